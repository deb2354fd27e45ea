"""Shared types, enums, and base models used across the QHSE scoring models."""

from enum import StrEnum

from pydantic import BaseModel


# --- Shared enums ---


class MetricsDomain(StrEnum):
    """The three independently scored QHSE domains."""

    QUALITY = "QUALITY"
    SAFETY = "SAFETY"
    ENVIRONMENTAL = "ENVIRONMENTAL"


class AuditType(StrEnum):
    """Audit slot families carried on a project record."""

    PROJECT = "PROJECT"
    CLIENT = "CLIENT"


class ComplianceStatus(StrEnum):
    """Pass/fail outcome of a threshold comparison."""

    COMPLIANT = "Compliant"
    NON_COMPLIANT = "Non-Compliant"


# --- Base models ---


class QHSEBase(BaseModel):
    """Base model with common configuration for all QHSE Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "protected_namespaces": (),
    }


class QHSEFrozen(QHSEBase, frozen=True):
    """Immutable base for derived values (normalised records, outputs)."""
