"""RecordNormalizer — the single total boundary over raw project records.

Converts the loosely-typed REST payload into ``NormalizedProject`` values.
Nothing here raises on bad data: malformed or missing fields resolve to
0 (numbers), 0 clamped to [0, 100] (percentages) or ``None`` (dates), and
duration-dependent values fall back to ``DEFAULT_PROJECT_DAYS``.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from src.models.project import (
    DEFAULT_PROJECT_DAYS,
    AuditSlot,
    NormalizedProject,
    ProjectRecord,
)
from src.scoring.arithmetic import clamp

logger = logging.getLogger(__name__)

# Placeholder values the source system uses for "no value".
_EMPTY_MARKERS: frozenset[str] = frozenset({"", "N/A", "n/a", "NA", "-"})

# Day-first formats used by the source spreadsheets, tried before ISO.
_DAY_FIRST_FORMATS: tuple[str, ...] = ("%d.%m.%Y", "%d/%m/%Y")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() in _EMPTY_MARKERS


def parse_number(value: Any) -> float:
    """Parse a count-like field with ``Number(value) || 0`` semantics.

    Numbers and numeric strings parse; anything else, including NaN and
    infinities, yields 0.
    """
    if _is_blank(value):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable numeric value %r, using 0", value)
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_percentage(value: Any) -> float:
    """Parse a percentage such as ``"85%"``, ``" 85.5 "`` or ``85``.

    A trailing ``%`` is stripped. Result is clamped to [0, 100].
    """
    if isinstance(value, str):
        value = value.strip().removesuffix("%")
    return clamp(parse_number(value))


def _expand_year(raw: str) -> str:
    return f"20{raw}" if len(raw) == 2 else raw


def parse_date(value: Any) -> date | None:
    """Parse a date field; return None when absent or invalid.

    Accepts date/datetime objects, ``DD.MM.YYYY`` and ``DD/MM/YYYY`` (two
    digit years read as 20YY) and ISO-8601 dates or date-times.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_blank(value) or not isinstance(value, str):
        return None

    text = value.strip()
    for separator, fmt in ((".", _DAY_FIRST_FORMATS[0]), ("/", _DAY_FIRST_FORMATS[1])):
        parts = text.split(separator)
        if len(parts) == 3 and all(p.isdigit() for p in parts):
            parts[2] = _expand_year(parts[2])
            try:
                return datetime.strptime(separator.join(parts), fmt).date()
            except ValueError:
                logger.debug("Invalid day-first date %r", value)
                return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug("Unparseable date %r", value)
        return None


def duration_days(
    start: date | None,
    end: date | None,
    default: int = DEFAULT_PROJECT_DAYS,
) -> int:
    """Days between ``start`` and ``end``.

    Falls back to ``default`` when either date is missing or the interval
    is not positive.
    """
    if start is None or end is None:
        return default
    days = (end - start).days
    return days if days > 0 else default


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class RecordNormalizer:
    """Converts raw project payloads into ``NormalizedProject`` values.

    ``normalize`` is total: it accepts a ``ProjectRecord``, any mapping
    shaped like the REST payload, or an already-normalised project, and
    always returns a ``NormalizedProject``.
    """

    def __init__(self, default_project_days: int = DEFAULT_PROJECT_DAYS) -> None:
        self._default_project_days = default_project_days

    def normalize(
        self,
        record: ProjectRecord | Mapping[str, Any] | NormalizedProject,
    ) -> NormalizedProject:
        if isinstance(record, NormalizedProject):
            return record
        raw = self._coerce_record(record)

        starting_date = parse_date(raw.project_starting_date)
        closing_date = parse_date(raw.project_closing_date)
        plan_status = _text(raw.project_quality_plan_status_rev)

        return NormalizedProject(
            project_no=_text(raw.project_no),
            project_title=_text(raw.project_title),
            project_manager=_text(raw.project_manager),
            starting_date=starting_date,
            closing_date=closing_date,
            kpi_percent=parse_percentage(raw.project_kpis_achieved_percent),
            completion_percent=parse_percentage(raw.project_completion_percent),
            cars_open=parse_number(raw.cars_open),
            cars_closed=parse_number(raw.cars_closed),
            obs_open=parse_number(raw.obs_open),
            obs_closed=parse_number(raw.obs_closed),
            manhours_used=parse_number(raw.manhours_used),
            audit_delay_days=parse_number(raw.delay_in_audits_no_days),
            quality_plan_status=None if plan_status in _EMPTY_MARKERS else plan_status,
            audits=self._audits(raw),
            duration_days=duration_days(
                starting_date, closing_date, self._default_project_days
            ),
        )

    def normalize_all(
        self,
        records: Iterable[ProjectRecord | Mapping[str, Any] | NormalizedProject] | None,
    ) -> list[NormalizedProject]:
        if not records:
            return []
        return [self.normalize(r) for r in records]

    # ---------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------

    @staticmethod
    def _coerce_record(record: Any) -> ProjectRecord:
        if isinstance(record, ProjectRecord):
            return record
        if isinstance(record, Mapping):
            try:
                return ProjectRecord.model_validate(dict(record))
            except ValidationError:
                # Only non-string keys can fail here; keep the string ones.
                logger.debug("Dropping non-string keys from project record")
                return ProjectRecord.model_validate(
                    {k: v for k, v in record.items() if isinstance(k, str)}
                )
        logger.debug("Project record of type %s treated as empty", type(record).__name__)
        return ProjectRecord()

    @staticmethod
    def _audits(raw: ProjectRecord) -> tuple[AuditSlot, ...]:
        slots: list[AuditSlot] = []
        for audit_type, number, value in raw.audit_slots():
            if _is_blank(value):
                continue
            slots.append(
                AuditSlot(
                    audit_type=audit_type,
                    number=number,
                    raw=_text(value),
                    audit_date=parse_date(value),
                )
            )
        return tuple(slots)


def normalize_projects(
    records: Iterable[ProjectRecord | Mapping[str, Any] | NormalizedProject] | None,
) -> list[NormalizedProject]:
    """Normalise a whole collection with the default normaliser."""
    return RecordNormalizer().normalize_all(records)
