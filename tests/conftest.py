"""Shared pytest fixtures for the QHSE scoring test suite.

Provides:
- make_project: factory building a NormalizedProject from raw payload fields
- sample_records: a small realistic REST payload
- messy_records: seeded generator of malformed / partial payloads
"""

import random
from collections.abc import Callable

import pytest

from src.models.project import NormalizedProject
from src.scoring.normalizer import RecordNormalizer


_MESSY_PERCENTAGES = [
    "85%", " 42.5 % ", "100%", "0%", "-12%", "140%", "N/A", "", "abc", None,
    55, 99.9, float("nan"), "Infinity", "73",
]
_MESSY_COUNTS = [
    "3", 0, 7, "0", "", None, "N/A", "many", -2, "12.5", float("inf"), [], {}, "1e307",
]
_MESSY_DATES = [
    "2024-01-15", "15.03.2024", "01/02/24", "2023-12-31T08:00:00Z", "31.02.2024",
    "not a date", "", "N/A", None, 20240101,
]


def _messy_record(rng: random.Random, idx: int) -> dict:
    record: dict = {"projectNo": f"P-{idx:03d}"}
    fields = {
        "projectKPIsAchievedPercent": _MESSY_PERCENTAGES,
        "projectCompletionPercent": _MESSY_PERCENTAGES,
        "carsOpen": _MESSY_COUNTS,
        "carsClosed": _MESSY_COUNTS,
        "obsOpen": _MESSY_COUNTS,
        "obsClosed": _MESSY_COUNTS,
        "manhoursUsed": _MESSY_COUNTS + ["1500", 420, 9000],
        "delayInAuditsNoDays": _MESSY_COUNTS,
        "projectStartingDate": _MESSY_DATES,
        "projectClosingDate": _MESSY_DATES,
        "projectAudit1": _MESSY_DATES,
        "clientAudit2": _MESSY_DATES,
        "projectManager": ["Alice", "Bob", "", None],
    }
    for key, choices in fields.items():
        # Leave roughly a fifth of the fields out entirely.
        if rng.random() < 0.8:
            record[key] = rng.choice(choices)
    return record


@pytest.fixture
def make_project() -> Callable[..., NormalizedProject]:
    """Build one NormalizedProject from camelCase payload fields."""
    normalizer = RecordNormalizer()

    def _make(**fields) -> NormalizedProject:
        return normalizer.normalize(fields)

    return _make


@pytest.fixture
def sample_records() -> list[dict]:
    """Three realistic project payloads as the REST API returns them."""
    return [
        {
            "projectNo": "QP-001",
            "projectTitle": "Substation upgrade",
            "projectManager": "Alice",
            "projectStartingDate": "2024-01-01",
            "projectClosingDate": "2024-12-31",
            "projectKPIsAchievedPercent": "92%",
            "projectCompletionPercent": "45%",
            "projectQualityPlanStatusRev": "Rev 2",
            "carsOpen": "1",
            "carsClosed": "6",
            "obsOpen": "2",
            "obsClosed": "10",
            "manhoursUsed": "1200",
            "delayInAuditsNoDays": "0",
            "projectAudit1": "2024-02-10",
            "projectAudit2": "2024-06-20",
            "clientAudit1": "N/A",
        },
        {
            "projectNo": "QP-002",
            "projectTitle": "Pipeline survey",
            "projectManager": "Bob",
            "projectStartingDate": "01.03.2024",
            "projectClosingDate": "30.04.2024",
            "projectKPIsAchievedPercent": "64%",
            "projectCompletionPercent": "100%",
            "projectQualityPlanStatusRev": "N/A",
            "carsOpen": 3,
            "carsClosed": 1,
            "obsOpen": 4,
            "obsClosed": 0,
            "manhoursUsed": 800,
            "delayInAuditsNoDays": "12",
            "projectAudit1": "15/03/2024",
        },
        {
            "projectNo": "QP-003",
            "projectTitle": "Control room fit-out",
            "projectManager": "",
            "projectKPIsAchievedPercent": "",
            "projectCompletionPercent": "10%",
            "carsOpen": "",
            "manhoursUsed": "300",
        },
    ]


@pytest.fixture
def messy_records() -> Callable[[int, int], list[dict]]:
    """Seeded generator of malformed payloads: ``messy_records(seed, n)``."""

    def _generate(seed: int, n: int = 40) -> list[dict]:
        rng = random.Random(seed)
        return [_messy_record(rng, i) for i in range(n)]

    return _generate
