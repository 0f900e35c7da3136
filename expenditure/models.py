"""
Record types for the military expenditure dataset.

Stored entities (``Country``, ``ExpenditureRecord``) are populated once by the
offline import and treated as read-only for the life of the process, so they
are frozen.  The remaining classes are derived rows computed per request.

Amounts are in millions of currency units and carried exactly as stored.
``None`` means "not recorded", which is distinct from a recorded ``0.0``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

# Reserved continent value for the staging bucket of duplicated rows.
SENTINEL_CONTINENT = "current_data"


@dataclass(frozen=True)
class Country:
    """One country as assigned at ingestion."""
    id: int
    name: str
    continent: str
    region: str | None = None
    iso_code: str | None = None
    population: int | None = None
    latitude: float | None = None
    longitude: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExpenditureRecord:
    """One (country, year) observation; (country_id, year) is the natural key."""
    country_id: int
    year: int
    amount: float | None = None


# ── Derived rows ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class YearRankingRow:
    name: str
    continent: str
    region: str | None
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TimeSeriesPoint:
    year: int
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GrowthRateRow:
    """Growth between two years; field names match the JSON wire format."""
    country: str
    expenditure_start: float
    expenditure_end: float
    growth_rate: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ContinentSummary:
    continent: str
    year: int
    total_expenditure: float
    avg_expenditure: float
    country_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
