"""Time-series aggregation over historical military expenditure data.

Modules:
    models       -- Country, ExpenditureRecord and derived row types
    errors       -- DataUnavailable, NotFound, InvalidArgument
    accessor     -- DatasetAccessor contract and the in-memory backend
    sqlite_store -- relational backend
    json_store   -- static JSON file backend
    engine       -- rankings, series slices and growth rates
    facade       -- ExpenditureQueries, the input-normalizing entry point
                    (import from expenditure.facade)
"""

from expenditure.errors import (
    DataUnavailable,
    ExpenditureError,
    InvalidArgument,
    NotFound,
)
from expenditure.models import (
    SENTINEL_CONTINENT,
    ContinentSummary,
    Country,
    ExpenditureRecord,
    GrowthRateRow,
    TimeSeriesPoint,
    YearRankingRow,
)
from expenditure.accessor import DatasetAccessor, InMemoryAccessor

__all__ = [
    "SENTINEL_CONTINENT",
    "ContinentSummary",
    "Country",
    "DataUnavailable",
    "DatasetAccessor",
    "ExpenditureError",
    "ExpenditureRecord",
    "GrowthRateRow",
    "InMemoryAccessor",
    "InvalidArgument",
    "NotFound",
    "TimeSeriesPoint",
    "YearRankingRow",
]
