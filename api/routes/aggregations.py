"""
Expenditure aggregation endpoints.

GET /api/v1/military-expenditure/{year}                 → recorded amounts, by name
GET /api/v1/top-expenditure/{year}[/{limit}]            → ranking, largest first
GET /api/v1/country-expenditure/{country}               → full series keyed by year
GET /api/v1/country-expenditure/{country}/{start}/{end} → bounded series
GET /api/v1/growth-rates/{start}/{end}[/{limit}]        → growth ranking
GET /api/v1/continent-summary/{year}                    → per-continent totals

Path parameters arrive as strings and are normalized by ExpenditureQueries:
an unreadable year is a 400, an unusable limit means "no limit", and a
year with no data gives an empty list.  ``country`` is an id or exact name.
"""

from fastapi import APIRouter, Depends
from fastapi import Query as FQuery

from api.database import get_queries
from api.models import (
    ContinentSummaryOut,
    CountrySeriesOut,
    ErrorResponse,
    GrowthRateOut,
    TimeSeriesPointOut,
    YearExpenditureOut,
)
from expenditure.facade import ExpenditureQueries

router = APIRouter(tags=["aggregations"])

_BAD_YEAR = {
    400: {"model": ErrorResponse, "description": "Year is not an integer"},
    503: {"model": ErrorResponse, "description": "Dataset unavailable"},
}
_NO_COUNTRY = {
    **_BAD_YEAR,
    404: {"model": ErrorResponse, "description": "Unknown country"},
}


@router.get(
    "/military-expenditure/{year}",
    response_model=list[YearExpenditureOut],
    summary="Expenditure by country for one year",
    responses=_BAD_YEAR,
)
def expenditure_by_year(
    year: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    """Return every country with a recorded amount in ``year``, ordered by name."""
    return [r.to_dict() for r in queries.expenditure_by_year(year)]


@router.get(
    "/top-expenditure/{year}",
    response_model=list[YearExpenditureOut],
    summary="Top spenders for one year",
    responses=_BAD_YEAR,
)
def top_expenditure(
    year: str,
    limit: str | None = FQuery(None, description="Maximum rows; omit for all"),
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    """Rank countries by expenditure in ``year``, ties broken by name."""
    return [r.to_dict() for r in queries.top_by_year(year, limit)]


@router.get(
    "/top-expenditure/{year}/{limit}",
    response_model=list[YearExpenditureOut],
    summary="Top N spenders for one year",
    responses=_BAD_YEAR,
)
def top_expenditure_limited(
    year: str,
    limit: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    return [r.to_dict() for r in queries.top_by_year(year, limit)]


@router.get(
    "/country-expenditure/{country}",
    response_model=CountrySeriesOut,
    summary="Full expenditure series for a country",
    responses=_NO_COUNTRY,
)
def country_series(
    country: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> dict:
    """Return every recorded year for one country as ``{year: amount}``."""
    resolved = queries.resolve_country(country)
    points = queries.time_series(resolved.id)
    return {
        "country": resolved.name,
        "years": {str(p.year): p.amount for p in points},
    }


@router.get(
    "/country-expenditure/{country}/{start_year}/{end_year}",
    response_model=list[TimeSeriesPointOut],
    summary="Expenditure series for a country within a year range",
    responses=_NO_COUNTRY,
)
def country_series_range(
    country: str,
    start_year: str,
    end_year: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    """Return recorded years in ``[start_year, end_year]``, ascending."""
    return [p.to_dict() for p in queries.time_series(country, start_year, end_year)]


@router.get(
    "/growth-rates/{start_year}/{end_year}",
    response_model=list[GrowthRateOut],
    summary="Growth-rate ranking between two years",
    responses=_BAD_YEAR,
)
def growth_rates(
    start_year: str,
    end_year: str,
    limit: str | None = FQuery(None, description="Maximum rows; omit for all"),
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    """Rank countries by percentage change; start amounts of zero are skipped."""
    return [r.to_dict() for r in queries.growth_rates(start_year, end_year, limit)]


@router.get(
    "/growth-rates/{start_year}/{end_year}/{limit}",
    response_model=list[GrowthRateOut],
    summary="Top N growth rates between two years",
    responses=_BAD_YEAR,
)
def growth_rates_limited(
    start_year: str,
    end_year: str,
    limit: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    return [r.to_dict() for r in queries.growth_rates(start_year, end_year, limit)]


@router.get(
    "/continent-summary/{year}",
    response_model=list[ContinentSummaryOut],
    summary="Per-continent totals for one year",
    responses=_BAD_YEAR,
)
def continent_summary(
    year: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> list[dict]:
    """Total, mean and country count per continent, largest total first."""
    return [s.to_dict() for s in queries.continent_summary(year)]
