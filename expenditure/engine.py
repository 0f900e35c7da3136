"""
Aggregation engine: rankings, time slices and growth rates.

Every function is a pure computation over the rows the accessor returns at
call time.  Nothing is cached and nothing is written, so concurrent calls
need no coordination.

The sentinel continent is removed by ``is_reportable()`` and nowhere else;
callers never filter it themselves.

Orderings are deterministic: descending by the ranked value, ties broken by
name ascending.
"""

from __future__ import annotations

from expenditure.accessor import DatasetAccessor
from expenditure.errors import NotFound
from expenditure.models import (
    SENTINEL_CONTINENT,
    ContinentSummary,
    Country,
    GrowthRateRow,
    TimeSeriesPoint,
    YearRankingRow,
)


def is_reportable(country: Country) -> bool:
    """Return False for rows in the sentinel staging bucket."""
    return country.continent != SENTINEL_CONTINENT


def _truncate(rows: list, limit: int | None) -> list:
    if limit is None:
        return rows
    return rows[:limit]


def _recorded_for_year(
    accessor: DatasetAccessor, year: int
) -> list[tuple[Country, float]]:
    """Reportable (country, amount) pairs with a recorded amount for ``year``."""
    return [
        (country, amount)
        for country, amount in accessor.expenditures_for_year(year)
        if amount is not None and is_reportable(country)
    ]


# ── Countries ─────────────────────────────────────────────────────────────────

def list_all(accessor: DatasetAccessor, continent: str | None = None) -> list[Country]:
    """Return countries sorted by name, optionally restricted to a continent.

    Asking for the sentinel continent explicitly yields an empty list rather
    than being treated as "no filter".
    """
    if continent is None:
        countries = accessor.list_countries()
    elif continent == SENTINEL_CONTINENT:
        return []
    else:
        countries = accessor.list_countries_by_continent(continent)
    return sorted((c for c in countries if is_reportable(c)), key=lambda c: c.name)


def list_continents(accessor: DatasetAccessor) -> list[str]:
    """Return the distinct non-sentinel continents, sorted."""
    return sorted({c.continent for c in accessor.list_countries() if is_reportable(c)})


def resolve_country(accessor: DatasetAccessor, country: int | str) -> Country:
    """Find a reportable country by id (int) or exact, case-sensitive name (str).

    Rows in the sentinel bucket never resolve.

    Raises:
        NotFound: If nothing matches.
    """
    for c in accessor.list_countries():
        if not is_reportable(c):
            continue
        if isinstance(country, int):
            if c.id == country:
                return c
        elif c.name == country:
            return c
    raise NotFound(country)


# ── Per-year views ────────────────────────────────────────────────────────────

def expenditure_by_year(accessor: DatasetAccessor, year: int) -> list[YearRankingRow]:
    """Every reportable country with a recorded amount in ``year``, by name."""
    rows = [
        YearRankingRow(name=c.name, continent=c.continent, region=c.region, amount=amount)
        for c, amount in _recorded_for_year(accessor, year)
    ]
    rows.sort(key=lambda r: r.name)
    return rows


def rank_by_year(
    accessor: DatasetAccessor, year: int, limit: int | None = None
) -> list[YearRankingRow]:
    """Rank countries by expenditure in ``year``, largest first.

    A year with no data gives an empty list, not an error.
    """
    rows = [
        YearRankingRow(name=c.name, continent=c.continent, region=c.region, amount=amount)
        for c, amount in _recorded_for_year(accessor, year)
    ]
    rows.sort(key=lambda r: (-r.amount, r.name))
    return _truncate(rows, limit)


def continent_summary(accessor: DatasetAccessor, year: int) -> list[ContinentSummary]:
    """Total, mean and country count per continent for ``year``.

    Only recorded amounts count towards the mean; absent years are not
    treated as zero.
    """
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for c, amount in _recorded_for_year(accessor, year):
        totals[c.continent] = totals.get(c.continent, 0.0) + amount
        counts[c.continent] = counts.get(c.continent, 0) + 1

    summaries = [
        ContinentSummary(
            continent=continent,
            year=year,
            total_expenditure=total,
            avg_expenditure=total / counts[continent],
            country_count=counts[continent],
        )
        for continent, total in totals.items()
    ]
    summaries.sort(key=lambda s: (-s.total_expenditure, s.continent))
    return summaries


# ── Per-country series ────────────────────────────────────────────────────────

def time_series(
    accessor: DatasetAccessor,
    country: int | str,
    start_year: int | None = None,
    end_year: int | None = None,
) -> list[TimeSeriesPoint]:
    """Return (year, amount) points for one country in ``[start_year, end_year]``.

    Either bound may be None for an open side.  Years without a recorded
    amount are omitted, never reported as zero.

    Raises:
        NotFound: If ``country`` does not resolve.
    """
    resolved = resolve_country(accessor, country)
    points = [
        TimeSeriesPoint(year=r.year, amount=r.amount)
        for r in accessor.expenditures_for_country(resolved.id)
        if r.amount is not None
        and (start_year is None or r.year >= start_year)
        and (end_year is None or r.year <= end_year)
    ]
    points.sort(key=lambda p: p.year)
    return points


# ── Growth ────────────────────────────────────────────────────────────────────

def growth_rates(
    accessor: DatasetAccessor,
    start_year: int,
    end_year: int,
    limit: int | None = None,
) -> list[GrowthRateRow]:
    """Rank countries by percentage change between two years.

    A country qualifies only with a strictly positive start amount and a
    recorded end amount, so the denominator is never zero or negative.
    Countries that do not qualify are left out silently.
    """
    start = {c.id: (c, amount) for c, amount in _recorded_for_year(accessor, start_year)}
    end = {c.id: amount for c, amount in _recorded_for_year(accessor, end_year)}

    rows: list[GrowthRateRow] = []
    for country_id, (country, start_amount) in start.items():
        if start_amount <= 0 or country_id not in end:
            continue
        end_amount = end[country_id]
        rows.append(GrowthRateRow(
            country=country.name,
            expenditure_start=start_amount,
            expenditure_end=end_amount,
            growth_rate=(end_amount - start_amount) * 100 / start_amount,
        ))
    rows.sort(key=lambda r: (-r.growth_rate, r.country))
    return _truncate(rows, limit)
