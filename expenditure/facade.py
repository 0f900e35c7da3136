"""
Query layer shared by the HTTP routes and any other caller.

``ExpenditureQueries`` is constructed with one ``DatasetAccessor``; switching
backends means passing a different accessor, never flipping a global flag.
Each method normalizes its raw inputs, then delegates to ``expenditure.engine``.

Input rules:
    - years: int or digit string; out-of-range years give empty results,
      unreadable values raise ``InvalidArgument``
    - limit: non-positive or non-numeric means unbounded
    - country: int is an id; a digit string is tried as an id, then as an
      exact name; anything else is an exact name

``NotFound`` and ``DataUnavailable`` propagate unchanged.
"""

import logging
from typing import Any

from expenditure import engine
from expenditure.accessor import DatasetAccessor
from expenditure.errors import NotFound
from expenditure.models import (
    ContinentSummary,
    Country,
    GrowthRateRow,
    TimeSeriesPoint,
    YearRankingRow,
)
from utils.validation import parse_country_key, parse_limit, parse_year

logger = logging.getLogger(__name__)


class ExpenditureQueries:
    """Stable set of read operations over one dataset accessor."""

    def __init__(self, accessor: DatasetAccessor) -> None:
        self._accessor = accessor

    @property
    def accessor(self) -> DatasetAccessor:
        return self._accessor

    def list_countries(self, continent: str | None = None) -> list[Country]:
        logger.debug("list_countries continent=%s", continent)
        return engine.list_all(self._accessor, continent or None)

    def list_continents(self) -> list[str]:
        logger.debug("list_continents")
        return engine.list_continents(self._accessor)

    def expenditure_by_year(self, year: Any) -> list[YearRankingRow]:
        y = parse_year(year, required=True)
        logger.debug("expenditure_by_year year=%s", y)
        return engine.expenditure_by_year(self._accessor, y)

    def top_by_year(self, year: Any, limit: Any = None) -> list[YearRankingRow]:
        """Countries ranked by expenditure in ``year``, optionally top-N."""
        y = parse_year(year, required=True)
        n = parse_limit(limit)
        logger.debug("top_by_year year=%s limit=%s", y, n)
        return engine.rank_by_year(self._accessor, y, n)

    def time_series(self, country: Any, start_year: Any = None,
                    end_year: Any = None) -> list[TimeSeriesPoint]:
        """Expenditure points for one country, optionally bounded by year."""
        start = parse_year(start_year, "start_year")
        end = parse_year(end_year, "end_year")
        resolved = self.resolve_country(country)
        logger.debug("time_series country=%r start=%s end=%s", resolved.name, start, end)
        return engine.time_series(self._accessor, resolved.id, start, end)

    def growth_rates(self, start_year: Any, end_year: Any,
                     limit: Any = None) -> list[GrowthRateRow]:
        start = parse_year(start_year, "start_year", required=True)
        end = parse_year(end_year, "end_year", required=True)
        n = parse_limit(limit)
        logger.debug("growth_rates start=%s end=%s limit=%s", start, end, n)
        return engine.growth_rates(self._accessor, start, end, n)

    def continent_summary(self, year: Any) -> list[ContinentSummary]:
        y = parse_year(year, required=True)
        logger.debug("continent_summary year=%s", y)
        return engine.continent_summary(self._accessor, y)

    def resolve_country(self, country: Any) -> Country:
        """Look up a country by id or exact name; raises ``NotFound``.

        A digit string that matches no id is retried as a name.
        """
        country_id, name = parse_country_key(country)
        if country_id is not None:
            try:
                return engine.resolve_country(self._accessor, country_id)
            except NotFound:
                if name is None:
                    raise
        return engine.resolve_country(self._accessor, name)
