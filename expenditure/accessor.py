"""Read-only data access contract for the aggregation engine.

The engine only ever calls the four methods of ``DatasetAccessor``.  Each
backend (SQLite, static JSON files, in-memory test data) supplies them and
owns its own storage format and connection lifecycle.

Usage::

    from expenditure.accessor import InMemoryAccessor
    from expenditure.models import Country, ExpenditureRecord

    accessor = InMemoryAccessor(
        countries=[Country(1, "Alpha", "Asia")],
        records=[ExpenditureRecord(1, 2020, 100.0)],
    )
    accessor.expenditures_for_year(2020)
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from expenditure.errors import DataUnavailable
from expenditure.models import Country, ExpenditureRecord


class DatasetAccessor(ABC):
    """Abstract read-only view over countries and expenditure records.

    No method mutates state.  Any storage failure must surface as
    ``DataUnavailable``; implementations never return partial rows.
    """

    @abstractmethod
    def list_countries(self) -> list[Country]:
        """Return every country, including the sentinel bucket."""

    @abstractmethod
    def list_countries_by_continent(self, continent: str) -> list[Country]:
        """Return countries whose continent equals ``continent`` exactly."""

    @abstractmethod
    def expenditures_for_country(self, country_id: int) -> list[ExpenditureRecord]:
        """Return all records for one country, in no guaranteed order."""

    @abstractmethod
    def expenditures_for_year(self, year: int) -> list[tuple[Country, float | None]]:
        """Return (country, amount) pairs joined for one year."""


class InMemoryAccessor(DatasetAccessor):
    """Accessor over lists of records held in memory.

    Validates at construction that every record references a known country
    and that no (country_id, year) pair appears twice.
    """

    def __init__(self, countries: Iterable[Country],
                 records: Iterable[ExpenditureRecord]) -> None:
        self._countries: list[Country] = list(countries)
        self._by_id: dict[int, Country] = {}
        names: set[str] = set()
        for c in self._countries:
            if c.id in self._by_id:
                raise DataUnavailable(f"Duplicate country id {c.id}")
            if c.name in names:
                raise DataUnavailable(f"Duplicate country name {c.name!r}")
            self._by_id[c.id] = c
            names.add(c.name)

        self._by_country: dict[int, list[ExpenditureRecord]] = {}
        self._by_year: dict[int, list[ExpenditureRecord]] = {}
        seen: set[tuple[int, int]] = set()
        for rec in records:
            if rec.country_id not in self._by_id:
                raise DataUnavailable(
                    f"Expenditure record references unknown country id {rec.country_id}"
                )
            key = (rec.country_id, rec.year)
            if key in seen:
                raise DataUnavailable(
                    f"Duplicate expenditure record for country {rec.country_id}, "
                    f"year {rec.year}"
                )
            if rec.amount is not None and rec.amount < 0:
                raise DataUnavailable(
                    f"Negative amount for country {rec.country_id}, year {rec.year}"
                )
            seen.add(key)
            self._by_country.setdefault(rec.country_id, []).append(rec)
            self._by_year.setdefault(rec.year, []).append(rec)

    def list_countries(self) -> list[Country]:
        return list(self._countries)

    def list_countries_by_continent(self, continent: str) -> list[Country]:
        return [c for c in self._countries if c.continent == continent]

    def expenditures_for_country(self, country_id: int) -> list[ExpenditureRecord]:
        return list(self._by_country.get(country_id, []))

    def expenditures_for_year(self, year: int) -> list[tuple[Country, float | None]]:
        return [(self._by_id[r.country_id], r.amount)
                for r in self._by_year.get(year, [])]
