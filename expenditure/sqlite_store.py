"""
Relational backend: ``DatasetAccessor`` over a SQLite database.

Schema (created by ``build_expenditure_db.py``)::

    countries(id, name UNIQUE, continent, region, iso_code, population,
              latitude, longitude)
    military_expenditure(id, country_id -> countries.id, year, expenditure,
                         UNIQUE(country_id, year))

A read-only connection is opened per call and closed before returning, so
the accessor holds no connection between requests and can be shared across
worker threads.
"""

import logging
import sqlite3
from contextlib import contextmanager
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from expenditure.accessor import DatasetAccessor
from expenditure.errors import DataUnavailable
from expenditure.models import Country, ExpenditureRecord
from utils.database import open_connection, query_to_dicts

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS countries (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        continent TEXT NOT NULL,
        region TEXT,
        iso_code TEXT,
        population INTEGER,
        latitude REAL,
        longitude REAL
    );
    CREATE TABLE IF NOT EXISTS military_expenditure (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        country_id INTEGER NOT NULL REFERENCES countries(id),
        year INTEGER NOT NULL,
        expenditure REAL,
        UNIQUE(country_id, year)
    );
    CREATE INDEX IF NOT EXISTS idx_military_expenditure_year
        ON military_expenditure(year);
"""

_COUNTRY_COLUMNS = ("id, name, continent, region, iso_code, population, "
                    "latitude, longitude")


def _country_from_row(row: dict[str, Any]) -> Country:
    return Country(
        id=row["id"],
        name=row["name"],
        continent=row["continent"],
        region=row.get("region"),
        iso_code=row.get("iso_code"),
        population=row.get("population"),
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
    )


class SqliteAccessor(DatasetAccessor):
    """Reads countries and expenditures from a SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if not self.db_path.exists():
            raise DataUnavailable(
                f"Database not found at '{self.db_path}'. "
                "Run 'python build_expenditure_db.py' to build it."
            )
        try:
            conn = open_connection(self.db_path, read_only=True)
        except sqlite3.Error as e:
            raise DataUnavailable(f"Cannot open database '{self.db_path}': {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            logger.error("query failed on %s: %s", self.db_path, e)
            raise DataUnavailable(f"Database query failed: {e}") from e
        finally:
            conn.close()

    def list_countries(self) -> list[Country]:
        with self._connect() as conn:
            rows = query_to_dicts(
                conn, f"SELECT {_COUNTRY_COLUMNS} FROM countries ORDER BY name"
            )
        return [_country_from_row(r) for r in rows]

    def list_countries_by_continent(self, continent: str) -> list[Country]:
        with self._connect() as conn:
            rows = query_to_dicts(
                conn,
                f"SELECT {_COUNTRY_COLUMNS} FROM countries "
                "WHERE continent = ? ORDER BY name",
                (continent,),
            )
        return [_country_from_row(r) for r in rows]

    def expenditures_for_country(self, country_id: int) -> list[ExpenditureRecord]:
        with self._connect() as conn:
            rows = query_to_dicts(
                conn,
                "SELECT country_id, year, expenditure FROM military_expenditure "
                "WHERE country_id = ? ORDER BY year",
                (country_id,),
            )
        return [ExpenditureRecord(r["country_id"], r["year"], r["expenditure"])
                for r in rows]

    def expenditures_for_year(self, year: int) -> list[tuple[Country, float | None]]:
        with self._connect() as conn:
            rows = query_to_dicts(
                conn,
                "SELECT c.id, c.name, c.continent, c.region, c.iso_code, "
                "c.population, c.latitude, c.longitude, me.expenditure "
                "FROM military_expenditure me "
                "JOIN countries c ON me.country_id = c.id "
                "WHERE me.year = ? ORDER BY c.name",
                (year,),
            )
        return [(_country_from_row(r), r["expenditure"]) for r in rows]
