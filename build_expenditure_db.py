"""
Military Expenditure Database Builder

Imports the static JSON data directory (``all_military_data.json`` plus the
optional ``country_metadata.json``) into the SQLite database served by the
API.  Re-running updates existing rows in place; ``--rebuild`` starts from an
empty file.

Usage:
    python build_expenditure_db.py                        # data/ -> military_expenditure.sqlite
    python build_expenditure_db.py --data public/data     # Custom data directory
    python build_expenditure_db.py --db mydb.sqlite --rebuild
    python build_expenditure_db.py --first-year 1960 --last-year 2022
"""

import argparse
import sqlite3
import sys
from pathlib import Path

from expenditure.accessor import InMemoryAccessor
from expenditure.errors import DataUnavailable
from expenditure.json_store import load_dataset
from expenditure.models import SENTINEL_CONTINENT, Country, ExpenditureRecord
from expenditure.sqlite_store import SCHEMA_SQL
from utils.config import DEFAULT_DATA_DIR, DEFAULT_DB_PATH
from utils.database import (
    batch_upsert,
    get_table_count,
    open_connection,
    query_to_dicts,
    table_exists,
)
from utils.validation import ValidationResult, is_valid_amount, is_valid_year

_COUNTRY_COLUMNS = ["name", "continent", "region", "iso_code",
                    "population", "latitude", "longitude"]
_EXPENDITURE_COLUMNS = ["country_id", "year", "expenditure"]


def check_dataset(countries: list[Country],
                  records: list[ExpenditureRecord]) -> ValidationResult:
    """Report data-quality issues; only errors block the import."""
    result = ValidationResult()

    negative = [r for r in records
                if r.amount is not None and not is_valid_amount(r.amount)]
    if negative:
        result.add_issue("negative_amounts", "error",
                         f"{len(negative)} records have a negative amount",
                         sample=(negative[0].country_id, negative[0].year),
                         count=len(negative))
    else:
        result.mark_check_passed("negative_amounts")

    staged = [c.name for c in countries if c.continent == SENTINEL_CONTINENT]
    if staged:
        result.add_issue("sentinel_bucket", "info",
                         f"{len(staged)} rows in the '{SENTINEL_CONTINENT}' bucket "
                         "(excluded from every ranking)",
                         sample=staged[0], count=len(staged))
    else:
        result.mark_check_passed("sentinel_bucket")

    no_iso = [c.name for c in countries
              if c.continent != SENTINEL_CONTINENT and not c.iso_code]
    if no_iso:
        result.add_issue("missing_iso_code", "warning",
                         f"{len(no_iso)} countries have no ISO code",
                         sample=no_iso[0], count=len(no_iso))
    else:
        result.mark_check_passed("missing_iso_code")

    with_data = {r.country_id for r in records if r.amount is not None}
    empty = [c.name for c in countries if c.id not in with_data]
    if empty:
        result.add_issue("countries_without_data", "warning",
                         f"{len(empty)} countries have no recorded amount in any year",
                         sample=empty[0], count=len(empty))
    else:
        result.mark_check_passed("countries_without_data")

    odd_years = sorted({r.year for r in records if not is_valid_year(r.year)})
    if odd_years:
        result.add_issue("year_span", "warning",
                         f"Years outside the recorded span: {odd_years}",
                         sample=odd_years[0], count=len(odd_years))
    else:
        result.mark_check_passed("year_span")

    return result


def build_database(data_dir: Path, db_path: Path, rebuild: bool = False,
                   first_year: int | None = None,
                   last_year: int | None = None) -> dict[str, int]:
    """Load ``data_dir`` and upsert it into ``db_path``.

    Countries are keyed by name, so reordering the source file keeps the ids
    already stored.  Both tables are written in one transaction; a failure
    leaves the database as it was.

    Args:
        data_dir: Directory holding the JSON data files.
        db_path: SQLite file to create or update.
        rebuild: Delete ``db_path`` first.
        first_year: Skip year columns before this year.
        last_year: Skip year columns after this year.

    Returns:
        Row counts of the two tables after the import.

    Raises:
        DataUnavailable: If the data directory cannot be read, fails a
            data-quality check, or violates the one-record-per-country-year
            rule.
        sqlite3.Error: If the database cannot be written.
    """
    countries, records = load_dataset(data_dir, first_year, last_year)

    report = check_dataset(countries, records)
    print(report.summary_text())
    if not report.is_valid():
        raise DataUnavailable(
            f"{report.error_count()} data-quality error(s) in {data_dir}; nothing imported"
        )
    # Rejects dangling references and duplicate keys.
    InMemoryAccessor(countries, records)

    if rebuild and db_path.exists():
        db_path.unlink()
        print(f"Removed existing database for rebuild: {db_path}")

    if db_path.exists():
        print(f"Updating existing database: {db_path}")
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        print(f"Created new database: {db_path}")

    conn = open_connection(db_path)
    try:
        if table_exists(conn, "countries"):
            print(f"  Existing rows: {get_table_count(conn, 'countries')} countries")
        conn.executescript(SCHEMA_SQL)

        with conn:
            n_countries = batch_upsert(
                conn, "countries", _COUNTRY_COLUMNS,
                [(c.name, c.continent, c.region, c.iso_code,
                  c.population, c.latitude, c.longitude) for c in countries],
                conflict_columns=["name"],
                commit=False,
            )
            stored_ids = {
                row["name"]: row["id"]
                for row in query_to_dicts(conn, "SELECT id, name FROM countries")
            }
            # load_dataset numbers countries by file position; map to stored ids.
            name_by_load_id = {c.id: c.name for c in countries}
            n_records = batch_upsert(
                conn, "military_expenditure", _EXPENDITURE_COLUMNS,
                [(stored_ids[name_by_load_id[r.country_id]], r.year, r.amount)
                 for r in records],
                conflict_columns=["country_id", "year"],
                commit=False,
            )
        print(f"  Imported {n_countries} countries, {n_records} expenditure records")
        counts = {
            "countries": get_table_count(conn, "countries"),
            "military_expenditure": get_table_count(conn, "military_expenditure"),
        }
    finally:
        conn.close()
    return counts


def main(argv: list[str] | None = None) -> int:
    """Parse command-line arguments and run the import."""
    parser = argparse.ArgumentParser(description="Build the military expenditure database")
    parser.add_argument("--data", type=Path, default=DEFAULT_DATA_DIR,
                        help=f"JSON data directory (default: {DEFAULT_DATA_DIR})")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH,
                        help=f"Database path (default: {DEFAULT_DB_PATH})")
    parser.add_argument("--rebuild", action="store_true",
                        help="Delete the existing database before importing")
    parser.add_argument("--first-year", type=int, default=None, metavar="YEAR",
                        help="Ignore years before YEAR")
    parser.add_argument("--last-year", type=int, default=None, metavar="YEAR",
                        help="Ignore years after YEAR")
    args = parser.parse_args(argv)

    try:
        counts = build_database(args.data, args.db, rebuild=args.rebuild,
                                first_year=args.first_year,
                                last_year=args.last_year)
    except DataUnavailable as e:
        print(f"ERROR: {e}")
        return 1
    except sqlite3.Error as e:
        print(f"ERROR: database write failed for {args.db}: {e}")
        return 1
    print(f"Done: {counts['countries']} countries, "
          f"{counts['military_expenditure']} expenditure rows in {args.db}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
