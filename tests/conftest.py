"""
Pytest fixtures for the military expenditure tests.

Every backend is built from the same small dataset so the same assertions
hold against each of them:

    Alpha (id=1, Asia)          2020: 100   2021: 150
    Beta  (id=2, Europe)        2020: 200   2021: 180
    Gamma (id=3, current_data)  2020: 9999

Gamma sits in the staging bucket and must never show up in any result.
"""
import json
import sqlite3
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from expenditure.accessor import InMemoryAccessor
from expenditure.json_store import JsonFileAccessor
from expenditure.models import Country, ExpenditureRecord
from expenditure.sqlite_store import SCHEMA_SQL, SqliteAccessor

SAMPLE_COUNTRIES = [
    Country(1, "Alpha", "Asia"),
    Country(2, "Beta", "Europe"),
    Country(3, "Gamma", "current_data"),
]

SAMPLE_RECORDS = [
    ExpenditureRecord(1, 2020, 100.0),
    ExpenditureRecord(1, 2021, 150.0),
    ExpenditureRecord(2, 2020, 200.0),
    ExpenditureRecord(2, 2021, 180.0),
    ExpenditureRecord(3, 2020, 9999.0),
]


def write_sample_sqlite(db_path: Path) -> Path:
    """Create ``db_path`` with the production schema and the sample rows."""
    conn = sqlite3.connect(str(db_path))
    conn.executescript(SCHEMA_SQL)
    conn.executemany(
        "INSERT INTO countries (id, name, continent) VALUES (?, ?, ?)",
        [(c.id, c.name, c.continent) for c in SAMPLE_COUNTRIES],
    )
    conn.executemany(
        "INSERT INTO military_expenditure (country_id, year, expenditure) "
        "VALUES (?, ?, ?)",
        [(r.country_id, r.year, r.amount) for r in SAMPLE_RECORDS],
    )
    conn.commit()
    conn.close()
    return db_path


def write_sample_json(data_dir: Path) -> Path:
    """Write the sample rows in the published JSON layout."""
    data_dir.mkdir(parents=True, exist_ok=True)
    rows = [
        {"Country": "Alpha", "Continent": "Asia", "2020": 100, "2021": 150},
        {"Country": "Beta", "Continent": "Europe", "2020": 200, "2021": 180},
        {"Country": "Gamma", "Continent": "current_data", "2020": 9999},
    ]
    (data_dir / "all_military_data.json").write_text(json.dumps(rows), encoding="utf-8")
    return data_dir


@pytest.fixture()
def memory_accessor():
    """In-memory accessor over the sample dataset."""
    return InMemoryAccessor(SAMPLE_COUNTRIES, SAMPLE_RECORDS)


@pytest.fixture()
def sample_db(tmp_path):
    """Path to a SQLite file holding the sample dataset."""
    return write_sample_sqlite(tmp_path / "sample.sqlite")


@pytest.fixture()
def sample_data_dir(tmp_path):
    """Directory holding the sample dataset as JSON files."""
    return write_sample_json(tmp_path / "data")


@pytest.fixture(params=["memory", "sqlite", "json"])
def any_accessor(request, tmp_path):
    """Each backend in turn, loaded with the sample dataset."""
    if request.param == "memory":
        return InMemoryAccessor(SAMPLE_COUNTRIES, SAMPLE_RECORDS)
    if request.param == "sqlite":
        return SqliteAccessor(write_sample_sqlite(tmp_path / "sample.sqlite"))
    return JsonFileAccessor(write_sample_json(tmp_path / "data"))
