"""
Static-file backend: ``DatasetAccessor`` over the published JSON data files.

Expected layout of ``data_dir``::

    all_military_data.json   [{"Country": "Alpha", "Continent": "Asia",
                               "1960": 12.5, "1961": null, ...}, ...]
    country_metadata.json    {"Alpha": {"iso_code": "ALP",
                               "coordinates": {"lat": 1.0, "lon": 2.0}}}  (optional)

Country ids are assigned 1..N in file order.  Year keys are digit strings;
values that are null or not numeric (the source uses "..." and "xxx") are
treated as not recorded.

The files are parsed once, on first use, into an ``InMemoryAccessor``.  A
failed load is not remembered, so the next call tries again.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any

from expenditure.accessor import DatasetAccessor, InMemoryAccessor
from expenditure.errors import DataUnavailable
from expenditure.models import Country, ExpenditureRecord

logger = logging.getLogger(__name__)

MILITARY_DATA_FILE = "all_military_data.json"
METADATA_FILE = "country_metadata.json"


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise DataUnavailable(f"Data file not found: {path}") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataUnavailable(f"Cannot read data file {path}: {e}") from e


def _parse_amount(raw: Any) -> float | None:
    """Return a float, or None for anything that is not a recorded number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(str(raw).replace(",", "").strip())
    except ValueError:
        return None


def load_dataset(
    data_dir: Path,
    first_year: int | None = None,
    last_year: int | None = None,
) -> tuple[list[Country], list[ExpenditureRecord]]:
    """Parse the JSON files in ``data_dir`` into countries and records.

    Args:
        data_dir: Directory holding the data files.
        first_year: Ignore year columns before this year (None = no bound).
        last_year: Ignore year columns after this year (None = no bound).

    Raises:
        DataUnavailable: On a missing or malformed file.
    """
    data_dir = Path(data_dir)
    rows = _read_json(data_dir / MILITARY_DATA_FILE)
    if not isinstance(rows, list):
        raise DataUnavailable(f"{MILITARY_DATA_FILE} must contain a JSON list")

    metadata: dict[str, Any] = {}
    meta_path = data_dir / METADATA_FILE
    if meta_path.exists():
        loaded = _read_json(meta_path)
        if not isinstance(loaded, dict):
            raise DataUnavailable(f"{METADATA_FILE} must contain a JSON object")
        metadata = loaded

    countries: list[Country] = []
    records: list[ExpenditureRecord] = []
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict) or not row.get("Country"):
            raise DataUnavailable(
                f"{MILITARY_DATA_FILE}: entry {index} has no 'Country' field"
            )
        name = str(row["Country"])
        meta = metadata.get(name) or {}
        coords = meta.get("coordinates") or {}
        countries.append(Country(
            id=index,
            name=name,
            continent=row.get("Continent") or "unknown",
            region=row.get("Region"),
            iso_code=meta.get("iso_code") or None,
            latitude=coords.get("lat"),
            longitude=coords.get("lon"),
        ))
        for key, raw in row.items():
            if not (isinstance(key, str) and key.isdigit()):
                continue
            year = int(key)
            if first_year is not None and year < first_year:
                continue
            if last_year is not None and year > last_year:
                continue
            records.append(ExpenditureRecord(index, year, _parse_amount(raw)))

    logger.info("Loaded %d countries and %d expenditure records from %s",
                len(countries), len(records), data_dir)
    return countries, records


class JsonFileAccessor(DatasetAccessor):
    """Serves the dataset straight from the JSON data directory."""

    def __init__(self, data_dir: Path, first_year: int | None = None,
                 last_year: int | None = None) -> None:
        self.data_dir = Path(data_dir)
        self.first_year = first_year
        self.last_year = last_year
        self._snapshot: InMemoryAccessor | None = None
        self._lock = threading.Lock()

    def _data(self) -> InMemoryAccessor:
        if self._snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    countries, records = load_dataset(
                        self.data_dir, self.first_year, self.last_year
                    )
                    self._snapshot = InMemoryAccessor(countries, records)
        return self._snapshot

    def reload(self) -> None:
        """Drop the parsed snapshot so the next call re-reads the files."""
        with self._lock:
            self._snapshot = None

    def list_countries(self) -> list[Country]:
        return self._data().list_countries()

    def list_countries_by_continent(self, continent: str) -> list[Country]:
        return self._data().list_countries_by_continent(continent)

    def expenditures_for_country(self, country_id: int) -> list[ExpenditureRecord]:
        return self._data().expenditures_for_country(country_id)

    def expenditures_for_year(self, year: int) -> list[tuple[Country, float | None]]:
        return self._data().expenditures_for_year(year)
