"""Configuration management for the military expenditure tools.

Settings come from environment variables with defaults that work out of the
box; nothing is read from disk.
"""

import os as _os
from pathlib import Path
from typing import Dict, Any

BACKEND_SQLITE = "sqlite"
BACKEND_JSON = "json"
KNOWN_BACKENDS = frozenset({BACKEND_SQLITE, BACKEND_JSON})

DEFAULT_DB_PATH = Path("military_expenditure.sqlite")
DEFAULT_DATA_DIR = Path("data")


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all public config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary, overriding the defaults.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config


def _int_env(name: str, default: int) -> int:
    raw = _os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    Environment variables:
        APP_DATA_BACKEND: "sqlite" or "json" (default: sqlite)
        APP_DB_PATH: Path to the SQLite database file (default: military_expenditure.sqlite)
        APP_DATA_DIR: Directory with the JSON data files (default: data)
        APP_FIRST_YEAR: First year served from the JSON files (default: 1960)
        APP_LAST_YEAR: Last year served from the JSON files (default: 2022)
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_LOG_LEVEL: Root logging level name (default: INFO)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        super().__init__()
        self.data_backend = _os.getenv("APP_DATA_BACKEND", BACKEND_SQLITE).strip().lower()
        if self.data_backend not in KNOWN_BACKENDS:
            raise ValueError(
                f"APP_DATA_BACKEND must be one of {sorted(KNOWN_BACKENDS)}, "
                f"got {self.data_backend!r}"
            )
        self.db_path = Path(_os.getenv("APP_DB_PATH", str(DEFAULT_DB_PATH)))
        self.data_dir = Path(_os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))
        self.first_year = _int_env("APP_FIRST_YEAR", 1960)
        self.last_year = _int_env("APP_LAST_YEAR", 2022)
        self.api_port = _int_env("APP_PORT", 8000)
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        self.log_level = _os.getenv("APP_LOG_LEVEL", "INFO").upper()
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
