"""Shared utilities for the military expenditure tools."""

# Configuration
from utils.config import AppConfig, Config

# Database utilities
from utils.database import (
    open_connection,
    init_pragmas,
    table_exists,
    get_table_count,
    query_to_dicts,
    batch_upsert,
)

# Validation utilities
from utils.validation import (
    ValidationIssue,
    ValidationResult,
    parse_year,
    parse_limit,
    parse_country_key,
    is_valid_year,
    is_valid_amount,
)

__all__ = [
    "AppConfig",
    "Config",
    "open_connection",
    "init_pragmas",
    "table_exists",
    "get_table_count",
    "query_to_dicts",
    "batch_upsert",
    "ValidationIssue",
    "ValidationResult",
    "parse_year",
    "parse_limit",
    "parse_country_key",
    "is_valid_year",
    "is_valid_amount",
]
