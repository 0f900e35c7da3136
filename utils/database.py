"""Database utilities for the military expenditure tools.

Provides reusable functions for:
- Opening SQLite connections with standard pragmas (read-write or read-only)
- Batch upsert operations used by the import script
- Common lookup queries
"""

import sqlite3
from pathlib import Path
from typing import List, Dict, Any


def open_connection(db_path: Path, read_only: bool = False) -> sqlite3.Connection:
    """Open a single SQLite connection with standard pragmas.

    Read-only connections use a ``mode=ro`` URI, so a missing file raises
    ``sqlite3.OperationalError`` instead of silently creating an empty
    database.

    Args:
        db_path: Path to the SQLite database file.
        read_only: If True, open in read-only mode (no WAL pragma).
    """
    if read_only:
        uri = f"file:{db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False,
                               timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout=5000")
        return conn
    conn = sqlite3.connect(str(db_path), check_same_thread=False, timeout=10)
    conn.row_factory = sqlite3.Row
    init_pragmas(conn)
    return conn


def init_pragmas(conn: sqlite3.Connection) -> None:
    """Initialize SQLite performance and reliability pragmas.

    - WAL mode so readers are not blocked while the import script writes
    - NORMAL synchronous mode for speed without data loss

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA busy_timeout=5000")
    conn.execute("PRAGMA foreign_keys=ON")


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Check if a table exists in the database.

    Args:
        conn: SQLite connection
        table: Table name

    Returns:
        True if table exists, False otherwise
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,)
    )
    return cursor.fetchone() is not None


def get_table_count(conn: sqlite3.Connection, table: str) -> int:
    """Get row count for a table.

    Args:
        conn: SQLite connection
        table: Table name

    Returns:
        Number of rows in table
    """
    result = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
    return result[0] if result else 0


def query_to_dicts(conn: sqlite3.Connection, query: str,
                   params: tuple = ()) -> List[Dict[str, Any]]:
    """Execute query and return results as list of dicts.

    Args:
        conn: SQLite connection (must have row_factory set)
        query: SQL query string
        params: Query parameters tuple

    Returns:
        List of row dicts
    """
    cursor = conn.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def batch_upsert(
    conn: sqlite3.Connection,
    table: str,
    columns: List[str],
    rows: List[tuple],
    conflict_columns: List[str],
    batch_size: int = 1000,
    commit: bool = True,
) -> int:
    """Execute batch upsert operations.

    Uses INSERT ... ON CONFLICT(...) DO UPDATE SET ... semantics so that
    re-importing a data directory updates existing rows instead of
    duplicating them.

    Args:
        conn: SQLite connection.
        table: Target table name.
        columns: List of column names to insert.
        rows: List of value tuples matching ``columns``.
        conflict_columns: Columns forming the unique constraint to conflict on.
        batch_size: Number of rows per batch (default: 1000).
        commit: Commit after each batch.  Pass False to leave the rows in the
            caller's open transaction.

    Returns:
        Total number of rows upserted.
    """
    if not rows:
        return 0

    cols_str = ", ".join(columns)
    placeholders = ", ".join("?" * len(columns))
    conflict_str = ", ".join(conflict_columns)
    update_set = ", ".join(
        f"{c} = excluded.{c}"
        for c in columns
        if c not in conflict_columns
    )
    sql = (
        f"INSERT INTO {table} ({cols_str}) VALUES ({placeholders}) "
        f"ON CONFLICT({conflict_str}) DO UPDATE SET {update_set}"
    )

    total = 0
    for i in range(0, len(rows), batch_size):
        batch = rows[i : i + batch_size]
        conn.executemany(sql, batch)
        if commit:
            conn.commit()
        total += len(batch)
    return total
