"""
Database utility functions.

Timestamp helpers shared by the repositories.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def parse_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a timestamp from SQLite.

    Supports:
    - ISO format strings (e.g., "2024-01-15T12:34:56+00:00")
    - "YYYY-MM-DD HH:MM:SS" (SQLite datetime('now') format)

    Returns:
        Parsed datetime, or None if value is empty or unparseable
    """
    if not value:
        return None

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        try:
            return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
