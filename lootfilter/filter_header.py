"""
Filter file metadata.

Two kinds of filter files exist next to the game client:
- Local filters: `*.filter` files. Name comes from the file name, last
  update from the file modification time.
- Online filters: extension-less files downloaded by the client. Name and
  last update come from `#name:` / `#lastUpdate:` header comments.

Only the first few KB of a file are read here; full content parsing is
handled by lootfilter.filter_parser.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Online filter headers sit within the first 20-30 lines
METADATA_SCAN_LINE_LIMIT = 50
HEADER_READ_BYTES = 8192

LOCAL_FILTER_EXTENSION = ".filter"

# Filter authors usually publish 1-2 days before launch
OUTDATED_GRACE_PERIOD = timedelta(days=3)

HEADER_NAME_RE = re.compile(r"^#name:\s*(.+)$", re.IGNORECASE)
HEADER_LAST_UPDATE_RE = re.compile(r"^#lastUpdate:\s*(.+)$", re.IGNORECASE)

# 32-bit FNV-1a
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619


class FilterType(str, Enum):
    """Where a filter file came from."""

    LOCAL = "local"
    ONLINE = "online"


@dataclass
class FilterMetadata:
    """Header-level information about one filter file."""

    id: str
    filter_type: FilterType
    file_path: str
    filter_name: str
    last_update: Optional[str] = None

    @property
    def file_name(self) -> str:
        return file_name_from_path(self.file_path)


def file_name_from_path(file_path: Union[str, Path]) -> str:
    """Basename that understands both `/` and `\\` separators."""
    return re.split(r"[\\/]", str(file_path))[-1]


def detect_filter_type(file_path: Union[str, Path]) -> Optional[FilterType]:
    """Local for `*.filter`, online for extension-less files, else None."""
    name = file_name_from_path(file_path)
    if name.lower().endswith(LOCAL_FILTER_EXTENSION):
        return FilterType.LOCAL
    if "." not in name:
        return FilterType.ONLINE
    return None


def generate_filter_id(file_path: Union[str, Path]) -> str:
    """
    Stable id for a filter, derived from its path.

    Separators are normalized and case is folded so the same file always
    maps to the same id regardless of how the path was spelled.
    """
    normalized = str(file_path).replace("\\", "/").lower()

    hash_value = _FNV_OFFSET_BASIS
    for ch in normalized:
        hash_value ^= ord(ch)
        hash_value = (hash_value * _FNV_PRIME) & 0xFFFFFFFF

    return f"filter_{hash_value:08x}"


def parse_online_header(lines: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Pull `#name:` and `#lastUpdate:` out of online filter header lines.

    Returns:
        (name, last_update); either may be None.
    """
    name: Optional[str] = None
    last_update: Optional[str] = None

    for line in lines:
        trimmed = line.strip()

        if name is None:
            match = HEADER_NAME_RE.match(trimmed)
            if match:
                name = match.group(1).strip()

        if last_update is None:
            match = HEADER_LAST_UPDATE_RE.match(trimmed)
            if match:
                last_update = match.group(1).strip()

        if name is not None and last_update is not None:
            break

    return name, last_update


def read_first_lines(
    file_path: Union[str, Path], max_lines: int = METADATA_SCAN_LINE_LIMIT
) -> List[str]:
    """Read at most the first HEADER_READ_BYTES of a file, split into lines."""
    with open(file_path, "rb") as f:
        data = f.read(HEADER_READ_BYTES)
    content = data.decode("utf-8-sig", errors="replace")
    return re.split(r"\r?\n", content)[:max_lines]


def read_filter_metadata(file_path: Union[str, Path]) -> Optional[FilterMetadata]:
    """
    Build FilterMetadata for one file.

    Returns None (and logs a warning) when the file is not a filter or
    cannot be read.
    """
    path_str = str(file_path)
    filter_type = detect_filter_type(path_str)
    if filter_type is None:
        logger.warning(f"Not a loot filter file: {path_str}")
        return None

    file_name = file_name_from_path(path_str)

    try:
        if filter_type == FilterType.LOCAL:
            mtime = Path(path_str).stat().st_mtime
            filter_name = file_name[: -len(LOCAL_FILTER_EXTENSION)]
            last_update: Optional[str] = datetime.fromtimestamp(
                mtime, tz=timezone.utc
            ).isoformat()
        else:
            name, last_update = parse_online_header(read_first_lines(path_str))
            filter_name = name or file_name
    except OSError as e:
        logger.warning(f"Failed to read filter metadata: {path_str}: {e}")
        return None

    return FilterMetadata(
        id=generate_filter_id(path_str),
        filter_type=filter_type,
        file_path=path_str,
        filter_name=filter_name,
        last_update=last_update,
    )


def _parse_iso(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_filter_outdated(
    last_update: Optional[str], league_start: Optional[str]
) -> bool:
    """
    True when the filter was last updated well before the league started.

    Updates inside OUTDATED_GRACE_PERIOD before league start still count as
    current. Missing or unparseable dates are never outdated.
    """
    if not last_update or not league_start:
        return False

    filter_date = _parse_iso(last_update)
    league_date = _parse_iso(league_start)
    if filter_date is None or league_date is None:
        return False

    return filter_date < league_date - OUTDATED_GRACE_PERIOD
