"""
File read boundary for loot filters.

Everything that touches the disk on the parse path lives here. A filter that
cannot be read is logged and degrades to FilterParseResult.empty(), so the
callers see the same "no divination section" shape for missing files as for
filters without the section.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Union

from lootfilter.filter_parser import FilterParseResult, FilterParser
from lootfilter.result import Err, Ok, Result

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_filter_text(file_path: PathLike) -> Result[str, str]:
    """
    Read a whole filter file as text.

    UTF-8 with an optional BOM; undecodable bytes are replaced rather than
    failing the read.

    Returns:
        Ok(content) or Err(message) when the file cannot be read.
    """
    path = Path(file_path)
    try:
        return Ok(path.read_text(encoding="utf-8-sig", errors="replace"))
    except OSError as e:
        return Err(f"Failed to read filter file {path}: {e}")


def parse_filter_file(file_path: PathLike) -> FilterParseResult:
    """Read a filter from disk and parse its divination card section."""
    result = read_filter_text(file_path)
    if result.is_err():
        logger.error(result.error)
        return FilterParseResult.empty()
    return FilterParser.parse_filter_content(result.unwrap())


async def parse_filter_file_async(file_path: PathLike) -> FilterParseResult:
    """
    Awaitable variant of parse_filter_file.

    The blocking read runs in a worker thread; parsing happens back on the
    caller's task once the content is available.
    """
    result = await asyncio.to_thread(read_filter_text, file_path)
    if result.is_err():
        logger.error(result.error)
        return FilterParseResult.empty()
    return FilterParser.parse_filter_content(result.unwrap())
