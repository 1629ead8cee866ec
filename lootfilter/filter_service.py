"""
Filter orchestration service.

Sits between the API/CLI and the parser + store:
- registers filter files (header metadata only, no content parse)
- parses a registered filter on demand and stores its card rarities
- lazily re-uses stored rarities once a filter has been parsed
- tracks the selected filter and the active rarity source
- merges filter-derived rarities with the market-derived fallback

Filters without a divination section are a normal outcome: nothing is
stored and callers fall back to another rarity source.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

from lootfilter.config import RARITY_SOURCE_FILTER, VALID_RARITY_SOURCES, Config
from lootfilter.database import FilterDatabase
from lootfilter.exceptions import FilterFileError, FilterNotFoundError
from lootfilter.filter_header import (
    FilterMetadata,
    is_filter_outdated,
    read_filter_metadata,
)
from lootfilter.filter_parser import CardRarity, FilterParseResult
from lootfilter.filter_reader import parse_filter_file, parse_filter_file_async
from lootfilter.models import (
    DiscoveredFilter,
    FilterCardRarity,
    FilterParseSummary,
    StoredFilter,
)

logger = logging.getLogger(__name__)

# Cards a filter does not tier are treated as common
DEFAULT_CARD_RARITY = int(CardRarity.COMMON)


class FilterService:
    """Coordinates filter registration, parsing, storage and rarity lookup."""

    def __init__(self, database: FilterDatabase, config: Config):
        self._db = database
        self._config = config

    @property
    def repository(self):
        return self._db.filters

    # ------------------------------------------------------------------
    # Registration / retrieval
    # ------------------------------------------------------------------

    def register_filter(self, file_path: Union[str, Path]) -> FilterMetadata:
        """
        Record a filter file's metadata without parsing its content.

        Raises:
            FilterFileError: file is not a filter or could not be read.
        """
        metadata = read_filter_metadata(file_path)
        if metadata is None:
            raise FilterFileError(str(file_path))

        self.repository.upsert_filter(metadata)
        logger.info(
            "filter_registered",
            extra={
                "filter_id": metadata.id,
                "filter_name": metadata.filter_name,
                "filter_type": metadata.filter_type.value,
            },
        )
        return metadata

    def get_filter(self, filter_id: str) -> Optional[StoredFilter]:
        return self.repository.get_filter(filter_id)

    def get_all_filters(
        self, league_start: Optional[str] = None
    ) -> List[DiscoveredFilter]:
        """All registered filters with outdated detection against league_start."""
        return [
            DiscoveredFilter(
                filter=stored,
                is_outdated=is_filter_outdated(stored.last_update, league_start),
            )
            for stored in self.repository.get_all_filters()
        ]

    def remove_filter(self, filter_id: str) -> None:
        """
        Forget a filter and its stored rarities; clears it if selected.

        Raises:
            FilterNotFoundError: unknown filter id.
        """
        if not self.repository.delete_filter(filter_id):
            raise FilterNotFoundError(filter_id)
        if self._config.selected_filter_id == filter_id:
            self._config.selected_filter_id = None
        logger.info(f"Removed filter {filter_id}")

    def _require_filter(self, filter_id: str) -> StoredFilter:
        stored = self.repository.get_filter(filter_id)
        if stored is None:
            raise FilterNotFoundError(filter_id)
        return stored

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_filter(self, filter_id: str) -> FilterParseSummary:
        """
        Fully parse a registered filter and store its card rarities.

        Raises:
            FilterNotFoundError: unknown filter id.
        """
        stored = self._require_filter(filter_id)
        logger.info(f"Parsing filter \"{stored.filter_name}\" ({filter_id})...")
        return self._store_parse_result(stored, parse_filter_file(stored.file_path))

    async def parse_filter_async(self, filter_id: str) -> FilterParseSummary:
        """parse_filter with the file read awaited instead of blocking."""
        stored = self._require_filter(filter_id)
        logger.info(f"Parsing filter \"{stored.filter_name}\" ({filter_id})...")
        result = await parse_filter_file_async(stored.file_path)
        return self._store_parse_result(stored, result)

    def _store_parse_result(
        self, stored: StoredFilter, result: FilterParseResult
    ) -> FilterParseSummary:
        if not result.has_divination_section:
            logger.info(
                f"Filter \"{stored.filter_name}\" has no divination card section"
                "; falling back to other rarity sources"
            )
            return FilterParseSummary(
                filter_id=stored.id,
                filter_name=stored.filter_name,
                has_divination_section=False,
            )

        self.repository.replace_card_rarities(stored.id, result.card_rarities)
        self.repository.mark_as_parsed(stored.id)

        logger.info(
            "filter_parsed",
            extra={
                "filter_id": stored.id,
                "filter_name": stored.filter_name,
                "total_cards": result.total_cards,
            },
        )
        return FilterParseSummary(
            filter_id=stored.id,
            filter_name=stored.filter_name,
            has_divination_section=True,
            rarities=[
                FilterCardRarity(filter_id=stored.id, card_name=name, rarity=int(rarity))
                for name, rarity in sorted(result.card_rarities.items())
            ],
        )

    def ensure_filter_parsed(self, filter_id: str) -> Optional[FilterParseSummary]:
        """
        Stored rarities when the filter was already parsed, else parse now.

        Returns:
            The summary, or None for an unknown filter id.
        """
        stored = self.repository.get_filter(filter_id)
        if stored is None:
            return None
        if stored.is_fully_parsed:
            return self._cached_summary(stored)
        return self.parse_filter(filter_id)

    async def ensure_filter_parsed_async(
        self, filter_id: str
    ) -> Optional[FilterParseSummary]:
        """ensure_filter_parsed with a lazy parse awaiting the file read."""
        stored = self.repository.get_filter(filter_id)
        if stored is None:
            return None
        if stored.is_fully_parsed:
            return self._cached_summary(stored)
        return await self.parse_filter_async(filter_id)

    def _cached_summary(self, stored: StoredFilter) -> FilterParseSummary:
        cached = self.repository.get_card_rarities(stored.id)
        return FilterParseSummary(
            filter_id=stored.id,
            filter_name=stored.filter_name,
            has_divination_section=len(cached) > 0,
            rarities=cached,
        )

    # ------------------------------------------------------------------
    # Manual overrides
    # ------------------------------------------------------------------

    def update_card_rarity(self, filter_id: str, card_name: str, rarity: int) -> bool:
        """
        Override one card's rarity inside a filter.

        Returns:
            True if the card was already tiered by the filter, False if it
            was added.

        Raises:
            ValueError: rarity outside 1..4.
            FilterNotFoundError: unknown filter id.
        """
        if rarity not in {int(r) for r in CardRarity}:
            raise ValueError(f"Invalid rarity: {rarity}")
        self._require_filter(filter_id)

        existed = self.repository.get_card_rarity(filter_id, card_name) is not None
        self.repository.set_card_rarity(filter_id, card_name, rarity)
        logger.info(
            f"Updated card rarity: \"{card_name}\" -> {rarity} in filter {filter_id}"
        )
        return existed

    # ------------------------------------------------------------------
    # Selection / rarity source
    # ------------------------------------------------------------------

    def select_filter(self, filter_id: Optional[str]) -> None:
        """Select a filter as the rarity source filter, or clear with None."""
        if filter_id is not None:
            stored = self._require_filter(filter_id)
            logger.info(f"Selected filter: \"{stored.filter_name}\" ({filter_id})")
        else:
            logger.info("Cleared filter selection")
        self._config.selected_filter_id = filter_id

    def get_selected_filter(self) -> Optional[StoredFilter]:
        selected_id = self._config.selected_filter_id
        if not selected_id:
            return None
        return self.repository.get_filter(selected_id)

    def get_rarity_source(self) -> str:
        return self._config.rarity_source

    def set_rarity_source(self, source: str) -> None:
        if source not in VALID_RARITY_SOURCES:
            raise ValueError(f"Invalid rarity source: {source}")
        self._config.rarity_source = source
        logger.info(f"Rarity source changed to: {source}")

    # ------------------------------------------------------------------
    # Rarity resolution
    # ------------------------------------------------------------------

    def resolve_card_rarities(
        self,
        card_names: Iterable[str],
        fallback: Optional[Mapping[str, int]] = None,
    ) -> Dict[str, int]:
        """
        Rarity for each card from the active source.

        With the "filter" source and a selected filter that has a
        divination section, cards take the filter's rarity and untiered
        cards are common. In every other case (other sources, no selection,
        filter without the section) cards take the fallback rarity, or
        common when the fallback does not know them.
        """
        selected_id = self._active_filter_id()
        summary = self.ensure_filter_parsed(selected_id) if selected_id else None
        return self._merge_rarities(
            card_names, fallback, self._usable_rarities(selected_id, summary)
        )

    async def resolve_card_rarities_async(
        self,
        card_names: Iterable[str],
        fallback: Optional[Mapping[str, int]] = None,
    ) -> Dict[str, int]:
        """resolve_card_rarities with a lazy filter parse awaiting the file read."""
        selected_id = self._active_filter_id()
        summary = (
            await self.ensure_filter_parsed_async(selected_id) if selected_id else None
        )
        return self._merge_rarities(
            card_names, fallback, self._usable_rarities(selected_id, summary)
        )

    @staticmethod
    def _merge_rarities(
        card_names: Iterable[str],
        fallback: Optional[Mapping[str, int]],
        filter_rarities: Optional[Dict[str, int]],
    ) -> Dict[str, int]:
        names = list(card_names)
        if filter_rarities is not None:
            return {
                name: filter_rarities.get(name, DEFAULT_CARD_RARITY) for name in names
            }

        fallback = fallback or {}
        return {name: int(fallback.get(name, DEFAULT_CARD_RARITY)) for name in names}

    def _active_filter_id(self) -> Optional[str]:
        """Selected filter id when the filter source is active, else None."""
        if self._config.rarity_source != RARITY_SOURCE_FILTER:
            return None

        selected_id = self._config.selected_filter_id
        if not selected_id:
            logger.warning("Rarity source is 'filter' but no filter is selected")
            return None
        return selected_id

    @staticmethod
    def _usable_rarities(
        selected_id: Optional[str], summary: Optional[FilterParseSummary]
    ) -> Optional[Dict[str, int]]:
        if selected_id is None:
            return None
        if summary is None or not summary.has_divination_section:
            logger.warning(
                f"Selected filter {selected_id} has no usable divination rarities"
            )
            return None

        return summary.rarity_map()
