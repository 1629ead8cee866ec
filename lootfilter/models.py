"""
Data transfer objects shared by the service layer, persistence and API.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from lootfilter.filter_header import FilterType, file_name_from_path


@dataclass
class StoredFilter:
    """A filter_metadata row."""

    id: str
    filter_type: FilterType
    file_path: str
    filter_name: str
    last_update: Optional[str] = None
    is_fully_parsed: bool = False
    parsed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def file_name(self) -> str:
        return file_name_from_path(self.file_path)


@dataclass
class DiscoveredFilter:
    """A stored filter plus runtime-only outdated detection."""

    filter: StoredFilter
    is_outdated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        f = self.filter
        return {
            "id": f.id,
            "type": f.filter_type.value,
            "file_path": f.file_path,
            "file_name": f.file_name,
            "name": f.filter_name,
            "last_update": f.last_update,
            "is_fully_parsed": f.is_fully_parsed,
            "is_outdated": self.is_outdated,
        }


@dataclass
class FilterCardRarity:
    """One (filter, card, rarity) row."""

    filter_id: str
    card_name: str
    rarity: int


@dataclass
class FilterParseSummary:
    """Result of parsing (or loading) a registered filter."""

    filter_id: str
    filter_name: str
    has_divination_section: bool
    rarities: List[FilterCardRarity] = field(default_factory=list)

    @property
    def total_cards(self) -> int:
        return len(self.rarities)

    def rarity_map(self) -> Dict[str, int]:
        return {r.card_name: r.rarity for r in self.rarities}
