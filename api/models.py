"""
api.models - Pydantic models for API request/response schemas.

These models provide type-safe data validation for all API endpoints.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field


# ==============================================================================
# Enums
# ==============================================================================


class RaritySource(str, Enum):
    """Where divination card rarities come from."""

    POE_NINJA = "poe.ninja"
    FILTER = "filter"
    PROHIBITED_LIBRARY = "prohibited-library"


class FilterKind(str, Enum):
    """Filter file origin."""

    LOCAL = "local"
    ONLINE = "online"


# ==============================================================================
# Parse Models
# ==============================================================================


class ParseContentRequest(BaseModel):
    """Raw filter text to parse without storing anything."""

    content: str = Field(
        ...,
        description="Full text of a loot filter file",
        examples=[
            "# TABLE OF CONTENTS\n# [[4200]] Divination Cards\n\n"
            "# [[4200]] Divination Cards\n"
            "Show # $type->divination $tier->t1\n"
            '    BaseType == "The Doctor" "The Nurse"\n'
        ],
    )


class ParseContentResponse(BaseModel):
    """Card rarities extracted from raw filter text."""

    has_divination_section: bool = Field(
        ..., description="Whether a Divination Cards section was found"
    )
    total_cards: int = Field(..., ge=0, description="Number of unique cards")
    card_rarities: dict[str, int] = Field(
        default_factory=dict,
        description="Card name -> rarity (1=extremely rare ... 4=common)",
        examples=[{"The Doctor": 1, "Rain of Chaos": 4}],
    )


class CardRarityEntry(BaseModel):
    """One card's rarity inside a filter."""

    card_name: str = Field(..., description="Divination card name", examples=["The Doctor"])
    rarity: int = Field(..., ge=1, le=4, description="Rarity 1-4", examples=[1])


class FilterParseResponse(BaseModel):
    """Stored (or freshly parsed) rarities of a registered filter."""

    filter_id: str = Field(..., examples=["filter_1a2b3c4d"])
    filter_name: str = Field(..., examples=["NeverSink's filter - 3-STRICT"])
    has_divination_section: bool
    total_cards: int = Field(..., ge=0)
    rarities: list[CardRarityEntry] = Field(default_factory=list)


# ==============================================================================
# Filter Models
# ==============================================================================


class RegisterFilterRequest(BaseModel):
    """Register a filter file by path."""

    file_path: str = Field(
        ...,
        min_length=1,
        description="Absolute path to a .filter file or an online filter file",
    )


class FilterResponse(BaseModel):
    """A registered filter."""

    id: str = Field(..., description="Stable path-derived filter id")
    type: FilterKind
    file_path: str
    file_name: str
    name: str
    last_update: Optional[str] = Field(None, description="ISO-8601 timestamp")
    is_fully_parsed: bool = False
    is_outdated: bool = False


class FilterListResponse(BaseModel):
    """All registered filters."""

    filters: list[FilterResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    local_count: int = Field(..., ge=0)
    online_count: int = Field(..., ge=0)


class UpdateCardRarityRequest(BaseModel):
    """Manual rarity override for one card."""

    rarity: int = Field(..., ge=1, le=4, description="Rarity 1-4")


class UpdateCardRarityResponse(BaseModel):
    filter_id: str
    card_name: str
    rarity: int
    created: bool = Field(
        ..., description="True when the card was not tiered by the filter before"
    )


# ==============================================================================
# Settings / Resolution Models
# ==============================================================================


class RaritySourceBody(BaseModel):
    source: RaritySource = Field(..., description="Active rarity source")


class SelectedFilterBody(BaseModel):
    filter_id: Optional[str] = Field(
        None, description="Filter id to select, or null to clear"
    )


class ResolveRaritiesRequest(BaseModel):
    """Cards to resolve against the active rarity source."""

    card_names: list[str] = Field(..., min_length=1)
    fallback: dict[str, Annotated[int, Field(ge=1, le=4)]] = Field(
        default_factory=dict,
        description="Market-derived rarities used when the filter source is unavailable",
    )


class ResolveRaritiesResponse(BaseModel):
    source: RaritySource
    rarities: dict[str, int] = Field(default_factory=dict)


# ==============================================================================
# Health Models
# ==============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status", examples=["healthy"])
    version: str = Field(..., description="API version", examples=["0.1.0"])
    database: str = Field(..., description="Database status", examples=["connected"])
    registered_filters: int = Field(0, ge=0)
