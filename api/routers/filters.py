"""
api.routers.filters - Filter parsing and registry endpoints.

Provides endpoints for parsing raw filter text, registering filter files,
parsing them into stored card rarities and overriding single cards.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_filter_service
from api.models import (
    CardRarityEntry,
    FilterListResponse,
    FilterParseResponse,
    FilterResponse,
    ParseContentRequest,
    ParseContentResponse,
    RegisterFilterRequest,
    UpdateCardRarityRequest,
    UpdateCardRarityResponse,
)
from lootfilter.filter_parser import FilterParser
from lootfilter.filter_service import FilterService
from lootfilter.models import DiscoveredFilter, FilterParseSummary

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_filter_response(discovered: DiscoveredFilter) -> FilterResponse:
    return FilterResponse(**discovered.to_dict())


def _to_parse_response(summary: FilterParseSummary) -> FilterParseResponse:
    return FilterParseResponse(
        filter_id=summary.filter_id,
        filter_name=summary.filter_name,
        has_divination_section=summary.has_divination_section,
        total_cards=summary.total_cards,
        rarities=[
            CardRarityEntry(card_name=r.card_name, rarity=r.rarity)
            for r in summary.rarities
        ],
    )


@router.post("/filters/parse", response_model=ParseContentResponse)
async def parse_content(request: ParseContentRequest) -> ParseContentResponse:
    """
    Parse raw filter text.

    Nothing is stored. A filter without a Divination Cards section yields
    has_divination_section=false and an empty mapping.
    """
    result = FilterParser.parse_filter_content(request.content)
    return ParseContentResponse(
        has_divination_section=result.has_divination_section,
        total_cards=result.total_cards,
        card_rarities={name: int(r) for name, r in result.card_rarities.items()},
    )


@router.post(
    "/filters",
    response_model=FilterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_filter(
    request: RegisterFilterRequest,
    service: FilterService = Depends(get_filter_service),
) -> FilterResponse:
    """
    Register a filter file by path.

    Only the header is read; the content is parsed on demand.
    Returns 400 if the path is not a readable filter file.
    """
    metadata = service.register_filter(request.file_path)
    stored = service.get_filter(metadata.id)
    if stored is None:
        raise HTTPException(status_code=500, detail="Filter registration failed")
    return _to_filter_response(DiscoveredFilter(filter=stored))


@router.get("/filters", response_model=FilterListResponse)
async def list_filters(
    service: FilterService = Depends(get_filter_service),
    league_start: Optional[str] = Query(
        None, description="ISO-8601 league start used for outdated detection"
    ),
) -> FilterListResponse:
    """List registered filters, local first, then by name."""
    filters = [_to_filter_response(d) for d in service.get_all_filters(league_start)]
    local_count = sum(1 for f in filters if f.type.value == "local")
    return FilterListResponse(
        filters=filters,
        total=len(filters),
        local_count=local_count,
        online_count=len(filters) - local_count,
    )


@router.get("/filters/{filter_id}", response_model=FilterResponse)
async def get_filter(
    filter_id: str,
    service: FilterService = Depends(get_filter_service),
) -> FilterResponse:
    """Get one registered filter."""
    stored = service.get_filter(filter_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Filter not found: {filter_id}")
    return _to_filter_response(DiscoveredFilter(filter=stored))


@router.delete("/filters/{filter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_filter(
    filter_id: str,
    service: FilterService = Depends(get_filter_service),
) -> None:
    """Forget a filter and its stored rarities."""
    service.remove_filter(filter_id)


@router.post("/filters/{filter_id}/parse", response_model=FilterParseResponse)
async def parse_filter(
    filter_id: str,
    service: FilterService = Depends(get_filter_service),
) -> FilterParseResponse:
    """Re-read and parse a registered filter, replacing stored rarities."""
    summary = await service.parse_filter_async(filter_id)
    return _to_parse_response(summary)


@router.get("/filters/{filter_id}/rarities", response_model=FilterParseResponse)
async def get_filter_rarities(
    filter_id: str,
    service: FilterService = Depends(get_filter_service),
) -> FilterParseResponse:
    """Stored rarities of a filter, parsing it first if it never was."""
    summary = await service.ensure_filter_parsed_async(filter_id)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"Filter not found: {filter_id}")
    return _to_parse_response(summary)


@router.patch(
    "/filters/{filter_id}/rarities/{card_name}",
    response_model=UpdateCardRarityResponse,
)
async def update_card_rarity(
    filter_id: str,
    card_name: str,
    request: UpdateCardRarityRequest,
    service: FilterService = Depends(get_filter_service),
) -> UpdateCardRarityResponse:
    """Override the rarity of one card in a filter."""
    existed = service.update_card_rarity(filter_id, card_name, request.rarity)
    return UpdateCardRarityResponse(
        filter_id=filter_id,
        card_name=card_name,
        rarity=request.rarity,
        created=not existed,
    )
