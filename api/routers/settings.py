"""
api.routers.settings - Rarity source settings and card rarity resolution.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_filter_service
from api.models import (
    RaritySource,
    RaritySourceBody,
    ResolveRaritiesRequest,
    ResolveRaritiesResponse,
    SelectedFilterBody,
)
from lootfilter.filter_service import FilterService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/settings/rarity-source", response_model=RaritySourceBody)
async def get_rarity_source(
    service: FilterService = Depends(get_filter_service),
) -> RaritySourceBody:
    return RaritySourceBody(source=RaritySource(service.get_rarity_source()))


@router.put("/settings/rarity-source", response_model=RaritySourceBody)
async def set_rarity_source(
    body: RaritySourceBody,
    service: FilterService = Depends(get_filter_service),
) -> RaritySourceBody:
    service.set_rarity_source(body.source.value)
    return body


@router.get("/settings/selected-filter", response_model=SelectedFilterBody)
async def get_selected_filter(
    service: FilterService = Depends(get_filter_service),
) -> SelectedFilterBody:
    """Selected filter id; null when none is selected or it was removed."""
    selected = service.get_selected_filter()
    return SelectedFilterBody(filter_id=selected.id if selected else None)


@router.put("/settings/selected-filter", response_model=SelectedFilterBody)
async def set_selected_filter(
    body: SelectedFilterBody,
    service: FilterService = Depends(get_filter_service),
) -> SelectedFilterBody:
    """Select a registered filter (404 if unknown) or clear with null."""
    service.select_filter(body.filter_id)
    return body


@router.post("/rarities/resolve", response_model=ResolveRaritiesResponse)
async def resolve_rarities(
    request: ResolveRaritiesRequest,
    service: FilterService = Depends(get_filter_service),
) -> ResolveRaritiesResponse:
    """
    Rarity of each card from the active source.

    With the filter source and a usable selected filter, untiered cards are
    common (4). Otherwise the request's fallback applies, defaulting to 4.
    """
    rarities = await service.resolve_card_rarities_async(
        request.card_names, request.fallback
    )
    return ResolveRaritiesResponse(
        source=RaritySource(service.get_rarity_source()),
        rarities=rarities,
    )
