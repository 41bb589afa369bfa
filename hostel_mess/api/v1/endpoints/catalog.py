"""
Grocery catalog endpoints: markets and preset items.
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.models.base.enums import GroceryCategory
from hostel_mess.schemas.mess import (
    MarketActiveUpdate,
    MarketCreate,
    MarketResponse,
    PresetCreate,
    PresetResponse,
)
from hostel_mess.services import GroceryCatalogService

router = APIRouter(tags=["Catalog"])


@router.post("/markets", response_model=MarketResponse, status_code=status.HTTP_201_CREATED)
def create_market(
    payload: MarketCreate,
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> MarketResponse:
    market = unwrap(
        service.create_market(
            payload.name,
            location=payload.location.coordinates if payload.location else None,
            description=payload.description,
        )
    )
    return MarketResponse.model_validate(market)


@router.get("/markets", response_model=List[MarketResponse])
def list_markets(
    active_only: bool = Query(True),
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> List[MarketResponse]:
    return [MarketResponse.model_validate(m) for m in unwrap(service.list_markets(active_only))]


@router.put("/markets/{market_id}/active", response_model=MarketResponse)
def set_market_active(
    market_id: str,
    payload: MarketActiveUpdate,
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> MarketResponse:
    return MarketResponse.model_validate(
        unwrap(service.set_market_active(market_id, payload.is_active))
    )


@router.post("/presets", response_model=PresetResponse, status_code=status.HTTP_201_CREATED)
def create_preset(
    payload: PresetCreate,
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> PresetResponse:
    preset = unwrap(service.create_preset(payload.name, payload.category, payload.default_unit))
    return PresetResponse.model_validate(preset)


@router.get("/presets", response_model=List[PresetResponse])
def list_presets(
    category: Optional[GroceryCategory] = Query(None),
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> List[PresetResponse]:
    return [PresetResponse.model_validate(p) for p in unwrap(service.list_presets(category))]


@router.post("/presets/seed", response_model=List[PresetResponse])
def seed_default_presets(
    service: GroceryCatalogService = Depends(deps.get_grocery_catalog_service),
) -> List[PresetResponse]:
    """Insert the built-in presets that are missing; returns the ones created."""
    return [PresetResponse.model_validate(p) for p in unwrap(service.seed_default_presets())]
