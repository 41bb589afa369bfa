"""
Grocery ledger endpoints: bazars, their line items and price history.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.schemas.mess import (
    BazarCreate,
    BazarResponse,
    GroceryItemCreate,
    GroceryItemResponse,
    GroceryItemUpdate,
    PricePoint,
)
from hostel_mess.services import GroceryLedgerService

router = APIRouter(tags=["Bazars"])


@router.post(
    "/hostels/{hostel_id}/bazars",
    response_model=BazarResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bazar(
    hostel_id: str,
    payload: BazarCreate,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> BazarResponse:
    bazar = unwrap(
        service.create_bazar(
            hostel_id,
            payload.bazar_date,
            added_by=current_user_id,
            receipts=payload.receipts,
        )
    )
    return BazarResponse.model_validate(bazar)


@router.get("/hostels/{hostel_id}/bazars", response_model=List[BazarResponse])
def list_bazars(
    hostel_id: str,
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> List[BazarResponse]:
    bazars = unwrap(service.list_bazars(hostel_id, start, end))
    return [BazarResponse.model_validate(b) for b in bazars]


@router.get("/bazars/{bazar_id}", response_model=BazarResponse)
def get_bazar(
    bazar_id: str,
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> BazarResponse:
    return BazarResponse.model_validate(unwrap(service.get_bazar(bazar_id)))


# ------------------------------------------------------------------ #
# Items
# ------------------------------------------------------------------ #
@router.post(
    "/bazars/{bazar_id}/items",
    response_model=GroceryItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_grocery_item(
    bazar_id: str,
    payload: GroceryItemCreate,
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> GroceryItemResponse:
    """Append an item; the bazar's grand total is recomputed in the same transaction."""
    item = unwrap(
        service.add_item(
            bazar_id,
            name=payload.name,
            category=payload.category,
            quantity=payload.quantity,
            unit=payload.unit,
            price_per_unit=payload.price_per_unit,
            market_id=payload.market_id,
        )
    )
    return GroceryItemResponse.model_validate(item)


# Registered before the item routes so "price-history" is not read as an item id.
@router.get("/grocery-items/price-history", response_model=List[PricePoint])
def price_history(
    name: str = Query(..., min_length=1),
    hostel_id: Optional[str] = Query(None),
    market_id: Optional[str] = Query(None),
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> List[PricePoint]:
    points = unwrap(service.price_history(name, hostel_id=hostel_id, market_id=market_id))
    return [PricePoint(bazar_date=day, price_per_unit=price) for day, price in points]


@router.patch("/grocery-items/{item_id}", response_model=GroceryItemResponse)
def update_grocery_item(
    item_id: str,
    payload: GroceryItemUpdate,
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> GroceryItemResponse:
    item = unwrap(service.update_item(item_id, **payload.changes()))
    return GroceryItemResponse.model_validate(item)


@router.delete("/grocery-items/{item_id}", response_model=BazarResponse)
def remove_grocery_item(
    item_id: str,
    service: GroceryLedgerService = Depends(deps.get_grocery_ledger_service),
) -> BazarResponse:
    return BazarResponse.model_validate(unwrap(service.remove_item(item_id)))
