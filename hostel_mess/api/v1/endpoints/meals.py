"""
Meal ledger endpoints.
"""
from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.schemas.mess import MealCounts, MealRecordResponse
from hostel_mess.services import MealLedgerService

router = APIRouter(tags=["Meals"])


@router.put("/hostels/{hostel_id}/meals/{meal_date}", response_model=MealRecordResponse)
def set_meal_counts(
    hostel_id: str,
    meal_date: date,
    payload: MealCounts,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: MealLedgerService = Depends(deps.get_meal_ledger_service),
) -> MealRecordResponse:
    """Create or replace the caller's counts for ``meal_date``; omitted counts are zero."""
    record = unwrap(
        service.set_meal_counts(current_user_id, hostel_id, meal_date, payload.model_dump())
    )
    return MealRecordResponse.model_validate(record)


@router.get("/hostels/{hostel_id}/meals", response_model=List[MealRecordResponse])
def list_meals(
    hostel_id: str,
    start: date = Query(...),
    end: date = Query(...),
    service: MealLedgerService = Depends(deps.get_meal_ledger_service),
) -> List[MealRecordResponse]:
    records = unwrap(service.get_meals_for_period(hostel_id, start, end))
    return [MealRecordResponse.model_validate(r) for r in records]


@router.get("/meals/{meal_date}", response_model=MealRecordResponse)
def get_my_meal_record(
    meal_date: date,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: MealLedgerService = Depends(deps.get_meal_ledger_service),
) -> MealRecordResponse:
    return MealRecordResponse.model_validate(
        unwrap(service.get_meal_record(current_user_id, meal_date))
    )
