"""
Billing endpoints: period closing and bill computation.
"""
from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.schemas.mess import BillingPeriodCreate, BillingPeriodResponse, BillReport
from hostel_mess.services import BillingService

router = APIRouter(prefix="/hostels/{hostel_id}", tags=["Billing"])


@router.post(
    "/billing-periods",
    response_model=BillingPeriodResponse,
    status_code=status.HTTP_201_CREATED,
)
def close_billing_period(
    hostel_id: str,
    payload: BillingPeriodCreate,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: BillingService = Depends(deps.get_billing_service),
) -> BillingPeriodResponse:
    """Close the range for edits; overlapping an existing period is a conflict."""
    period = unwrap(
        service.close_billing_period(
            hostel_id, payload.start_date, payload.end_date, closed_by=current_user_id
        )
    )
    return BillingPeriodResponse.model_validate(period)


@router.get("/billing-periods", response_model=List[BillingPeriodResponse])
def list_billing_periods(
    hostel_id: str,
    service: BillingService = Depends(deps.get_billing_service),
) -> List[BillingPeriodResponse]:
    periods = unwrap(service.list_billing_periods(hostel_id))
    return [BillingPeriodResponse.model_validate(p) for p in periods]


@router.get("/bill", response_model=BillReport)
def compute_bill(
    hostel_id: str,
    start: date = Query(...),
    end: date = Query(...),
    allow_empty: bool = Query(False, description="Return a zero meal-cost bill when no meals were recorded"),
    service: BillingService = Depends(deps.get_billing_service),
) -> BillReport:
    return unwrap(service.compute_bill(hostel_id, start, end, allow_empty=allow_empty))
