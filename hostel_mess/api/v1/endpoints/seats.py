"""
Seat ledger endpoints.
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.models.base.enums import SeatStatus
from hostel_mess.schemas.hostel import HostelResponse
from hostel_mess.schemas.room import (
    SeatCreate,
    SeatReconcileReport,
    SeatResponse,
    SeatStatusUpdate,
    SeatTotalUpdate,
)
from hostel_mess.services import SeatLedgerService

router = APIRouter(tags=["Seats"])


@router.post(
    "/hostels/{hostel_id}/seats",
    response_model=SeatResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_seat(
    hostel_id: str,
    payload: SeatCreate,
    service: SeatLedgerService = Depends(deps.get_seat_ledger_service),
) -> SeatResponse:
    seat = unwrap(
        service.create_seat(
            hostel_id,
            seat_number=payload.seat_number,
            room_number=payload.room_number,
            rent=payload.rent,
        )
    )
    return SeatResponse.model_validate(seat)


@router.get("/hostels/{hostel_id}/seats", response_model=List[SeatResponse])
def list_seats(
    hostel_id: str,
    seat_status: Optional[SeatStatus] = Query(None, alias="status"),
    service: SeatLedgerService = Depends(deps.get_seat_ledger_service),
) -> List[SeatResponse]:
    seats = unwrap(service.list_seats(hostel_id, seat_status))
    return [SeatResponse.model_validate(s) for s in seats]


@router.put("/hostels/{hostel_id}/seat-total", response_model=HostelResponse)
def set_seat_total(
    hostel_id: str,
    payload: SeatTotalUpdate,
    service: SeatLedgerService = Depends(deps.get_seat_ledger_service),
) -> HostelResponse:
    return HostelResponse.model_validate(unwrap(service.set_seat_total(hostel_id, payload.total)))


@router.post("/hostels/{hostel_id}/seats/reconcile", response_model=SeatReconcileReport)
def reconcile_seat_counts(
    hostel_id: str,
    service: SeatLedgerService = Depends(deps.get_seat_ledger_service),
) -> SeatReconcileReport:
    """Recompute the hostel seat summary from its seat records."""
    return SeatReconcileReport.model_validate(
        unwrap(service.reconcile_hostel_seat_counts(hostel_id))
    )


@router.put("/seats/{seat_id}/status", response_model=SeatResponse)
def set_seat_status(
    seat_id: str,
    payload: SeatStatusUpdate,
    service: SeatLedgerService = Depends(deps.get_seat_ledger_service),
) -> SeatResponse:
    """
    Move a seat to a new status.

    OCCUPIED requires ``occupant_id``; other statuses forbid it. Pass
    ``expected_version`` to fail with CONCURRENT_MODIFICATION when the
    seat changed since it was read.
    """
    seat = unwrap(
        service.set_seat_status(
            seat_id,
            payload.status,
            occupant_id=payload.occupant_id,
            expected_version=payload.expected_version,
        )
    )
    return SeatResponse.model_validate(seat)
