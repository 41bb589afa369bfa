"""
Membership endpoints. Join and leave act on the calling user.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.schemas.hostel import (
    JoinHostelRequest,
    LeaveHostelRequest,
    MembershipResponse,
    SecurityDepositRequest,
)
from hostel_mess.services import MembershipService

router = APIRouter(prefix="/memberships", tags=["Memberships"])


@router.post("/join", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
def join_hostel(
    payload: JoinHostelRequest,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: MembershipService = Depends(deps.get_membership_service),
) -> MembershipResponse:
    """Join by short code, optionally occupying a seat in the same step."""
    membership = unwrap(
        service.join_hostel(
            current_user_id,
            payload.short_code,
            payload.join_date,
            seat_id=payload.seat_id,
        )
    )
    return MembershipResponse.model_validate(membership)


@router.post("/leave", response_model=MembershipResponse)
def leave_hostel(
    payload: LeaveHostelRequest,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: MembershipService = Depends(deps.get_membership_service),
) -> MembershipResponse:
    membership = unwrap(service.leave_hostel(current_user_id, payload.leaving_date))
    return MembershipResponse.model_validate(membership)


@router.get("/me", response_model=Optional[MembershipResponse])
def get_my_membership(
    current_user_id: str = Depends(deps.get_current_user_id),
    service: MembershipService = Depends(deps.get_membership_service),
) -> Optional[MembershipResponse]:
    membership = unwrap(service.get_active_membership(current_user_id))
    return MembershipResponse.model_validate(membership) if membership else None


@router.put("/{membership_id}/deposit", response_model=MembershipResponse)
def record_security_deposit(
    membership_id: str,
    payload: SecurityDepositRequest,
    service: MembershipService = Depends(deps.get_membership_service),
) -> MembershipResponse:
    membership = unwrap(
        service.record_security_deposit(membership_id, payload.amount, payload.paid_at)
    )
    return MembershipResponse.model_validate(membership)
