"""
Hostel administration endpoints: creation, rules, meal weights, service
suspension, fines and member listing.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from hostel_mess.api import deps
from hostel_mess.api.errors import unwrap
from hostel_mess.schemas.hostel import (
    FineCreate,
    FineResponse,
    HostelCreate,
    HostelResponse,
    HostelRuleCreate,
    HostelRuleResponse,
    MealWeightsUpdate,
    MembershipResponse,
    SuspensionRequest,
)
from hostel_mess.services import HostelService, MembershipService

router = APIRouter(prefix="/hostels", tags=["Hostels"])


@router.post("", response_model=HostelResponse, status_code=status.HTTP_201_CREATED)
def create_hostel(
    payload: HostelCreate,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    """Create a hostel owned by the caller. Seats are added separately."""
    hostel = unwrap(
        service.create_hostel(
            owner_id=current_user_id,
            name=payload.name,
            short_code=payload.short_code,
            hostel_type=payload.hostel_type,
            address=payload.address,
            total_seats=payload.total_seats,
            location=payload.location.coordinates if payload.location else None,
            manager_id=payload.manager_id,
        )
    )
    return HostelResponse.model_validate(hostel)


@router.get("/by-code/{short_code}", response_model=HostelResponse)
def get_hostel_by_short_code(
    short_code: str,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    return HostelResponse.model_validate(unwrap(service.get_by_short_code(short_code)))


@router.get("/{hostel_id}", response_model=HostelResponse)
def get_hostel(
    hostel_id: str,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    return HostelResponse.model_validate(unwrap(service.get_hostel(hostel_id)))


# ------------------------------------------------------------------ #
# Rules
# ------------------------------------------------------------------ #
@router.post(
    "/{hostel_id}/rules",
    response_model=HostelRuleResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_rule(
    hostel_id: str,
    payload: HostelRuleCreate,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelRuleResponse:
    rule = unwrap(
        service.add_rule(
            hostel_id,
            order=payload.order,
            title=payload.title,
            level=payload.level,
            description=payload.description,
            fine=payload.fine,
        )
    )
    return HostelRuleResponse.model_validate(rule)


@router.get("/{hostel_id}/rules", response_model=List[HostelRuleResponse])
def list_rules(
    hostel_id: str,
    service: HostelService = Depends(deps.get_hostel_service),
) -> List[HostelRuleResponse]:
    return [HostelRuleResponse.model_validate(r) for r in unwrap(service.list_rules(hostel_id))]


# ------------------------------------------------------------------ #
# Meal weights & suspension
# ------------------------------------------------------------------ #
@router.put("/{hostel_id}/meal-weights", response_model=HostelResponse)
def set_meal_weights(
    hostel_id: str,
    payload: MealWeightsUpdate,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    hostel = unwrap(
        service.set_meal_weights(
            hostel_id,
            breakfast=payload.breakfast,
            lunch=payload.lunch,
            dinner=payload.dinner,
        )
    )
    return HostelResponse.model_validate(hostel)


@router.post("/{hostel_id}/suspension", response_model=HostelResponse)
def suspend_service(
    hostel_id: str,
    payload: SuspensionRequest,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    """Freeze joins and meal edits until ``until``."""
    hostel = unwrap(service.suspend_service(hostel_id, payload.until, payload.reason))
    return HostelResponse.model_validate(hostel)


@router.delete("/{hostel_id}/suspension", response_model=HostelResponse)
def resume_service(
    hostel_id: str,
    service: HostelService = Depends(deps.get_hostel_service),
) -> HostelResponse:
    return HostelResponse.model_validate(unwrap(service.resume_service(hostel_id)))


# ------------------------------------------------------------------ #
# Fines & members
# ------------------------------------------------------------------ #
@router.post(
    "/{hostel_id}/fines",
    response_model=FineResponse,
    status_code=status.HTTP_201_CREATED,
)
def issue_fine(
    hostel_id: str,
    payload: FineCreate,
    current_user_id: str = Depends(deps.get_current_user_id),
    service: HostelService = Depends(deps.get_hostel_service),
) -> FineResponse:
    fine = unwrap(
        service.issue_fine(
            hostel_id,
            user_id=payload.user_id,
            amount=payload.amount,
            issued_on=payload.issued_on,
            reason=payload.reason,
            rule_id=payload.rule_id,
            issued_by=current_user_id,
        )
    )
    return FineResponse.model_validate(fine)


@router.get("/{hostel_id}/members", response_model=List[MembershipResponse])
def list_members(
    hostel_id: str,
    on: Optional[date] = Query(None, description="Day to list members for; defaults to today"),
    service: MembershipService = Depends(deps.get_membership_service),
) -> List[MembershipResponse]:
    memberships = unwrap(service.list_members(hostel_id, on))
    return [MembershipResponse.model_validate(m) for m in memberships]
