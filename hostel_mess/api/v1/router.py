"""
API v1 Router - Main Entry Point
Aggregates all v1 endpoints of the mess ledger.
"""
from fastapi import APIRouter

from hostel_mess.api.v1.endpoints import (
    bazars,
    billing,
    catalog,
    hostels,
    meals,
    memberships,
    seats,
)
from hostel_mess.schemas.common import ErrorResponse

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Not Found"},
        409: {"model": ErrorResponse, "description": "Conflict"},
        422: {"model": ErrorResponse, "description": "Validation Error"},
        423: {"model": ErrorResponse, "description": "Locked"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    }
)

router.include_router(hostels.router)
router.include_router(seats.router)
router.include_router(memberships.router)
router.include_router(meals.router)
router.include_router(bazars.router)
router.include_router(billing.router)
router.include_router(catalog.router)


@router.get("/health", tags=["Health"])
def health_check() -> dict:
    return {"status": "ok"}
