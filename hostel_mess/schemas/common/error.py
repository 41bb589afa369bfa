"""
Error envelope returned by the API for every failed operation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from hostel_mess.schemas.common.base import BaseSchema

__all__ = ["ErrorBody", "ErrorResponse"]


class ErrorBody(BaseSchema):
    code: str = Field(..., description="Error tag, e.g. DUPLICATE_SEAT")
    kind: str = Field(..., description="VALIDATION, CONFLICT, STATE, NOT_FOUND or INTERNAL")
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseSchema):
    error: ErrorBody
