"""
Schema bases shared by request and response models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]


class BaseSchema(BaseModel):
    """
    Common configuration: load from ORM rows, strip strings and keep
    enums as Enum members.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseCreateSchema(BaseSchema):
    """Request body that creates a ledger row."""


class BaseUpdateSchema(BaseSchema):
    """
    Request body for a partial update. Fields are Optional with ``None``
    defaults; only fields the client actually sent are applied.
    """

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class BaseResponseSchema(BaseSchema):
    id: str = Field(..., description="Row id (UUID)")
    created_at: datetime
    updated_at: datetime
