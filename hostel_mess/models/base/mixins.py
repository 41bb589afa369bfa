"""
SQLAlchemy model mixins for reusable functionality.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Numeric
from sqlalchemy.orm import Mapped, mapped_column, validates


class LocationMixin:
    """
    Mixin for geographic location fields.

    Stores a point as longitude/latitude with range validation.
    """

    longitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 7),
        nullable=True,
        comment="Longitude coordinate"
    )
    latitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 7),
        nullable=True,
        comment="Latitude coordinate"
    )

    @validates('latitude')
    def validate_latitude(self, key: str, value: Optional[Decimal]) -> Optional[Decimal]:
        """Validate latitude range."""
        if value is not None:
            if value < -90 or value > 90:
                raise ValueError(f"Latitude must be between -90 and 90: {value}")
        return value

    @validates('longitude')
    def validate_longitude(self, key: str, value: Optional[Decimal]) -> Optional[Decimal]:
        """Validate longitude range."""
        if value is not None:
            if value < -180 or value > 180:
                raise ValueError(f"Longitude must be between -180 and 180: {value}")
        return value

    @property
    def coordinates(self) -> Optional[tuple]:
        """(longitude, latitude) or None."""
        if self.longitude is None or self.latitude is None:
            return None
        return (self.longitude, self.latitude)
