"""
Database enums mirroring schema enums.

Values equal names so that stored strings and API payloads match.
"""

import enum


class HostelType(str, enum.Enum):
    """Hostel type categorization."""
    BOYS = "BOYS"
    GIRLS = "GIRLS"


class RuleLevel(str, enum.Enum):
    """Severity of a hostel rule."""
    CRITICAL = "CRITICAL"
    MODERATE = "MODERATE"
    INFO = "INFO"


class SeatStatus(str, enum.Enum):
    """Seat occupancy status."""
    OCCUPIED = "OCCUPIED"
    AVAILABLE_FOR_RENT = "AVAILABLE_FOR_RENT"
    IN_MAINTENANCE = "IN_MAINTENANCE"


class GroceryCategory(str, enum.Enum):
    """Grocery item category."""
    RICE_GRAINS = "RICE_GRAINS"
    PROTEIN = "PROTEIN"
    VEGETABLE = "VEGETABLE"
    SPICES_OIL = "SPICES_OIL"
    OTHER = "OTHER"


class GroceryUnit(str, enum.Enum):
    """Unit a grocery quantity is measured in."""
    KG = "KG"
    LITER = "LITER"
    PCS = "PCS"
    DOZEN = "DOZEN"
    PACKET = "PACKET"
    GM = "GM"


class MealType(str, enum.Enum):
    """Meal slots of a mess day."""
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
