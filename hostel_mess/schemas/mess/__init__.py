from hostel_mess.schemas.mess.meal import MealCounts, MealRecordResponse
from hostel_mess.schemas.mess.bazar import (
    BazarCreate,
    BazarResponse,
    GroceryItemCreate,
    GroceryItemResponse,
    GroceryItemUpdate,
    PricePoint,
)
from hostel_mess.schemas.mess.catalog import (
    MarketActiveUpdate,
    MarketCreate,
    MarketResponse,
    PresetCreate,
    PresetResponse,
)
from hostel_mess.schemas.mess.billing import (
    BillingPeriodCreate,
    BillingPeriodResponse,
    BillReport,
    MemberBill,
)

__all__ = [
    "MealCounts",
    "MealRecordResponse",
    "BazarCreate",
    "BazarResponse",
    "GroceryItemCreate",
    "GroceryItemUpdate",
    "GroceryItemResponse",
    "PricePoint",
    "MarketCreate",
    "MarketActiveUpdate",
    "MarketResponse",
    "PresetCreate",
    "PresetResponse",
    "BillingPeriodCreate",
    "BillingPeriodResponse",
    "MemberBill",
    "BillReport",
]
