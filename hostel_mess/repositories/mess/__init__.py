from hostel_mess.repositories.mess.meal_record_repository import MealRecordRepository
from hostel_mess.repositories.mess.bazar_repository import BazarRepository, GroceryItemRepository
from hostel_mess.repositories.mess.market_repository import (
    MarketRepository,
    PresetGroceryItemRepository,
)
from hostel_mess.repositories.mess.billing_period_repository import BillingPeriodRepository

__all__ = [
    "MealRecordRepository",
    "BazarRepository",
    "GroceryItemRepository",
    "MarketRepository",
    "PresetGroceryItemRepository",
    "BillingPeriodRepository",
]
