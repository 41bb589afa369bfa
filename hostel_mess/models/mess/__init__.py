from hostel_mess.models.mess.meal_record import MEAL_COUNT_FIELDS, MealRecord
from hostel_mess.models.mess.market import Market
from hostel_mess.models.mess.bazar import Bazar, GroceryItem
from hostel_mess.models.mess.preset_grocery_item import PresetGroceryItem
from hostel_mess.models.mess.billing_period import BillingPeriod

__all__ = [
    "MEAL_COUNT_FIELDS",
    "MealRecord",
    "Market",
    "Bazar",
    "GroceryItem",
    "PresetGroceryItem",
    "BillingPeriod",
]
