"""
Mess service constants: meals, groceries and billing.
"""

from typing import Final, Tuple

from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit

MAX_GROCERY_NAME_LENGTH: Final[int] = 120

# Stored scale of GroceryItem.quantity and GroceryItem.price_per_unit
QUANTITY_DECIMAL_PLACES: Final[int] = 3
PRICE_DECIMAL_PLACES: Final[int] = 4

GROCERY_ITEM_FIELDS: Final = frozenset(
    {"name", "category", "quantity", "unit", "price_per_unit", "market_id"}
)

# Success messages
SUCCESS_MEAL_COUNTS_SAVED: Final[str] = "Meal counts saved"
SUCCESS_BAZAR_CREATED: Final[str] = "Bazar created successfully"
SUCCESS_ITEM_ADDED: Final[str] = "Grocery item added"
SUCCESS_ITEM_UPDATED: Final[str] = "Grocery item updated"
SUCCESS_ITEM_REMOVED: Final[str] = "Grocery item removed"
SUCCESS_MARKET_CREATED: Final[str] = "Market created successfully"
SUCCESS_PRESET_CREATED: Final[str] = "Preset created successfully"
SUCCESS_PERIOD_CLOSED: Final[str] = "Billing period closed"

# System presets offered to every hostel
DEFAULT_PRESETS: Final[Tuple[Tuple[str, GroceryCategory, GroceryUnit], ...]] = (
    ("rice", GroceryCategory.RICE_GRAINS, GroceryUnit.KG),
    ("lentils", GroceryCategory.RICE_GRAINS, GroceryUnit.KG),
    ("flour", GroceryCategory.RICE_GRAINS, GroceryUnit.KG),
    ("chicken", GroceryCategory.PROTEIN, GroceryUnit.KG),
    ("beef", GroceryCategory.PROTEIN, GroceryUnit.KG),
    ("fish", GroceryCategory.PROTEIN, GroceryUnit.KG),
    ("egg", GroceryCategory.PROTEIN, GroceryUnit.DOZEN),
    ("potato", GroceryCategory.VEGETABLE, GroceryUnit.KG),
    ("onion", GroceryCategory.VEGETABLE, GroceryUnit.KG),
    ("tomato", GroceryCategory.VEGETABLE, GroceryUnit.KG),
    ("green chili", GroceryCategory.VEGETABLE, GroceryUnit.GM),
    ("garlic", GroceryCategory.SPICES_OIL, GroceryUnit.KG),
    ("ginger", GroceryCategory.SPICES_OIL, GroceryUnit.KG),
    ("turmeric", GroceryCategory.SPICES_OIL, GroceryUnit.PACKET),
    ("soybean oil", GroceryCategory.SPICES_OIL, GroceryUnit.LITER),
    ("salt", GroceryCategory.SPICES_OIL, GroceryUnit.PACKET),
    ("gas cylinder", GroceryCategory.OTHER, GroceryUnit.PCS),
)
