from hostel_mess.services.mess.meal_ledger_service import MealLedgerService
from hostel_mess.services.mess.grocery_ledger_service import GroceryLedgerService
from hostel_mess.services.mess.grocery_catalog_service import GroceryCatalogService
from hostel_mess.services.mess.billing_service import BillingService

__all__ = [
    "MealLedgerService",
    "GroceryLedgerService",
    "GroceryCatalogService",
    "BillingService",
]
