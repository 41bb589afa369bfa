"""
Grocery expense ledger.

A bazar's ``grand_total`` is recomputed from its items inside the same
transaction as every item mutation, with the bazar row locked, so it
always equals the sum of the items' ``total_cost``.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import (
    BillingPeriodClosedError,
    InvalidGroceryItemError,
    ValidationError,
)
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit
from hostel_mess.models.mess import Bazar, GroceryItem
from hostel_mess.repositories import (
    BazarRepository,
    BillingPeriodRepository,
    GroceryItemRepository,
    HostelRepository,
    MarketRepository,
    UserRepository,
)
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.mess.constants import (
    GROCERY_ITEM_FIELDS,
    MAX_GROCERY_NAME_LENGTH,
    PRICE_DECIMAL_PLACES,
    QUANTITY_DECIMAL_PLACES,
    SUCCESS_BAZAR_CREATED,
    SUCCESS_ITEM_ADDED,
    SUCCESS_ITEM_REMOVED,
    SUCCESS_ITEM_UPDATED,
)
from hostel_mess.utils.date_utils import Clock
from hostel_mess.utils.money import minor_unit, quantize_money, to_decimal

Number = Union[Decimal, int, float, str]


def normalize_item_name(name: Any) -> str:
    """Trimmed, lowercase item name used for grouping and history."""
    cleaned = str(name or "").strip().lower()
    if not cleaned:
        raise InvalidGroceryItemError("Item name is required", "name", name)
    if len(cleaned) > MAX_GROCERY_NAME_LENGTH:
        raise InvalidGroceryItemError(
            f"Item name must be at most {MAX_GROCERY_NAME_LENGTH} characters", "name", name
        )
    return cleaned


def validate_item_values(
    name: Any,
    category: Any,
    quantity: Any,
    unit: Any,
    price_per_unit: Any,
) -> Dict[str, Any]:
    """
    Check and normalize a line item.

    Quantity and price are taken as given, never rounded: values finer
    than the stored scale are rejected. Only ``total_cost`` is rounded,
    half-up to the currency minor unit.

    Raises:
        InvalidGroceryItemError: unless name is non-empty, quantity > 0,
            price_per_unit >= 0, both fit their stored scale and
            category/unit are known
    """
    values = {"name": normalize_item_name(name)}

    try:
        values["category"] = GroceryCategory(category)
    except ValueError as e:
        raise InvalidGroceryItemError(f"Unknown category: {category}", "category", category) from e
    try:
        values["unit"] = GroceryUnit(unit)
    except ValueError as e:
        raise InvalidGroceryItemError(f"Unknown unit: {unit}", "unit", unit) from e

    try:
        qty = to_decimal(quantity)
    except ValueError as e:
        raise InvalidGroceryItemError("Quantity must be a number", "quantity", quantity) from e
    if qty <= 0:
        raise InvalidGroceryItemError("Quantity must be greater than zero", "quantity", quantity)

    try:
        price = to_decimal(price_per_unit)
    except ValueError as e:
        raise InvalidGroceryItemError(
            "Price per unit must be a number", "price_per_unit", price_per_unit
        ) from e
    if price < 0:
        raise InvalidGroceryItemError(
            "Price per unit cannot be negative", "price_per_unit", price_per_unit
        )

    _check_scale(qty, QUANTITY_DECIMAL_PLACES, "quantity", quantity)
    _check_scale(price, PRICE_DECIMAL_PLACES, "price_per_unit", price_per_unit)

    values["quantity"] = qty
    values["price_per_unit"] = price
    values["total_cost"] = quantize_money(qty * price)
    return values


def _check_scale(value: Decimal, places: int, field: str, raw: Any) -> None:
    try:
        fits = value == value.quantize(minor_unit(places))
    except InvalidOperation:
        fits = False
    if not fits:
        raise InvalidGroceryItemError(
            f"{field} allows at most {places} decimal places", field, raw
        )


class GroceryLedgerService(BaseService):

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.bazar_repo = BazarRepository(db_session)
        self.item_repo = GroceryItemRepository(db_session)
        self.market_repo = MarketRepository(db_session)
        self.billing_period_repo = BillingPeriodRepository(db_session)
        self.user_repo = UserRepository(db_session)

    # =========================================================================
    # Bazar
    # =========================================================================

    def create_bazar(
        self,
        hostel_id: str,
        bazar_date: date,
        added_by: str,
        receipts: Optional[List[str]] = None,
    ) -> ServiceResult[Bazar]:
        """Open an empty bazar with ``grand_total = 0``."""

        def _create() -> Bazar:
            self.hostel_repo.lock_by_id(hostel_id)
            self.user_repo.get_by_id(added_by)
            self._ensure_open(hostel_id, bazar_date)
            bazar = Bazar(
                hostel_id=hostel_id,
                bazar_date=bazar_date,
                added_by=added_by,
                grand_total=Decimal("0.00"),
                receipts=list(receipts or []),
            )
            return self.bazar_repo.create(bazar)

        return self._execute(
            "create bazar", _create, entity_ref=hostel_id, message=SUCCESS_BAZAR_CREATED
        )

    def get_bazar(self, bazar_id: str) -> ServiceResult[Bazar]:
        return self._execute(
            "get bazar", lambda: self.bazar_repo.get_with_items(bazar_id), entity_ref=bazar_id
        )

    def list_bazars(
        self,
        hostel_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ServiceResult[List[Bazar]]:
        def _list() -> List[Bazar]:
            self.hostel_repo.get_by_id(hostel_id)
            return self.bazar_repo.list_for_hostel(hostel_id, start_date, end_date)

        return self._execute("list bazars", _list, entity_ref=hostel_id)

    # =========================================================================
    # Items
    # =========================================================================

    def add_item(
        self,
        bazar_id: str,
        name: str,
        category: Union[GroceryCategory, str],
        quantity: Number,
        unit: Union[GroceryUnit, str],
        price_per_unit: Number,
        market_id: Optional[str] = None,
    ) -> ServiceResult[GroceryItem]:
        """Append a line item; ``total_cost = quantity * price_per_unit``."""

        def _add() -> GroceryItem:
            values = validate_item_values(name, category, quantity, unit, price_per_unit)
            bazar = self._lock_for_edit(bazar_id)
            if market_id is not None:
                self.market_repo.get_by_id(market_id)

            item = GroceryItem(bazar_id=bazar.id, market_id=market_id, **values)
            self.item_repo.create(item)
            self._recompute_grand_total(bazar)
            return item

        return self._execute("add grocery item", _add, entity_ref=bazar_id, message=SUCCESS_ITEM_ADDED)

    def update_item(self, item_id: str, **changes: Any) -> ServiceResult[GroceryItem]:
        """Change any of name, category, quantity, unit, price_per_unit, market_id."""

        def _update() -> GroceryItem:
            unknown = set(changes) - GROCERY_ITEM_FIELDS
            if unknown:
                raise ValidationError(
                    "Unknown grocery item fields",
                    details={"unknown": sorted(unknown)},
                )

            item = self.item_repo.get_by_id(item_id)
            bazar = self._lock_for_edit(item.bazar_id)
            merged = {
                "name": item.name,
                "category": item.category,
                "quantity": item.quantity,
                "unit": item.unit,
                "price_per_unit": item.price_per_unit,
            }
            merged.update({k: v for k, v in changes.items() if k != "market_id"})
            values = validate_item_values(**merged)

            if "market_id" in changes:
                if changes["market_id"] is not None:
                    self.market_repo.get_by_id(changes["market_id"])
                values["market_id"] = changes["market_id"]

            self.item_repo.update(item, values)
            self._recompute_grand_total(bazar)
            return item

        return self._execute(
            "update grocery item", _update, entity_ref=item_id, message=SUCCESS_ITEM_UPDATED
        )

    def remove_item(self, item_id: str) -> ServiceResult[Bazar]:
        """Delete a line item and return the bazar with its new total."""

        def _remove() -> Bazar:
            item = self.item_repo.get_by_id(item_id)
            bazar = self._lock_for_edit(item.bazar_id)
            self.item_repo.delete(item)
            self._recompute_grand_total(bazar)
            return bazar

        return self._execute(
            "remove grocery item", _remove, entity_ref=item_id, message=SUCCESS_ITEM_REMOVED
        )

    def price_history(
        self,
        item_name: str,
        hostel_id: Optional[str] = None,
        market_id: Optional[str] = None,
    ) -> ServiceResult[Iterator[Tuple[date, Decimal]]]:
        """
        Lazy (bazar_date, price_per_unit) pairs for an item, oldest first.

        Call again to restart; each call issues a fresh query. Rows are
        fetched during iteration, outside this operation's transaction,
        so storage errors then are raised to the caller rather than
        returned as a failed result.
        """

        def _history() -> Iterator[Tuple[date, Decimal]]:
            name = normalize_item_name(item_name)
            return self.item_repo.iter_price_history(name, hostel_id, market_id)

        return self._execute("price history", _history, entity_ref=item_name)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lock_for_edit(self, bazar_id: str) -> Bazar:
        """
        Lock hostel then bazar and refuse edits inside a closed period.
        """
        hostel_id = self.bazar_repo.get_by_id(bazar_id).hostel_id
        self.hostel_repo.lock_by_id(hostel_id)
        bazar = self.bazar_repo.lock_by_id(bazar_id)
        self._ensure_open(hostel_id, bazar.bazar_date)
        return bazar

    def _ensure_open(self, hostel_id: str, day: date) -> None:
        period = self.billing_period_repo.find_covering(hostel_id, day)
        if period is not None:
            raise BillingPeriodClosedError(hostel_id, day, period.id)

    def _recompute_grand_total(self, bazar: Bazar) -> Decimal:
        """Set grand_total to the live sum of the bazar's items."""
        self.db.expire(bazar, ["items"])
        total = quantize_money(self.item_repo.sum_for_bazar(bazar.id))
        self.bazar_repo.update(bazar, {"grand_total": total})
        return total
