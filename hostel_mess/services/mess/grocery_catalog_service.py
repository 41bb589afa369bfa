"""
Grocery catalog: markets and preset item names.
"""

from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import ConflictError, ErrorCode, ValidationError
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit
from hostel_mess.models.mess import Market, PresetGroceryItem
from hostel_mess.repositories import MarketRepository, PresetGroceryItemRepository
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.hostel.hostel_service import Location, validate_location
from hostel_mess.services.mess.constants import (
    DEFAULT_PRESETS,
    SUCCESS_MARKET_CREATED,
    SUCCESS_PRESET_CREATED,
)
from hostel_mess.services.mess.grocery_ledger_service import normalize_item_name
from hostel_mess.utils.date_utils import Clock


class GroceryCatalogService(BaseService):

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.market_repo = MarketRepository(db_session)
        self.preset_repo = PresetGroceryItemRepository(db_session)

    # =========================================================================
    # Markets
    # =========================================================================

    def create_market(
        self,
        name: str,
        location: Optional[Location] = None,
        description: Optional[str] = None,
    ) -> ServiceResult[Market]:
        def _create() -> Market:
            clean = (name or "").strip()
            if not clean:
                raise ValidationError("Market name is required", field="name")
            longitude, latitude = validate_location(location)
            if self.market_repo.find_by_name(clean) is not None:
                raise self._duplicate_market(clean)
            market = Market(
                name=clean,
                description=description.strip() if description else None,
                longitude=longitude,
                latitude=latitude,
                is_active=True,
            )
            try:
                return self.market_repo.create(market)
            except IntegrityError as e:
                raise self._duplicate_market(clean) from e

        return self._execute("create market", _create, entity_ref=name, message=SUCCESS_MARKET_CREATED)

    def list_markets(self, active_only: bool = True) -> ServiceResult[List[Market]]:
        return self._execute("list markets", lambda: self.market_repo.list_markets(active_only))

    def set_market_active(self, market_id: str, active: bool) -> ServiceResult[Market]:
        def _set() -> Market:
            market = self.market_repo.get_by_id(market_id)
            return self.market_repo.update(market, {"is_active": bool(active)})

        return self._execute("set market active", _set, entity_ref=market_id)

    # =========================================================================
    # Presets
    # =========================================================================

    def create_preset(
        self,
        name: str,
        category: Union[GroceryCategory, str],
        default_unit: Union[GroceryUnit, str],
        is_custom: bool = True,
    ) -> ServiceResult[PresetGroceryItem]:
        def _create() -> PresetGroceryItem:
            return self._add_preset(name, category, default_unit, is_custom)

        return self._execute("create preset", _create, entity_ref=name, message=SUCCESS_PRESET_CREATED)

    def list_presets(
        self,
        category: Optional[Union[GroceryCategory, str]] = None,
    ) -> ServiceResult[List[PresetGroceryItem]]:
        def _list() -> List[PresetGroceryItem]:
            kind = self._category(category) if category is not None else None
            return self.preset_repo.list_presets(kind)

        return self._execute("list presets", _list)

    def seed_default_presets(self) -> ServiceResult[List[PresetGroceryItem]]:
        """Insert missing system presets; returns only the ones created."""

        def _seed() -> List[PresetGroceryItem]:
            created = []
            for preset_name, category, unit in DEFAULT_PRESETS:
                if self.preset_repo.find_by_name(preset_name) is None:
                    created.append(self._add_preset(preset_name, category, unit, is_custom=False))
            if created:
                self._log_operation("seed default presets", extra={"presets_created": len(created)})
            return created

        return self._execute("seed default presets", _seed)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _add_preset(self, name, category, default_unit, is_custom: bool) -> PresetGroceryItem:
        clean = normalize_item_name(name)
        kind = self._category(category)
        try:
            unit = GroceryUnit(default_unit)
        except ValueError as e:
            raise ValidationError(f"Unknown unit: {default_unit}", field="default_unit") from e

        if self.preset_repo.find_by_name(clean) is not None:
            raise self._duplicate_preset(clean)
        preset = PresetGroceryItem(
            name=clean,
            category=kind,
            default_unit=unit,
            is_custom=is_custom,
            is_active=True,
        )
        try:
            return self.preset_repo.create(preset)
        except IntegrityError as e:
            raise self._duplicate_preset(clean) from e

    @staticmethod
    def _category(category) -> GroceryCategory:
        try:
            return GroceryCategory(category)
        except ValueError as e:
            raise ValidationError(f"Unknown category: {category}", field="category") from e

    @staticmethod
    def _duplicate_market(name: str) -> ConflictError:
        return ConflictError(
            "A market with this name already exists",
            error_code=ErrorCode.DUPLICATE_MARKET,
            field="name",
            details={"name": name},
        )

    @staticmethod
    def _duplicate_preset(name: str) -> ConflictError:
        return ConflictError(
            "A preset with this name already exists",
            error_code=ErrorCode.DUPLICATE_PRESET,
            field="name",
            details={"name": name},
        )
