"""
Hostel administration: creation, rules, meal weights, service
suspension ("panic lock") and fines.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_mess.config.settings import settings
from hostel_mess.core.exceptions import (
    BillingPeriodClosedError,
    ConflictError,
    ErrorCode,
    NotAMemberError,
    ResourceNotFoundError,
    ValidationError,
)
from hostel_mess.models.base.enums import HostelType, RuleLevel
from hostel_mess.models.hostel import Fine, Hostel, HostelRule
from hostel_mess.repositories import (
    BillingPeriodRepository,
    FineRepository,
    HostelRepository,
    HostelRuleRepository,
    MembershipRepository,
    UserRepository,
)
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.hostel.constants import (
    MIN_HOSTEL_NAME_LENGTH,
    MIN_TOTAL_SEATS,
    SHORT_CODE_PATTERN,
    SUCCESS_FINE_ISSUED,
    SUCCESS_HOSTEL_CREATED,
    SUCCESS_MEAL_WEIGHTS_UPDATED,
    SUCCESS_RULE_ADDED,
    SUCCESS_SERVICE_RESUMED,
    SUCCESS_SERVICE_SUSPENDED,
)
from hostel_mess.utils.date_utils import Clock, to_utc
from hostel_mess.utils.money import quantize_money, to_decimal

Location = Sequence[Union[Decimal, float, int, str]]


def validate_location(location: Optional[Location]):
    """
    Return (longitude, latitude) as Decimals, or (None, None).

    Raises:
        ValidationError: INVALID_COORDINATES for a malformed or out-of-range pair
    """
    if location is None:
        return None, None
    try:
        longitude, latitude = (to_decimal(v) for v in location)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Coordinates must be [longitude, latitude]",
            error_code=ErrorCode.INVALID_COORDINATES,
            field="location",
        ) from e
    if not (-180 <= longitude <= 180) or not (-90 <= latitude <= 90):
        raise ValidationError(
            "Coordinates must be [longitude, latitude] with valid ranges",
            error_code=ErrorCode.INVALID_COORDINATES,
            field="location",
            details={"longitude": str(longitude), "latitude": str(latitude)},
        )
    return longitude, latitude


class HostelService(BaseService):
    """
    High-level hostel operations.

    Seat counters are not written here; see ``SeatLedgerService``.
    """

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.rule_repo = HostelRuleRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)
        self.fine_repo = FineRepository(db_session)
        self.billing_period_repo = BillingPeriodRepository(db_session)
        self.user_repo = UserRepository(db_session)

    # =========================================================================
    # Hostel
    # =========================================================================

    def create_hostel(
        self,
        owner_id: str,
        name: str,
        short_code: str,
        hostel_type: Union[HostelType, str],
        address: Optional[str] = None,
        total_seats: int = MIN_TOTAL_SEATS,
        location: Optional[Location] = None,
        manager_id: Optional[str] = None,
    ) -> ServiceResult[Hostel]:
        """
        Create a hostel with an empty seat inventory.

        Seat counters start at zero and only change through the seat
        ledger. Meal weights are seeded from settings.
        """

        def _create() -> Hostel:
            code = (short_code or "").strip().upper()
            if not SHORT_CODE_PATTERN.match(code):
                raise ValidationError(
                    "Short code must be 2-10 uppercase letters or digits",
                    field="short_code",
                    details={"attempted": short_code},
                )
            clean_name = (name or "").strip()
            if len(clean_name) < MIN_HOSTEL_NAME_LENGTH:
                raise ValidationError(
                    f"Hostel name must be at least {MIN_HOSTEL_NAME_LENGTH} characters",
                    field="name",
                )
            if isinstance(total_seats, bool) or not isinstance(total_seats, int) or total_seats < MIN_TOTAL_SEATS:
                raise ValidationError(
                    f"Total seats must be at least {MIN_TOTAL_SEATS}",
                    field="total_seats",
                    details={"attempted": total_seats},
                )
            try:
                kind = HostelType(hostel_type)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown hostel type: {hostel_type}", field="hostel_type"
                ) from e
            longitude, latitude = validate_location(location)

            self.user_repo.get_by_id(owner_id)
            if manager_id is not None:
                self.user_repo.get_by_id(manager_id)

            if self.hostel_repo.short_code_exists(code):
                raise self._duplicate_short_code(code)

            hostel = Hostel(
                name=clean_name,
                short_code=code,
                hostel_type=kind,
                address=address.strip() if address else None,
                owner_id=owner_id,
                manager_id=manager_id,
                longitude=longitude,
                latitude=latitude,
                seats_total=total_seats,
                seats_occupied=0,
                seats_available_for_rent=0,
                seats_in_maintenance=0,
                breakfast_weight=settings.DEFAULT_BREAKFAST_WEIGHT,
                lunch_weight=settings.DEFAULT_LUNCH_WEIGHT,
                dinner_weight=settings.DEFAULT_DINNER_WEIGHT,
            )
            try:
                self.hostel_repo.create(hostel)
            except IntegrityError as e:
                raise self._duplicate_short_code(code) from e

            self._log_operation("create hostel", hostel.id, {"short_code": code})
            return hostel

        return self._execute(
            "create hostel", _create, entity_ref=short_code, message=SUCCESS_HOSTEL_CREATED
        )

    def get_hostel(self, hostel_id: str) -> ServiceResult[Hostel]:
        return self._execute(
            "get hostel", lambda: self.hostel_repo.get_by_id(hostel_id), entity_ref=hostel_id
        )

    def get_by_short_code(self, short_code: str) -> ServiceResult[Hostel]:
        return self._execute(
            "get hostel by short code",
            lambda: self.hostel_repo.get_by_short_code(short_code),
            entity_ref=short_code,
        )

    # =========================================================================
    # Rules
    # =========================================================================

    def add_rule(
        self,
        hostel_id: str,
        order: int,
        title: str,
        level: Union[RuleLevel, str] = RuleLevel.INFO,
        description: Optional[str] = None,
        fine: Optional[str] = None,
    ) -> ServiceResult[HostelRule]:
        def _add() -> HostelRule:
            if isinstance(order, bool) or not isinstance(order, int) or order < 1:
                raise ValidationError("Rule order must be a positive integer", field="order")
            if not (title or "").strip():
                raise ValidationError("Rule title is required", field="title")
            try:
                rule_level = RuleLevel(level)
            except ValueError as e:
                raise ValidationError(f"Unknown rule level: {level}", field="level") from e

            self.hostel_repo.lock_by_id(hostel_id)
            if self.rule_repo.find_by_order(hostel_id, order) is not None:
                raise self._duplicate_rule_order(hostel_id, order)

            rule = HostelRule(
                hostel_id=hostel_id,
                order=order,
                level=rule_level,
                title=title.strip(),
                description=description,
                fine=fine,
            )
            try:
                return self.rule_repo.create(rule)
            except IntegrityError as e:
                raise self._duplicate_rule_order(hostel_id, order) from e

        return self._execute("add rule", _add, entity_ref=hostel_id, message=SUCCESS_RULE_ADDED)

    def list_rules(self, hostel_id: str) -> ServiceResult[List[HostelRule]]:
        def _list() -> List[HostelRule]:
            self.hostel_repo.get_by_id(hostel_id)
            return self.rule_repo.list_for_hostel(hostel_id)

        return self._execute("list rules", _list, entity_ref=hostel_id)

    # =========================================================================
    # Meal weights
    # =========================================================================

    def set_meal_weights(
        self,
        hostel_id: str,
        breakfast: Union[Decimal, int, str],
        lunch: Union[Decimal, int, str],
        dinner: Union[Decimal, int, str],
    ) -> ServiceResult[Hostel]:
        """Weights are non-negative and at least one is positive."""

        def _set() -> Hostel:
            weights = {}
            for field, value in (("breakfast", breakfast), ("lunch", lunch), ("dinner", dinner)):
                try:
                    weight = to_decimal(value)
                except ValueError as e:
                    raise ValidationError(
                        str(e), error_code=ErrorCode.INVALID_MEAL_WEIGHTS, field=field
                    ) from e
                if weight < 0:
                    raise ValidationError(
                        "Meal weights cannot be negative",
                        error_code=ErrorCode.INVALID_MEAL_WEIGHTS,
                        field=field,
                        details={"attempted": str(weight)},
                    )
                weights[f"{field}_weight"] = weight
            if not any(weights.values()):
                raise ValidationError(
                    "At least one meal weight must be positive",
                    error_code=ErrorCode.INVALID_MEAL_WEIGHTS,
                )

            hostel = self.hostel_repo.lock_by_id(hostel_id)
            return self.hostel_repo.update(hostel, weights)

        return self._execute(
            "set meal weights", _set, entity_ref=hostel_id, message=SUCCESS_MEAL_WEIGHTS_UPDATED
        )

    # =========================================================================
    # Service suspension
    # =========================================================================

    def suspend_service(
        self,
        hostel_id: str,
        until: datetime,
        reason: Optional[str] = None,
    ) -> ServiceResult[Hostel]:
        """Freeze joins and meal edits from now until ``until``."""

        def _suspend() -> Hostel:
            now = self.clock.now()
            end = to_utc(until)
            if end is None or end <= now:
                raise ValidationError(
                    "Suspension end must be in the future",
                    error_code=ErrorCode.INVALID_SUSPENSION,
                    field="until",
                    details={"now": now.isoformat(), "attempted": end.isoformat() if end else None},
                )
            hostel = self.hostel_repo.lock_by_id(hostel_id)
            self.hostel_repo.update(
                hostel,
                {
                    "service_suspended_at": now,
                    "service_suspended_until": end,
                    "service_suspension_reason": reason,
                },
            )
            self._logger.warning(
                "Hostel service suspended",
                extra={"hostel_id": hostel_id, "until": end.isoformat(), "reason": reason},
            )
            return hostel

        return self._execute(
            "suspend service", _suspend, entity_ref=hostel_id, message=SUCCESS_SERVICE_SUSPENDED
        )

    def resume_service(self, hostel_id: str) -> ServiceResult[Hostel]:
        def _resume() -> Hostel:
            hostel = self.hostel_repo.lock_by_id(hostel_id)
            return self.hostel_repo.update(
                hostel,
                {
                    "service_suspended_at": None,
                    "service_suspended_until": None,
                    "service_suspension_reason": None,
                },
            )

        return self._execute(
            "resume service", _resume, entity_ref=hostel_id, message=SUCCESS_SERVICE_RESUMED
        )

    # =========================================================================
    # Fines
    # =========================================================================

    def issue_fine(
        self,
        hostel_id: str,
        user_id: str,
        amount: Union[Decimal, int, str],
        issued_on: date,
        reason: Optional[str] = None,
        rule_id: Optional[str] = None,
        issued_by: Optional[str] = None,
    ) -> ServiceResult[Fine]:
        """
        Record a fine against a member.

        Fines are billed in the period containing ``issued_on``, so a
        closed period rejects them like meal and bazar edits.
        """

        def _issue() -> Fine:
            try:
                value = quantize_money(amount)
            except ValueError as e:
                raise ValidationError(str(e), error_code=ErrorCode.INVALID_FINE, field="amount") from e
            if value <= 0:
                raise ValidationError(
                    "Fine amount must be positive",
                    error_code=ErrorCode.INVALID_FINE,
                    field="amount",
                    details={"attempted": str(value)},
                )

            self.hostel_repo.lock_by_id(hostel_id)
            if self.membership_repo.find_covering(user_id, hostel_id, issued_on) is None:
                raise NotAMemberError(user_id, hostel_id, on=issued_on)
            if rule_id is not None:
                rule = self.rule_repo.find_by_id(rule_id)
                if rule is None or rule.hostel_id != hostel_id:
                    raise ResourceNotFoundError("HostelRule", rule_id)
            period = self.billing_period_repo.find_covering(hostel_id, issued_on)
            if period is not None:
                raise BillingPeriodClosedError(hostel_id, issued_on, period.id)

            fine = Fine(
                hostel_id=hostel_id,
                user_id=user_id,
                rule_id=rule_id,
                amount=value,
                issued_on=issued_on,
                reason=reason,
                issued_by=issued_by,
            )
            return self.fine_repo.create(fine)

        return self._execute("issue fine", _issue, entity_ref=hostel_id, message=SUCCESS_FINE_ISSUED)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _duplicate_short_code(code: str) -> ConflictError:
        return ConflictError(
            "A hostel with this short code already exists",
            error_code=ErrorCode.DUPLICATE_SHORT_CODE,
            field="short_code",
            details={"short_code": code},
        )

    @staticmethod
    def _duplicate_rule_order(hostel_id: str, order: int) -> ConflictError:
        return ConflictError(
            "A rule with this order already exists",
            error_code=ErrorCode.DUPLICATE_RULE_ORDER,
            field="order",
            details={"hostel_id": hostel_id, "order": order},
        )
