"""
Base service class providing common functionality for all services.
"""

import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from hostel_mess.config.settings import settings
from hostel_mess.core.exceptions import (
    ConcurrentModificationError,
    ConflictError,
    DomainError,
    ErrorCode,
)
from hostel_mess.core.logging import get_logger
from hostel_mess.services.base.service_result import (
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from hostel_mess.utils.date_utils import Clock, SystemClock

T = TypeVar("T")


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger, db session and clock
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    - Retry of lost optimistic-concurrency races
    """

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
            clock: Source of "now"; defaults to the UTC wall clock
        """
        self.db: Session = db_session
        self.clock: Clock = clock or SystemClock()
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert an exception to a ServiceResult failure with logging.

        Domain errors keep their tag and are logged without traceback;
        everything else is logged with traceback and reported as an
        opaque internal error.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, DomainError):
            self._logger.info(
                f"{operation} rejected: {exception}",
                extra={**context, "error_code": exception.error_code.value},
            )
            return ServiceResult.failure(ServiceError.from_exception(exception))

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                severity=ErrorSeverity.CRITICAL,
                details={"entity_ref": context["entity_ref"]},
            )
        )

    def _translate_storage_error(self, exception: Exception, entity_ref: Optional[Any]) -> Exception:
        """
        Map optimistic-lock and constraint failures that escaped the
        operation body onto domain errors.
        """
        if isinstance(exception, StaleDataError):
            return ConcurrentModificationError(
                entity=self._entity_name_from(exception),
                entity_id=str(entity_ref) if entity_ref is not None else None,
            )
        if isinstance(exception, IntegrityError):
            return ConflictError(
                "Write violates a uniqueness or integrity constraint",
                details={"constraint": str(exception.orig)},
            )
        return exception

    @staticmethod
    def _entity_name_from(exception: StaleDataError) -> str:
        # StaleDataError messages start with "UPDATE statement on table 'x'"
        message = str(exception)
        if "table '" in message:
            return message.split("table '", 1)[1].split("'", 1)[0]
        return "entity"

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.seat_repo.create(seat)
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception:
            self._rollback()
            raise

    def _commit(self) -> None:
        self.db.commit()
        self._logger.debug("Transaction committed successfully")

    def _rollback(self) -> None:
        """Rollback the current transaction, logging rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            # Log but don't raise - rollback errors should not mask original error
            self._logger.warning(f"Rollback failed: {e}")

    def _execute(
        self,
        operation: str,
        func: Callable[[], T],
        entity_ref: Optional[Any] = None,
        message: Optional[str] = None,
    ) -> ServiceResult[T]:
        """
        Run ``func`` in one transaction and wrap the outcome.

        Any exception rolls the whole transaction back, so no invariant
        failure leaves a partial write.
        """
        try:
            with self.transaction():
                data = func()
            return ServiceResult.success(data, message=message)
        except (StaleDataError, IntegrityError) as e:
            return self._handle_exception(
                self._translate_storage_error(e, entity_ref), operation, entity_ref
            )
        except Exception as e:
            return self._handle_exception(e, operation, entity_ref)

    # -------------------------------------------------------------------------
    # Retry
    # -------------------------------------------------------------------------

    def retry_on_conflict(
        self,
        func: Callable[..., ServiceResult[T]],
        *args,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        **kwargs,
    ) -> ServiceResult[T]:
        """
        Call a service operation, retrying while it fails with
        CONCURRENT_MODIFICATION. Backoff grows linearly per attempt.
        """
        attempts = max_attempts or settings.CONFLICT_RETRY_ATTEMPTS
        backoff = (
            settings.CONFLICT_RETRY_BACKOFF_SECONDS
            if backoff_seconds is None
            else backoff_seconds
        )

        result = func(*args, **kwargs)
        attempt = 1
        while not result.is_success and result.error.retryable and attempt < attempts:
            self._logger.warning(
                f"Concurrent modification in {getattr(func, '__name__', 'operation')}, "
                f"retrying ({attempt}/{attempts})"
            )
            time.sleep(backoff * attempt)
            attempt += 1
            result = func(*args, **kwargs)
        return result

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a completed service operation with standardized format."""
        log_data = {
            "operation": operation,
            "service": self.__class__.__name__,
        }
        if entity_ref is not None:
            log_data["entity_ref"] = str(entity_ref)
        if extra:
            log_data.update(extra)
        self._logger.info(f"Operation: {operation}", extra=log_data)
