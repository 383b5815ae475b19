"""Domain error codes for the matchday module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    VOUCHER_REJECTED = "VOUCHER_REJECTED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    MISSING_DISCOUNT_REASON = "MISSING_DISCOUNT_REASON"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    DUPLICATE_TRANSACTION = "DUPLICATE_TRANSACTION"


class VoucherRejection(Enum):
    """Why a voucher cannot be redeemed, in the order they are checked."""

    NOT_FOUND = "NotFound"
    INACTIVE = "Inactive"
    WRONG_OWNER = "WrongOwner"
    GLOBALLY_DEPLETED = "GloballyDepleted"
    PER_USER_LIMIT_REACHED = "PerUserLimitReached"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input is well-formed but not acceptable."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class PlayerNotSignedUpError(ValidationError):
    """Raised when admitting or marking absent a player who is not pending."""

    def __init__(self, player_id: object) -> None:
        super().__init__("Player is not signed up for this event")
        object.__setattr__(self, "player_id", player_id)


class NotEnoughAttendeesError(ValidationError):
    """Raised when starting an event with fewer than two confirmed attendees."""

    def __init__(self, count: int) -> None:
        super().__init__(f"At least 2 confirmed attendees are required, found {count}")
        object.__setattr__(self, "count", count)


class UnknownPlayerError(DomainError):
    """Raised when a player is not found."""

    def __init__(self, player_id: object) -> None:
        super().__init__(code=ErrorCode.PLAYER_NOT_FOUND, message="Player not found")
        object.__setattr__(self, "player_id", player_id)


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        object.__setattr__(self, "event_id", event_id)


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class OutOfStockError(DomainError):
    """Raised when a rental item has no units left for this event."""

    def __init__(self, item_id: object, item_name: str | None = None) -> None:
        label = f'"{item_name}"' if item_name else "item"
        super().__init__(
            code=ErrorCode.OUT_OF_STOCK,
            message=f"No stock available for rental {label}",
        )
        object.__setattr__(self, "item_id", item_id)


class VoucherRejectedError(DomainError):
    """Raised when a voucher fails redemption checks."""

    _MESSAGES = {
        VoucherRejection.NOT_FOUND: "Voucher code not found",
        VoucherRejection.INACTIVE: "Voucher is not active",
        VoucherRejection.WRONG_OWNER: "Voucher is assigned to another player",
        VoucherRejection.GLOBALLY_DEPLETED: "Voucher has reached its total usage limit",
        VoucherRejection.PER_USER_LIMIT_REACHED: "Player has used this voucher the maximum number of times",
    }

    def __init__(self, reason: VoucherRejection) -> None:
        super().__init__(code=ErrorCode.VOUCHER_REJECTED, message=self._MESSAGES[reason])
        object.__setattr__(self, "reason", reason)


class InvalidStateTransitionError(DomainError):
    """Raised when an operation is not allowed in the event's current status."""

    def __init__(self, current: object, action: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATE_TRANSITION,
            message=f"Cannot {action} an event that is {current}",
        )
        object.__setattr__(self, "current", current)
        object.__setattr__(self, "action", action)


class MissingDiscountReasonError(DomainError):
    """Raised when a manual discount is given without a reason."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_DISCOUNT_REASON,
            message="A reason is required for a manual discount",
        )


class ConcurrentModificationError(DomainError):
    """Raised when a record changed since it was read."""

    def __init__(self, kind: str, expected_version: int | None) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_MODIFICATION,
            message=f"{kind} was modified by another operation, reload and retry",
        )
        object.__setattr__(self, "expected_version", expected_version)


class DuplicateTransactionError(DomainError):
    """Raised when appending a transaction id that is already in the ledger."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_TRANSACTION,
            message="Transaction already recorded",
        )
        object.__setattr__(self, "transaction_id", transaction_id)
