"""
Error Taxonomy

Defines the closed set of error kinds for ledger operations and the
tagged error type every failure is normalized into before a retry
decision is made.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorCategory(str, Enum):
    """Groups of error kinds."""

    NETWORK = "network"
    AUTH = "auth"
    TRANSACTION = "transaction"
    CONTRACT = "contract"
    VALIDATION = "validation"
    SYSTEM = "system"


class ErrorKind(str, Enum):
    """Every failure crossing the resilience layer carries exactly one kind."""

    # Network / connection
    NETWORK_ERROR = "NetworkError"
    CONNECTION_TIMEOUT = "ConnectionTimeout"
    RPC_ERROR = "RpcError"

    # Authentication
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    WALLET_NOT_CONNECTED = "WalletNotConnected"
    INSUFFICIENT_PERMISSIONS = "InsufficientPermissions"

    # Transaction
    TRANSACTION_FAILED = "TransactionFailed"
    TRANSACTION_REJECTED = "TransactionRejected"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    GAS_LIMIT_EXCEEDED = "GasLimitExceeded"
    TRANSACTION_TIMEOUT = "TransactionTimeout"

    # Contract / domain
    CONTRACT_ERROR = "ContractError"
    INVALID_ENTITY_ID = "InvalidEntityId"
    ENTITY_NOT_FOUND = "EntityNotFound"
    ENTITY_ALREADY_LISTED = "EntityAlreadyListed"
    ENTITY_NOT_OWNED = "EntityNotOwned"

    # Validation
    VALIDATION_ERROR = "ValidationError"
    INVALID_INPUT = "InvalidInput"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"

    # System
    UNKNOWN_ERROR = "UnknownError"
    RATE_LIMITED = "RateLimited"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    CANCELLED = "Cancelled"

    @property
    def category(self) -> ErrorCategory:
        return _KIND_CATEGORIES[self]


_KIND_CATEGORIES: Dict[ErrorKind, ErrorCategory] = {
    ErrorKind.NETWORK_ERROR: ErrorCategory.NETWORK,
    ErrorKind.CONNECTION_TIMEOUT: ErrorCategory.NETWORK,
    ErrorKind.RPC_ERROR: ErrorCategory.NETWORK,
    ErrorKind.AUTHENTICATION_FAILED: ErrorCategory.AUTH,
    ErrorKind.WALLET_NOT_CONNECTED: ErrorCategory.AUTH,
    ErrorKind.INSUFFICIENT_PERMISSIONS: ErrorCategory.AUTH,
    ErrorKind.TRANSACTION_FAILED: ErrorCategory.TRANSACTION,
    ErrorKind.TRANSACTION_REJECTED: ErrorCategory.TRANSACTION,
    ErrorKind.INSUFFICIENT_FUNDS: ErrorCategory.TRANSACTION,
    ErrorKind.GAS_LIMIT_EXCEEDED: ErrorCategory.TRANSACTION,
    ErrorKind.TRANSACTION_TIMEOUT: ErrorCategory.TRANSACTION,
    ErrorKind.CONTRACT_ERROR: ErrorCategory.CONTRACT,
    ErrorKind.INVALID_ENTITY_ID: ErrorCategory.CONTRACT,
    ErrorKind.ENTITY_NOT_FOUND: ErrorCategory.CONTRACT,
    ErrorKind.ENTITY_ALREADY_LISTED: ErrorCategory.CONTRACT,
    ErrorKind.ENTITY_NOT_OWNED: ErrorCategory.CONTRACT,
    ErrorKind.VALIDATION_ERROR: ErrorCategory.VALIDATION,
    ErrorKind.INVALID_INPUT: ErrorCategory.VALIDATION,
    ErrorKind.MISSING_REQUIRED_FIELD: ErrorCategory.VALIDATION,
    ErrorKind.UNKNOWN_ERROR: ErrorCategory.SYSTEM,
    ErrorKind.RATE_LIMITED: ErrorCategory.SYSTEM,
    ErrorKind.SERVICE_UNAVAILABLE: ErrorCategory.SYSTEM,
    ErrorKind.CANCELLED: ErrorCategory.SYSTEM,
}


# Kinds that are transient unless the raiser says otherwise.
DEFAULT_RETRYABLE_KINDS: frozenset = frozenset(
    {
        ErrorKind.NETWORK_ERROR,
        ErrorKind.CONNECTION_TIMEOUT,
        ErrorKind.RPC_ERROR,
        ErrorKind.TRANSACTION_TIMEOUT,
        ErrorKind.RATE_LIMITED,
        ErrorKind.SERVICE_UNAVAILABLE,
    }
)


class LedgerError(Exception):
    """
    Tagged error for ledger operations.

    `retryable` defaults to membership of `kind` in DEFAULT_RETRYABLE_KINDS
    but can be forced either way by whoever raises the error. When
    `retry_after_seconds` is set it replaces the computed backoff delay.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        code: Optional[Union[str, int]] = None,
        retryable: Optional[bool] = None,
        retry_after_seconds: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        if not isinstance(kind, ErrorKind):
            raise TypeError(f"kind must be an ErrorKind, got {kind!r}")
        if retry_after_seconds is not None and retry_after_seconds < 0:
            raise ValueError(f"retry_after_seconds must be >= 0, got {retry_after_seconds}")
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code
        self.retryable = kind in DEFAULT_RETRYABLE_KINDS if retryable is None else retryable
        self.retry_after_seconds = retry_after_seconds
        self.context: Dict[str, Any] = dict(context or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category

    def with_context(self, **extra: Any) -> "LedgerError":
        """Copy of this error with `extra` merged into its context; self is untouched."""
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.args = self.args
        clone.__cause__ = self.__cause__
        clone.context = {**self.context, **extra}
        return clone

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "category": self.category.value,
            "message": self.message,
            "code": self.code,
            "retryable": self.retryable,
            "retryAfterSeconds": self.retry_after_seconds,
            "context": self.context,
            "cause": repr(self.cause) if self.cause is not None else None,
        }


class RateLimitError(LedgerError):
    """Remote endpoint is throttling requests."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after_seconds: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            ErrorKind.RATE_LIMITED,
            message,
            retry_after_seconds=retry_after_seconds,
            context=context,
        )


class TransactionTimeoutError(LedgerError):
    """Transaction was not sealed in time."""

    def __init__(
        self,
        message: str = "Transaction timed out",
        transaction_id: Optional[str] = None,
    ):
        super().__init__(
            ErrorKind.TRANSACTION_TIMEOUT,
            message,
            context={"transaction_id": transaction_id} if transaction_id else None,
        )


class InsufficientFundsError(LedgerError):
    """Wallet balance does not cover the transaction."""

    def __init__(
        self,
        message: str = "Insufficient funds",
        required: Optional[str] = None,
        available: Optional[str] = None,
    ):
        super().__init__(
            ErrorKind.INSUFFICIENT_FUNDS,
            message,
            context={"required": required, "available": available},
        )


class WalletNotConnectedError(LedgerError):
    def __init__(self, message: str = "Wallet not connected"):
        super().__init__(ErrorKind.WALLET_NOT_CONNECTED, message)


class RetryCancelledError(LedgerError):
    """A retry sequence was abandoned by its caller. Never retryable."""

    def __init__(
        self,
        message: str = "Retry sequence cancelled",
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            ErrorKind.CANCELLED,
            message,
            retryable=False,
            context=context,
            cause=cause,
        )


def create_ledger_error(kind: ErrorKind, message: str, **options: Any) -> LedgerError:
    """Build a LedgerError, accepting the same keyword options as its constructor."""
    return LedgerError(kind, message, **options)
