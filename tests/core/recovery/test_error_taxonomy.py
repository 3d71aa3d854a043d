"""
Tests for the ledger error taxonomy.
"""

import pytest

from ledger_resilience.core.recovery import (
    DEFAULT_RETRYABLE_KINDS,
    ErrorCategory,
    ErrorKind,
    InsufficientFundsError,
    LedgerError,
    RateLimitError,
    RetryCancelledError,
    TransactionTimeoutError,
    WalletNotConnectedError,
    create_ledger_error,
)


class TestErrorKind:
    """Tests for the closed set of kinds."""

    def test_kind_values_use_taxonomy_names(self):
        assert ErrorKind.NETWORK_ERROR.value == "NetworkError"
        assert ErrorKind("InsufficientFunds") is ErrorKind.INSUFFICIENT_FUNDS

    def test_every_kind_has_a_category(self):
        for kind in ErrorKind:
            assert isinstance(kind.category, ErrorCategory)

    def test_categories_group_kinds(self):
        assert ErrorKind.RPC_ERROR.category == ErrorCategory.NETWORK
        assert ErrorKind.WALLET_NOT_CONNECTED.category == ErrorCategory.AUTH
        assert ErrorKind.GAS_LIMIT_EXCEEDED.category == ErrorCategory.TRANSACTION
        assert ErrorKind.ENTITY_NOT_OWNED.category == ErrorCategory.CONTRACT
        assert ErrorKind.MISSING_REQUIRED_FIELD.category == ErrorCategory.VALIDATION
        assert ErrorKind.RATE_LIMITED.category == ErrorCategory.SYSTEM

    def test_default_retryable_kinds(self):
        assert DEFAULT_RETRYABLE_KINDS == {
            ErrorKind.NETWORK_ERROR,
            ErrorKind.CONNECTION_TIMEOUT,
            ErrorKind.RPC_ERROR,
            ErrorKind.TRANSACTION_TIMEOUT,
            ErrorKind.RATE_LIMITED,
            ErrorKind.SERVICE_UNAVAILABLE,
        }

    def test_default_retryable_kinds_is_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_RETRYABLE_KINDS.add(ErrorKind.UNKNOWN_ERROR)


class TestLedgerError:
    """Tests for the tagged error type."""

    def test_retryable_defaults_from_kind(self):
        assert LedgerError(ErrorKind.NETWORK_ERROR, "down").retryable is True
        assert LedgerError(ErrorKind.INSUFFICIENT_FUNDS, "broke").retryable is False

    def test_retryable_can_be_overridden(self):
        assert LedgerError(ErrorKind.NETWORK_ERROR, "down", retryable=False).retryable is False
        assert LedgerError(ErrorKind.CONTRACT_ERROR, "flaky", retryable=True).retryable is True

    def test_kind_is_required_to_be_an_error_kind(self):
        with pytest.raises(TypeError):
            LedgerError("NetworkError", "down")

    def test_negative_retry_after_rejected(self):
        with pytest.raises(ValueError):
            LedgerError(ErrorKind.RATE_LIMITED, "slow down", retry_after_seconds=-1)

        with pytest.raises(ValueError):
            RateLimitError(retry_after_seconds=-0.5)

    def test_with_context_returns_annotated_copy(self):
        original = LedgerError(
            ErrorKind.INSUFFICIENT_FUNDS,
            "broke",
            code=7,
            context={"required": "10"},
            cause=RuntimeError("rpc said no"),
        )

        annotated = original.with_context(idempotency_key="k1")

        assert annotated is not original
        assert annotated.context == {"required": "10", "idempotency_key": "k1"}
        assert original.context == {"required": "10"}
        assert annotated.kind == ErrorKind.INSUFFICIENT_FUNDS
        assert annotated.code == 7
        assert str(annotated) == "broke"
        assert annotated.__cause__ is original.__cause__

    def test_with_context_keeps_subclass(self):
        annotated = RateLimitError(retry_after_seconds=4).with_context(operation="get_listing")

        assert isinstance(annotated, RateLimitError)
        assert annotated.retry_after_seconds == 4

    def test_cause_is_chained(self):
        original = RuntimeError("socket closed")
        error = LedgerError(ErrorKind.NETWORK_ERROR, "down", cause=original)

        assert error.cause is original
        assert error.__cause__ is original

    def test_to_dict(self):
        error = LedgerError(
            ErrorKind.RATE_LIMITED,
            "slow down",
            code=429,
            retry_after_seconds=3,
            context={"operation": "get_listing"},
        )

        data = error.to_dict()

        assert data["kind"] == "RateLimited"
        assert data["category"] == "system"
        assert data["code"] == 429
        assert data["retryable"] is True
        assert data["retryAfterSeconds"] == 3
        assert data["context"] == {"operation": "get_listing"}
        assert data["cause"] is None

    def test_str_is_message(self):
        assert str(LedgerError(ErrorKind.UNKNOWN_ERROR, "odd")) == "odd"

    def test_create_ledger_error(self):
        error = create_ledger_error(ErrorKind.GAS_LIMIT_EXCEEDED, "gas", code="E42")

        assert error.kind == ErrorKind.GAS_LIMIT_EXCEEDED
        assert error.code == "E42"
        assert error.retryable is False


class TestConvenienceErrors:
    """Tests for the specific error subclasses."""

    def test_rate_limit_error(self):
        error = RateLimitError(retry_after_seconds=30)

        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.retry_after_seconds == 30
        assert error.retryable is True

    def test_transaction_timeout_error(self):
        error = TransactionTimeoutError(transaction_id="abc123")

        assert error.kind == ErrorKind.TRANSACTION_TIMEOUT
        assert error.retryable is True
        assert error.context["transaction_id"] == "abc123"

    def test_insufficient_funds_error(self):
        error = InsufficientFundsError(required="10", available="2")

        assert error.kind == ErrorKind.INSUFFICIENT_FUNDS
        assert error.retryable is False
        assert error.context == {"required": "10", "available": "2"}

    def test_wallet_not_connected_error(self):
        error = WalletNotConnectedError()

        assert error.kind == ErrorKind.WALLET_NOT_CONNECTED
        assert error.category == ErrorCategory.AUTH

    def test_retry_cancelled_error_is_never_retryable(self):
        error = RetryCancelledError()

        assert error.kind == ErrorKind.CANCELLED
        assert error.retryable is False
