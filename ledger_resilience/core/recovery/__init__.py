"""
Ledger Recovery Module

Provides error normalization, retry policies and the retry executor
for resilient execution of ledger queries and transactions.
"""

from .classifier import classify_message, normalize
from .errors import (
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
from .executor import (
    RetryExecutor,
    RetryResult,
    compute_delay_ms,
    query_executor,
    should_retry,
    transaction_executor,
    with_retry,
)
from .policies import DEFAULT_POLICY, RetryPolicy, query_policy, transaction_policy

__all__ = [
    # Errors
    "DEFAULT_RETRYABLE_KINDS",
    "ErrorCategory",
    "ErrorKind",
    "LedgerError",
    "RateLimitError",
    "TransactionTimeoutError",
    "InsufficientFundsError",
    "WalletNotConnectedError",
    "RetryCancelledError",
    "create_ledger_error",
    # Classification
    "normalize",
    "classify_message",
    # Policies
    "RetryPolicy",
    "DEFAULT_POLICY",
    "transaction_policy",
    "query_policy",
    # Executor
    "RetryExecutor",
    "RetryResult",
    "compute_delay_ms",
    "should_retry",
    "with_retry",
    "transaction_executor",
    "query_executor",
]
