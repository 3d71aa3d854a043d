"""
Retry Policies

Immutable retry configuration plus the two preconfigured policies for
ledger transactions and read-only queries.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, FrozenSet

from .errors import DEFAULT_RETRYABLE_KINDS, ErrorKind


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for one class of calls.

    An error is retried only if it is flagged retryable AND its kind is in
    `retryable_kinds`, so a policy can narrow the default retryable set.
    """

    max_attempts: int = 3
    base_delay_ms: int = 1000
    exponential_backoff: bool = True
    retryable_kinds: FrozenSet[ErrorKind] = field(default=DEFAULT_RETRYABLE_KINDS)

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValueError(f"max_attempts must be an int, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")

        # Accepts ErrorKind members or their string values
        kinds = frozenset(ErrorKind(k) for k in self.retryable_kinds)
        object.__setattr__(self, "retryable_kinds", kinds)

    def is_retryable_kind(self, kind: ErrorKind) -> bool:
        return kind in self.retryable_kinds

    def with_overrides(self, **overrides: Any) -> "RetryPolicy":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)


DEFAULT_POLICY = RetryPolicy()

TRANSACTION_RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.NETWORK_ERROR,
        ErrorKind.CONNECTION_TIMEOUT,
        ErrorKind.TRANSACTION_TIMEOUT,
        ErrorKind.RATE_LIMITED,
    }
)

QUERY_RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.NETWORK_ERROR,
        ErrorKind.CONNECTION_TIMEOUT,
        ErrorKind.RPC_ERROR,
        ErrorKind.SERVICE_UNAVAILABLE,
    }
)

_TRANSACTION_POLICY = RetryPolicy(
    max_attempts=5,
    base_delay_ms=2000,
    exponential_backoff=True,
    retryable_kinds=TRANSACTION_RETRYABLE_KINDS,
)

_QUERY_POLICY = RetryPolicy(
    max_attempts=3,
    base_delay_ms=1000,
    exponential_backoff=True,
    retryable_kinds=QUERY_RETRYABLE_KINDS,
)


def transaction_policy(**overrides: Any) -> RetryPolicy:
    """Mutating calls: more attempts, wider spacing, no RPC/service retries."""
    return _TRANSACTION_POLICY.with_overrides(**overrides) if overrides else _TRANSACTION_POLICY


def query_policy(**overrides: Any) -> RetryPolicy:
    """Read-only calls: fail fast, but retry RPC and availability errors."""
    return _QUERY_POLICY.with_overrides(**overrides) if overrides else _QUERY_POLICY

