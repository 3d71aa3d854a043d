"""
Retry Executor

Runs an async operation under a RetryPolicy: every failure is normalized
into a LedgerError, checked against the policy, and retried after an
exponential (or flat) backoff with jitter.
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from .cancellation import SleepFunc, is_cancelled, sleep_unless_cancelled
from .classifier import OPERATION_KINDS, normalize
from .errors import LedgerError, RetryCancelledError
from .policies import DEFAULT_POLICY, RetryPolicy, query_policy, transaction_policy

T = TypeVar("T")

JITTER_RATIO = 0.1


@dataclass
class RetryResult(Generic[T]):
    """Outcome of one `execute` call."""

    success: bool
    data: Optional[T] = None
    error: Optional[LedgerError] = None
    attempts: int = 1
    total_time_ms: int = 0

    def unwrap(self) -> T:
        """Return the data, or raise the error if the call failed."""
        if self.success:
            return self.data  # type: ignore[return-value]
        raise self.error  # type: ignore[misc]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error.to_dict() if self.error else None,
            "attempts": self.attempts,
            "totalTimeMs": self.total_time_ms,
        }


def should_retry(error: LedgerError, attempt: int, policy: RetryPolicy) -> bool:
    """Retry only while budget remains and both the error and the policy allow it."""
    if attempt >= policy.max_attempts:
        return False
    if not error.retryable:
        return False
    return policy.is_retryable_kind(error.kind)


def compute_delay_ms(
    attempt: int,
    policy: RetryPolicy,
    error: LedgerError,
    rng: Optional[random.Random] = None,
) -> float:
    """
    Delay before the attempt following `attempt` (1-based).

    A server-suggested `retry_after_seconds` wins outright and gets no
    jitter. Otherwise the base delay doubles per attempt when exponential
    backoff is on, plus up to 10% jitter.
    """
    if error.retry_after_seconds is not None:
        return max(0, error.retry_after_seconds * 1000)

    base = float(policy.base_delay_ms)
    if policy.exponential_backoff:
        base *= 2 ** (attempt - 1)

    uniform = rng.uniform if rng is not None else random.uniform
    return base + uniform(0, JITTER_RATIO * base)


def _elapsed_ms(started: float) -> int:
    return round((time.monotonic() - started) * 1000)


class RetryExecutor:
    """
    Executes async operations with classification-driven retries.

    Holds no per-call state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        op_kind: str = "query",
        sleep: SleepFunc = asyncio.sleep,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if op_kind not in OPERATION_KINDS:
            raise ValueError(f"op_kind must be one of {OPERATION_KINDS}, got {op_kind!r}")
        self.policy = policy or DEFAULT_POLICY
        self.op_kind = op_kind
        self._sleep = sleep
        self._rng = rng
        self.logger = logger or logging.getLogger(__name__)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: Optional[RetryPolicy] = None,
        operation_name: str = "operation",
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RetryResult[T]:
        """
        Run `operation` until it succeeds or the policy says stop.

        Args:
            operation: Zero-argument coroutine function to call per attempt
            policy: Overrides the executor's policy for this call
            operation_name: Name for logging
            cancel_event: Setting it abandons the sequence before the next
                attempt or during a backoff sleep

        Returns:
            RetryResult; operation failures are never raised
        """
        policy = policy or self.policy
        started = time.monotonic()
        attempt = 1

        while True:
            if is_cancelled(cancel_event):
                self.logger.info(f"{operation_name} cancelled before attempt {attempt}")
                return RetryResult(
                    success=False,
                    error=RetryCancelledError(
                        f"{operation_name} cancelled before attempt {attempt}",
                        context={"operation": operation_name},
                    ),
                    attempts=attempt - 1,
                    total_time_ms=_elapsed_ms(started),
                )

            try:
                data = await operation()
            except Exception as e:
                error = normalize(e, self.op_kind)
                if error is not e:
                    error.context.setdefault("operation", operation_name)
            else:
                if attempt > 1:
                    self.logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return RetryResult(
                    success=True,
                    data=data,
                    attempts=attempt,
                    total_time_ms=_elapsed_ms(started),
                )

            if not should_retry(error, attempt, policy):
                self.logger.error(
                    f"{operation_name} failed after {attempt} attempt(s) "
                    f"[{error.kind.value}]: {error.message}"
                )
                return RetryResult(
                    success=False,
                    error=error,
                    attempts=attempt,
                    total_time_ms=_elapsed_ms(started),
                )

            delay_ms = compute_delay_ms(attempt, policy, error, self._rng)
            self.logger.warning(
                f"{operation_name} attempt {attempt}/{policy.max_attempts} "
                f"failed [{error.kind.value}]: {error.message}. "
                f"Retrying in {delay_ms / 1000:.2f}s"
            )

            cancelled = await sleep_unless_cancelled(delay_ms / 1000, cancel_event, self._sleep)
            if cancelled:
                self.logger.info(f"{operation_name} cancelled during backoff")
                return RetryResult(
                    success=False,
                    error=RetryCancelledError(
                        f"{operation_name} cancelled after {attempt} attempt(s)",
                        cause=error,
                        context={"operation": operation_name},
                    ),
                    attempts=attempt,
                    total_time_ms=_elapsed_ms(started),
                )

            attempt += 1


def transaction_executor(**overrides: Any) -> RetryExecutor:
    """Executor for mutating ledger transactions."""
    return RetryExecutor(policy=transaction_policy(**overrides), op_kind="transaction")


def query_executor(**overrides: Any) -> RetryExecutor:
    """Executor for read-only ledger queries."""
    return RetryExecutor(policy=query_policy(**overrides), op_kind="query")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    op_kind: str = "query",
    **overrides: Any,
) -> T:
    """
    Run `operation` with retries and return its value.

    Keyword overrides are applied on top of `policy` (or the default
    policy). Raises the final LedgerError if every attempt failed.
    """
    base = policy or DEFAULT_POLICY
    if overrides:
        base = base.with_overrides(**overrides)

    result = await RetryExecutor(policy=base, op_kind=op_kind).execute(operation)
    return result.unwrap()
