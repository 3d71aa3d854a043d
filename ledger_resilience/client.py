"""
Ledger client facade.

Routes opaque ledger calls through the matching retry executor. Queries
are retried freely; transactions must carry an idempotency key that is
handed to every attempt so the ledger side can drop duplicates.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .config import Settings, settings as default_settings
from .core.recovery.errors import ErrorKind, LedgerError
from .core.recovery.executor import RetryExecutor, RetryResult
from .core.recovery.policies import RetryPolicy, query_policy, transaction_policy

T = TypeVar("T")

logger = logging.getLogger(__name__)


class LedgerClient:
    """
    Stateless between calls: every call gets its own RetryResult, so one
    client can serve concurrent queries and transactions.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        query_retry_policy: Optional[RetryPolicy] = None,
        transaction_retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or default_settings
        self._query_executor = RetryExecutor(
            policy=query_retry_policy or query_policy(),
            op_kind="query",
            logger=logger,
        )
        self._transaction_executor = RetryExecutor(
            policy=transaction_retry_policy or transaction_policy(),
            op_kind="transaction",
            logger=logger,
        )

    async def run_query(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str = "query",
    ) -> RetryResult[T]:
        """Run a read-only call and return the full RetryResult."""
        return await self._query_executor.execute(operation, operation_name=name)

    async def query(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str = "query",
    ) -> T:
        """Run a read-only call; raises LedgerError once retries are exhausted."""
        result = await self.run_query(operation, name=name)
        return result.unwrap()

    async def run_transaction(
        self,
        operation: Callable[[Optional[str]], Awaitable[T]],
        idempotency_key: Optional[str] = None,
        name: str = "transaction",
    ) -> RetryResult[T]:
        """
        Submit a mutating call and return the full RetryResult.

        Args:
            operation: Coroutine function taking the idempotency key; it is
                called with the same key on every attempt
            idempotency_key: Caller-chosen key identifying this logical
                transaction
            name: Name for logging

        Raises:
            LedgerError: MissingRequiredField if a key is required but absent
        """
        if not idempotency_key and self.settings.require_idempotency_key:
            raise LedgerError(
                ErrorKind.MISSING_REQUIRED_FIELD,
                f"{name} requires an idempotency key",
                context={"operation": name, "field": "idempotency_key"},
            )

        async def attempt() -> T:
            return await operation(idempotency_key)

        result = await self._transaction_executor.execute(attempt, operation_name=name)
        if result.error is not None and idempotency_key:
            result.error = result.error.with_context(idempotency_key=idempotency_key)
        return result

    async def transact(
        self,
        operation: Callable[[Optional[str]], Awaitable[T]],
        idempotency_key: Optional[str] = None,
        name: str = "transaction",
    ) -> T:
        """Submit a mutating call; raises LedgerError once retries are exhausted."""
        result = await self.run_transaction(operation, idempotency_key=idempotency_key, name=name)
        return result.unwrap()
