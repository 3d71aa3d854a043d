"""
Cancellation

Lets a caller abandon a pending retry sequence through an asyncio.Event
instead of cancelling the task that owns it.
"""

import asyncio
from typing import Awaitable, Callable, Optional

SleepFunc = Callable[[float], Awaitable[None]]


def is_cancelled(cancel_event: Optional[asyncio.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


async def sleep_unless_cancelled(
    delay_seconds: float,
    cancel_event: Optional[asyncio.Event] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> bool:
    """
    Sleep for `delay_seconds` or until `cancel_event` is set.

    Returns:
        True if the event fired before the sleep finished
    """
    if cancel_event is None:
        await sleep(delay_seconds)
        return False

    if cancel_event.is_set():
        return True

    sleeper = asyncio.ensure_future(sleep(delay_seconds))
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sleeper, waiter):
            if not task.done():
                task.cancel()
        # Reap both tasks before returning
        await asyncio.gather(sleeper, waiter, return_exceptions=True)

    return cancel_event.is_set()
