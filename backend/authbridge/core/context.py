"""
Cancellation and deadline scope for a single lifecycle operation.
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from authbridge.core.errors import OperationCancelled


class OperationContext:
    """
    Bounds the directory calls made by one lifecycle operation.

    The context is cancelled explicitly with ``cancel()`` or implicitly once
    its deadline passes. A cancelled context refuses to start new calls and
    abandons the call in flight.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = asyncio.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    async def run(
        self,
        principal_id: str,
        operation: str,
        step: str,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """
        Await ``func(*args, **kwargs)`` unless the context is cancelled first.

        Raises:
            OperationCancelled: If the context was already cancelled, is
                cancelled while the call is in flight, or its deadline passes
        """
        if self.cancelled:
            raise OperationCancelled(principal_id, operation, step)

        call = asyncio.ensure_future(func(*args, **kwargs))
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {call, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            waiter.cancel()
            if not call.done():
                call.cancel()

        if call in done:
            return call.result()
        raise OperationCancelled(principal_id, operation, step)
