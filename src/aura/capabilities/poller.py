"""Polling for long-running remote operations.

Hides how the client waits on server-side jobs: the fixed interval, the
optional deadline and the terminal-state check.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from .errors import OperationTimeoutError

DEFAULT_POLL_INTERVAL = 5.0


class OperationHandle(Protocol):
    """Anything with a ``done`` flag, such as an SDK operation object."""

    done: bool | None


HandleT = TypeVar("HandleT", bound=OperationHandle)


class OperationPoller:
    """Re-fetches an operation on a fixed interval until it reports done.

    Without a timeout the loop is unbounded, matching the service contract
    that a submitted job eventually completes. A handle that already reports
    done is returned without any further fetch.

    Example:
        poller = OperationPoller(interval=5.0)
        operation = await poller.wait(operation, client.aio.operations.get)
    """

    def __init__(
        self,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the poller.

        Args:
            interval: Seconds to wait between status fetches
            timeout: Optional overall deadline in seconds (None = wait forever)
            sleep: Awaitable sleep function
            clock: Monotonic clock used for the deadline
        """
        if interval < 0:
            raise ValueError("Poll interval must be non-negative")
        if timeout is not None and timeout <= 0:
            raise ValueError("Poll timeout must be positive")
        self._interval = interval
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Poller", message)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def wait(
        self,
        operation: HandleT,
        refresh: Callable[[HandleT], Awaitable[HandleT]],
    ) -> HandleT:
        """Poll until the operation reports completion.

        Args:
            operation: Handle returned by the submission call
            refresh: Coroutine function fetching the latest status of a handle

        Returns:
            The first handle observed with ``done`` set

        Raises:
            OperationTimeoutError: If a timeout is configured and exceeded
        """
        started = self._clock()
        polls = 0

        while not operation.done:
            if self._timeout is not None and self._clock() - started >= self._timeout:
                raise OperationTimeoutError(self._timeout, getattr(operation, "name", None))

            await self._sleep(self._interval)
            operation = await refresh(operation)
            polls += 1
            self._debug("debug", f"Poll {polls}: done={bool(operation.done)}")

        self._debug("info", f"Operation complete after {polls} poll(s)")
        return operation
