# itinerary_editor/managers/debouncer.py
"""
Debounced execution of an async callback.

Each ``trigger()`` cancels the pending timer and starts a new one, so only the
last call in a burst runs the callback. Once the quiet period has elapsed the
callback runs to completion: a later ``trigger()`` never cancels a callback
that has already started.
"""

from asyncio import CancelledError, Task, create_task, gather, sleep
from collections.abc import Awaitable, Callable
from contextlib import suppress
from logging import getLogger

from itinerary_editor.configs import file_logger

logger = file_logger(getLogger(__name__))


class Debouncer:
    """Cancellable, restartable scheduled task around one async callback."""

    __slots__ = ("_callback", "_delay", "_name", "_running", "_timer")

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        delay: float,
        name: str = "debouncer",
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            callback: Coroutine function to run after the quiet period.
            delay: Quiet period in seconds.
            name: Label used in logs.
        """
        self._callback = callback
        self._delay = delay
        self._name = name
        self._timer: Task[None] | None = None
        self._running: set[Task[None]] = set()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._timer is not None and not self._timer.done()

    @property
    def running(self) -> bool:
        """True while a fired callback has not finished."""
        return any(not t.done() for t in self._running)

    def trigger(self) -> None:
        """Restart the quiet period. Must be called from a running event loop."""
        self.cancel()
        self._timer = create_task(self._wait_then_run(), name=f"{self._name}-timer")

    def cancel(self) -> bool:
        """Cancel the pending timer, if any. Returns whether one was pending."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        return True

    async def flush(self) -> bool:
        """Run the pending callback now instead of waiting. Returns whether one ran."""
        if not self.cancel():
            return False
        await self._run()
        return True

    async def wait(self) -> None:
        """Wait until the pending timer and any running callback have finished."""
        while self.pending or self.running:
            if self._timer is not None and not self._timer.done():
                with suppress(CancelledError):
                    await self._timer
            await gather(*self._running, return_exceptions=True)

    async def close(self) -> None:
        """Cancel the timer and wait for a callback that already started."""
        self.cancel()
        await gather(*self._running, return_exceptions=True)

    async def _wait_then_run(self) -> None:
        await sleep(self._delay)
        # Detach from the timer slot so trigger() cannot cancel the callback
        self._timer = None
        await self._run()

    async def _run(self) -> None:
        task = create_task(self._guarded(), name=f"{self._name}-run")
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        await task

    async def _guarded(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.exception(f"Debounced callback '{self._name}' failed")
