"""
Periodic Timers
===============

Cancellable periodic callbacks on the asyncio event loop.

All console timers run on one loop, so callbacks never overlap and no
locking is needed. A timer started while a subsystem is active must be
stopped exactly once when it becomes inactive; ``stop()`` is idempotent and
``cancel_count`` makes that verifiable.

Failure Policy:
    - AssertionError from a callback is an invariant violation: logged at
      CRITICAL and re-raised, which ends the timer task
    - Any other exception is logged and the timer keeps running
"""

import asyncio
import logging
from typing import Callable, Optional

from smartad_console.runtime.random_source import RandomSource


logger = logging.getLogger(__name__)


class PeriodicTimer:
    """
    Calls ``callback`` every ``interval`` seconds until stopped.

    Attributes:
        name: Task name, used in logs
        interval: Base period in seconds
        jitter: Maximum extra delay added to each period
        fire_count: Number of completed callback invocations
        cancel_count: Number of times a running timer was cancelled
        error: Invariant violation that ended the timer, if any

    Example:
        timer = PeriodicTimer("rotation_tick", 1.0, scheduler.tick)
        timer.start()      # inside a running event loop
        ...
        timer.stop()
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: Callable[[], None],
        jitter: float = 0.0,
        rng: Optional[RandomSource] = None,
    ) -> None:
        """
        Initialize periodic timer.

        Args:
            name: Timer name
            interval: Seconds between callbacks. Must be > 0.
            callback: Synchronous callable invoked each period
            jitter: Max random extra delay per period (seconds)
            rng: Random source for jitter (required when jitter > 0)
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        if jitter < 0:
            raise ValueError("jitter must be non-negative")
        if jitter > 0 and rng is None:
            raise ValueError("rng is required when jitter is set")

        self.name = name
        self.interval = interval
        self.jitter = jitter
        self._callback = callback
        self._rng = rng
        self._task: Optional[asyncio.Task] = None

        self.fire_count: int = 0
        self.cancel_count: int = 0
        self.error: Optional[AssertionError] = None

    @property
    def running(self) -> bool:
        """Whether the timer task is scheduled and not finished."""
        return self._task is not None and not self._task.done()

    @property
    def failed(self) -> bool:
        """Whether an invariant violation ended the timer task."""
        return self.error is not None

    def start(self) -> None:
        """
        Start the timer on the running event loop.

        Raises:
            RuntimeError: If called outside a running loop
        """
        if self.running:
            logger.debug(f"Timer {self.name} already running")
            return

        loop = asyncio.get_running_loop()
        self.error = None
        self._task = loop.create_task(self._run(), name=self.name)
        logger.debug(f"Timer {self.name} started (interval={self.interval}s)")

    def stop(self) -> bool:
        """
        Cancel the timer.

        Returns:
            True if a running timer was cancelled, False if it was not running.
        """
        if self._task is None:
            return False

        task, self._task = self._task, None
        if task.done():
            # Mark a failed task's exception as retrieved; it is kept in error
            if not task.cancelled():
                task.exception()
            return False

        task.cancel()
        self.cancel_count += 1
        logger.debug(f"Timer {self.name} cancelled")
        return True

    def _next_delay(self) -> float:
        if self.jitter > 0 and self._rng is not None:
            return self.interval + self._rng.random() * self.jitter
        return self.interval

    async def _run(self) -> None:
        """Sleep/fire loop."""
        while True:
            await asyncio.sleep(self._next_delay())
            try:
                self._callback()
            except AssertionError as e:
                self.error = e
                logger.critical(f"Invariant violated in timer {self.name}", exc_info=True)
                raise
            except Exception as e:
                logger.error(f"Timer {self.name} callback error: {e}", exc_info=True)
            self.fire_count += 1
