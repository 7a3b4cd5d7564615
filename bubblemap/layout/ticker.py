"""Frame scheduling for the physics loop, independent of any UI framework."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..config.settings import FRAME_MS

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]  # receives elapsed ms since last tick


class Ticker(ABC):
    """Calls a callback once per frame until stopped."""

    @abstractmethod
    def start(self, callback: TickCallback) -> None:
        """Begin ticking. Restarts if already running."""

    @abstractmethod
    def stop(self) -> None:
        """Stop ticking. Safe to call more than once."""

    @property
    @abstractmethod
    def running(self) -> bool:
        ...


class AsyncioTicker(Ticker):
    """Schedules one tick per frame on the running asyncio event loop."""

    def __init__(self, fps: float = 60, clock: Callable[[], float] = time.monotonic):
        self.interval = 1.0 / fps
        self.clock = clock
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TickCallback) -> None:
        self.stop()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, callback: TickCallback) -> None:
        last = self.clock()
        while True:
            await asyncio.sleep(self.interval)
            now = self.clock()
            elapsed_ms = (now - last) * 1000
            last = now
            self.ticks += 1
            try:
                callback(elapsed_ms)
            except Exception as e:
                # A bad frame is skipped; the next tick retries
                logger.error(f"Tick callback failed: {e}")


class FixedStepTicker(Ticker):
    """Synchronous ticker with a constant frame time, for headless runs."""

    def __init__(self, frame_ms: float = FRAME_MS):
        self.frame_ms = frame_ms
        self.ticks = 0
        self._callback: Optional[TickCallback] = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def run(self, frames: int) -> int:
        """Tick up to `frames` times. Returns how many ticks ran."""
        ran = 0
        for _ in range(frames):
            if self._callback is None:
                break
            self._callback(self.frame_ms)
            self.ticks += 1
            ran += 1
        return ran
