"""Binds a physics simulation to a ticker for the live distribution view."""

import logging
from typing import Callable, Iterable, Optional

from ..models.circle import LayoutResult
from ..models.entity import WeightedEntity
from .physics import PhysicsSimulation
from .ticker import Ticker

logger = logging.getLogger(__name__)


class LiveDistribution:
    """Runs the simulation once per tick and hands frames to the renderer."""

    def __init__(
        self,
        simulation: PhysicsSimulation,
        ticker: Ticker,
        on_frame: Optional[Callable[[LayoutResult], None]] = None,
    ):
        self.simulation = simulation
        self.ticker = ticker
        self.on_frame = on_frame
        self.frames = 0

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *args):
        self.stop()

    @property
    def running(self) -> bool:
        return self.ticker.running

    def start(self) -> None:
        logger.debug("Starting live distribution loop")
        self.ticker.start(self._on_tick)

    def stop(self) -> None:
        """Cancel the frame loop (call on teardown)."""
        if self.ticker.running:
            logger.debug(f"Stopping live distribution loop after {self.frames} frames")
        self.ticker.stop()

    def update(self, entities: Iterable[WeightedEntity]) -> None:
        """Merge a fresh fetch result into the running simulation."""
        self.simulation.sync(entities)

    def _on_tick(self, elapsed_ms: float) -> None:
        self.simulation.step(elapsed_ms)
        self.frames += 1
        if self.on_frame is not None:
            self.on_frame(self.simulation.result())
