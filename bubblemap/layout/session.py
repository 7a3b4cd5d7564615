"""Refresh handling for the zone layout: last write wins."""

import asyncio
import logging
from typing import Iterable, List, Optional

from ..models.circle import LayoutResult
from ..models.entity import WeightedEntity
from .zone_layout import ZoneLayout

logger = logging.getLogger(__name__)


class LayoutSession:
    """Holds the latest committed layout for one view."""

    def __init__(self, layout: Optional[ZoneLayout] = None):
        self.layout = layout or ZoneLayout()
        self.generation = 0
        self._current = LayoutResult()

    @property
    def current(self) -> LayoutResult:
        return self._current

    def refresh(
        self, entities: Iterable[WeightedEntity], width: float, height: float
    ) -> LayoutResult:
        """Recompute from scratch and commit immediately."""
        self.generation += 1
        result = self.layout.layout(list(entities), width, height)
        result.generation = self.generation
        self._current = result
        return result

    async def refresh_async(
        self, entities: Iterable[WeightedEntity], width: float, height: float
    ) -> Optional[LayoutResult]:
        """
        Recompute in a worker thread.

        Returns the committed result, or None if a newer refresh started
        while this one was running (its result is discarded).
        """
        self.generation += 1
        generation = self.generation
        snapshot: List[WeightedEntity] = list(entities)

        result = await asyncio.to_thread(self.layout.layout, snapshot, width, height)

        if generation != self.generation:
            logger.debug(
                f"Discarding stale layout gen {generation} (current {self.generation})"
            )
            return None

        result.generation = generation
        self._current = result
        return result
