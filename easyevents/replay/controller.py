"""
Replay controller: re-drive the stored log through the engine.

Replay runs every stored event through handlers and processors in
REPLAYING mode. Nested raises inherit the mode, so replay never grows the
store.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.context import EngineMode

if TYPE_CHECKING:
    from ..core.engine import DispatchEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        replayed: Number of stored events re-driven
        store_length: Store length after replay (equal to replayed)
    """
    replayed: int
    store_length: int


class ReplayController:
    """Replays an engine's store through the same engine."""

    def __init__(self, engine: "DispatchEngine") -> None:
        self.engine = engine

    async def replay_all(self, reset_state: bool = False) -> ReplayResult:
        """
        Replay the whole log in position order.

        The log is read once, up front; events appended while the replay
        runs are not replayed.

        Args:
            reset_state: Clear all stream state first (fresh projection).
                By default processor state accumulated before the replay
                is kept.

        Returns:
            ReplayResult with count of replayed events
        """
        records = self.engine.store.read_all()
        if reset_state:
            self.engine.processors.reset()

        logger.info("Replaying %d events", len(records), extra={"trace_id": "replay"})

        for rec in records:
            await self.engine.raise_event(rec.event, EngineMode.REPLAYING)

        return ReplayResult(replayed=len(records), store_length=len(self.engine.store))
