"""Piece generation, spawning and level virus placement."""
from __future__ import annotations

import logging
import random
from typing import List, Sequence, Tuple

from esper import World

from pillfall.components.asset_ref import AssetRef
from pillfall.components.element_color import ElementColor
from pillfall.components.pill_chunk import PillChunk
from pillfall.components.staged_piece import StagedPiece
from pillfall.constants import COLORS
from pillfall.events.bus import (
    EVENT_NEXT_PIECE_READY,
    EVENT_PIECE_SPAWNED,
    EVENT_VIRUSES_PLACED,
    EventBus,
)
from pillfall.rendering.asset_resolver import AssetResolver, ElementKind, ImagePathResolver, Orientation
from pillfall.systems.board_ops import (
    board_dimensions,
    create_virus,
    is_occupied,
    place_element,
    refresh_pair_assets,
)
from pillfall.utils.session import get_piece_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class GameOver(Exception):
    """Raised when a new piece cannot enter the board because its spawn cells are taken."""

    def __init__(self, blocked: Sequence[Position]):
        self.blocked = list(blocked)
        super().__init__(f"Spawn cells occupied: {self.blocked}")


class PairIdAllocator:
    """Hands out pill pair identifiers unique within one session."""

    def __init__(self, start: int = 0):
        self._next = start

    def allocate(self) -> int:
        value = self._next
        self._next += 1
        return value


def spawn_cells(cols: int) -> Tuple[Position, Position]:
    """The two top-row center cells a new pill appears in, left one first."""
    right = cols // 2
    return (0, right - 1), (0, right)


class PieceSpawnSystem:
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        colors: Sequence[str] | None = None,
        rng: random.Random | None = None,
        resolver: AssetResolver | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.colors = list(colors or getattr(world, "colors", None) or COLORS)
        if not self.colors:
            raise ValueError("At least one color is required")
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self.resolver = resolver or getattr(world, "assets", None) or ImagePathResolver()
        self.pair_ids = PairIdAllocator()

    def random_color(self) -> str:
        return self._rng.choice(self.colors)

    def generate_next(self) -> List[int]:
        """Create the next pill off-board, replacing any next pill not yet spawned."""
        state = get_piece_state(self.world)
        for entity in state.next:
            if self.world.entity_exists(entity) and self.world.has_component(entity, StagedPiece):
                self.world.delete_entity(entity, immediate=True)
        pair_id = self.pair_ids.allocate()
        chunks: List[int] = []
        for slot in (0, 1):
            color = self.random_color()
            orientation = Orientation.LEFT if slot == 0 else Orientation.RIGHT
            chunks.append(
                self.world.create_entity(
                    PillChunk(pair_id=pair_id),
                    ElementColor(color=color),
                    AssetRef(ref=self.resolver.resolve(ElementKind.PILL, color, orientation)),
                    StagedPiece(slot=slot),
                )
            )
        state.next = chunks
        self.event_bus.emit(
            EVENT_NEXT_PIECE_READY,
            entities=tuple(chunks),
            colors=tuple(self.world.component_for_entity(e, ElementColor).color for e in chunks),
        )
        return chunks

    def promote(self) -> List[int]:
        """Move the next pill onto the spawn cells and make it the active piece.

        Raises GameOver, leaving the next pill untouched, if either spawn cell is
        already occupied.
        """
        state = get_piece_state(self.world)
        if state.active:
            raise RuntimeError("Active piece still in play")
        if len(state.next) != 2:
            self.generate_next()
        _, cols = board_dimensions(self.world)
        cells = spawn_cells(cols)
        blocked = [cell for cell in cells if is_occupied(self.world, *cell)]
        if blocked:
            logger.info("Spawn blocked at %s", blocked)
            raise GameOver(blocked)
        chunks = list(state.next)
        for entity, (row, col) in zip(chunks, cells):
            self.world.remove_component(entity, StagedPiece)
            self.world.component_for_entity(entity, PillChunk).can_fall = True
            place_element(self.world, entity, row, col)
        state.active = chunks
        state.next = []
        refresh_pair_assets(self.world, chunks, self.resolver)
        self.event_bus.emit(EVENT_PIECE_SPAWNED, entities=tuple(chunks), cells=list(cells))
        self.generate_next()
        return chunks

    def generate_viruses(self, count: int) -> List[int]:
        """Scatter count viruses over the lower half of the board.

        Cells are not checked for existing elements, so two viruses may share
        a cell.
        """
        rows, cols = board_dimensions(self.world)
        half = rows / 2
        created: List[int] = []
        positions: List[Position] = []
        for _ in range(max(0, count)):
            row = int(self._rng.random() * half + half)
            col = self._rng.randrange(cols)
            created.append(create_virus(self.world, row, col, self.random_color(), self.resolver))
            positions.append((row, col))
        logger.debug("Placed %d viruses at %s", len(created), positions)
        self.event_bus.emit(EVENT_VIRUSES_PLACED, positions=positions)
        return created
