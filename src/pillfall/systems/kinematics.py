from __future__ import annotations

from typing import List, Tuple

from esper import World

from pillfall.components.board_position import BoardPosition
from pillfall.components.pill_chunk import PillChunk
from pillfall.events.bus import (
    EVENT_PIECE_DROP_REQUEST,
    EVENT_PIECE_LOCKED,
    EVENT_PIECE_MOVE_REQUEST,
    EVENT_PIECE_MOVED,
    EVENT_PIECE_ROTATE_REQUEST,
    EVENT_PIECE_ROTATED,
    EventBus,
)
from pillfall.rendering.asset_resolver import AssetResolver, ImagePathResolver
from pillfall.systems.board_ops import (
    board_dimensions,
    is_occupied,
    position_of,
    refresh_pair_assets,
    relocate,
)
from pillfall.utils.game_state import input_accepted
from pillfall.utils.session import get_piece_state


class KinematicsSystem:
    """Moves, rotates and drops the player-controlled pill."""

    def __init__(self, world: World, event_bus: EventBus, *, resolver: AssetResolver | None = None):
        self.world = world
        self.event_bus = event_bus
        self.resolver = resolver or getattr(world, "assets", None) or ImagePathResolver()
        self.event_bus.subscribe(EVENT_PIECE_MOVE_REQUEST, self.on_move_request)
        self.event_bus.subscribe(EVENT_PIECE_ROTATE_REQUEST, self.on_rotate_request)
        self.event_bus.subscribe(EVENT_PIECE_DROP_REQUEST, self.on_drop_request)

    # ------------------------------------------------------------------
    # Player requests
    # ------------------------------------------------------------------
    def on_move_request(self, sender, **kwargs):
        dx = kwargs.get('dx')
        if not dx or not input_accepted(self.world):
            return
        self.move(int(dx), 0)

    def on_rotate_request(self, sender, **kwargs):
        if not input_accepted(self.world):
            return
        if kwargs.get('clockwise', True):
            self.rotate()
        else:
            self.rotate_right()

    def on_drop_request(self, sender, **kwargs):
        if not input_accepted(self.world):
            return
        self.step_down()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def active_chunks(self) -> List[int]:
        state = get_piece_state(self.world)
        return list(state.active) if state.has_active() else []

    def _cells(self, chunks: List[int]) -> List[Tuple[int, int]]:
        return [position_of(self.world, e) for e in chunks]

    def move(self, dx: int, dy: int) -> bool:
        """Translate the active pill by (dx, dy); rejected as a whole if either chunk is blocked."""
        chunks = self.active_chunks()
        if not chunks:
            return False
        rows, cols = board_dimensions(self.world)
        a, b = chunks
        pos_a = self.world.component_for_entity(a, BoardPosition)
        pos_b = self.world.component_for_entity(b, BoardPosition)
        left, right = (pos_a, pos_b) if pos_a.col < pos_b.col else (pos_b, pos_a)
        if left.col + dx < 0 or right.col + dx >= cols:
            return False
        if dy > 0 and max(pos_a.row, pos_b.row) + dy >= rows:
            return False
        for pos in (left, right):
            if is_occupied(self.world, pos.row + dy, pos.col + dx, exclude=chunks):
                return False
        relocate(self.world, [(e, p.row + dy, p.col + dx) for e, p in ((a, pos_a), (b, pos_b))])
        self.event_bus.emit(EVENT_PIECE_MOVED, dx=dx, dy=dy, cells=self._cells(chunks))
        return True

    def _blocked(self, entity: int, chunks: List[int], rows: int) -> bool:
        chunk = self.world.component_for_entity(entity, PillChunk)
        if not chunk.can_fall:
            return True
        row, col = position_of(self.world, entity)
        if row >= rows - 1:
            return True
        return is_occupied(self.world, row + 1, col, exclude=chunks)

    def step_down(self) -> bool:
        """Advance the active pill one row, or lock it in place.

        Returns True when the pill locked; the active piece is then empty.
        """
        chunks = self.active_chunks()
        if not chunks:
            return False
        rows, _ = board_dimensions(self.world)
        if any(self._blocked(e, chunks, rows) for e in chunks):
            for entity in chunks:
                self.world.component_for_entity(entity, PillChunk).can_fall = False
            get_piece_state(self.world).active = []
            self.event_bus.emit(EVENT_PIECE_LOCKED, entities=tuple(chunks), cells=self._cells(chunks))
            return True
        relocate(self.world, [(e, row + 1, col) for e, (row, col) in zip(chunks, self._cells(chunks))])
        for entity in chunks:
            row, col = position_of(self.world, entity)
            self.world.component_for_entity(entity, PillChunk).can_fall = not is_occupied(
                self.world, row + 1, col, exclude=chunks
            )
        self.event_bus.emit(EVENT_PIECE_MOVED, dx=0, dy=1, cells=self._cells(chunks))
        return False

    def rotate(self) -> bool:
        """Rotate clockwise; a pill pushed past the right wall is kicked back one column."""
        return self._rotate(clockwise=True)

    def rotate_right(self) -> bool:
        """Same turn as rotate; a pill pushed past the right wall is kicked one column further right."""
        return self._rotate(clockwise=False)

    def _rotate(self, clockwise: bool) -> bool:
        chunks = self.active_chunks()
        if not chunks:
            return False
        _, cols = board_dimensions(self.world)
        positions = {e: self.world.component_for_entity(e, BoardPosition) for e in chunks}
        # Upper chunk turns; on a tie the right one.
        turning = min(chunks, key=lambda e: (positions[e].row, -positions[e].col))
        anchor = chunks[1] if turning == chunks[0] else chunks[0]
        t, o = positions[turning], positions[anchor]

        x_delta = -1 if t.col > o.col else 0
        y_delta = 1 if t.row < o.row else -1
        original = [(e, positions[e].row, positions[e].col) for e in chunks]
        moves = [(turning, t.row + y_delta, t.col + x_delta)]
        if x_delta == 0:
            moves.append((anchor, o.row, o.col + 1))
        relocate(self.world, moves)

        kicked = False
        if max(positions[e].col for e in chunks) >= cols:
            kicked = self.move(-1 if clockwise else 1, 0)
        if any(not 0 <= positions[e].col < cols for e in chunks):
            # Kick was blocked; the pill must not stay outside the walls.
            relocate(self.world, original)
            return False

        refresh_pair_assets(self.world, chunks, self.resolver)
        self.event_bus.emit(EVENT_PIECE_ROTATED, clockwise=clockwise, kicked=kicked, cells=self._cells(chunks))
        return True
