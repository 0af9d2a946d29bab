from typing import List, Set

from esper import World

from pillfall.components.board_position import BoardPosition
from pillfall.components.pill_chunk import PillChunk
from pillfall.events.bus import EVENT_GRAVITY_APPLIED, EVENT_MATCH_CLEARED, EventBus
from pillfall.rendering.asset_resolver import AssetResolver, ImagePathResolver
from pillfall.systems.board_ops import (
    RemovedElement,
    board_dimensions,
    entities_at,
    is_occupied,
    partner_of,
    position_of,
    refresh_orphan_assets,
    relocate,
    remove_element,
)
from pillfall.utils.session import get_piece_state, get_session


class SettlementSystem:
    """Removes matched elements and lets unsupported pills fall afterwards."""

    def __init__(self, world: World, event_bus: EventBus, *, resolver: AssetResolver | None = None):
        self.world = world
        self.event_bus = event_bus
        self.resolver = resolver or getattr(world, "assets", None) or ImagePathResolver()

    def settle(self) -> List[RemovedElement]:
        """Take every pending removable element off the board and return snapshots of them."""
        session = get_session(self.world)
        removed: List[RemovedElement] = []
        for entity in session.pending_removal:
            if not self.world.entity_exists(entity) or not self.world.has_component(entity, BoardPosition):
                continue
            removed.append(remove_element(self.world, entity))
        session.pending_removal = []
        session.pending_virus_count = 0
        if removed:
            refresh_orphan_assets(self.world, self.resolver)
            self.event_bus.emit(EVENT_MATCH_CLEARED, removed=removed)
        return removed

    def gravity_pass(self, row: int) -> int:
        """Drop every unsupported pill chunk in row by one cell.

        A chunk whose partner is still on the board only falls together with it,
        and only when the cell below the partner is free as well. Returns the
        number of chunks that fell.
        """
        rows, cols = board_dimensions(self.world)
        if row < 0 or row >= rows - 1:
            return 0
        active = set(get_piece_state(self.world).active)
        moved: Set[int] = set()
        fallen = 0
        for col in range(cols):
            for entity in entities_at(self.world, row, col):
                if entity in moved or entity in active or not self.world.has_component(entity, PillChunk):
                    continue
                if is_occupied(self.world, row + 1, col):
                    continue
                partner = partner_of(self.world, entity)
                moves = [(entity, row + 1, col)]
                if partner is not None:
                    p_row, p_col = position_of(self.world, partner)
                    if is_occupied(self.world, row + 1, p_col):
                        continue
                    moves.append((partner, p_row + 1, p_col))
                relocate(self.world, moves)
                moved.update(e for e, _, _ in moves)
                fallen += len(moves)
        return fallen

    def gravity_sweep(self) -> int:
        """One gravity pass over every row, from just above the floor to the top."""
        rows, _ = board_dimensions(self.world)
        fallen = sum(self.gravity_pass(row) for row in range(rows - 2, -1, -1))
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, fallen=fallen)
        return fallen
