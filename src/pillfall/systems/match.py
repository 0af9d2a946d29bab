from typing import Dict, List, Set, Tuple

from esper import World

from pillfall.components.board_position import BoardPosition
from pillfall.components.element_color import ElementColor
from pillfall.components.virus_chunk import VirusChunk
from pillfall.constants import MATCH_LENGTH
from pillfall.events.bus import EVENT_MATCH_FOUND, EventBus
from pillfall.rendering.asset_resolver import AssetResolver, ImagePathResolver
from pillfall.systems.board_ops import get_index, mark_for_removal
from pillfall.utils.session import get_session

Position = Tuple[int, int]


class MatchSystem:
    """Finds horizontal and vertical runs of same-colored elements."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        run_length: int = MATCH_LENGTH,
        resolver: AssetResolver | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.run_length = run_length
        self.resolver = resolver or getattr(world, "assets", None) or ImagePathResolver()

    def _colored_at(self, cells: Dict[Position, List[int]], pos: Position, color: str) -> List[int]:
        return [
            ent for ent in cells.get(pos, ())
            if self.world.component_for_entity(ent, ElementColor).color == color
        ]

    def find_removable(self) -> Set[int]:
        """Union of every element seeding a run of run_length to its right or below it."""
        cells = get_index(self.world).cells
        removable: Set[int] = set()
        for ent, (pos, color) in self.world.get_components(BoardPosition, ElementColor):
            for d_row, d_col in ((0, 1), (1, 0)):
                run: List[int] = []
                for step in range(1, self.run_length):
                    found = self._colored_at(
                        cells, (pos.row + d_row * step, pos.col + d_col * step), color.color
                    )
                    if not found:
                        break
                    run.extend(found)
                else:
                    removable.add(ent)
                    removable.update(run)
        return removable

    def detect_matches(self) -> int:
        """Scan the whole board and store the removable set until settlement consumes it.

        Viruses in the new set are added to the session's removed_virus_count.
        Returns the size of the removable set.
        """
        session = get_session(self.world)
        removable = self.find_removable()
        virus_count = sum(1 for ent in removable if self.world.has_component(ent, VirusChunk))
        # A rescan before settle replaces the pending set rather than adding to it.
        session.removed_virus_count += virus_count - session.pending_virus_count
        session.pending_virus_count = virus_count
        session.pending_removal = sorted(removable)
        if removable:
            mark_for_removal(self.world, removable, self.resolver)
            positions = sorted(
                (p.row, p.col)
                for p in (self.world.component_for_entity(e, BoardPosition) for e in removable)
            )
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(removable), viruses=virus_count)
        return len(removable)

    def has_removable(self) -> bool:
        return bool(get_session(self.world).pending_removal)

    def pending(self) -> List[int]:
        return list(get_session(self.world).pending_removal)
