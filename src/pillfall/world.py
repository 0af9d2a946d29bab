import random
from typing import Sequence

from esper import World

from pillfall.components.board import Board
from pillfall.components.game_state import GameState
from pillfall.components.occupancy_index import OccupancyIndex
from pillfall.components.piece_state import PieceState
from pillfall.components.session import SessionCounters
from pillfall.constants import COLORS, GRID_COLS, GRID_ROWS
from pillfall.events.bus import EventBus
from pillfall.rendering.asset_resolver import AssetResolver, ImagePathResolver


def create_world(
    event_bus: EventBus,
    *,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    colors: Sequence[str] = COLORS,
    rng: random.Random | None = None,
    resolver: AssetResolver | None = None,
) -> World:
    """Build an empty board with the singleton resources every system expects."""
    if rows < 2 or cols < 2:
        raise ValueError(f"Board must be at least 2x2, got {rows}x{cols}")
    if not colors:
        raise ValueError("At least one color is required")
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "colors", tuple(colors))
    setattr(world, "assets", resolver or ImagePathResolver())

    world.create_entity(Board(rows=rows, cols=cols), OccupancyIndex())
    world.create_entity(GameState())
    world.create_entity(PieceState())
    world.create_entity(SessionCounters())
    return world
