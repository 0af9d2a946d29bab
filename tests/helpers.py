from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from esper import World

from pillfall.components.asset_ref import AssetRef
from pillfall.components.element_color import ElementColor
from pillfall.components.pill_chunk import PillChunk
from pillfall.events.bus import EventBus
from pillfall.rendering.asset_resolver import ElementKind, Orientation
from pillfall.systems.board_ops import create_virus, place_element
from pillfall.systems.game_flow_system import GameFlowSystem
from pillfall.systems.kinematics import KinematicsSystem
from pillfall.systems.match import MatchSystem
from pillfall.systems.settlement import SettlementSystem
from pillfall.systems.spawn_system import PieceSpawnSystem
from pillfall.world import create_world


@dataclass
class Session:
    bus: EventBus
    world: World
    spawner: PieceSpawnSystem
    kinematics: KinematicsSystem
    matcher: MatchSystem
    settlement: SettlementSystem
    flow: GameFlowSystem


def build_session(
    rows: int = 15,
    cols: int = 8,
    colors: Sequence[str] = ("brown", "blue", "yellow"),
    seed: int = 7,
    virus_count: int = 0,
) -> Session:
    """Wire a world with every board system, the way the game window does."""
    bus = EventBus()
    rng = random.Random(seed)
    world = create_world(bus, rows=rows, cols=cols, colors=colors, rng=rng)
    spawner = PieceSpawnSystem(world, bus)
    kinematics = KinematicsSystem(world, bus)
    matcher = MatchSystem(world, bus)
    settlement = SettlementSystem(world, bus)
    flow = GameFlowSystem(
        world, bus, spawner, kinematics, matcher, settlement,
        virus_count=lambda level: virus_count,
    )
    return Session(bus, world, spawner, kinematics, matcher, settlement, flow)


def place_virus(world: World, row: int, col: int, color: str) -> int:
    return create_virus(world, row, col, color, world.assets)


def place_chunk(world: World, row: int, col: int, color: str, pair_id: int, can_fall: bool = False) -> int:
    entity = world.create_entity(
        PillChunk(pair_id=pair_id, can_fall=can_fall),
        ElementColor(color=color),
        AssetRef(ref=world.assets.resolve(ElementKind.PILL, color, Orientation.SINGLE)),
    )
    place_element(world, entity, row, col)
    return entity


def place_pill(world: World, first: tuple[int, int], second: tuple[int, int],
               colors: tuple[str, str], pair_id: int, can_fall: bool = False) -> tuple[int, int]:
    """Place a locked pill whose two chunks share pair_id."""
    a = place_chunk(world, first[0], first[1], colors[0], pair_id, can_fall)
    b = place_chunk(world, second[0], second[1], colors[1], pair_id, can_fall)
    return a, b
