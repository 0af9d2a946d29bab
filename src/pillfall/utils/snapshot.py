"""Read-only view of a session for presentation code."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from esper import World

from pillfall.components.asset_ref import AssetRef
from pillfall.components.board_position import BoardPosition
from pillfall.components.element_color import ElementColor
from pillfall.components.game_state import GameMode
from pillfall.components.pill_chunk import PillChunk
from pillfall.rendering.asset_resolver import ElementKind
from pillfall.systems.board_ops import board_dimensions, remaining_virus_count
from pillfall.utils.game_state import get_game_state
from pillfall.utils.session import get_piece_state, get_session


@dataclass(frozen=True, slots=True)
class ElementView:
    entity: int
    kind: ElementKind
    color: str
    row: Optional[int]
    col: Optional[int]
    asset_ref: Optional[str]
    pair_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    rows: int
    cols: int
    elements: Tuple[ElementView, ...]
    active: Tuple[ElementView, ...]
    next: Tuple[ElementView, ...]
    remaining_virus_count: int
    removed_virus_count: int
    score: int
    high_score: int
    level: int
    mode: GameMode


def _view(world: World, entity: int) -> ElementView:
    chunk = world.try_component(entity, PillChunk)
    pos = world.try_component(entity, BoardPosition)
    asset = world.try_component(entity, AssetRef)
    return ElementView(
        entity=entity,
        kind=ElementKind.PILL if chunk is not None else ElementKind.VIRUS,
        color=world.component_for_entity(entity, ElementColor).color,
        row=pos.row if pos else None,
        col=pos.col if pos else None,
        asset_ref=asset.ref if asset else None,
        pair_id=chunk.pair_id if chunk is not None else None,
    )


def build_snapshot(world: World) -> BoardSnapshot:
    rows, cols = board_dimensions(world)
    pieces = get_piece_state(world)
    session = get_session(world)
    elements: List[ElementView] = [_view(world, ent) for ent, _ in world.get_component(BoardPosition)]
    elements.sort(key=lambda v: (v.row, v.col, v.entity))
    return BoardSnapshot(
        rows=rows,
        cols=cols,
        elements=tuple(elements),
        active=tuple(_view(world, e) for e in pieces.active),
        next=tuple(_view(world, e) for e in pieces.next),
        remaining_virus_count=remaining_virus_count(world),
        removed_virus_count=session.removed_virus_count,
        score=session.score,
        high_score=session.high_score,
        level=session.level,
        mode=get_game_state(world).mode,
    )
