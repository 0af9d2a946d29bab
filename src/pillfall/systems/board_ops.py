from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from pillfall.components.asset_ref import AssetRef
from pillfall.components.board import Board
from pillfall.components.board_position import BoardPosition
from pillfall.components.element_color import ElementColor
from pillfall.components.occupancy_index import OccupancyIndex
from pillfall.components.pill_chunk import PillChunk
from pillfall.components.virus_chunk import VirusChunk
from pillfall.rendering.asset_resolver import AssetResolver, AssetState, ElementKind, Orientation

Position = Tuple[int, int]
Move = Tuple[int, int, int]  # entity, row, col


@dataclass(frozen=True, slots=True)
class RemovedElement:
    """Snapshot of an element taken off the board, kept for the clear animation."""
    entity: int
    kind: ElementKind
    color: str
    row: int
    col: int
    asset_ref: Optional[str]
    pair_id: Optional[int] = None


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_index(world: World) -> OccupancyIndex:
    for _, index in world.get_component(OccupancyIndex):
        return index
    raise RuntimeError("OccupancyIndex not found")


def board_dimensions(world: World) -> Tuple[int, int]:
    board = get_board(world)
    return board.rows, board.cols


def element_kind(world: World, entity: int) -> ElementKind:
    if world.has_component(entity, PillChunk):
        return ElementKind.PILL
    return ElementKind.VIRUS


def position_of(world: World, entity: int) -> Position:
    pos = world.component_for_entity(entity, BoardPosition)
    return pos.row, pos.col


def entities_at(world: World, row: int, col: int) -> List[int]:
    return list(get_index(world).cells.get((row, col), ()))


def is_occupied(world: World, row: int, col: int, *, exclude: Iterable[int] = ()) -> bool:
    """Return True if any board element other than those in exclude sits at (row, col)."""
    occupants = get_index(world).cells.get((row, col))
    if not occupants:
        return False
    skip = set(exclude)
    return any(ent not in skip for ent in occupants)


def _index_add(index: OccupancyIndex, entity: int, row: int, col: int) -> None:
    index.cells.setdefault((row, col), []).append(entity)


def _index_discard(index: OccupancyIndex, entity: int, row: int, col: int) -> None:
    occupants = index.cells.get((row, col))
    if not occupants:
        return
    if entity in occupants:
        occupants.remove(entity)
    if not occupants:
        del index.cells[(row, col)]


def place_element(world: World, entity: int, row: int, col: int) -> None:
    """Make entity a board member at (row, col)."""
    index = get_index(world)
    world.add_component(entity, BoardPosition(row=row, col=col))
    _index_add(index, entity, row, col)
    chunk = world.try_component(entity, PillChunk)
    if chunk is not None:
        members = index.pairs.setdefault(chunk.pair_id, [])
        if entity not in members:
            members.append(entity)


def relocate(world: World, moves: Sequence[Move]) -> None:
    """Move several board elements at once.

    All entries are taken out of the index before any is re-inserted, so a pair
    moving into its own cells never sees itself as an obstacle.
    """
    index = get_index(world)
    positions = []
    for entity, row, col in moves:
        pos = world.component_for_entity(entity, BoardPosition)
        _index_discard(index, entity, pos.row, pos.col)
        positions.append((pos, entity, row, col))
    for pos, entity, row, col in positions:
        pos.row = row
        pos.col = col
        _index_add(index, entity, row, col)


def remove_element(world: World, entity: int) -> RemovedElement:
    """Delete a board element and return what it looked like."""
    index = get_index(world)
    pos = world.component_for_entity(entity, BoardPosition)
    color = world.component_for_entity(entity, ElementColor).color
    asset = world.try_component(entity, AssetRef)
    chunk = world.try_component(entity, PillChunk)
    _index_discard(index, entity, pos.row, pos.col)
    pair_id = None
    if chunk is not None:
        pair_id = chunk.pair_id
        members = index.pairs.get(pair_id)
        if members and entity in members:
            members.remove(entity)
            if not members:
                del index.pairs[pair_id]
    removed = RemovedElement(
        entity=entity,
        kind=ElementKind.PILL if chunk is not None else ElementKind.VIRUS,
        color=color,
        row=pos.row,
        col=pos.col,
        asset_ref=asset.ref if asset else None,
        pair_id=pair_id,
    )
    world.delete_entity(entity, immediate=True)
    return removed


def partner_of(world: World, entity: int) -> Optional[int]:
    """Return the other chunk of entity's pill while it is still on the board."""
    chunk = world.try_component(entity, PillChunk)
    if chunk is None:
        return None
    for other in get_index(world).pairs.get(chunk.pair_id, ()):
        if other != entity:
            return other
    return None


def virus_entities(world: World) -> List[int]:
    return [ent for ent, _ in world.get_components(BoardPosition, VirusChunk)]


def remaining_virus_count(world: World) -> int:
    return len(virus_entities(world))


def create_virus(world: World, row: int, col: int, color: str, resolver: AssetResolver) -> int:
    entity = world.create_entity(
        VirusChunk(),
        ElementColor(color=color),
        AssetRef(ref=resolver.resolve(ElementKind.VIRUS, color)),
    )
    place_element(world, entity, row, col)
    return entity


def pair_orientations(first: Position, second: Position) -> Tuple[Orientation, Orientation]:
    """Visual side of each chunk of a two-chunk pill, in argument order."""
    (r1, c1), (r2, c2) = first, second
    if r1 < r2:
        return Orientation.TOP, Orientation.BOTTOM
    if r1 > r2:
        return Orientation.BOTTOM, Orientation.TOP
    if c1 <= c2:
        return Orientation.LEFT, Orientation.RIGHT
    return Orientation.RIGHT, Orientation.LEFT


def refresh_pair_assets(world: World, chunks: Sequence[int], resolver: AssetResolver) -> None:
    """Re-resolve the idle look of a pill pair after it was placed or rotated."""
    if len(chunks) != 2:
        return
    a, b = chunks
    orient_a, orient_b = pair_orientations(position_of(world, a), position_of(world, b))
    for entity, orientation in ((a, orient_a), (b, orient_b)):
        color = world.component_for_entity(entity, ElementColor).color
        world.component_for_entity(entity, AssetRef).ref = resolver.resolve(
            ElementKind.PILL, color, orientation
        )


def refresh_orphan_assets(world: World, resolver: AssetResolver) -> List[int]:
    """Give every chunk whose partner is gone the single-cell look."""
    index = get_index(world)
    orphans: List[int] = []
    for members in index.pairs.values():
        if len(members) != 1:
            continue
        entity = members[0]
        color = world.component_for_entity(entity, ElementColor).color
        world.component_for_entity(entity, AssetRef).ref = resolver.resolve(
            ElementKind.PILL, color, Orientation.SINGLE
        )
        orphans.append(entity)
    return orphans


def mark_for_removal(world: World, entities: Iterable[int], resolver: AssetResolver) -> None:
    for entity in entities:
        color = world.component_for_entity(entity, ElementColor).color
        world.component_for_entity(entity, AssetRef).ref = resolver.resolve(
            element_kind(world, entity), color, None, AssetState.MARKED
        )


def reset_board(world: World) -> None:
    """Delete every board element and staged chunk, leaving singletons in place."""
    doomed = {ent for ent, _ in world.get_component(ElementColor)}
    for entity in doomed:
        world.delete_entity(entity, immediate=True)
    get_index(world).clear()
