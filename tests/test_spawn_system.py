import pytest

from pillfall.components.asset_ref import AssetRef
from pillfall.components.board_position import BoardPosition
from pillfall.components.pill_chunk import PillChunk
from pillfall.components.staged_piece import StagedPiece
from pillfall.components.virus_chunk import VirusChunk
from pillfall.events.bus import EVENT_PIECE_SPAWNED
from pillfall.systems.board_ops import position_of, remaining_virus_count
from pillfall.systems.spawn_system import GameOver, spawn_cells
from pillfall.utils.session import get_piece_state
from tests.helpers import build_session, place_virus


def test_generate_next_stages_pair_off_board():
    s = build_session()
    chunks = s.spawner.generate_next()
    assert get_piece_state(s.world).next == chunks
    pair_ids = {s.world.component_for_entity(e, PillChunk).pair_id for e in chunks}
    assert len(pair_ids) == 1
    assert [s.world.component_for_entity(e, StagedPiece).slot for e in chunks] == [0, 1]
    for entity in chunks:
        assert not s.world.has_component(entity, BoardPosition)


def test_pair_ids_never_repeat_and_old_next_is_discarded():
    s = build_session()
    first = s.spawner.generate_next()
    second = s.spawner.generate_next()
    second_id = s.world.component_for_entity(second[0], PillChunk).pair_id
    assert not any(s.world.entity_exists(e) for e in first)
    third = s.spawner.generate_next()
    assert s.world.component_for_entity(third[0], PillChunk).pair_id != second_id


def test_sessions_allocate_pair_ids_independently():
    one = build_session()
    two = build_session()
    a = one.spawner.generate_next()
    b = two.spawner.generate_next()
    assert one.world.component_for_entity(a[0], PillChunk).pair_id == 0
    assert two.world.component_for_entity(b[0], PillChunk).pair_id == 0


def test_spawn_cells_are_top_center():
    assert spawn_cells(8) == ((0, 3), (0, 4))
    assert spawn_cells(5) == ((0, 1), (0, 2))


def test_promote_places_next_pill_and_refills():
    s = build_session()
    staged = s.spawner.generate_next()
    spawned = {}
    s.bus.subscribe(EVENT_PIECE_SPAWNED, lambda sender, **k: spawned.update(k))
    active = s.spawner.promote()
    state = get_piece_state(s.world)
    assert active == staged
    assert state.active == staged
    assert [position_of(s.world, e) for e in active] == [(0, 3), (0, 4)]
    assert len(state.next) == 2 and not set(state.next) & set(active)
    for entity in active:
        assert not s.world.has_component(entity, StagedPiece)
        assert s.world.component_for_entity(entity, PillChunk).can_fall
    left_ref = s.world.component_for_entity(active[0], AssetRef).ref
    right_ref = s.world.component_for_entity(active[1], AssetRef).ref
    assert left_ref.endswith("_left.png") and right_ref.endswith("_right.png")
    assert spawned['cells'] == [(0, 3), (0, 4)]


def test_promote_generates_next_when_missing():
    s = build_session()
    active = s.spawner.promote()
    assert len(active) == 2
    assert len(get_piece_state(s.world).next) == 2


def test_promote_blocked_spawn_raises_game_over():
    s = build_session()
    place_virus(s.world, 0, 3, "blue")
    staged = s.spawner.generate_next()
    with pytest.raises(GameOver) as excinfo:
        s.spawner.promote()
    assert excinfo.value.blocked == [(0, 3)]
    state = get_piece_state(s.world)
    assert state.next == staged
    assert state.active == []
    for entity in staged:
        assert s.world.has_component(entity, StagedPiece)
        assert not s.world.has_component(entity, BoardPosition)


def test_promote_with_active_piece_is_an_error():
    s = build_session()
    s.spawner.promote()
    with pytest.raises(RuntimeError):
        s.spawner.promote()


def test_viruses_land_in_lower_half():
    s = build_session(rows=15, cols=8)
    viruses = s.spawner.generate_viruses(60)
    assert len(viruses) == 60
    for entity in viruses:
        assert s.world.has_component(entity, VirusChunk)
        row, col = position_of(s.world, entity)
        assert 7 <= row <= 14
        assert 0 <= col < 8
    # Placement does not deduplicate, so stacked viruses still count.
    assert remaining_virus_count(s.world) == 60


def test_virus_assets_use_idle_reference():
    s = build_session(colors=("yellow",))
    (virus,) = s.spawner.generate_viruses(1)
    assert s.world.component_for_entity(virus, AssetRef).ref == "img/covid_yellow.png"
