from pillfall.components.game_state import GameMode
from pillfall.rendering.asset_resolver import ElementKind
from pillfall.utils.snapshot import build_snapshot
from tests.helpers import build_session


def test_snapshot_reflects_board_and_session():
    s = build_session(virus_count=3)
    s.flow.start_level(1)
    s.flow.advance()
    snap = build_snapshot(s.world)

    assert (snap.rows, snap.cols) == (15, 8)
    assert snap.mode == GameMode.ACTIVE
    assert snap.level == 1
    assert snap.score == 0
    assert snap.high_score == 0
    assert snap.remaining_virus_count == 3
    assert len(snap.elements) == 5
    assert sum(1 for v in snap.elements if v.kind is ElementKind.VIRUS) == 3
    assert [(v.row, v.col) for v in snap.active] == [(0, 3), (0, 4)]
    assert all(v.row is None and v.kind is ElementKind.PILL for v in snap.next)
    assert snap.active[0].pair_id == snap.active[1].pair_id
    assert snap.next[0].pair_id != snap.active[0].pair_id


def test_snapshot_elements_are_ordered_by_cell():
    s = build_session(virus_count=4)
    s.flow.start_level(1)
    cells = [(v.row, v.col) for v in build_snapshot(s.world).elements]
    assert cells == sorted(cells)
