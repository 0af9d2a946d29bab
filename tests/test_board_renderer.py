from pillfall.constants import COLORS
from pillfall.rendering.board_renderer import PALETTE, BoardRenderer
from pillfall.utils.snapshot import build_snapshot
from tests.helpers import build_session, place_virus


class RecordingArcade:
    """Stands in for the arcade module and records draw calls."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args))
        return record


def test_render_draws_board_elements_and_panel():
    s = build_session()
    s.flow.start_level(1)
    place_virus(s.world, 14, 0, "blue")
    fake = RecordingArcade()
    BoardRenderer(cell_size=10, margin=5).render(fake, build_snapshot(s.world))

    names = [name for name, _ in fake.calls]
    assert names.count("draw_circle_filled") == 1
    texts = [args[0] for name, args in fake.calls if name == "draw_text"]
    assert texts == ["Level 1", "Score 0", "Best 0", "Viruses 1"]
    # Virus in the bottom row sits just above the bottom margin.
    _, args = next(c for c in fake.calls if c[0] == "draw_circle_filled")
    assert args[:2] == (10.0, 10.0)
    assert args[3] == PALETTE["blue"]


def test_cell_origin_flips_rows():
    s = build_session()
    snapshot = build_snapshot(s.world)
    renderer = BoardRenderer(cell_size=10, margin=5)
    assert renderer.cell_origin(snapshot, 0, 0) == (5, 145)
    assert renderer.cell_origin(snapshot, 14, 7) == (75, 5)


def test_palette_covers_game_colors_only():
    assert set(PALETTE) == set(COLORS)
