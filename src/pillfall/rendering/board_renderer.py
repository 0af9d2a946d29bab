from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Tuple

from pillfall.components.game_state import GameMode
from pillfall.constants import BOARD_MARGIN, CELL_SIZE
from pillfall.rendering.asset_resolver import ElementKind

if TYPE_CHECKING:
    from pillfall.utils.snapshot import BoardSnapshot, ElementView

RGB = Tuple[int, int, int]

PALETTE: Dict[str, RGB] = {
    'brown': (150, 96, 52),
    'blue': (70, 110, 220),
    'yellow': (230, 200, 60),
}
FALLBACK_COLOR: RGB = (200, 200, 200)
GRID_COLOR: RGB = (28, 28, 40)
BORDER_COLOR: RGB = (120, 120, 150)
TEXT_COLOR: RGB = (235, 235, 235)


class BoardRenderer:
    """Draws a BoardSnapshot with primitive shapes; no textures are loaded."""

    def __init__(self, cell_size: int = CELL_SIZE, margin: int = BOARD_MARGIN, padding: int = 2):
        self.cell_size = cell_size
        self.margin = margin
        self.padding = padding

    def cell_origin(self, snapshot: BoardSnapshot, row: int, col: int) -> Tuple[float, float]:
        # Arcade's origin is bottom-left; board row 0 is the top row.
        x = self.margin + col * self.cell_size
        y = self.margin + (snapshot.rows - 1 - row) * self.cell_size
        return x, y

    def render(self, arcade, snapshot: BoardSnapshot) -> None:
        width = snapshot.cols * self.cell_size
        height = snapshot.rows * self.cell_size
        arcade.draw_lbwh_rectangle_filled(self.margin, self.margin, width, height, GRID_COLOR)
        arcade.draw_lbwh_rectangle_outline(self.margin, self.margin, width, height, BORDER_COLOR, border_width=2)
        for view in snapshot.elements:
            if view.row is None or view.col is None or not 0 <= view.row < snapshot.rows:
                continue
            x, y = self.cell_origin(snapshot, view.row, view.col)
            self._draw_element(arcade, view, x, y)
        self._draw_panel(arcade, snapshot, self.margin * 2 + width, self.margin + height)

    def _draw_element(self, arcade, view: ElementView, x: float, y: float) -> None:
        color = PALETTE.get(view.color, FALLBACK_COLOR)
        size = self.cell_size - 2 * self.padding
        if view.kind is ElementKind.VIRUS:
            radius = size / 2
            arcade.draw_circle_filled(x + self.cell_size / 2, y + self.cell_size / 2, radius, color)
            arcade.draw_circle_outline(x + self.cell_size / 2, y + self.cell_size / 2, radius, TEXT_COLOR, 1)
        else:
            arcade.draw_lbwh_rectangle_filled(x + self.padding, y + self.padding, size, size, color)

    def _draw_panel(self, arcade, snapshot: BoardSnapshot, left: float, top: float) -> None:
        lines = [
            f"Level {snapshot.level}",
            f"Score {snapshot.score}",
            f"Best {snapshot.high_score}",
            f"Viruses {snapshot.remaining_virus_count}",
        ]
        if snapshot.mode == GameMode.WON:
            lines.append("Cleared! Enter: next")
        elif snapshot.mode == GameMode.LOST:
            lines.append("Game over. N: new game")
        for i, text in enumerate(lines):
            arcade.draw_text(text, left, top - 24 * (i + 1), TEXT_COLOR, 14)
        next_top = top - 24 * (len(lines) + 2)
        for i, view in enumerate(snapshot.next):
            color = PALETTE.get(view.color, FALLBACK_COLOR)
            arcade.draw_lbwh_rectangle_filled(
                left + i * self.cell_size, next_top, self.cell_size - self.padding, self.cell_size - self.padding, color
            )
