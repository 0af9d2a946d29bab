from dataclasses import dataclass, field
from typing import Dict, List, Tuple

Position = Tuple[int, int]


@dataclass(slots=True)
class OccupancyIndex:
    """Derived lookup kept in sync with BoardPosition/PillChunk components.

    cells maps (row, col) to the entities standing there. A list is kept per cell
    because rotation and virus placement are allowed to stack elements.
    pairs maps a pill pair id to the chunk entities still alive on the board.
    """
    cells: Dict[Position, List[int]] = field(default_factory=dict)
    pairs: Dict[int, List[int]] = field(default_factory=dict)

    def clear(self) -> None:
        self.cells.clear()
        self.pairs.clear()
