from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class PieceState:
    """Singleton tracking the player-controlled pair and the pre-generated next pair."""
    active: List[int] = field(default_factory=list)
    next: List[int] = field(default_factory=list)

    def has_active(self) -> bool:
        return len(self.active) == 2
