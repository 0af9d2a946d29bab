"""Game state resource describing where the simulation is in its cycle."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """Stages of the spawn/fall/match/settle cycle."""
    SPAWNING = auto()
    ACTIVE = auto()
    LOCKED = auto()
    MATCHING = auto()
    CLEARING = auto()
    SETTLING = auto()
    WON = auto()
    LOST = auto()

    @property
    def terminal(self) -> bool:
        return self in (GameMode.WON, GameMode.LOST)


@dataclass
class GameState:
    """Singleton component storing the current mode and the external input guard."""
    mode: GameMode = GameMode.SPAWNING
    input_blocked: bool = False
