from dataclasses import dataclass

@dataclass(slots=True)
class PillChunk:
    """One half of a two-cell pill.

    pair_id: shared by exactly the two chunks created together.
    can_fall: False once nothing more may move this chunk down on its own tick.
    """
    pair_id: int
    can_fall: bool = True
