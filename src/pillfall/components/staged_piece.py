from dataclasses import dataclass

@dataclass(slots=True)
class StagedPiece:
    """Marks a generated chunk that waits off-board as part of the next piece.

    slot: 0 for the chunk that spawns on the left, 1 for the right one.
    """
    slot: int
