from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Grid cell of an element placed on the board.

    Rows grow downward, columns grow rightward. Only entities that are members
    of the board carry this component.
    """
    row: int
    col: int
