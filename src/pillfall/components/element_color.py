from dataclasses import dataclass

@dataclass(slots=True)
class ElementColor:
    color: str
