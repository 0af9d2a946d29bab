from dataclasses import dataclass

@dataclass(slots=True)
class VirusChunk:
    """Tag for an immobile single-cell target. Presence of this component is the element kind."""
    pass
