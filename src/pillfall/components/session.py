from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class SessionCounters:
    """Score inputs shared between matching, settlement and game flow.

    removed_virus_count accumulates viruses marked during the current
    settlement cycle; the flow consumes it into the score and resets it to 0.
    high_score survives new games for the lifetime of the session.
    """
    removed_virus_count: int = 0
    pending_removal: List[int] = field(default_factory=list)
    pending_virus_count: int = 0
    score: int = 0
    high_score: int = 0
    level: int = 1
