from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True)
class AssetRef:
    """Opaque presentation handle produced by the asset resolver; never inspected by the engine."""
    ref: Optional[str] = None
