"""Asset references handed to presentation code.

The engine asks an ``AssetResolver`` for a reference whenever an element's
look changes and stores whatever comes back in its ``AssetRef`` component
without inspecting it.
"""
from __future__ import annotations

from enum import Enum
from typing import Protocol


class ElementKind(Enum):
    PILL = "pill"
    VIRUS = "virus"


class Orientation(Enum):
    """Which side of its pill a chunk draws as."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "up"
    BOTTOM = "down"
    SINGLE = "dot"


class AssetState(Enum):
    IDLE = "idle"
    MARKED = "marked"


class AssetResolver(Protocol):
    def resolve(
        self,
        kind: ElementKind,
        color: str,
        orientation: Orientation | None = None,
        state: AssetState = AssetState.IDLE,
    ) -> str:
        ...


class ImagePathResolver:
    """Resolves elements to image paths under a shared directory."""

    def __init__(self, base_dir: str = "img"):
        self.base_dir = base_dir.rstrip("/")

    def resolve(
        self,
        kind: ElementKind,
        color: str,
        orientation: Orientation | None = None,
        state: AssetState = AssetState.IDLE,
    ) -> str:
        if kind is ElementKind.VIRUS:
            if state is AssetState.MARKED:
                return f"{self.base_dir}/{color}_x.png"
            return f"{self.base_dir}/covid_{color}.png"
        if state is AssetState.MARKED:
            return f"{self.base_dir}/{color}_o.png"
        side = (orientation or Orientation.SINGLE).value
        return f"{self.base_dir}/{color}_{side}.png"
