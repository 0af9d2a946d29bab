from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere alive.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# PLAYER INPUT
# ============================================================================
EVENT_PIECE_MOVE_REQUEST = "piece_move_request"      # payload: dx=int
EVENT_PIECE_ROTATE_REQUEST = "piece_rotate_request"  # payload: clockwise=bool
EVENT_PIECE_DROP_REQUEST = "piece_drop_request"      # payload: None


# ============================================================================
# PIECE LIFECYCLE
# ============================================================================
EVENT_NEXT_PIECE_READY = "next_piece_ready"    # payload: entities=(int,int), colors=(str,str)
EVENT_PIECE_SPAWNED = "piece_spawned"          # payload: entities=(int,int), cells=[(r,c),(r,c)]
EVENT_PIECE_MOVED = "piece_moved"              # payload: dx=int, dy=int, cells=[(r,c),...]
EVENT_PIECE_ROTATED = "piece_rotated"          # payload: clockwise=bool, kicked=bool, cells=[(r,c),...]
EVENT_PIECE_LOCKED = "piece_locked"            # payload: entities=(int,int), cells=[(r,c),...]
EVENT_VIRUSES_PLACED = "viruses_placed"        # payload: positions=[(r,c),...]


# ============================================================================
# MATCHING & SETTLEMENT
# ============================================================================
EVENT_MATCH_FOUND = "match_found"              # payload: positions=[(r,c),...], size=int, viruses=int
EVENT_MATCH_CLEARED = "match_cleared"          # payload: removed=[RemovedElement,...]
EVENT_GRAVITY_APPLIED = "gravity_applied"      # payload: fallen=int
EVENT_CASCADE_COMPLETE = "cascade_complete"    # payload: depth=int, removed_viruses=int


# ============================================================================
# SESSION & GAME FLOW
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_LEVEL_STARTED = "level_started"              # payload: level=int, viruses=int
EVENT_LEVEL_WON = "level_won"                      # payload: level=int, score=int
EVENT_GAME_OVER = "game_over"                      # payload: level=int, score=int, blocked=[(r,c),...]
