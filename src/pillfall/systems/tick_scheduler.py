from typing import Dict, Optional

from esper import World

from pillfall.components.game_state import GameMode
from pillfall.constants import ACTIVE_STEP_DELAY, CLEARING_DELAY, SETTLING_STEP_DELAY
from pillfall.events.bus import EVENT_TICK, EventBus
from pillfall.systems.game_flow_system import GameFlowSystem
from pillfall.utils.game_state import get_game_state

DEFAULT_DELAYS: Dict[GameMode, float] = {
    GameMode.ACTIVE: ACTIVE_STEP_DELAY,
    GameMode.CLEARING: CLEARING_DELAY,
    GameMode.SETTLING: SETTLING_STEP_DELAY,
}


class TickScheduler:
    """Turns frame ticks into flow stages at a per-mode cadence.

    Modes without a delay advance within the same tick. Nothing runs once the
    game is won or lost until the flow is restarted.
    """

    # Upper bound on stages per tick; a full cycle needs far fewer.
    MAX_STAGES_PER_TICK = 64

    def __init__(self, world: World, event_bus: EventBus, flow: GameFlowSystem,
                 delays: Optional[Dict[GameMode, float]] = None):
        self.world = world
        self.event_bus = event_bus
        self.flow = flow
        self.delays = dict(DEFAULT_DELAYS if delays is None else delays)
        self.paused = False
        self._elapsed = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 0.0) or 0.0
        if self.paused:
            return
        state = get_game_state(self.world)
        if state.mode.terminal:
            self._elapsed = 0.0
            return
        self._elapsed += dt
        for _ in range(self.MAX_STAGES_PER_TICK):
            mode = state.mode
            if mode.terminal:
                self._elapsed = 0.0
                return
            delay = self.delays.get(mode, 0.0)
            if self._elapsed < delay:
                return
            self._elapsed -= delay
            self.flow.advance()
            if state.mode != mode:
                self._elapsed = 0.0
