from __future__ import annotations

from esper import World

from pillfall.components.game_state import GameMode, GameState
from pillfall.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def get_game_state(world: World) -> GameState:
    for _, state in world.get_component(GameState):
        return state
    world.create_entity(GameState())
    return world.get_component(GameState)[0][1]


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    """Update the global game mode and emit a change event when it differs."""

    state = get_game_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return
    state.mode = mode
    event_bus.emit(
        EVENT_GAME_MODE_CHANGED,
        previous_mode=previous_mode,
        new_mode=mode,
    )


def input_accepted(world: World) -> bool:
    """Player requests are honoured only while a piece is live and nothing blocks input."""
    state = get_game_state(world)
    return state.mode == GameMode.ACTIVE and not state.input_blocked


def set_input_blocked(world: World, blocked: bool) -> None:
    get_game_state(world).input_blocked = bool(blocked)
