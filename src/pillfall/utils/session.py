from esper import World

from pillfall.components.piece_state import PieceState
from pillfall.components.session import SessionCounters


def get_piece_state(world: World) -> PieceState:
    """Return the shared PieceState component, creating it if absent."""
    existing = list(world.get_component(PieceState))
    if existing:
        return existing[0][1]
    world.create_entity(PieceState())
    return list(world.get_component(PieceState))[0][1]


def get_session(world: World) -> SessionCounters:
    """Return the shared SessionCounters component, creating it if absent."""
    existing = list(world.get_component(SessionCounters))
    if existing:
        return existing[0][1]
    world.create_entity(SessionCounters())
    return list(world.get_component(SessionCounters))[0][1]
