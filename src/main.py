"""Entry point for the Pillfall falling-pill puzzle.

Sets up ECS world, event bus, systems, and Arcade window.
"""
import logging

import arcade
from arcade import Window, run, set_background_color, color

from pillfall.constants import BOARD_MARGIN, CELL_SIZE, GRID_COLS, GRID_ROWS, SIDE_PANEL_WIDTH
from pillfall.components.game_state import GameMode
from pillfall.events.bus import (
    EVENT_PIECE_DROP_REQUEST,
    EVENT_PIECE_MOVE_REQUEST,
    EVENT_PIECE_ROTATE_REQUEST,
    EVENT_TICK,
    EventBus,
)
from pillfall.rendering.board_renderer import BoardRenderer
from pillfall.systems.game_flow_system import GameFlowSystem
from pillfall.systems.kinematics import KinematicsSystem
from pillfall.systems.match import MatchSystem
from pillfall.systems.settlement import SettlementSystem
from pillfall.systems.spawn_system import PieceSpawnSystem
from pillfall.systems.tick_scheduler import TickScheduler
from pillfall.utils.snapshot import build_snapshot
from pillfall.world import create_world

KEY_REQUESTS = {
    arcade.key.A: (EVENT_PIECE_MOVE_REQUEST, {'dx': -1}),
    arcade.key.LEFT: (EVENT_PIECE_MOVE_REQUEST, {'dx': -1}),
    arcade.key.D: (EVENT_PIECE_MOVE_REQUEST, {'dx': 1}),
    arcade.key.RIGHT: (EVENT_PIECE_MOVE_REQUEST, {'dx': 1}),
    arcade.key.S: (EVENT_PIECE_DROP_REQUEST, {}),
    arcade.key.DOWN: (EVENT_PIECE_DROP_REQUEST, {}),
    arcade.key.W: (EVENT_PIECE_ROTATE_REQUEST, {'clockwise': True}),
    arcade.key.UP: (EVENT_PIECE_ROTATE_REQUEST, {'clockwise': True}),
    arcade.key.LSHIFT: (EVENT_PIECE_ROTATE_REQUEST, {'clockwise': False}),
    arcade.key.RSHIFT: (EVENT_PIECE_ROTATE_REQUEST, {'clockwise': False}),
}


class PillfallWindow(Window):
    def __init__(self):
        width = BOARD_MARGIN * 3 + GRID_COLS * CELL_SIZE + SIDE_PANEL_WIDTH
        height = BOARD_MARGIN * 2 + GRID_ROWS * CELL_SIZE
        super().__init__(width, height, "Pillfall")
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus)

        # Board systems
        self.spawn_system = PieceSpawnSystem(self.world, self.event_bus)
        self.kinematics_system = KinematicsSystem(self.world, self.event_bus)
        self.match_system = MatchSystem(self.world, self.event_bus)
        self.settlement_system = SettlementSystem(self.world, self.event_bus)

        # Flow and pacing
        self.game_flow_system = GameFlowSystem(
            self.world,
            self.event_bus,
            self.spawn_system,
            self.kinematics_system,
            self.match_system,
            self.settlement_system,
        )
        self.tick_scheduler = TickScheduler(self.world, self.event_bus, self.game_flow_system)

        self.board_renderer = BoardRenderer()
        set_background_color(color.BLACK)
        self.game_flow_system.new_game()

    def on_draw(self):
        self.clear()
        self.board_renderer.render(arcade, build_snapshot(self.world))

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_key_press(self, symbol: int, modifiers: int):
        mode = self.game_flow_system.mode
        if mode == GameMode.LOST and symbol == arcade.key.N:
            self.game_flow_system.new_game()
            return
        if mode == GameMode.WON and symbol in (arcade.key.ENTER, arcade.key.RETURN):
            self.game_flow_system.next_level()
            return
        if symbol == arcade.key.P:
            self.tick_scheduler.paused = not self.tick_scheduler.paused
            return
        request = KEY_REQUESTS.get(symbol)
        if request is None:
            return
        name, payload = request
        self.event_bus.emit(name, **payload)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    window = PillfallWindow()
    run()

if __name__ == "__main__":
    main()
