"""Drives the spawn, fall, match and settle cycle one stage at a time."""
from __future__ import annotations

import logging
import random
from typing import Callable

from esper import World

from pillfall.components.game_state import GameMode
from pillfall.constants import SCORE_PER_VIRUS, VIRUS_COUNT_MAX, VIRUS_COUNT_MIN
from pillfall.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_GAME_OVER,
    EVENT_LEVEL_STARTED,
    EVENT_LEVEL_WON,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from pillfall.systems.board_ops import remaining_virus_count, reset_board
from pillfall.systems.kinematics import KinematicsSystem
from pillfall.systems.match import MatchSystem
from pillfall.systems.settlement import SettlementSystem
from pillfall.systems.spawn_system import GameOver, PieceSpawnSystem
from pillfall.utils.game_state import get_game_state, set_game_mode
from pillfall.utils.session import get_piece_state, get_session

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Central coordinator for the board cycle.

    The flow never waits: every call to ``advance`` performs exactly one stage
    and returns. Pacing is left to whoever calls it (see TickScheduler).
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        spawner: PieceSpawnSystem,
        kinematics: KinematicsSystem,
        matcher: MatchSystem,
        settlement: SettlementSystem,
        *,
        rng: random.Random | None = None,
        virus_count: Callable[[int], int] | None = None,
        score_per_virus: int = SCORE_PER_VIRUS,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.spawner = spawner
        self.kinematics = kinematics
        self.matcher = matcher
        self.settlement = settlement
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._virus_count = virus_count or self._default_virus_count
        self.score_per_virus = score_per_virus
        self.cascade_depth = 0

    def _default_virus_count(self, level: int) -> int:
        return self._rng.randint(VIRUS_COUNT_MIN, VIRUS_COUNT_MAX)

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------
    def new_game(self) -> None:
        session = get_session(self.world)
        session.score = 0
        self.start_level(1)

    def start_level(self, level: int | None = None) -> None:
        """Clear the board and place a fresh set of viruses and a next pill."""
        session = get_session(self.world)
        if level is not None:
            session.level = level
        reset_board(self.world)
        pieces = get_piece_state(self.world)
        pieces.active = []
        pieces.next = []
        session.pending_removal = []
        session.pending_virus_count = 0
        session.removed_virus_count = 0
        self.cascade_depth = 0
        get_game_state(self.world).input_blocked = False
        count = self._virus_count(session.level)
        self.spawner.generate_viruses(count)
        self.spawner.generate_next()
        set_game_mode(self.world, self.event_bus, GameMode.SPAWNING)
        logger.info("Level %d started with %d viruses", session.level, count)
        self.event_bus.emit(EVENT_LEVEL_STARTED, level=session.level, viruses=count)

    def next_level(self) -> bool:
        if self.mode != GameMode.WON:
            return False
        self.start_level(get_session(self.world).level + 1)
        return True

    def consume_removed_viruses(self) -> int:
        """Return the viruses removed since the last call and reset the counter."""
        session = get_session(self.world)
        count = session.removed_virus_count
        session.removed_virus_count = 0
        return count

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def advance(self) -> GameMode:
        mode = self.mode
        if mode == GameMode.SPAWNING:
            self._spawn()
        elif mode == GameMode.ACTIVE:
            # The player may already have locked the pill with a drop request.
            if not get_piece_state(self.world).has_active() or self.kinematics.step_down():
                set_game_mode(self.world, self.event_bus, GameMode.LOCKED)
        elif mode == GameMode.LOCKED:
            self.cascade_depth = 0
            set_game_mode(self.world, self.event_bus, GameMode.MATCHING)
        elif mode == GameMode.MATCHING:
            if self.matcher.detect_matches():
                self.cascade_depth += 1
                set_game_mode(self.world, self.event_bus, GameMode.CLEARING)
            else:
                self._finish_cycle()
        elif mode == GameMode.CLEARING:
            self.settlement.settle()
            set_game_mode(self.world, self.event_bus, GameMode.SETTLING)
        elif mode == GameMode.SETTLING:
            if self.settlement.gravity_sweep() == 0:
                set_game_mode(self.world, self.event_bus, GameMode.MATCHING)
        return self.mode

    def _spawn(self) -> None:
        try:
            self.spawner.promote()
        except GameOver as exc:
            session = get_session(self.world)
            logger.info("Game over on level %d with score %d", session.level, session.score)
            set_game_mode(self.world, self.event_bus, GameMode.LOST)
            self.event_bus.emit(EVENT_GAME_OVER, level=session.level, score=session.score, blocked=exc.blocked)
            return
        set_game_mode(self.world, self.event_bus, GameMode.ACTIVE)

    def _finish_cycle(self) -> None:
        session = get_session(self.world)
        removed = self.consume_removed_viruses()
        if self.cascade_depth:
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=self.cascade_depth, removed_viruses=removed)
        if removed:
            delta = removed * self.score_per_virus
            session.score += delta
            if session.score > session.high_score:
                session.high_score = session.score
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta)
        self.cascade_depth = 0
        if remaining_virus_count(self.world) == 0:
            logger.info("Level %d cleared with score %d", session.level, session.score)
            set_game_mode(self.world, self.event_bus, GameMode.WON)
            self.event_bus.emit(EVENT_LEVEL_WON, level=session.level, score=session.score)
            return
        set_game_mode(self.world, self.event_bus, GameMode.SPAWNING)
