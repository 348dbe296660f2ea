from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .aim import direction_from_angle
from .board import BoardState, Vector
from .config import DEFAULT_CONFIG, GameConfig
from .entities import Bubble, Cause, Color, PopAnimation, PopEvent, Projectile, Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a session, polled once per rendered frame."""
    status: Status
    cause: Optional[Cause]
    bubbles: Tuple[Bubble, ...]
    projectile: Optional[Projectile]
    animations: Tuple[PopAnimation, ...]
    score: int
    time_left: int
    time_played: int
    next_color: Color
    launcher: Tuple[float, float]
    ticks: int


class GameSession:
    """
    Lifecycle of one game: NOT_STARTED -> RUNNING -> OVER.

    Time only moves through tick()/tick_countdown() or the fixed-timestep
    advance(), so whoever drives the session owns the clock and stopping it is
    just a matter of not calling advance() again.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.board = BoardState(config, rng if rng is not None else random.Random(seed))
        self.status = Status.NOT_STARTED
        self.time_left = config.countdown_seconds
        self.ticks = 0
        self._accum = 0.0
        self._running_ticks = 0

    @property
    def cause(self) -> Optional[Cause]:
        return self.board.cause

    @property
    def score(self) -> int:
        return self.board.score

    @property
    def time_played(self) -> int:
        return self.config.countdown_seconds - self.time_left

    def start(self) -> bool:
        if self.status is not Status.NOT_STARTED:
            return False
        self.status = Status.RUNNING
        self.board.started = True
        self._accum = 0.0
        self._running_ticks = 0
        logger.info("session started, %d bubbles on board", self.board.bubble_count)
        return True

    def reset(self) -> None:
        # Halt the clock before the board is rebuilt.
        self.status = Status.NOT_STARTED
        self._accum = 0.0
        self._running_ticks = 0
        self.ticks = 0
        self.board.reset()
        self.time_left = self.config.countdown_seconds
        logger.info("session reset")

    def fire(self, direction: Vector, power: float) -> bool:
        if self.status is not Status.RUNNING:
            return False
        return self.board.fire(direction, power)

    def fire_angle(self, angle: float, power: float) -> bool:
        if not math.isfinite(angle):
            return False
        return self.fire(direction_from_angle(angle), power)

    def tick(self) -> Optional[PopEvent]:
        """One simulation step: projectile and its consequences first, then animation aging."""
        event = None
        if self.status is Status.RUNNING:
            event = self.board.tick()
            if self.board.game_over:
                self._finish()
        self.board.tick_animations()
        self.ticks += 1
        return event

    def tick_countdown(self) -> None:
        if self.status is not Status.RUNNING:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left == 0:
            # Any shot still in flight is dropped, not resolved.
            self.board.end(Cause.TIME)
            self._finish()

    def advance(self, elapsed: float) -> int:
        """
        Fixed-timestep driver. Consumes `elapsed` seconds in 1/tick_rate steps and
        decrements the countdown once per tick_rate running ticks. Leftover time
        carries over to the next call. Returns the number of ticks run.
        """
        if elapsed <= 0:
            return 0
        step = self.config.tick_interval
        self._accum += elapsed
        ran = 0
        while self._accum + 1e-9 >= step:
            if self.status is not Status.RUNNING and not self.board.animations:
                # Nothing left to simulate; idle time is not banked.
                self._accum = 0.0
                break
            self._accum -= step
            running = self.status is Status.RUNNING
            self.tick()
            ran += 1
            if running and self.status is Status.RUNNING:
                self._running_ticks += 1
                if self._running_ticks % self.config.tick_rate == 0:
                    self.tick_countdown()
        return ran

    def _finish(self) -> None:
        if self.status is Status.OVER:
            return
        self.status = Status.OVER
        logger.info("session over: cause=%s score=%d time_played=%ds",
                    self.cause.value if self.cause else None, self.score, self.time_played)

    def snapshot(self) -> Snapshot:
        b = self.board
        return Snapshot(
            status=self.status,
            cause=self.cause,
            bubbles=tuple(b.bubbles),
            projectile=b.projectile,
            animations=tuple(b.animations),
            score=b.score,
            time_left=self.time_left,
            time_played=self.time_played,
            next_color=b.next_color,
            launcher=self.config.launcher,
            ticks=self.ticks,
        )

    def pretty(self) -> str:
        head = f"score={self.score} time={format_time(self.time_left)} status={self.status.value}"
        if self.cause is not None:
            head += f" ({self.cause.value})"
        return head + '\n' + self.board.pretty()


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"
