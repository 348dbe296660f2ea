from __future__ import annotations

import itertools
import logging
import math
import random
from typing import Dict, List, Optional, Tuple

from .clusters import cluster_points, connected_same_color, should_pop
from .config import DEFAULT_CONFIG, GameConfig
from .deal import deal_bubbles, pick_color
from .entities import Bubble, Cause, Color, PopAnimation, PopEvent, Projectile, Slot
from .geometry import GridGeometry
from .projectile import Continue, Discard, MissBottom, Place, advance

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]


class BoardState:
    """
    Mutable playfield: placed bubbles, at most one projectile, score,
    pop animations and the game-over flag. Randomness comes only from the
    injected rng so a seeded board deals the same layout every time.
    """

    def __init__(self, config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.geometry = GridGeometry(config)
        self.rng = rng if rng is not None else random.Random()
        self._ids = itertools.count(1)
        self.bubbles: List[Bubble] = []
        self.projectile: Optional[Projectile] = None
        self.next_color: Color = config.palette[0]
        self.score = 0
        self.animations: List[PopAnimation] = []
        self.started = False
        self.game_over = False
        self.cause: Optional[Cause] = None
        self.last_pop: Optional[PopEvent] = None
        self.reset()

    def reset(self) -> None:
        self.bubbles = deal_bubbles(self.geometry, self.rng)
        self.next_color = pick_color(self.config.palette, self.rng)
        self.projectile = None
        self.score = 0
        self.animations = []
        self.started = False
        self.game_over = False
        self.cause = None
        self.last_pop = None

    # -- queries --

    @property
    def bubble_count(self) -> int:
        return len(self.bubbles)

    @property
    def in_flight(self) -> bool:
        return self.projectile is not None

    def occupied(self, row: int, col: int) -> bool:
        return any(b.row == row and b.col == col for b in self.bubbles)

    def bubble_at(self, row: int, col: int) -> Optional[Bubble]:
        for b in self.bubbles:
            if b.row == row and b.col == col:
                return b
        return None

    # -- commands --

    def fire(self, direction: Vector, power: float) -> bool:
        """Launches the next color. Returns False (and changes nothing) when the shot is not allowed."""
        if self.projectile is not None or self.game_over or not self.started:
            return False
        dx, dy = direction
        if not all(math.isfinite(v) for v in (power, dx, dy)):
            return False
        if power < self.config.min_power:
            return False
        norm = math.hypot(dx, dy)
        if norm == 0:
            return False
        speed = min(power * self.config.power_scale, self.config.max_speed)
        lx, ly = self.config.launcher
        self.projectile = Projectile(
            x=lx,
            y=ly,
            vx=dx / norm * speed,
            vy=dy / norm * speed,
            color=self.next_color,
            radius=self.config.bubble_radius,
        )
        self.next_color = pick_color(self.config.palette, self.rng)
        logger.debug("fired %s at (%.2f, %.2f) speed=%.2f", self.projectile.color, dx / norm, dy / norm, speed)
        return True

    def tick(self) -> Optional[PopEvent]:
        """Advances the projectile one step and resolves it. Returns the pop, if one happened."""
        if self.projectile is None:
            return None
        outcome = advance(self.projectile, self.bubbles, self.geometry)
        if isinstance(outcome, Continue):
            self.projectile = outcome.projectile
            return None
        self.projectile = None
        if isinstance(outcome, Place):
            return self._place(outcome.slot, outcome.color)
        if isinstance(outcome, Discard):
            logger.debug("slot (%d, %d) occupied, shot discarded", outcome.slot.row, outcome.slot.col)
            return None
        if isinstance(outcome, MissBottom):
            self.end(Cause.LOST)
        return None

    def tick_animations(self) -> None:
        lifetime = self.config.pop_lifetime
        aged = [a.aged() for a in self.animations]
        self.animations = [a for a in aged if a.frame < lifetime]

    def end(self, cause: Cause) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.cause = cause
        self.projectile = None
        logger.info("game over (%s), score=%d", cause.value, self.score)

    # -- internals --

    def _place(self, slot: Slot, color: Color) -> Optional[PopEvent]:
        bubble = Bubble(
            id=f"proj-{next(self._ids)}",
            row=slot.row,
            col=slot.col,
            x=slot.x,
            y=slot.y,
            color=color,
            radius=self.config.bubble_radius,
        )
        candidates = self.bubbles + [bubble]
        component = connected_same_color(bubble, candidates, self.config)
        if not should_pop(component, self.config):
            self.bubbles = candidates
            return None

        removed_ids = {b.id for b in component}
        # Keep board order for the removal report.
        removed = tuple(b for b in candidates if b.id in removed_ids)
        self.bubbles = [b for b in candidates if b.id not in removed_ids]
        self.animations.extend(PopAnimation(x=b.x, y=b.y, color=b.color) for b in removed)
        points = cluster_points(len(removed), self.config)
        self.score += points
        event = PopEvent(removed=removed, points=points)
        self.last_pop = event
        logger.debug("popped %d %s bubbles for %d points", event.count, color, points)
        if not self.bubbles:
            self.end(Cause.WON)
        return event

    def pretty(self) -> str:
        """Generates a human-readable view of the grid, one letter per bubble."""
        cells: Dict[Tuple[int, int], str] = {b.slot: b.color[0].upper() for b in self.bubbles}
        lines: List[str] = []
        for row in range(self.config.rows):
            indent = ' ' if row % 2 == 1 else ''
            marks = [cells.get((row, col), '.') for col in range(self.geometry.valid_cols(row))]
            lines.append(indent + ' '.join(marks))
        return '\n'.join(lines)
