from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple

Color = str  # 'purple', 'cyan', 'magenta', 'lime', 'orange'


class Slot(NamedTuple):
    """A (row, col) grid address together with its pixel center."""
    row: int
    col: int
    x: float
    y: float


class Status(enum.Enum):
    NOT_STARTED = 'not_started'
    RUNNING = 'running'
    OVER = 'over'


class Cause(enum.Enum):
    WON = 'won'
    LOST = 'lost'
    TIME = 'time'


@dataclass(frozen=True)
class Bubble:
    """A stationary bubble occupying one grid slot."""
    id: str
    row: int
    col: int
    x: float
    y: float
    color: Color
    radius: float

    @property
    def slot(self) -> Tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class Projectile:
    """The single in-flight shot."""
    x: float
    y: float
    vx: float
    vy: float
    color: Color
    radius: float

    def moved(self) -> 'Projectile':
        return replace(self, x=self.x + self.vx, y=self.y + self.vy)


@dataclass(frozen=True)
class PopAnimation:
    x: float
    y: float
    color: Color
    frame: int = 0

    def aged(self) -> 'PopAnimation':
        return replace(self, frame=self.frame + 1)


@dataclass(frozen=True)
class PopEvent:
    """Reported synchronously when a cluster is removed from the board."""
    removed: Tuple[Bubble, ...]
    points: int

    @property
    def count(self) -> int:
        return len(self.removed)
