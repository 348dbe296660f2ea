from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .entities import Color


@dataclass(frozen=True)
class GameConfig:
    """Fixed game constants. Substitutable per session, never changed at runtime."""
    bubble_radius: int = 18
    row_height_factor: float = 0.87
    rows: int = 12
    cols: int = 12
    grid_origin: Tuple[float, float] = (40.0, 60.0)
    playable_min_x: float = 40.0
    playable_max_x: float = 440.0

    initial_rows: int = 6
    initial_cols_cap: int = 10
    initial_max_x: float = 440.0

    board_width: int = 480
    board_height: int = 640
    launcher_offset: int = 80
    top_margin: float = 20.0
    bottom_margin: float = 20.0
    overlap_tolerance: float = 3.0
    adjacency_factor: float = 1.1

    palette: Tuple[Color, ...] = ('purple', 'cyan', 'magenta', 'lime', 'orange')

    min_power: float = 0.1
    power_scale: float = 15.0
    max_speed: float = 12.0

    min_cluster: int = 3
    points_per_bubble: int = 10
    bonus_per_extra: int = 5

    pop_lifetime: int = 20
    countdown_seconds: int = 180
    tick_rate: int = 60

    aim_min_angle: float = -math.pi * 0.9
    aim_max_angle: float = -math.pi * 0.1
    aim_full_power_distance: float = 100.0

    def __post_init__(self) -> None:
        if not self.palette:
            raise ValueError('palette must contain at least one color')
        if self.tick_rate <= 0:
            raise ValueError('tick_rate must be positive')
        if self.rows <= 0 or self.cols <= 1:
            raise ValueError('grid needs at least one row and two columns')

    @property
    def spacing(self) -> float:
        return self.bubble_radius * 2

    @property
    def row_height(self) -> float:
        return self.spacing * self.row_height_factor

    @property
    def adjacency_threshold(self) -> float:
        return self.spacing * self.adjacency_factor

    @property
    def launcher(self) -> Tuple[float, float]:
        return self.board_width / 2, self.board_height - self.launcher_offset

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.tick_rate


DEFAULT_CONFIG = GameConfig()


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer, got {raw!r}') from None


def config_from_env(base: GameConfig = DEFAULT_CONFIG) -> GameConfig:
    """Applies deployment overrides (BUBBLE_TICK_RATE) on top of a base config."""
    tick_rate = _env_int('BUBBLE_TICK_RATE')
    if tick_rate is None:
        return base
    return replace(base, tick_rate=tick_rate)


def seed_from_env() -> Optional[int]:
    """Returns BUBBLE_SEED when set, so deployments can pin board layouts."""
    return _env_int('BUBBLE_SEED')


def log_level_from_env(default: str = 'WARNING') -> str:
    return os.getenv('BUBBLE_LOG_LEVEL', default).upper()
