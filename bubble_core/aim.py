from __future__ import annotations

import math
from typing import Optional, Tuple

from .config import DEFAULT_CONFIG, GameConfig


def direction_from_angle(angle: float) -> Tuple[float, float]:
    """Unit vector for an angle in radians. Screen y grows downward, so upward shots have negative angles."""
    return math.cos(angle), math.sin(angle)


def clamp_angle(angle: float, config: GameConfig = DEFAULT_CONFIG) -> float:
    return max(config.aim_min_angle, min(config.aim_max_angle, angle))


def aim_from_drag(dx: float, dy: float, config: GameConfig = DEFAULT_CONFIG) -> Optional[Tuple[float, float]]:
    """
    Converts a drag offset (pointer minus launcher) into (angle, power).
    Downward drags give None. The angle is clamped to the upward arc and power
    saturates at 1.0 once the drag reaches aim_full_power_distance.
    """
    if dy >= 0:
        return None
    angle = clamp_angle(math.atan2(dy, dx), config)
    power = min(math.hypot(dx, dy) / config.aim_full_power_distance, 1.0)
    return angle, power
