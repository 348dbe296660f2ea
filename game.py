from __future__ import annotations

# Facade module that re-exports the bubble shooter core.
# The Flask app and tests import from here; single-responsibility modules
# live under bubble_core/*.

from bubble_core.config import (  # noqa: F401
    DEFAULT_CONFIG,
    GameConfig,
    config_from_env,
    log_level_from_env,
    seed_from_env,
)
from bubble_core.entities import (  # noqa: F401
    Bubble,
    Cause,
    Color,
    PopAnimation,
    PopEvent,
    Projectile,
    Slot,
    Status,
)
from bubble_core.geometry import GridGeometry  # noqa: F401
from bubble_core.clusters import (  # noqa: F401
    are_adjacent,
    cluster_points,
    connected_same_color,
    should_pop,
)
from bubble_core.projectile import (  # noqa: F401
    Continue,
    Discard,
    MissBottom,
    Outcome,
    Place,
    advance,
    bounce_walls,
    collides,
)
from bubble_core.deal import deal_bubbles, pick_color  # noqa: F401
from bubble_core.board import BoardState  # noqa: F401
from bubble_core.session import GameSession, Snapshot, format_time  # noqa: F401
from bubble_core.aim import aim_from_drag, clamp_angle, direction_from_angle  # noqa: F401


def main() -> None:
    # CLI driver delegated to bubble_core.cli
    from bubble_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
