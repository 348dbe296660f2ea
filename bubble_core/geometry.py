from __future__ import annotations

import math
from typing import Iterator, Tuple

from .config import DEFAULT_CONFIG, GameConfig
from .entities import Slot


class GridGeometry:
    """Coordinate math for the staggered grid. Odd rows shift right by half a spacing."""

    def __init__(self, config: GameConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    @property
    def width(self) -> float:
        return self.config.board_width

    @property
    def height(self) -> float:
        return self.config.board_height

    @property
    def top_y(self) -> float:
        """Center y of row 0, used when a shot snaps against the ceiling."""
        return self.config.grid_origin[1]

    def position(self, row: int, col: int) -> Tuple[float, float]:
        cfg = self.config
        ox, oy = cfg.grid_origin
        offset = cfg.spacing / 2 if row % 2 == 1 else 0
        return ox + offset + col * cfg.spacing, oy + row * cfg.row_height

    def valid_cols(self, row: int) -> int:
        return self.config.cols - 1 if row % 2 == 1 else self.config.cols

    def in_playable_width(self, x: float) -> bool:
        return self.config.playable_min_x <= x <= self.config.playable_max_x

    def slots(self) -> Iterator[Slot]:
        """Yields every playable slot in row-major scan order."""
        for row in range(self.config.rows):
            for col in range(self.valid_cols(row)):
                x, y = self.position(row, col)
                if self.in_playable_width(x):
                    yield Slot(row, col, x, y)

    def nearest_slot(self, x: float, y: float) -> Slot:
        """Exhaustive scan for the slot closest to (x, y). Ties go to the first slot scanned."""
        best = None
        best_dist = math.inf
        for slot in self.slots():
            d = math.hypot(x - slot.x, y - slot.y)
            if d < best_dist:
                best_dist = d
                best = slot
        if best is None:
            return self.launcher_slot()
        return best

    def launcher_slot(self) -> Slot:
        """Bottom-row slot nearest the launcher column."""
        cfg = self.config
        row = cfg.rows - 1
        launcher_x = cfg.launcher[0]
        offset = cfg.spacing / 2 if row % 2 == 1 else 0
        col = int(round((launcher_x - cfg.grid_origin[0] - offset) / cfg.spacing))
        col = max(0, min(self.valid_cols(row) - 1, col))
        sx, sy = self.position(row, col)
        return Slot(row, col, sx, sy)
