from __future__ import annotations

import random
from typing import List, Sequence

from .entities import Bubble, Color
from .geometry import GridGeometry


def pick_color(palette: Sequence[Color], rng: random.Random) -> Color:
    """Uniform pick from the palette."""
    return palette[rng.randrange(len(palette))]


def deal_bubbles(geometry: GridGeometry, rng: random.Random) -> List[Bubble]:
    """Fills the top rows of the board with randomly colored bubbles."""
    cfg = geometry.config
    bubbles: List[Bubble] = []
    for row in range(cfg.initial_rows):
        for col in range(min(geometry.valid_cols(row), cfg.initial_cols_cap)):
            x, y = geometry.position(row, col)
            if x >= cfg.initial_max_x:
                continue
            bubbles.append(Bubble(
                id=f"{row}-{col}",
                row=row,
                col=col,
                x=x,
                y=y,
                color=pick_color(cfg.palette, rng),
                radius=cfg.bubble_radius,
            ))
    return bubbles
