from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Set, Tuple, Union

from .entities import Bubble, Color, Projectile, Slot
from .geometry import GridGeometry


@dataclass(frozen=True)
class Continue:
    projectile: Projectile


@dataclass(frozen=True)
class Place:
    slot: Slot
    color: Color


@dataclass(frozen=True)
class Discard:
    """The shot made contact but its snap slot is taken; it attaches to nothing."""
    slot: Slot


@dataclass(frozen=True)
class MissBottom:
    pass


Outcome = Union[Continue, Place, Discard, MissBottom]


def collides(proj: Projectile, bubble: Bubble, tolerance: float) -> bool:
    return math.hypot(proj.x - bubble.x, proj.y - bubble.y) <= proj.radius + bubble.radius - tolerance


def bounce_walls(proj: Projectile, width: float) -> Projectile:
    """Reflects off the side walls: flips vx and clamps x into [r, width - r]."""
    lo = proj.radius
    hi = width - proj.radius
    if proj.x <= lo or proj.x >= hi:
        return replace(proj, vx=-proj.vx, x=max(lo, min(hi, proj.x)))
    return proj


def _resolve_contact(slot: Slot, color: Color, occupied: Set[Tuple[int, int]]) -> Outcome:
    if (slot.row, slot.col) in occupied:
        return Discard(slot)
    return Place(slot, color)


def advance(
    proj: Projectile,
    bubbles: Iterable[Bubble],
    geometry: GridGeometry,
    occupied: Optional[Set[Tuple[int, int]]] = None,
) -> Outcome:
    """Moves the projectile one tick and reports how the shot resolves."""
    cfg = geometry.config
    bubbles = list(bubbles)
    if occupied is None:
        occupied = {b.slot for b in bubbles}

    nxt = bounce_walls(proj.moved(), geometry.width)

    # Ceiling: snap into the top row.
    if nxt.y <= nxt.radius + cfg.top_margin:
        slot = geometry.nearest_slot(nxt.x, geometry.top_y)
        return _resolve_contact(slot, proj.color, occupied)

    for bubble in bubbles:
        if collides(nxt, bubble, cfg.overlap_tolerance):
            slot = geometry.nearest_slot(nxt.x, nxt.y)
            return _resolve_contact(slot, proj.color, occupied)

    if nxt.y >= geometry.height - nxt.radius - cfg.bottom_margin:
        return MissBottom()

    return Continue(nxt)
