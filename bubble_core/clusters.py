from __future__ import annotations

import math
from typing import Iterable, List, Set

from .config import DEFAULT_CONFIG, GameConfig
from .entities import Bubble


def are_adjacent(a: Bubble, b: Bubble, threshold: float) -> bool:
    return math.hypot(a.x - b.x, a.y - b.y) <= threshold


def connected_same_color(
    origin: Bubble,
    bubbles: Iterable[Bubble],
    config: GameConfig = DEFAULT_CONFIG,
) -> Set[Bubble]:
    """
    Returns the maximal same-color component reachable from origin.
    Flood fill over an explicit work-list, so the board size never touches the
    recursion limit. The origin is always part of its own component.
    """
    threshold = config.adjacency_threshold
    candidates = [b for b in bubbles if b.color == origin.color and b.id != origin.id]
    visited: Set[str] = {origin.id}
    component: Set[Bubble] = {origin}
    frontier: List[Bubble] = [origin]
    while frontier:
        current = frontier.pop()
        for other in candidates:
            if other.id in visited:
                continue
            if are_adjacent(current, other, threshold):
                visited.add(other.id)
                component.add(other)
                frontier.append(other)
    return component


def cluster_points(count: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Points for popping `count` bubbles: a flat rate plus a bonus per bubble beyond the minimum."""
    extra = max(0, count - config.min_cluster)
    return count * config.points_per_bubble + extra * config.bonus_per_extra


def should_pop(component: Set[Bubble], config: GameConfig = DEFAULT_CONFIG) -> bool:
    return len(component) >= config.min_cluster
