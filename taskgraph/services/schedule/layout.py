"""Display helpers for a built dependency graph.

Two views are provided:
- execution levels: groups of tasks whose prerequisites all sit in earlier
  groups (tasks in one level could run side by side);
- circular layout: tasks spaced evenly on a circle fitted into a panel.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

from taskgraph.core.config import settings
from taskgraph.services.schedule.graph import DependencyGraph


@dataclass(frozen=True)
class Point:
    """Top-left corner of a node's box in panel coordinates."""

    x: int
    y: int


def execution_levels(graph: DependencyGraph) -> list[list[str]]:
    """Group tasks into execution levels with level-based Kahn's algorithm.

    Args:
        graph: A built dependency graph.

    Returns:
        Levels of task names, earliest first. Empty if the graph contains a
        cycle (or has no nodes).

    Example:
        >>> graph.build([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        >>> execution_levels(graph)
        [['A'], ['B', 'C'], ['D']]
    """
    remaining = {node.key: node.in_degree for node in graph}
    names = {node.key: node.name for node in graph}
    outgoing = {node.key: node.outgoing for node in graph}

    queue: deque[str] = deque(key for key, degree in remaining.items() if degree == 0)
    levels: list[list[str]] = []
    placed = 0

    while queue:
        current_level: list[str] = []
        next_queue: deque[str] = deque()

        while queue:
            key = queue.popleft()
            current_level.append(names[key])
            placed += 1

            for successor in outgoing[key]:
                remaining[successor] -= 1
                if remaining[successor] == 0:
                    next_queue.append(successor)

        levels.append(current_level)
        queue = next_queue

    if placed != len(remaining):
        return []
    return levels


def level_index(levels: list[list[str]]) -> dict[str, int]:
    """Map each task name to the index of its execution level."""
    return {name: index for index, level in enumerate(levels) for name in level}


def circular_layout(
    graph: DependencyGraph,
    width: int | None = None,
    height: int | None = None,
    margin: int | None = None,
    min_radius: int | None = None,
    node_size: int | None = None,
) -> dict[str, Point]:
    """Place tasks evenly on a circle centred in a ``width`` x ``height`` panel.

    The radius is ``min(centre_x, centre_y) - margin`` but never below
    ``min_radius``. Nodes go round in creation order starting at angle zero,
    and each point is shifted by half of ``node_size`` so it marks the
    node box's top-left corner. Unset arguments fall back to the
    ``LAYOUT_*`` settings.

    Returns:
        Mapping of task name to its point, in node creation order.
    """
    width = settings.LAYOUT_WIDTH if width is None else width
    height = settings.LAYOUT_HEIGHT if height is None else height
    margin = settings.LAYOUT_MARGIN if margin is None else margin
    min_radius = settings.LAYOUT_MIN_RADIUS if min_radius is None else min_radius
    node_size = settings.LAYOUT_NODE_SIZE if node_size is None else node_size

    centre_x = width // 2
    centre_y = height // 2
    radius = max(min(centre_x, centre_y) - margin, min_radius)
    half = node_size // 2

    count = len(graph)
    points: dict[str, Point] = {}
    for index, node in enumerate(graph):
        angle = 2 * math.pi * index / count
        x = centre_x + int(radius * math.cos(angle))
        y = centre_y + int(radius * math.sin(angle))
        points[node.name] = Point(x - half, y - half)

    return points


__all__ = [
    "Point",
    "circular_layout",
    "execution_levels",
    "level_index",
]
