"""Dependency graph over named tasks.

Nodes live in a flat store keyed by the lower-cased task name, and edges
are lists of those keys, so rebuilding the graph is a single ``clear()``.
An edge ``source -> target`` means source must execute before target.

Time Complexity:
- build: O(V + E)
- Topological order: O(V + E)
- Cycle path search: O(V + E)

Space Complexity: O(V + E)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from taskgraph.core.logging import get_logger
from taskgraph.services.schedule.exceptions import CycleDetectedError

logger = get_logger(__name__)


def node_key(name: str) -> str:
    """Lookup key for a task name; names differing only in case collide."""
    return name.lower()


@dataclass
class TaskNode:
    """One named task.

    Attributes:
        name: Display name, in the casing first seen during build.
        outgoing: Keys of dependent tasks, one entry per edge (duplicates kept).
        in_degree: Number of incoming edges. Only ``build`` changes it.
    """

    name: str
    outgoing: list[str] = field(default_factory=list)
    in_degree: int = 0

    @property
    def key(self) -> str:
        return node_key(self.name)


class DependencyGraph:
    """Directed graph of tasks built from parsed dependency pairs.

    The graph is meant to be long lived and rebuilt per user action; each
    ``build`` discards everything from the previous one.

    Example:
        >>> graph = DependencyGraph()
        >>> graph.build([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        >>> graph.topological_order()
        ['A', 'B', 'C', 'D']
    """

    __slots__ = ("_edge_count", "_nodes")

    def __init__(self) -> None:
        self._nodes: dict[str, TaskNode] = {}
        self._edge_count: int = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def build(self, pairs: Iterable[tuple[str, str]]) -> None:
        """Replace the graph with the nodes and edges described by ``pairs``.

        Nodes are created the first time their name appears, in
        first-appearance order. Duplicate pairs add duplicate edges.
        """
        self._nodes.clear()
        self._edge_count = 0

        for source, target in pairs:
            source_node = self._ensure_node(source)
            target_node = self._ensure_node(target)
            source_node.outgoing.append(target_node.key)
            target_node.in_degree += 1
            self._edge_count += 1

        logger.debug(
            "Dependency graph built",
            extra={"context": {"nodes": len(self._nodes), "edges": self._edge_count}},
        )

    def _ensure_node(self, name: str) -> TaskNode:
        key = node_key(name)
        node = self._nodes.get(key)
        if node is None:
            node = TaskNode(name=name)
            self._nodes[key] = node
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> list[TaskNode]:
        """All nodes in creation order."""
        return list(self._nodes.values())

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def get_node(self, name: str) -> TaskNode | None:
        """Case-insensitive node lookup. Returns None when absent."""
        return self._nodes.get(node_key(name))

    def get_successors(self, name: str) -> list[str]:
        """Display names of the tasks that depend on ``name``.

        One entry per edge, so duplicate edges show up twice.
        """
        node = self.get_node(name)
        if node is None:
            return []
        return [self._nodes[key].name for key in node.outgoing]

    def get_in_degree(self, name: str) -> int:
        node = self.get_node(name)
        return node.in_degree if node is not None else 0

    def has_edge(self, source: str, target: str) -> bool:
        node = self.get_node(source)
        return node is not None and node_key(target) in node.outgoing

    def edges(self) -> Iterator[tuple[str, str]]:
        """Yield every edge as a ``(source, target)`` pair of display names."""
        for node in self._nodes.values():
            for key in node.outgoing:
                yield node.name, self._nodes[key].name

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------

    def topological_order(self) -> list[str]:
        """Compute one valid execution order with Kahn's algorithm.

        The queue is seeded in node creation order and processed FIFO, so
        the same build always yields the same order. Stored in-degrees are
        left untouched; the sort works on a copy.

        Returns:
            Every task name, each appearing after all of its prerequisites.

        Raises:
            CycleDetectedError: If some tasks can never be released. No
                partial order is returned.
        """
        remaining: dict[str, int] = {
            key: node.in_degree for key, node in self._nodes.items()
        }
        queue: deque[str] = deque(key for key, degree in remaining.items() if degree == 0)
        order: list[str] = []

        while queue:
            key = queue.popleft()
            node = self._nodes[key]
            order.append(node.name)

            for successor in node.outgoing:
                remaining[successor] -= 1
                if remaining[successor] == 0:
                    queue.append(successor)

        if len(order) != len(self._nodes):
            unresolved = len(self._nodes) - len(order)
            logger.info(
                "Topological sort stalled on a cycle",
                extra={"context": {"nodes": len(self._nodes), "unresolved": unresolved}},
            )
            raise CycleDetectedError(unresolved=unresolved)

        return order

    def find_cycle_path(self) -> list[str]:
        """Find one cycle with an iterative depth-first search.

        Roots are tried in node creation order. The search stops at the
        first back edge it meets.

        Returns:
            Task names around the loop with the first name repeated at the
            end (``[X, X]`` for a self-loop), or an empty list when the graph
            is acyclic.
        """
        visited: set[str] = set()
        on_stack: set[str] = set()
        path: list[str] = []

        for root in self._nodes:
            if root in visited:
                continue

            # Frames are [node key, index of the next outgoing edge to try]
            stack: list[list] = [[root, 0]]
            visited.add(root)
            on_stack.add(root)
            path.append(root)

            while stack:
                frame = stack[-1]
                key, position = frame
                outgoing = self._nodes[key].outgoing

                if position == len(outgoing):
                    stack.pop()
                    on_stack.discard(key)
                    path.pop()
                    continue

                frame[1] = position + 1
                neighbor = outgoing[position]

                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    path.append(neighbor)
                    stack.append([neighbor, 0])
                elif neighbor in on_stack:
                    loop = path[path.index(neighbor):]
                    loop.append(neighbor)
                    return [self._nodes[k].name for k in loop]

        return []

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and node_key(name) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TaskNode]:
        return iter(self._nodes.values())

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={self.node_count}, edges={self.edge_count})"


__all__ = [
    "DependencyGraph",
    "TaskNode",
    "node_key",
]
