"""Schedule driver: validate rule text, then replay the order step by step.

The driver ties the parser and the graph together the way a presentation
layer consumes them:

1. ``validate(text)`` parses and rebuilds the graph, then either stores an
   execution order (``valid``), reports a cycle path (``cycle``), or reports
   that nothing usable was found (``empty``).
2. ``advance()`` moves a cursor through the stored order. The cursor starts
   at -1 (not started) and stops at the last index; asking for more reports
   completion instead of moving.

A driver instance is not safe to share between threads without a lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from taskgraph.core.logging import LogContext, get_logger
from taskgraph.services.schedule.exceptions import (
    CycleDetectedError,
    ScheduleNotReadyError,
)
from taskgraph.services.schedule.graph import DependencyGraph
from taskgraph.services.schedule.layout import (
    Point,
    circular_layout,
    execution_levels,
    level_index,
)
from taskgraph.services.schedule.parser import RuleParser

logger = get_logger(__name__)

NOT_STARTED = -1

EMPTY_MESSAGE = "Error: No valid rules found! Use format 'TaskA -> TaskB'"
VALID_MESSAGE = "Graph valid! Advance to replay the execution order."


class ScheduleStatus(str, Enum):
    """Outcome of a validate action."""

    VALID = "valid"
    CYCLE = "cycle"
    EMPTY = "empty"


@dataclass(frozen=True)
class NodeView:
    """Render-ready snapshot of one task."""

    name: str
    in_degree: int
    outgoing: list[str]
    position: Point
    level: int | None = None


@dataclass
class ScheduleOutcome:
    """Everything a presentation layer needs after a validate action."""

    status: ScheduleStatus
    message: str
    execution_order: list[str] = field(default_factory=list)
    cycle_path: list[str] = field(default_factory=list)
    nodes: list[NodeView] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status is ScheduleStatus.VALID


@dataclass(frozen=True)
class StepState:
    """Position of the replay cursor within the execution order.

    Attributes:
        cursor: Index of the current task, -1 before the first step.
        execution_order: The full order being replayed.
        advanced: Whether the last ``advance`` call moved the cursor.
        completed: True once a step past the final task has been requested.
    """

    cursor: int
    execution_order: list[str]
    advanced: bool = False
    completed: bool = False

    @property
    def current(self) -> str | None:
        if self.cursor == NOT_STARTED:
            return None
        return self.execution_order[self.cursor]

    @property
    def executed(self) -> list[str]:
        return self.execution_order[: self.cursor + 1]

    @property
    def pending(self) -> list[str]:
        return self.execution_order[self.cursor + 1 :]


class ScheduleDriver:
    """Validate dependency rules and replay the resulting execution order.

    Example:
        >>> driver = ScheduleDriver()
        >>> driver.validate("A -> B").status
        <ScheduleStatus.VALID: 'valid'>
        >>> driver.advance().current
        'A'
    """

    def __init__(
        self,
        parser: RuleParser | None = None,
        graph: DependencyGraph | None = None,
    ) -> None:
        self.parser = parser or RuleParser()
        self.graph = graph or DependencyGraph()
        self._execution_order: list[str] = []
        self._cursor: int = NOT_STARTED
        self._completed = False

    @property
    def can_step(self) -> bool:
        return bool(self._execution_order)

    @property
    def execution_order(self) -> list[str]:
        return list(self._execution_order)

    def validate(self, raw_text: str) -> ScheduleOutcome:
        """Parse ``raw_text``, rebuild the graph and compute the schedule."""
        with LogContext(logger, action="validate", chars=len(raw_text)):
            return self._validate(raw_text)

    def _validate(self, raw_text: str) -> ScheduleOutcome:
        self.graph.build(self.parser.parse(raw_text))
        self._execution_order = []
        self._cursor = NOT_STARTED
        self._completed = False

        if self.graph.is_empty:
            logger.info(
                "No valid rules found",
                extra={"context": {"status": ScheduleStatus.EMPTY.value}},
            )
            return ScheduleOutcome(status=ScheduleStatus.EMPTY, message=EMPTY_MESSAGE)

        nodes = self._node_views()

        try:
            order = self.graph.topological_order()
        except CycleDetectedError as e:
            error = e.with_path(self.graph.find_cycle_path())
            message = error.message
            if error.cycle_path:
                message += " Cycle: " + "->".join(error.cycle_path)
            logger.info(
                "Schedule is infeasible",
                extra={
                    "context": {
                        "status": ScheduleStatus.CYCLE.value,
                        "cycle_path": error.cycle_path,
                        "nodes": self.graph.node_count,
                    }
                },
            )
            return ScheduleOutcome(
                status=ScheduleStatus.CYCLE,
                message=message,
                cycle_path=error.cycle_path,
                nodes=nodes,
            )

        self._execution_order = order
        logger.info(
            "Schedule validated",
            extra={
                "context": {
                    "status": ScheduleStatus.VALID.value,
                    "nodes": self.graph.node_count,
                    "edges": self.graph.edge_count,
                }
            },
        )
        return ScheduleOutcome(
            status=ScheduleStatus.VALID,
            message=VALID_MESSAGE,
            execution_order=list(order),
            nodes=nodes,
        )

    def advance(self) -> StepState:
        """Move to the next task, or report completion at the end.

        Raises:
            ScheduleNotReadyError: If there is no execution order to replay.
        """
        if not self._execution_order:
            raise ScheduleNotReadyError()

        if self._cursor < len(self._execution_order) - 1:
            self._cursor += 1
            logger.debug(
                "Advanced execution cursor",
                extra={
                    "context": {
                        "cursor": self._cursor,
                        "task": self._execution_order[self._cursor],
                    }
                },
            )
            return self._state(advanced=True)

        self._completed = True
        logger.info("Execution complete", extra={"context": {"cursor": self._cursor}})
        return self._state(advanced=False)

    def reset(self) -> StepState:
        """Rewind the cursor to "not started".

        Raises:
            ScheduleNotReadyError: If there is no execution order to replay.
        """
        if not self._execution_order:
            raise ScheduleNotReadyError()
        self._cursor = NOT_STARTED
        self._completed = False
        return self._state()

    def state(self) -> StepState:
        return self._state()

    def _state(self, advanced: bool = False) -> StepState:
        return StepState(
            cursor=self._cursor,
            execution_order=list(self._execution_order),
            advanced=advanced,
            completed=self._completed,
        )

    def _node_views(self) -> list[NodeView]:
        positions = circular_layout(self.graph)
        levels = level_index(execution_levels(self.graph))
        return [
            NodeView(
                name=node.name,
                in_degree=node.in_degree,
                outgoing=self.graph.get_successors(node.name),
                position=positions[node.name],
                level=levels.get(node.name),
            )
            for node in self.graph
        ]


__all__ = [
    "EMPTY_MESSAGE",
    "NOT_STARTED",
    "VALID_MESSAGE",
    "NodeView",
    "ScheduleDriver",
    "ScheduleOutcome",
    "ScheduleStatus",
    "StepState",
]
