"""Dependency scheduling package.

Components:
- RuleParser: raw ``A -> B`` text to ordered dependency pairs
- DependencyGraph: node store, topological order, cycle path search
- Layout helpers: execution levels and circular node placement
- ScheduleDriver: validate action plus step-by-step replay
- Exceptions: CycleDetectedError and friends

Example:
    >>> from taskgraph.services.schedule import ScheduleDriver
    >>> outcome = ScheduleDriver().validate("Fetch -> Build\\nBuild -> Test")
    >>> outcome.execution_order
    ['Fetch', 'Build', 'Test']
"""

from taskgraph.services.schedule.driver import (
    NodeView,
    ScheduleDriver,
    ScheduleOutcome,
    ScheduleStatus,
    StepState,
)
from taskgraph.services.schedule.exceptions import (
    CycleDetectedError,
    ScheduleError,
    ScheduleNotReadyError,
)
from taskgraph.services.schedule.graph import DependencyGraph, TaskNode
from taskgraph.services.schedule.layout import Point, circular_layout, execution_levels
from taskgraph.services.schedule.parser import RuleParser, parse_rules

__all__ = [
    # Parsing
    "RuleParser",
    "parse_rules",
    # Graph
    "DependencyGraph",
    "TaskNode",
    # Layout
    "Point",
    "circular_layout",
    "execution_levels",
    # Driver
    "NodeView",
    "ScheduleDriver",
    "ScheduleOutcome",
    "ScheduleStatus",
    "StepState",
    # Exceptions
    "CycleDetectedError",
    "ScheduleError",
    "ScheduleNotReadyError",
]
