"""Pydantic schemas for schedule validation and step replay.

Error outcomes (cycles, empty rule sets) are regular 200 responses told
apart by ``status``; only misuse of the step endpoints maps to HTTP errors.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from taskgraph.core.config import settings
from taskgraph.schemas.base import BaseSchema
from taskgraph.services.schedule.driver import (
    NodeView,
    ScheduleOutcome,
    ScheduleStatus,
    StepState,
)

# =============================================================================
# Request Schemas
# =============================================================================


class RulesText(BaseSchema):
    """Raw dependency rule text, one ``Name -> Name`` rule per line."""

    # Rule text is stored verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    text: str = Field(
        ...,
        max_length=settings.MAX_RULES_CHARS,
        description="Dependency rules, one 'Source -> Target' per line",
        examples=["# build\nFetch -> Compile\nCompile -> Test"],
    )


# =============================================================================
# Schedule Result Schemas
# =============================================================================


class NodeResponse(BaseSchema):
    """Single task with the data needed to draw it."""

    name: str = Field(..., description="Task name as first written")
    in_degree: int = Field(..., ge=0, description="Number of incoming edges")
    outgoing: list[str] = Field(
        default_factory=list,
        description="Tasks that must run after this one",
    )
    level: int | None = Field(
        default=None,
        ge=0,
        description="Execution level (0-based); null when the graph has a cycle",
    )
    x: int = Field(..., description="Node X coordinate for visualization")
    y: int = Field(..., description="Node Y coordinate for visualization")

    @classmethod
    def from_view(cls, view: NodeView) -> NodeResponse:
        return cls(
            name=view.name,
            in_degree=view.in_degree,
            outgoing=view.outgoing,
            level=view.level,
            x=view.position.x,
            y=view.position.y,
        )


class ScheduleResult(BaseSchema):
    """Result of validating a rule set."""

    status: ScheduleStatus = Field(..., description="valid, cycle or empty")
    message: str = Field(..., description="Human-readable status message")
    execution_order: list[str] = Field(
        default_factory=list,
        description="One valid execution order (empty unless status is valid)",
    )
    cycle_path: list[str] = Field(
        default_factory=list,
        description="Tasks around one cycle, first repeated last (cycle only)",
    )
    nodes: list[NodeResponse] = Field(
        default_factory=list,
        description="All tasks in first-appearance order",
    )
    total_nodes: int = Field(default=0, ge=0, description="Number of tasks")

    @classmethod
    def from_outcome(cls, outcome: ScheduleOutcome) -> ScheduleResult:
        return cls(
            status=outcome.status,
            message=outcome.message,
            execution_order=outcome.execution_order,
            cycle_path=outcome.cycle_path,
            nodes=[NodeResponse.from_view(view) for view in outcome.nodes],
            total_nodes=len(outcome.nodes),
        )


class StepStateResponse(BaseSchema):
    """Replay cursor state."""

    cursor: int = Field(..., ge=-1, description="Current index, -1 before the first step")
    current: str | None = Field(default=None, description="Task at the cursor")
    executed: list[str] = Field(default_factory=list, description="Tasks done so far")
    pending: list[str] = Field(default_factory=list, description="Tasks still to run")
    execution_order: list[str] = Field(default_factory=list)
    advanced: bool = Field(default=False, description="Whether the cursor just moved")
    completed: bool = Field(default=False, description="Whether a step past the final task was requested")

    @classmethod
    def from_state(cls, state: StepState) -> StepStateResponse:
        return cls(
            cursor=state.cursor,
            current=state.current,
            executed=state.executed,
            pending=state.pending,
            execution_order=state.execution_order,
            advanced=state.advanced,
            completed=state.completed,
        )


# =============================================================================
# Rules File Schemas
# =============================================================================


class RulesFileResponse(BaseSchema):
    """Stored rule file."""

    model_config = ConfigDict(str_strip_whitespace=False)

    name: str
    text: str


class RulesListResponse(BaseSchema):
    """Names of stored rule files."""

    names: list[str] = Field(default_factory=list)


__all__ = [
    "NodeResponse",
    "RulesFileResponse",
    "RulesListResponse",
    "RulesText",
    "ScheduleResult",
    "StepStateResponse",
]
