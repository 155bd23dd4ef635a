"""Pydantic request/response schemas for the HTTP API."""

from taskgraph.schemas.base import BaseSchema
from taskgraph.schemas.schedule import (
    NodeResponse,
    RulesFileResponse,
    RulesListResponse,
    RulesText,
    ScheduleResult,
    StepStateResponse,
)

__all__ = [
    "BaseSchema",
    "NodeResponse",
    "RulesFileResponse",
    "RulesListResponse",
    "RulesText",
    "ScheduleResult",
    "StepStateResponse",
]
