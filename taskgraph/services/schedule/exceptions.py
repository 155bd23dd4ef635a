"""Schedule engine exceptions.

Malformed rule lines and empty graphs are deliberately absent from this
module: the parser filters the former and the driver reports the latter as
an ``empty`` outcome.
"""

from __future__ import annotations

from typing import Any

from taskgraph.core.exceptions import AppError

CYCLE_DETECTED_MESSAGE = "Cycle Detected! The plan is impossible."


class ScheduleError(AppError):
    """Base exception for schedule engine errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code for API responses.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details)


class CycleDetectedError(ScheduleError):
    """Raised when no total execution order exists.

    The topological sort only knows that some nodes were never released, so
    ``cycle_path`` is empty unless the caller attaches one found with
    ``DependencyGraph.find_cycle_path``.

    Attributes:
        cycle_path: Task names forming the loop, first name repeated last.
        unresolved: Number of tasks the sort could not place.
    """

    def __init__(
        self,
        cycle_path: list[str] | None = None,
        unresolved: int | None = None,
    ) -> None:
        self.cycle_path = list(cycle_path or [])
        self.unresolved = unresolved
        details: dict[str, Any] = {"cycle_path": self.cycle_path}
        if unresolved is not None:
            details["unresolved"] = unresolved
        super().__init__(
            message=CYCLE_DETECTED_MESSAGE,
            error_code="CYCLE_DETECTED",
            details=details,
        )

    def with_path(self, cycle_path: list[str]) -> CycleDetectedError:
        """Return a copy of this error carrying ``cycle_path``."""
        return CycleDetectedError(cycle_path=cycle_path, unresolved=self.unresolved)


class ScheduleNotReadyError(ScheduleError):
    """Raised when stepping is requested before a successful validation."""

    def __init__(self) -> None:
        super().__init__(
            message="No execution order available. Validate a feasible rule set first.",
            error_code="SCHEDULE_NOT_READY",
        )


__all__ = [
    "CYCLE_DETECTED_MESSAGE",
    "CycleDetectedError",
    "ScheduleError",
    "ScheduleNotReadyError",
]
