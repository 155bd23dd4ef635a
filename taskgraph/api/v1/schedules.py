"""Schedule API Router.

Validate dependency rule text and replay the resulting execution order one
task at a time.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from taskgraph.api.deps import ScheduleSession
from taskgraph.schemas.schedule import RulesText, ScheduleResult, StepStateResponse
from taskgraph.services.schedule import ScheduleNotReadyError

router = APIRouter()


@router.post(
    "/validate",
    response_model=ScheduleResult,
    summary="Validate Dependency Rules",
    description="Parse rule text, rebuild the graph and compute an execution order.",
    responses={
        200: {"description": "Validation completed (see status for the outcome)"},
        422: {"description": "Request body is missing or too large"},
    },
)
async def validate_rules(body: RulesText, session: ScheduleSession) -> ScheduleResult:
    """Validate a rule set.

    Returns status ``valid`` with an execution order, ``cycle`` with one
    cycle path, or ``empty`` when no well-formed rule was found. A valid
    result rewinds the replay cursor.
    """
    async with session as driver:
        outcome = driver.validate(body.text)
    return ScheduleResult.from_outcome(outcome)


@router.post(
    "/step",
    response_model=StepStateResponse,
    summary="Advance Replay",
    responses={409: {"description": "No feasible schedule has been validated"}},
)
async def step(session: ScheduleSession) -> StepStateResponse:
    """Move the replay cursor to the next task.

    At the final task the cursor stays put, ``advanced`` is false and
    ``completed`` turns true, signalling that execution is complete.
    """
    try:
        async with session as driver:
            state = driver.advance()
    except ScheduleNotReadyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return StepStateResponse.from_state(state)


@router.post(
    "/reset",
    response_model=StepStateResponse,
    summary="Rewind Replay",
    responses={409: {"description": "No feasible schedule has been validated"}},
)
async def reset(session: ScheduleSession) -> StepStateResponse:
    """Rewind the replay cursor to "not started"."""
    try:
        async with session as driver:
            state = driver.reset()
    except ScheduleNotReadyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return StepStateResponse.from_state(state)


@router.get(
    "/state",
    response_model=StepStateResponse,
    summary="Get Replay State",
)
async def get_state(session: ScheduleSession) -> StepStateResponse:
    """Current replay cursor; cursor -1 and an empty order when idle."""
    async with session as driver:
        state = driver.state()
    return StepStateResponse.from_state(state)
