"""Rules File API Router.

Save and load raw rule text by name. Stored text is not validated; send it
to ``/schedules/validate`` to schedule it.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from taskgraph.api.deps import RulesStoreDep
from taskgraph.schemas.schedule import RulesFileResponse, RulesListResponse, RulesText
from taskgraph.services.rules_store import InvalidRulesNameError, RulesFileNotFoundError

router = APIRouter()


@router.get("", response_model=RulesListResponse, summary="List Rule Files")
async def list_rules(store: RulesStoreDep) -> RulesListResponse:
    """List stored rule file names."""
    return RulesListResponse(names=store.list_names())


@router.get(
    "/{name}",
    response_model=RulesFileResponse,
    summary="Load Rule File",
    responses={
        400: {"description": "Invalid file name"},
        404: {"description": "Rule file not found"},
    },
)
async def load_rules(name: str, store: RulesStoreDep) -> RulesFileResponse:
    """Load a stored rule file."""
    try:
        text = store.load(name)
    except InvalidRulesNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except RulesFileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return RulesFileResponse(name=name, text=text)


@router.put(
    "/{name}",
    response_model=RulesFileResponse,
    summary="Save Rule File",
    responses={400: {"description": "Invalid file name"}},
)
async def save_rules(name: str, body: RulesText, store: RulesStoreDep) -> RulesFileResponse:
    """Create or overwrite a stored rule file."""
    try:
        store.save(name, body.text)
    except InvalidRulesNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return RulesFileResponse(name=name, text=body.text)
