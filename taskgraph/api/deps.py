"""API dependencies.

The service keeps one process-wide schedule driver. Every route touching it
goes through ``ScheduleSession`` and holds its ``asyncio.Lock`` for the
whole validate/step call.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import Depends

from taskgraph.core.config import settings
from taskgraph.services.rules_store import RulesStore
from taskgraph.services.schedule import ScheduleDriver


class DriverSession:
    """A schedule driver paired with the lock that serialises access to it."""

    def __init__(self, driver: ScheduleDriver | None = None) -> None:
        self.driver = driver or ScheduleDriver()
        self.lock = asyncio.Lock()

    async def __aenter__(self) -> ScheduleDriver:
        await self.lock.acquire()
        return self.driver

    async def __aexit__(self, *args: object) -> None:
        self.lock.release()


_driver_session = DriverSession()


def get_driver_session() -> DriverSession:
    """Return the process-wide driver session."""
    return _driver_session


ScheduleSession = Annotated[DriverSession, Depends(get_driver_session)]
"""Type alias for driver session dependency injection.

Usage:
    @router.post("/validate")
    async def validate(session: ScheduleSession):
        async with session as driver:
            return driver.validate(text)
"""


def get_rules_store() -> RulesStore:
    """Provide a rules store rooted at ``settings.RULES_DIR``."""
    return RulesStore(settings.RULES_DIR)


RulesStoreDep = Annotated[RulesStore, Depends(get_rules_store)]


__all__ = [
    "DriverSession",
    "RulesStoreDep",
    "ScheduleSession",
    "get_driver_session",
    "get_rules_store",
]
