"""Executor lifecycle and FastAPI dependency wiring."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from ..config import Settings
from .executor import QueryExecutor, create_executor


logger = logging.getLogger(__name__)


async def open_executor(app: FastAPI, settings: Settings) -> QueryExecutor:
    """Create the configured executor once and attach it to the application."""
    executor = create_executor(settings)
    await executor.initialize()
    app.state.executor = executor
    return executor


async def close_executor(app: FastAPI) -> None:
    """Release the executor attached to the application, if any."""
    executor = getattr(app.state, "executor", None)
    if executor is not None:
        await executor.close()
        app.state.executor = None


def get_executor(request: Request) -> QueryExecutor:
    """Dependency returning the process-wide executor."""
    return request.app.state.executor


Executor = Annotated[QueryExecutor, Depends(get_executor)]
