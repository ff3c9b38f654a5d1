"""FastAPI dependencies for the authenticated tenant context."""

from typing import Annotated

from fastapi import Depends, Request

from ..errors.problem_details import UnauthorizedError
from .tokens import AuthContext


async def get_auth_context(request: Request) -> AuthContext:
    """Get the AuthContext injected by the authentication middleware.

    Raises:
        UnauthorizedError: If the request was not authenticated
    """
    context = getattr(request.state, "auth", None)
    if context is None:
        raise UnauthorizedError("Missing auth context.")
    return context


CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
