"""Authentication middleware for Bearer token processing."""

import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import get_settings
from ..db.errors import DataAccessError
from ..errors.problem_details import ForbiddenError, ProblemDetailException, ServiceUnavailableError, UnauthorizedError
from .tokens import AuthContext, decode_access_token


logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
PROPERTY_HEADER = "X-Property-Id"

PROPERTY_ACCESS_QUERY = """
    SELECT p.id
    FROM properties p
    JOIN team_members tm
      ON tm.account_id = p.account_id
      AND tm.user_id = $1
      AND tm.status = 'accepted'
      AND tm.deleted_at IS NULL
    WHERE p.id = $2
      AND p.deleted_at IS NULL
    LIMIT 1
"""


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Extract bearer token from Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("Missing Bearer token.")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError("Missing Bearer token.")

    return token


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware placing the caller's AuthContext on ``request.state.auth``.

    The token's property can be switched per request with the
    ``X-Property-Id`` header when the user is an accepted team member of
    that property's account.
    """

    def __init__(self, app, skip_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.skip_paths = skip_paths or [
            "/health", "/ready", "/live", "/", "/docs", "/redoc", "/openapi.json"
        ]

    async def dispatch(self, request: Request, call_next):
        """Process the request through authentication middleware."""
        if request.url.path in self.skip_paths:
            return await call_next(request)

        try:
            request.state.auth = await self._authenticate_request(request)
        except ProblemDetailException as e:
            logger.warning(f"AuthMiddleware: Authentication failed for {request.url.path}: {e.detail}")
            return e.to_response(request)

        return await call_next(request)

    async def _authenticate_request(self, request: Request) -> AuthContext:
        token = extract_bearer_token(request.headers.get("Authorization"))
        context = decode_access_token(token, get_settings().jwt_secret)

        requested_property = request.headers.get(PROPERTY_HEADER)
        if requested_property and requested_property != context.property_id:
            if not await self._has_property_access(request, context.user_id, requested_property):
                raise ForbiddenError("No access to requested property.")
            context = context.model_copy(update={"property_id": requested_property})

        logger.debug(f"AuthMiddleware: Authenticated user {context.user_id} for property {context.property_id}")
        return context

    async def _has_property_access(self, request: Request, user_id: str, property_id: str) -> bool:
        executor = request.app.state.executor
        try:
            row = await executor.execute_one(PROPERTY_ACCESS_QUERY, [user_id, property_id])
        except DataAccessError as e:
            logger.error(f"AuthMiddleware: Property access check failed: {e}")
            raise ServiceUnavailableError("Unable to verify property access")
        return row is not None
