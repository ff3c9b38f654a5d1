"""Problem Details (RFC 9457) responses for the Hotel Ops API."""

from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


PROBLEM_CONTENT_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="A URI reference that identifies the problem type")
    title: str = Field(description="A short, human-readable summary of the problem type")
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(default=None, description="A human-readable explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="A URI reference that identifies the specific occurrence")
    code: Optional[str] = Field(default=None, description="Stable machine-readable error code")

    # Allow additional properties for extensions
    model_config = {"extra": "allow"}


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: str = "about:blank",
    instance: Optional[str] = None,
    request: Optional[Request] = None,
    code: Optional[str] = None,
    **extensions: Any
) -> JSONResponse:
    """Create a Problem Details response."""
    if instance is None and request is not None:
        instance = str(request.url.path)

    problem = ProblemDetail(
        type=type_uri,
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        code=code,
        **extensions
    )

    return JSONResponse(
        status_code=status,
        content=problem.model_dump(mode="json", exclude_none=True),
        media_type=PROBLEM_CONTENT_TYPE,
    )


class ProblemDetailException(Exception):
    """Base exception rendered as a Problem Details response.

    Subclasses fix ``status``, ``title`` and ``code``; instances carry the
    occurrence-specific detail and any extension members.
    """

    status: int = 500
    title: str = "Internal Server Error"
    code: str = "INTERNAL_SERVER_ERROR"
    default_detail: Optional[str] = None

    def __init__(
        self,
        detail: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        self.detail = detail if detail is not None else self.default_detail
        self.type_uri = type_uri
        self.instance = instance
        self.extensions = extensions
        super().__init__(self.detail or self.title)

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        """Convert to JSONResponse with Problem Details format."""
        return create_problem_response(
            status=self.status,
            title=self.title,
            detail=self.detail,
            type_uri=self.type_uri,
            instance=self.instance,
            request=request,
            code=self.code,
            **self.extensions
        )


class UnauthorizedError(ProblemDetailException):
    """401 Unauthorized error."""

    status = 401
    title = "Unauthorized"
    code = "UNAUTHORIZED"
    default_detail = "Authentication required"


class ForbiddenError(ProblemDetailException):
    """403 Forbidden error."""

    status = 403
    title = "Forbidden"
    code = "FORBIDDEN"
    default_detail = "Access denied"


class ServiceUnavailableError(ProblemDetailException):
    """503 Service Unavailable error."""

    status = 503
    title = "Service Unavailable"
    code = "SERVICE_UNAVAILABLE"
    default_detail = "Service temporarily unavailable"
