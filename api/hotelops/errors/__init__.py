"""Error handling module for the Hotel Ops API."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    UnauthorizedError,
    ForbiddenError,
    ServiceUnavailableError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "UnauthorizedError",
    "ForbiddenError",
    "ServiceUnavailableError",
    "create_problem_response",
    "register_exception_handlers"
]
