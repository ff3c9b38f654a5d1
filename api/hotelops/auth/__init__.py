"""Authentication collaborator: bearer JWT verification and tenant context."""

from .tokens import AuthContext, create_access_token, decode_access_token
from .middleware import AuthenticationMiddleware, extract_bearer_token
from .dependencies import get_auth_context, CurrentAuth

__all__ = [
    "AuthContext",
    "create_access_token",
    "decode_access_token",
    "AuthenticationMiddleware",
    "extract_bearer_token",
    "get_auth_context",
    "CurrentAuth"
]
