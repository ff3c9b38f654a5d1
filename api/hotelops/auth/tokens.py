"""Access tokens and the per-request tenant context."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Literal, Tuple

import jwt
from pydantic import BaseModel, Field, ValidationError

from ..errors.problem_details import UnauthorizedError


JWT_ALGORITHM = "HS256"

Role = Literal["owner", "admin", "manager", "staff", "viewer"]


class AuthContext(BaseModel):
    """Identity and tenant scope of an authenticated request."""

    user_id: str = Field(description="Authenticated user id (token subject)")
    account_id: str = Field(description="Account the user belongs to")
    property_id: str = Field(description="Property the request is scoped to")
    role: Role = Field(description="Role of the user within the account")


def create_access_token(context: AuthContext, secret: str, ttl_hours: int = 24) -> Tuple[str, datetime]:
    """Sign an access token carrying the auth context claims.

    Returns:
        Tuple of (token, expires_at)
    """
    expires_at = datetime.now(timezone.utc) + timedelta(hours=ttl_hours)
    payload: Dict[str, Any] = {
        "sub": context.user_id,
        "account_id": context.account_id,
        "property_id": context.property_id,
        "role": context.role,
        "exp": expires_at,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM), expires_at


def decode_access_token(token: str, secret: str) -> AuthContext:
    """Verify a bearer token and return its auth context.

    Raises:
        UnauthorizedError: If the token is invalid, expired or missing claims
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid or expired token.")

    try:
        return AuthContext(
            user_id=claims.get("sub"),
            account_id=claims.get("account_id"),
            property_id=claims.get("property_id"),
            role=claims.get("role"),
        )
    except ValidationError:
        raise UnauthorizedError("Token is missing required claims.")
