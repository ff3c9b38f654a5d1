"""Opaque cursor tokens for keyset pagination."""

import base64
import binascii
import json
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError


CursorValue = Union[StrictStr, StrictInt, StrictFloat, None]


class CursorToken(BaseModel):
    """Last seen sort value and row id of the previous page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    value: CursorValue = Field(..., description="Sort value of the last row")
    id: StrictStr = Field(..., description="Id of the last row, the tie-breaker")


def encode_cursor(token: CursorToken) -> str:
    """Encode a cursor token as base64url JSON without padding.

    The payload layout ``{"value":...,"id":...}`` is the wire format held
    by clients and must not change.
    """
    payload = json.dumps(
        {"value": token.value, "id": token.id},
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    encoded = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number in cursor: {name}")


def decode_cursor(cursor: Optional[str]) -> Optional[CursorToken]:
    """Decode a cursor string.

    Never raises: a missing, tampered or stale cursor yields None so the
    listing restarts from the first page.
    """
    if not cursor or not isinstance(cursor, str):
        return None

    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
        if not isinstance(data, dict) or "value" not in data:
            return None
        token = CursorToken.model_validate(data)
        # Overflowing literals such as 1e400 parse to inf
        if isinstance(token.value, float) and not math.isfinite(token.value):
            return None
        return token
    except (ValueError, TypeError, binascii.Error, ValidationError):
        return None


def cursor_value(value: Any) -> Union[str, int, float, None]:
    """Normalize a row's sort value into something a cursor can carry."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    return str(value)


def make_cursor(sort_value: Any, row_id: Any) -> str:
    """Build the encoded cursor for a row's sort value and id."""
    return encode_cursor(CursorToken(value=cursor_value(sort_value), id=str(row_id)))
