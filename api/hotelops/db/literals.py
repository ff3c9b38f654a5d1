"""Inline SQL literal encoding for transports that cannot bind parameters.

The proxy backend ships a single SQL string to a remote procedure, so every
``$n`` placeholder has to be replaced by a literal before the call. The
functions here are pure and shared by both executor variants: placeholder
checking runs in direct mode too, so a statement fails the same way no matter
which backend is configured.
"""

import json
import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence
from uuid import UUID

from .errors import EncodingError, MissingParameterError, UnsupportedTypeError


PLACEHOLDER_PATTERN = re.compile(r"\$(\d+)")


def quote_string(value: str) -> str:
    """Quote a string as a SQL literal, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


def _number_literal(value: Any) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError("Cannot serialize non-finite number parameter.")
        # Subclasses (numpy scalars, IntEnum) may override repr/str
        text = float.__repr__(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise EncodingError("Cannot serialize non-finite number parameter.")
        text = Decimal.__str__(value)
    else:
        text = int.__repr__(value)

    # "x-$1" with -5 would otherwise read as "x--5", a line comment
    if text.startswith("-"):
        return f"({text})"
    return text


def to_sql_literal(value: Any) -> str:
    """Encode a parameter value as an injection-safe SQL literal.

    Args:
        value: None, bool, int, float, Decimal, str, UUID, datetime, date,
            bytes-like, list/tuple of those, or a dict (sent as JSONB)

    Returns:
        SQL text representing the value

    Raises:
        EncodingError: If a number is NaN/infinite or a dict is not JSON-serializable
        UnsupportedTypeError: If the value has any other type
    """
    if value is None:
        return "NULL"

    # bool is a subclass of int
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"

    if isinstance(value, (int, float, Decimal)):
        return _number_literal(value)

    if isinstance(value, str):
        return quote_string(value)

    if isinstance(value, UUID):
        return quote_string(str(value))

    # datetime is a subclass of date
    if isinstance(value, (datetime, date)):
        return quote_string(value.isoformat())

    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"'\\x{bytes(value).hex()}'::bytea"

    if isinstance(value, (list, tuple)):
        if not value:
            return "ARRAY[]"
        return "ARRAY[" + ", ".join(to_sql_literal(item) for item in value) + "]"

    if isinstance(value, Mapping):
        try:
            payload = json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Cannot serialize JSON parameter: {e}")
        return f"{quote_string(payload)}::jsonb"

    raise UnsupportedTypeError(value)


def check_placeholders(statement: str, params: Sequence[Any]) -> None:
    """Ensure every ``$n`` in the statement has a parameter.

    Raises:
        MissingParameterError: On the first placeholder without a parameter
    """
    for match in PLACEHOLDER_PATTERN.finditer(statement):
        index = int(match.group(1))
        if index < 1 or index > len(params):
            raise MissingParameterError(match.group(0), len(params))


def interpolate_sql(statement: str, params: Sequence[Any]) -> str:
    """Replace each ``$n`` placeholder with the literal of ``params[n-1]``.

    Raises:
        MissingParameterError: If a placeholder has no parameter
        EncodingError: If a parameter cannot be encoded
    """
    check_placeholders(statement, params)

    def _replace(match: "re.Match[str]") -> str:
        return to_sql_literal(params[int(match.group(1)) - 1])

    return PLACEHOLDER_PATTERN.sub(_replace, statement)
