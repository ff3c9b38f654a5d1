"""RFC 8288 Link headers for paginated responses."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    next_cursor: Optional[str] = None,
) -> Optional[str]:
    """Create a Link header pointing at the next page.

    Args:
        base_url: Base URL for the resource, without query string
        params: Query parameters to carry over (the cursor is replaced)
        next_cursor: Cursor for next page

    Returns:
        Link header value or None if there is no next page
    """
    if not next_cursor:
        return None

    next_params = {k: v for k, v in params.items() if k != "cursor" and v is not None}
    next_params["cursor"] = next_cursor
    return f'<{base_url}?{urlencode(next_params, doseq=True)}>; rel="next"'
