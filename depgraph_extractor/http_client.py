"""HTTP client utilities with consistent user agent."""

from typing import Optional

from . import __version__

USER_AGENT = f"depgraph-extractor/{__version__}"


def get_default_headers(token: Optional[str] = None, content_type: Optional[str] = None) -> dict:
    """
    Get default HTTP headers with user agent.

    Args:
        token: Optional authentication token to include
        content_type: Optional Content-Type header value (e.g., "application/json")

    Returns:
        Dictionary of HTTP headers
    """
    headers = {"User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if content_type:
        headers["Content-Type"] = content_type
    return headers
