"""
Utility helpers shared across routers/services.
"""

from typing import Optional


def absolute_url(path: str, base: Optional[str] = None, public_base_url: Optional[str] = None) -> str:
    """
    Turn a relative path into an absolute URL.

    ``public_base_url`` (PUBLIC_BASE_URL) wins when set; otherwise ``base``
    (normally the request's own base URL) is used.
    """
    base_url = (public_base_url or base or "").rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path
