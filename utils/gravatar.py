"""
Gravatar URL for a user's e-mail address.
"""

from __future__ import annotations

import hashlib
from urllib.parse import urlencode


def avatar_url(
    email: str,
    size: str = "200",
    rating: str = "pg",
    default: str = "mm",
) -> str:
    """Protocol-relative gravatar URL; same e-mail always gives the same URL."""
    digest = hashlib.md5(email.strip().lower().encode()).hexdigest()
    query = urlencode({"s": size, "r": rating, "d": default})
    return f"//www.gravatar.com/avatar/{digest}?{query}"
