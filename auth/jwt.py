"""
JWT-style token creation and verification.

Tokens are URL-safe base64 JSON payloads signed with HMAC-SHA256::

    <base64(payload)>.<hex(hmac)>

The payload carries ``sub`` (user id), ``iat``, ``exp`` and a random
``jti`` so that two tokens issued in the same second still differ.
The secret is handed to ``TokenService`` once at startup.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import re
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Callable, Dict, Optional

from utils.errors import TokenBadSignature, TokenExpired, TokenMalformed

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")
_SIGNATURE_RE = re.compile(r"[0-9a-f]{64}")


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(data: str) -> bytes:
    padded = data + "=" * (-len(data) % 4)
    return urlsafe_b64decode(padded.encode())


class TokenService:
    """Issues and verifies bearer tokens for one signing secret."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Token TTL must be positive")
        self._secret = secret.encode()
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, encoded_payload: str) -> str:
        return hmac.new(self._secret, encoded_payload.encode(), hashlib.sha256).hexdigest()

    def issue(self, user_id: str, ttl: Optional[int] = None) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        ttl = self.ttl_seconds if ttl is None else ttl
        if ttl <= 0:
            raise ValueError("Token TTL must be positive")
        now = int(self._clock())
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + ttl,
            "jti": secrets.token_hex(8),
        }
        encoded = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
        return f"{encoded}.{self._sign(encoded)}"

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify ``token`` and return its claims.

        Raises ``TokenMalformed``, ``TokenBadSignature`` or ``TokenExpired``.
        """
        if not isinstance(token, str):
            raise TokenMalformed("token is not a string")
        parts = token.split(".")
        if len(parts) != 2 or not all(parts):
            raise TokenMalformed("bad format")
        encoded, signature = parts
        if not _SEGMENT_RE.fullmatch(encoded) or not _SIGNATURE_RE.fullmatch(signature):
            raise TokenMalformed("bad characters")
        try:
            raw = _b64decode(encoded)
        except (binascii.Error, ValueError) as exc:
            raise TokenMalformed(f"bad base64: {exc}") from exc

        # Claims are only parsed once the signature is known to be ours.
        if not hmac.compare_digest(signature.encode(), self._sign(encoded).encode()):
            raise TokenBadSignature("bad signature")

        try:
            claims = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as exc:
            raise TokenMalformed(f"undecodable payload: {exc}") from exc
        if (
            not isinstance(claims, dict)
            or not isinstance(claims.get("sub"), str)
            or not isinstance(claims.get("exp"), int)
        ):
            raise TokenMalformed("missing claims")

        if self._clock() > claims["exp"]:
            raise TokenExpired("token expired")
        return claims

    def verify(self, token: str) -> str:
        """Verify token and return the user id it was issued for."""
        return self.decode(token)["sub"]
