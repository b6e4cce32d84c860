"""
Typed failures raised by the auth and profile services.

The HTTP layer (``api.errors``) turns each of them into a response using
``status_code``; nothing below this module knows about HTTP.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional


class DevconnectError(Exception):
    """Base class for every expected failure."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DevconnectError):
    status_code = 400
    default_message = "Invalid input"

    def __init__(
        self,
        errors: Optional[List[Dict[str, Any]]] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or [{"msg": self.message}]

    @classmethod
    def from_details(cls, details: List[Dict[str, Any]]) -> "ValidationError":
        """Build from pydantic's ``exc.errors()`` list."""
        errors = []
        for item in details:
            loc = [str(part) for part in item.get("loc", ()) if part != "body"]
            errors.append({"msg": item.get("msg", cls.default_message), "param": ".".join(loc)})
        return cls(errors)


class InvalidCredentials(DevconnectError):
    """Unknown e-mail and wrong password both end up here, on purpose."""

    status_code = 400
    default_message = "Invalid Credentials"


class DuplicateIdentity(DevconnectError):
    status_code = 400
    default_message = "User already exists"


class NotFound(DevconnectError):
    status_code = 404
    default_message = "Not found"


class StoreError(DevconnectError):
    status_code = 500
    default_message = "Server Error"


# ── Token failures ───────────────────────────────────────────────────────


class AuthErrorKind(str, Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


class AuthError(DevconnectError):
    status_code = 401
    default_message = "Token is not valid"
    kind: AuthErrorKind


class TokenMalformed(AuthError):
    kind = AuthErrorKind.MALFORMED


class TokenBadSignature(AuthError):
    kind = AuthErrorKind.BAD_SIGNATURE


class TokenExpired(AuthError):
    kind = AuthErrorKind.EXPIRED


class Unauthenticated(DevconnectError):
    """
    Uniform rejection produced by the auth gate.

    ``reason`` is ``"missing"`` or an ``AuthErrorKind`` value and is meant
    for logs only; callers always see the same message.
    """

    status_code = 401
    default_message = "No token, authorization denied"

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason
