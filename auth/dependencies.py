"""
FastAPI dependencies for authentication.

Provides ``get_current_user_id``, the gate in front of every protected
route.  It only verifies the bearer token; it never reads the database and
does no role checks.  The resolved user id is returned so handlers pass it
on explicitly.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import TokenService
from utils.errors import AuthError, Unauthenticated

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    x_auth_token: Optional[str] = None,
) -> Optional[str]:
    """Prefer ``Authorization: Bearer``; fall back to the ``x-auth-token`` header."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if x_auth_token:
        return x_auth_token.strip() or None
    return None


def authenticate(token: Optional[str], tokens: TokenService) -> str:
    """
    Resolve ``token`` to a user id.

    Raises ``Unauthenticated`` whether the token is missing, malformed,
    forged or expired; only the log line tells them apart.
    """
    if not token:
        logger.warning("Rejected request: no token")
        raise Unauthenticated("missing")
    try:
        return tokens.verify(token)
    except AuthError as exc:
        logger.warning("Rejected request: %s token (%s)", exc.kind.value, exc.message)
        raise Unauthenticated(exc.kind.value, "Token is not valid") from exc


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    x_auth_token: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).
    """
    return authenticate(extract_token(credentials, x_auth_token), tokens)
