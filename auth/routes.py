"""
Auth API routes — register, login, current user.

Route prefix: /api
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_current_user_id, get_token_service
from auth.jwt import TokenService
from auth.service import CredentialService
from database.session import get_db_session
from database.store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _check_email(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError("email", "Please include a valid email")
    return value


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Name is required")
        return value

    @field_validator("email")
    @classmethod
    def email_valid(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "password_length",
                "Please enter a password with 6 or more characters",
            )
        return value


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def email_valid(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("required", "Password is required")
        return value


class TokenResponse(BaseModel):
    token: str


# ── Dependencies ───────────────────────────────────────────────────────


def get_credential_service(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> CredentialService:
    return CredentialService(UserStore(session), tokens, request.app.state.settings)


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/users", response_model=TokenResponse)
async def register(
    req: RegisterRequest,
    service: CredentialService = Depends(get_credential_service),
) -> Dict[str, Any]:
    """Register a new user."""
    _, token = await service.register(req.name, req.email, req.password)
    return {"token": token}


@router.post("/auth", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
) -> Dict[str, Any]:
    """Authenticate user & get token."""
    _, token = await service.login(req.email, req.password)
    return {"token": token}


@router.get("/auth")
async def current_user(
    user_id: str = Depends(get_current_user_id),
    service: CredentialService = Depends(get_credential_service),
) -> Dict[str, Any]:
    """The authenticated account, without its password hash."""
    user = await service.current_user(user_id)
    return user.to_public()
