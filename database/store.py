"""
Record stores for users and profiles.

Lookups return the record or ``None``; ids that are not valid UUIDs simply
match nothing.  A duplicate e-mail on user save is ``DuplicateIdentity``;
every other SQLAlchemy failure leaves this module as a ``StoreError`` so
callers never see driver exceptions.
"""

from __future__ import annotations

import functools
import logging
import uuid
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Profile, User
from utils.errors import DuplicateIdentity, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _wrap_store_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.exception("Store operation %s failed", func.__qualname__)
            raise StoreError() from exc

    return wrapper


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @_wrap_store_errors
    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @_wrap_store_errors
    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        return await self.session.get(User, uid)

    @_wrap_store_errors
    async def save(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Unique e-mail lost a race with a concurrent registration.
            raise DuplicateIdentity() from exc
        return user

    @_wrap_store_errors
    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()


class ProfileStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @_wrap_store_errors
    async def find_by_user(self, user_id: str | uuid.UUID) -> Optional[Profile]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        result = await self.session.execute(select(Profile).where(Profile.user_id == uid))
        return result.scalar_one_or_none()

    @_wrap_store_errors
    async def list_all(self) -> List[Profile]:
        result = await self.session.execute(select(Profile).order_by(Profile.created_at))
        return list(result.scalars().all())

    @_wrap_store_errors
    async def save(self, profile: Profile) -> Profile:
        self.session.add(profile)
        await self.session.flush()
        return profile

    @_wrap_store_errors
    async def delete(self, profile: Profile) -> None:
        await self.session.delete(profile)
        await self.session.flush()
