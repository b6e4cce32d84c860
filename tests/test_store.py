"""
Tests for the user / profile stores.
"""

import uuid

import pytest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from database.models import Profile, User
from database.store import ProfileStore, UserStore
from utils.errors import DuplicateIdentity, StoreError


def _user(email: str = "ada@example.com") -> User:
    return User(
        user_id=uuid.uuid4(),
        name="Ada",
        email=email,
        avatar="//www.gravatar.com/avatar/x",
        password_hash="$2b$04$notarealhash",
    )


class TestUserStore:
    @pytest.mark.asyncio
    async def test_save_and_find(self, users):
        user = await users.save(_user())
        assert (await users.find_by_email("ada@example.com")).user_id == user.user_id
        assert (await users.find_by_id(str(user.user_id))).email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_missing_and_malformed_ids(self, users):
        assert await users.find_by_email("nobody@example.com") is None
        assert await users.find_by_id(str(uuid.uuid4())) is None
        assert await users.find_by_id("not-a-uuid") is None

    @pytest.mark.asyncio
    async def test_second_user_with_same_email(self, users):
        await users.save(_user())
        with pytest.raises(DuplicateIdentity):
            await users.save(_user())

    @pytest.mark.asyncio
    async def test_delete(self, users):
        user = await users.save(_user())
        await users.delete(user)
        assert await users.find_by_email("ada@example.com") is None


class TestProfileStore:
    @pytest.mark.asyncio
    async def test_find_by_user(self, users, profiles):
        user = await users.save(_user())
        profile = await profiles.save(Profile(profile_id=uuid.uuid4(), user=user, status="Dev"))

        found = await profiles.find_by_user(str(user.user_id))
        assert found.profile_id == profile.profile_id
        assert await profiles.find_by_user("nope") is None

    @pytest.mark.asyncio
    async def test_version_increments_on_save(self, users, profiles):
        user = await users.save(_user())
        profile = await profiles.save(Profile(profile_id=uuid.uuid4(), user=user, status="Dev"))
        first = profile.version

        profile.status = "Lead"
        await profiles.save(profile)
        assert profile.version == first + 1


class TestStoreErrors:
    def _broken_session(self, exc: Exception) -> MagicMock:
        session = MagicMock()
        session.execute = AsyncMock(side_effect=exc)
        session.flush = AsyncMock(side_effect=exc)
        session.get = AsyncMock(side_effect=exc)
        return session

    @pytest.mark.asyncio
    async def test_driver_failure_becomes_store_error(self):
        exc = OperationalError("SELECT 1", {}, Exception("connection lost"))
        store = UserStore(self._broken_session(exc))
        with pytest.raises(StoreError) as info:
            await store.find_by_email("ada@example.com")
        assert info.value.__cause__ is exc

    @pytest.mark.asyncio
    async def test_stale_profile_save_becomes_store_error(self):
        store = ProfileStore(self._broken_session(StaleDataError("version mismatch")))
        with pytest.raises(StoreError):
            await store.save(Profile(status="Dev"))

    @pytest.mark.asyncio
    async def test_unique_violation_on_user_save_is_duplicate(self):
        exc = IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email"))
        store = UserStore(self._broken_session(exc))
        with pytest.raises(DuplicateIdentity):
            await store.save(_user())

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        store = UserStore(self._broken_session(RuntimeError("boom")))
        with pytest.raises(RuntimeError):
            await store.find_by_id(str(uuid.uuid4()))
