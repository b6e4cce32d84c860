"""
Registration and login.

Both flows end by issuing a bearer token for the stored user id.  Login
failures are deliberately indistinguishable: an unknown e-mail and a wrong
password raise the same ``InvalidCredentials`` after the same bcrypt work.
"""

from __future__ import annotations

import functools
import logging
import uuid
from typing import Optional, Tuple

from auth.jwt import TokenService
from auth.password import hash_password, verify_password
from config.settings import Settings
from database.models import User
from database.store import UserStore
from utils.errors import DuplicateIdentity, InvalidCredentials, NotFound
from utils.gravatar import avatar_url

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@functools.lru_cache(maxsize=None)
def _dummy_hash(rounds: Optional[int]) -> str:
    """One throwaway bcrypt hash per work factor, shared by the whole process."""
    return hash_password(uuid.uuid4().hex, rounds)


class CredentialService:
    def __init__(
        self,
        users: UserStore,
        tokens: TokenService,
        settings: Optional[Settings] = None,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.settings = settings
        self._rounds = settings.bcrypt_rounds if settings else None
        self._dummy_hash = _dummy_hash(self._rounds)

    def _avatar(self, email: str) -> str:
        if self.settings is None:
            return avatar_url(email)
        return avatar_url(
            email,
            size=self.settings.avatar_size,
            rating=self.settings.avatar_rating,
            default=self.settings.avatar_default,
        )

    async def register(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """Create an account and return it with a fresh token."""
        email = normalize_email(email)
        if await self.users.find_by_email(email) is not None:
            raise DuplicateIdentity()

        user = User(
            user_id=uuid.uuid4(),
            name=name.strip(),
            email=email,
            avatar=self._avatar(email),
            password_hash=hash_password(password, self._rounds),
        )
        await self.users.save(user)

        token = self.tokens.issue(str(user.user_id))
        logger.info("Registered user %s (%s)", user.name, user.user_id)
        return user, token

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and return the user with a fresh token."""
        user = await self.users.find_by_email(normalize_email(email))

        if user is None:
            # Burn the same bcrypt cost as a real check.
            verify_password(password, self._dummy_hash)
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            raise InvalidCredentials()

        token = self.tokens.issue(str(user.user_id))
        logger.info("Login: %s (%s)", user.name, user.user_id)
        return user, token

    async def current_user(self, user_id: str) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
