"""
Profile editor — sparse profile upserts and the experience / education
sub-collections.

Sub-collection rules:
  • new entries go to the front (most recent first)
  • removal is by entry id only; an unknown id raises ``NotFound`` and
    leaves the collection exactly as it was
  • the collection list is always replaced, never mutated in place
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from database.models import Profile
from database.store import ProfileStore, UserStore
from profiles.schemas import EducationIn, ExperienceIn, ProfilePatch
from utils.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

EXPERIENCE = "experience"
EDUCATION = "education"

_ENTRY_SCHEMAS: Dict[str, Type[BaseModel]] = {
    EXPERIENCE: ExperienceIn,
    EDUCATION: EducationIn,
}

EntryData = Union[BaseModel, Mapping[str, Any]]


class ProfileEditor:
    def __init__(self, profiles: ProfileStore, users: UserStore) -> None:
        self.profiles = profiles
        self.users = users

    # ── Reads ────────────────────────────────────────────────────────────

    async def get_own(self, user_id: str) -> Profile:
        profile = await self.profiles.find_by_user(user_id)
        if profile is None:
            raise NotFound("There is no profile for this user")
        return profile

    async def get_by_user(self, user_id: str) -> Profile:
        profile = await self.profiles.find_by_user(user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    async def list_profiles(self) -> List[Profile]:
        return await self.profiles.list_all()

    # ── Upsert ───────────────────────────────────────────────────────────

    async def create_or_update(self, user_id: str, patch: ProfilePatch) -> Profile:
        """Apply ``patch`` to the user's profile, creating the profile if needed."""
        profile = await self.profiles.find_by_user(user_id)
        if profile is None:
            user = await self.users.find_by_id(user_id)
            if user is None:
                raise NotFound("User not found")
            profile = Profile(
                profile_id=uuid.uuid4(),
                user=user,
                skills=[],
                social={},
                experience=[],
                education=[],
            )
            logger.info("Creating profile for user %s", user_id)
        elif patch.is_empty():
            return profile
        patch.apply(profile)
        return await self.profiles.save(profile)

    # ── Sub-collections ──────────────────────────────────────────────────

    async def _add_entry(self, user_id: str, collection: str, data: EntryData) -> Profile:
        schema = _ENTRY_SCHEMAS[collection]
        try:
            entry_in = schema.model_validate(
                data.model_dump(by_alias=True) if isinstance(data, BaseModel) else data
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_details(exc.errors()) from exc

        profile = await self.profiles.find_by_user(user_id)
        if profile is None:
            raise NotFound("There is no profile for this user")

        entry = entry_in.to_entry(uuid.uuid4().hex)
        setattr(profile, collection, [entry, *(getattr(profile, collection) or [])])
        logger.debug("Added %s entry %s for user %s", collection, entry["id"], user_id)
        return await self.profiles.save(profile)

    async def _remove_entry(self, user_id: str, collection: str, entry_id: str) -> Profile:
        profile = await self.profiles.find_by_user(user_id)
        if profile is None:
            raise NotFound("There is no profile for this user")

        entries = list(getattr(profile, collection) or [])
        remaining = [e for e in entries if e.get("id") != entry_id]
        if len(remaining) == len(entries):
            raise NotFound(f"No {collection} entry with id {entry_id}")

        setattr(profile, collection, remaining)
        logger.debug("Removed %s entry %s for user %s", collection, entry_id, user_id)
        return await self.profiles.save(profile)

    async def add_experience(self, user_id: str, data: EntryData) -> Profile:
        return await self._add_entry(user_id, EXPERIENCE, data)

    async def remove_experience(self, user_id: str, entry_id: str) -> Profile:
        return await self._remove_entry(user_id, EXPERIENCE, entry_id)

    async def add_education(self, user_id: str, data: EntryData) -> Profile:
        return await self._add_entry(user_id, EDUCATION, data)

    async def remove_education(self, user_id: str, entry_id: str) -> Profile:
        return await self._remove_entry(user_id, EDUCATION, entry_id)

    # ── Account removal ──────────────────────────────────────────────────

    async def delete_account(self, user_id: str) -> None:
        """Remove the user's profile and the user account itself."""
        profile = await self.profiles.find_by_user(user_id)
        if profile is not None:
            await self.profiles.delete(profile)
        user = await self.users.find_by_id(user_id)
        if user is not None:
            await self.users.delete(user)
        logger.info("Deleted account %s", user_id)
