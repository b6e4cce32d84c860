"""
Profile API routes.

Route prefix: /api/profile
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_current_user_id
from database.session import get_db_session
from database.store import ProfileStore, UserStore
from profiles.schemas import EducationIn, ExperienceIn, ProfileRequest
from profiles.service import ProfileEditor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])


def get_profile_editor(session: AsyncSession = Depends(get_db_session)) -> ProfileEditor:
    return ProfileEditor(ProfileStore(session), UserStore(session))


@router.get("/me")
async def my_profile(
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    """Get current user's profile."""
    profile = await editor.get_own(user_id)
    return profile.to_dict()


@router.post("")
async def create_or_update_profile(
    req: ProfileRequest,
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    """Create or update user profile."""
    profile = await editor.create_or_update(user_id, req)
    return profile.to_dict()


@router.get("")
async def all_profiles(
    editor: ProfileEditor = Depends(get_profile_editor),
) -> List[Dict[str, Any]]:
    profiles = await editor.list_profiles()
    return [p.to_dict() for p in profiles]


@router.get("/user/{user_id}")
async def profile_by_user(
    user_id: str,
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    profile = await editor.get_by_user(user_id)
    return profile.to_dict()


@router.delete("")
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    """Delete profile and user."""
    await editor.delete_account(user_id)
    return {"msg": "User deleted"}


# ── Experience / education ─────────────────────────────────────────────


@router.put("/experience")
async def add_experience(
    req: ExperienceIn,
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    profile = await editor.add_experience(user_id, req)
    return profile.to_dict()


@router.delete("/experience/{exp_id}")
async def remove_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    profile = await editor.remove_experience(user_id, exp_id)
    return profile.to_dict()


@router.put("/education")
async def add_education(
    req: EducationIn,
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    profile = await editor.add_education(user_id, req)
    return profile.to_dict()


@router.delete("/education/{edu_id}")
async def remove_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    editor: ProfileEditor = Depends(get_profile_editor),
) -> Dict[str, Any]:
    profile = await editor.remove_education(user_id, edu_id)
    return profile.to_dict()
