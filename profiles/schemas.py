"""
Pydantic schemas for profiles and their sub-collection entries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from database.models import Profile

SCALAR_FIELDS = (
    "company",
    "website",
    "location",
    "bio",
    "status",
    "githubusername",
    "skills",
)
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


def _required(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise PydanticCustomError("required", message)
    return str(value).strip()


# ═══════════════════════════════════════════════════════════════════════════════
# Profile — sparse patch
# ═══════════════════════════════════════════════════════════════════════════════


class ProfilePatch(BaseModel):
    """
    Fields a caller supplied for a profile create/update.

    Anything left out (``None`` or blank) keeps its stored value; ``apply``
    never clears a field.
    """

    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = None
    githubusername: Optional[str] = None
    skills: Optional[List[str]] = None

    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, value: Any) -> Any:
        """``"go, rust"`` -> ``["go", "rust"]``; blank items are dropped."""
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    def changes(self) -> Dict[str, Any]:
        """Scalar fields that were actually supplied."""
        out: Dict[str, Any] = {}
        for name in SCALAR_FIELDS:
            value = getattr(self, name)
            if name == "skills":
                if value:
                    out[name] = list(value)
            elif value is not None and value.strip():
                out[name] = value.strip()
        return out

    def social_changes(self) -> Dict[str, str]:
        out = {}
        for name in SOCIAL_FIELDS:
            value = getattr(self, name)
            if value is not None and value.strip():
                out[name] = value.strip()
        return out

    def is_empty(self) -> bool:
        return not self.changes() and not self.social_changes()

    def apply(self, profile: Profile) -> Profile:
        """Write the supplied fields onto ``profile``; other fields stay as they are."""
        for name, value in self.changes().items():
            setattr(profile, name, value)
        social = self.social_changes()
        if social:
            profile.social = {**(profile.social or {}), **social}
        return profile


class ProfileRequest(ProfilePatch):
    """``POST /api/profile`` body: status and skills must be present."""

    model_config = ConfigDict(validate_default=True)

    @field_validator("status")
    @classmethod
    def status_required(cls, value: Optional[str]) -> str:
        return _required(value, "Status is required")

    @field_validator("skills")
    @classmethod
    def skills_required(cls, value: Optional[List[str]]) -> List[str]:
        if not value:
            raise PydanticCustomError("required", "Skills is required")
        return value


# ═══════════════════════════════════════════════════════════════════════════════
# Sub-collection entries
# ═══════════════════════════════════════════════════════════════════════════════


class _EntryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    current: bool = False
    description: Optional[str] = None

    @field_validator("from_")
    @classmethod
    def from_required(cls, value: Optional[str]) -> str:
        return _required(value, "From date is required")

    def to_entry(self, entry_id: str) -> Dict[str, Any]:
        return {"id": entry_id, **self.model_dump(by_alias=True)}


class ExperienceIn(_EntryIn):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, value: Optional[str]) -> str:
        return _required(value, "Title is required")

    @field_validator("company")
    @classmethod
    def company_required(cls, value: Optional[str]) -> str:
        return _required(value, "Company is required")


class EducationIn(_EntryIn):
    school: Optional[str] = None
    degree: Optional[str] = None
    fieldofstudy: Optional[str] = None

    @field_validator("school")
    @classmethod
    def school_required(cls, value: Optional[str]) -> str:
        return _required(value, "School is required")

    @field_validator("degree")
    @classmethod
    def degree_required(cls, value: Optional[str]) -> str:
        return _required(value, "Degree is required")

    @field_validator("fieldofstudy")
    @classmethod
    def fieldofstudy_required(cls, value: Optional[str]) -> str:
        return _required(value, "Field of study is required")
