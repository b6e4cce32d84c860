"""
SQLAlchemy ORM models for users and their profiles.

Sub-collections (experience, education), skills and social links live in
JSON columns on the profile row, so a profile is read and saved as one
document.  Always assign a new list/dict to those columns; in-place
mutation is not tracked.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    avatar = Column(String(255))
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_public(self) -> Dict[str, Any]:
        """Account fields safe to return to clients (no password hash)."""
        return {
            "id": str(self.user_id),
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "date": self.created_at.isoformat() if self.created_at else None,
        }


class Profile(Base):
    __tablename__ = "profiles"

    profile_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    company = Column(String(255))
    website = Column(String(255))
    location = Column(String(255))
    bio = Column(Text)
    status = Column(String(255))
    githubusername = Column(String(255))
    skills = Column(JSON, nullable=False, default=list)
    social = Column(JSON, nullable=False, default=dict)
    experience = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    version = Column(Integer, nullable=False)

    # One-way and eagerly loaded so to_dict() never triggers lazy IO.
    user = relationship("User", lazy="selectin")

    # Saving a row that someone else saved in the meantime raises StaleDataError.
    __mapper_args__ = {"version_id_col": version}

    def to_dict(self) -> Dict[str, Any]:
        """Profile document with the owner's name and avatar populated."""
        owner = None
        if self.user is not None:
            owner = {
                "id": str(self.user.user_id),
                "name": self.user.name,
                "avatar": self.user.avatar,
            }
        return {
            "id": str(self.profile_id),
            "user": owner,
            "company": self.company,
            "website": self.website,
            "location": self.location,
            "bio": self.bio,
            "status": self.status,
            "githubusername": self.githubusername,
            "skills": list(self.skills or []),
            "social": dict(self.social or {}),
            "experience": list(self.experience or []),
            "education": list(self.education or []),
            "date": self.created_at.isoformat() if self.created_at else None,
        }
