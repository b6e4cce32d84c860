"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

from typing import Optional

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt; every call draws a fresh salt."""
    salt = bcrypt.gensalt(rounds=rounds or DEFAULT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False
