"""Signup, login and profile lookup."""

from __future__ import annotations

import logging
from typing import Any

import psycopg2

from app.db import repository
from app.errors import EmailAlreadyRegistered, InvalidCredentials
from app.schemas.auth import UserProfile
from app.services.usage_tracker import UsageTracker
from app.utils.auth import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, usage: UsageTracker, repo=repository) -> None:
        self._repo = repo
        self._usage = usage

    def signup(self, email: str, name: str, password: str) -> UserProfile:
        if self._repo.get_user_by_email(email):
            raise EmailAlreadyRegistered("User with this email already exists")
        try:
            row = self._repo.create_user(email, name, hash_password(password))
        except psycopg2.IntegrityError as exc:
            raise EmailAlreadyRegistered("User with this email already exists") from exc
        logger.info("User %s signed up", row["id"])
        return _profile(row)

    def login(self, email: str, password: str) -> UserProfile:
        row = self._repo.get_user_by_email(email)
        if not row or not verify_password(password, row.get("password_hash")):
            raise InvalidCredentials("Invalid credentials")
        return _profile(row)

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Profile with token counters, applying any pending daily reset."""
        row = self._repo.get_user_by_id(user_id)
        if not row:
            return None
        usage = self._usage.usage_for(row)
        profile = _profile(row)
        profile.total_tokens_used = usage.total_tokens_used
        profile.daily_tokens_used = usage.daily_tokens_used
        return profile


def _profile(row: dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        total_tokens_used=int(row.get("total_tokens_used") or 0),
        daily_tokens_used=int(row.get("daily_tokens_used") or 0),
        created_at=row.get("created_at"),
    )
