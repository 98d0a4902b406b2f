"""
Authentication use cases: registration, login and logout.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import cached_property

from argon2 import PasswordHasher

from todo.core.context import RequestContext
from todo.core.errors import NotFoundError, UnauthorizedError
from todo.core.log import service_logger
from todo.core.security import hash_password, needs_rehash, verify_password
from todo.domain.entities import User
from todo.domain.validation import validate_credentials
from todo.repositories.base import UserRepository


@dataclass
class AuthService:
    """Owns the password-hash lifecycle and the online/last-active transitions."""

    users: UserRepository
    hasher: PasswordHasher
    logger: logging.Logger = field(default_factory=lambda: service_logger("auth"))

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    @cached_property
    def _decoy_hash(self) -> str:
        return hash_password(secrets.token_urlsafe(16), self.hasher)

    # -------------------------------------- register --------------------------------------
    def register(self, ctx: RequestContext, username: str, password: str) -> User:
        ctx.check()
        validate_credentials(username, password)
        password_hash = hash_password(password, self.hasher)
        ctx.check()
        user = User(
            username=username,
            password_hash=password_hash,
            status_text="",
            avatar_url=None,
            registered_at=self._now(),
            is_online=False,
        )
        user.id = self.users.create(ctx, user)
        self.logger.info("Registered user id=%s username=%s", user.id, username)
        return user

    # -------------------------------------- login --------------------------------------
    def login(self, ctx: RequestContext, username: str, password: str) -> User:
        """
        Verify credentials, mark the user online and refresh last-active.

        Unknown usernames and wrong passwords both raise UnauthorizedError, and
        both pay for one hash verification.
        """
        ctx.check()
        try:
            user = self.users.get_by_username(ctx, username)
        except NotFoundError:
            verify_password(password, self._decoy_hash, self.hasher)
            self.logger.info("Login rejected for username=%s", username)
            raise UnauthorizedError("invalid credentials") from None
        if not verify_password(password, user.password_hash, self.hasher):
            self.logger.info("Login rejected for username=%s", username)
            raise UnauthorizedError("invalid credentials")
        if needs_rehash(user.password_hash, self.hasher):
            self.users.update_password(ctx, user.id, hash_password(password, self.hasher))
            self.logger.info("Upgraded password hash for user id=%s", user.id)
        self.users.set_online(ctx, user.id, True)
        self.users.update_last_active(ctx, user.id)
        self.logger.info("User id=%s logged in", user.id)
        return self.users.get_by_id(ctx, user.id)

    def logout(self, ctx: RequestContext, user_id: int) -> None:
        ctx.check()
        self.users.set_online(ctx, user_id, False)
        self.logger.info("User id=%s logged out", user_id)
