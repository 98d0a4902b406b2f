"""Profile use cases: read, avatar/status edits and password change."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from argon2 import PasswordHasher

from todo.core.context import RequestContext
from todo.core.errors import UnauthorizedError
from todo.core.log import service_logger
from todo.core.security import hash_password, verify_password
from todo.domain.entities import User
from todo.repositories.base import UserRepository


@dataclass
class ProfileService:
    users: UserRepository
    hasher: PasswordHasher
    logger: logging.Logger = field(default_factory=lambda: service_logger("profile"))

    def view(self, ctx: RequestContext, user_id: int) -> User:
        ctx.check()
        return self.users.get_by_id(ctx, user_id)

    def edit_avatar_and_status(
        self, ctx: RequestContext, user_id: int, avatar_url: Optional[str], status_text: str
    ) -> None:
        """Overwrite both fields; an empty or missing avatar clears it."""
        ctx.check()
        self.users.update_profile(ctx, user_id, avatar_url or None, status_text or "")

    def change_password(self, ctx: RequestContext, user_id: int, old_password: str, new_password: str) -> None:
        # new_password length is not re-checked here, only register enforces the minimum
        ctx.check()
        user = self.users.get_by_id(ctx, user_id)
        if not verify_password(old_password, user.password_hash, self.hasher):
            self.logger.info("Password change rejected for user id=%s", user_id)
            raise UnauthorizedError("invalid credentials")
        password_hash = hash_password(new_password, self.hasher)
        ctx.check()
        self.users.update_password(ctx, user_id, password_hash)
        self.logger.info("Password changed for user id=%s", user_id)
