"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc
from argon2.profiles import RFC_9106_LOW_MEMORY

from .config import Settings


def build_password_hasher(settings: Settings) -> PasswordHasher:
    """Create an Argon2 hasher from the configured cost policy."""
    if settings.app_env == "prod" and (
        settings.password_time_cost < RFC_9106_LOW_MEMORY.time_cost
        or settings.password_memory_cost < RFC_9106_LOW_MEMORY.memory_cost
    ):
        raise RuntimeError("Password hash cost policy is too weak for production.")
    return PasswordHasher(
        time_cost=settings.password_time_cost,
        memory_cost=settings.password_memory_cost,
        parallelism=settings.password_parallelism,
    )


def hash_password(password: str, hasher: PasswordHasher) -> str:
    return hasher.hash(password)


def verify_password(password: str, stored_hash: str | None, hasher: PasswordHasher) -> bool:
    stored = stored_hash or ""
    if not stored:
        return False
    try:
        return hasher.verify(stored, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str, hasher: PasswordHasher) -> bool:
    """True when the hash was produced with a different cost policy."""
    try:
        return hasher.check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return True
