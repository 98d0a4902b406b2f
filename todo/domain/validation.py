"""Input validation rules applied before any repository call."""
from __future__ import annotations

from todo.core.errors import ValidationError
from todo.domain.entities import GroupStatus

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def _encoded_length(value: str | None) -> int:
    return len((value or "").encode("utf-8"))


def validate_credentials(username: str | None, password: str | None) -> None:
    """Reject usernames shorter than 3 and passwords shorter than 6 bytes (UTF-8)."""
    if _encoded_length(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"username must be at least {MIN_USERNAME_LENGTH} bytes long")
    if _encoded_length(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} bytes long")


def require_text(value: str | None, field_name: str) -> str:
    if not value:
        raise ValidationError(f"{field_name} required")
    return value


def parse_group_status(value: str | GroupStatus | None) -> GroupStatus:
    try:
        return GroupStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in GroupStatus)
        raise ValidationError(f"invalid group status (expected one of: {allowed})") from None
