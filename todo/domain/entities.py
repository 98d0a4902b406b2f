"""Plain data definitions for users, task groups and tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class GroupStatus(str, Enum):
    URGENT = "urgent"
    DAILY = "daily"
    LONGTERM = "longterm"


@dataclass
class User:
    username: str
    password_hash: str = field(repr=False)
    status_text: str = ""
    avatar_url: Optional[str] = None
    registered_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None
    is_online: bool = False
    id: Optional[int] = None

    def to_public_dict(self) -> dict:
        """Serializable view without the credential."""
        return {
            "id": self.id,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "status_text": self.status_text,
            "registered_at": self.registered_at.isoformat() if self.registered_at else None,
            "last_active_at": self.last_active_at.isoformat() if self.last_active_at else None,
            "is_online": self.is_online,
        }


@dataclass
class TaskGroup:
    user_id: int
    title: str
    status: GroupStatus
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class Task:
    user_id: int
    group_id: int
    title: str
    body: str
    is_done: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = None


__all__ = ["GroupStatus", "User", "TaskGroup", "Task"]
