"""
High-level use cases for the todo backend.

Each service orchestrates repository contracts to implement business rules
(register, change password, rename a group, move a task, etc.). Services
never call each other and never touch the database session directly;
transport code should call these services instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from argon2 import PasswordHasher

from todo.repositories.base import TaskGroupRepository, TaskRepository, UserRepository

from .auth_service import AuthService
from .profile_service import ProfileService
from .task_group_service import TaskGroupService
from .task_service import TaskService


@dataclass
class Services:
    auth: AuthService
    profile: ProfileService
    task_groups: TaskGroupService
    tasks: TaskService


def build_services(store, hasher: PasswordHasher, logger: Optional[logging.Logger] = None) -> Services:
    """
    Wire one service per responsibility from a store exposing ``users``,
    ``task_groups`` and ``tasks`` repositories.
    """
    users: UserRepository = store.users
    task_groups: TaskGroupRepository = store.task_groups
    tasks: TaskRepository = store.tasks

    def _child(name: str) -> dict:
        return {"logger": logger.getChild(name)} if logger is not None else {}

    return Services(
        auth=AuthService(users=users, hasher=hasher, **_child("auth")),
        profile=ProfileService(users=users, hasher=hasher, **_child("profile")),
        task_groups=TaskGroupService(task_groups=task_groups, **_child("task_groups")),
        tasks=TaskService(tasks=tasks, **_child("tasks")),
    )


__all__ = [
    "Services",
    "build_services",
    "AuthService",
    "ProfileService",
    "TaskGroupService",
    "TaskService",
]
