"""
Repository capability sets consumed by the service layer.

Every method takes the caller's RequestContext first. Lookups raise
NotFoundError when the row is absent. Ownership-scoped mutations take both the
resource id and the caller's user id and raise NotFoundError when they do not
match a stored row, so another user's resources look exactly like missing ones.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from todo.core.context import RequestContext
from todo.domain.entities import Task, TaskGroup, User


class UserRepository(Protocol):
    def create(self, ctx: RequestContext, user: User) -> int: ...

    def get_by_id(self, ctx: RequestContext, user_id: int) -> User: ...

    def get_by_username(self, ctx: RequestContext, username: str) -> User: ...

    def update_profile(self, ctx: RequestContext, user_id: int, avatar_url: Optional[str], status_text: str) -> None: ...

    def update_password(self, ctx: RequestContext, user_id: int, password_hash: str) -> None: ...

    def set_online(self, ctx: RequestContext, user_id: int, online: bool) -> None: ...

    def update_last_active(self, ctx: RequestContext, user_id: int) -> None: ...


class TaskGroupRepository(Protocol):
    def create(self, ctx: RequestContext, group: TaskGroup) -> int: ...

    def delete(self, ctx: RequestContext, group_id: int, user_id: int) -> None: ...

    def update_title(self, ctx: RequestContext, group_id: int, user_id: int, title: str) -> None: ...

    def list_by_user(self, ctx: RequestContext, user_id: int) -> Sequence[TaskGroup]: ...


class TaskRepository(Protocol):
    def create(self, ctx: RequestContext, task: Task) -> int: ...

    def delete(self, ctx: RequestContext, task_id: int, user_id: int) -> None: ...

    def update(self, ctx: RequestContext, task_id: int, user_id: int, title: str, body: str) -> None: ...

    def move_to_group(self, ctx: RequestContext, task_id: int, user_id: int, group_id: int) -> None: ...

    def set_done(self, ctx: RequestContext, task_id: int, user_id: int, done: bool) -> None: ...

    def list_by_group(self, ctx: RequestContext, user_id: int, group_id: int) -> Sequence[Task]: ...


__all__ = ["UserRepository", "TaskGroupRepository", "TaskRepository"]
