"""Task group use cases, every one scoped to the calling user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from todo.core.context import RequestContext
from todo.core.log import service_logger
from todo.domain.entities import GroupStatus, TaskGroup
from todo.domain.validation import parse_group_status, require_text
from todo.repositories.base import TaskGroupRepository


@dataclass
class TaskGroupService:
    """
    CRUD for task groups. Ownership is enforced by the repository: delete and
    rename pass both the group id and the caller's id, and a mismatch surfaces
    as NotFoundError.
    """

    task_groups: TaskGroupRepository
    logger: logging.Logger = field(default_factory=lambda: service_logger("task_groups"))

    def create(self, ctx: RequestContext, user_id: int, title: str, status: str | GroupStatus) -> TaskGroup:
        ctx.check()
        require_text(title, "title")
        group_status = parse_group_status(status)
        group = TaskGroup(
            user_id=user_id,
            title=title,
            status=group_status,
            created_at=datetime.now(timezone.utc),
        )
        group.id = self.task_groups.create(ctx, group)
        self.logger.debug("Created task group id=%s for user id=%s", group.id, user_id)
        return group

    def delete(self, ctx: RequestContext, user_id: int, group_id: int) -> None:
        ctx.check()
        self.task_groups.delete(ctx, group_id, user_id)
        self.logger.debug("Deleted task group id=%s for user id=%s", group_id, user_id)

    def rename(self, ctx: RequestContext, user_id: int, group_id: int, new_title: str) -> None:
        ctx.check()
        require_text(new_title, "title")
        self.task_groups.update_title(ctx, group_id, user_id, new_title)

    def list_by_user(self, ctx: RequestContext, user_id: int) -> list[TaskGroup]:
        ctx.check()
        return list(self.task_groups.list_by_user(ctx, user_id))
