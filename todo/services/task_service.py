"""Task use cases, every one scoped to the calling user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from todo.core.context import RequestContext
from todo.core.log import service_logger
from todo.domain.entities import Task
from todo.domain.validation import require_text
from todo.repositories.base import TaskRepository


@dataclass
class TaskService:
    tasks: TaskRepository
    logger: logging.Logger = field(default_factory=lambda: service_logger("tasks"))

    def _validate(self, title: str, body: str) -> None:
        require_text(title, "title")
        require_text(body, "body")

    def create(self, ctx: RequestContext, user_id: int, group_id: int, title: str, body: str) -> Task:
        """Create a not-done task; the repository rejects groups the user does not own."""
        ctx.check()
        self._validate(title, body)
        task = Task(user_id=user_id, group_id=group_id, title=title, body=body, is_done=False)
        task.id = self.tasks.create(ctx, task)
        self.logger.debug("Created task id=%s in group id=%s for user id=%s", task.id, group_id, user_id)
        return task

    def edit(self, ctx: RequestContext, user_id: int, task_id: int, title: str, body: str) -> None:
        ctx.check()
        self._validate(title, body)
        self.tasks.update(ctx, task_id, user_id, title, body)

    def delete(self, ctx: RequestContext, user_id: int, task_id: int) -> None:
        ctx.check()
        self.tasks.delete(ctx, task_id, user_id)
        self.logger.debug("Deleted task id=%s for user id=%s", task_id, user_id)

    def move(self, ctx: RequestContext, user_id: int, task_id: int, new_group_id: int) -> None:
        ctx.check()
        self.tasks.move_to_group(ctx, task_id, user_id, new_group_id)
        self.logger.debug("Moved task id=%s to group id=%s", task_id, new_group_id)

    def toggle_done(self, ctx: RequestContext, user_id: int, task_id: int, done: bool) -> None:
        """Set (not flip) the done flag."""
        ctx.check()
        self.tasks.set_done(ctx, task_id, user_id, bool(done))

    def list_by_group(self, ctx: RequestContext, user_id: int, group_id: int) -> list[Task]:
        ctx.check()
        return list(self.tasks.list_by_group(ctx, user_id, group_id))
