"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, ContextManager, Iterator, Optional

from sqlalchemy import case, delete, select, update
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from todo.core.context import RequestContext
from todo.core.errors import ConflictError, InfrastructureError, NotFoundError
from todo.db.models import TaskGroupRow, TaskRow, UserRow
from todo.db.session import get_session
from todo.domain.entities import GroupStatus, Task, TaskGroup, User

SessionFactory = Callable[[], ContextManager[Session]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None:
        return None
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        avatar_url=row.avatar_url,
        status_text=row.status_text or "",
        registered_at=_utc(row.registered_at),
        last_active_at=_utc(row.last_active_at),
        is_online=bool(row.is_online),
    )


def _group_from_row(row: TaskGroupRow) -> TaskGroup:
    return TaskGroup(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        status=GroupStatus(row.status),
        created_at=_utc(row.created_at),
    )


def _task_from_row(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        group_id=row.group_id,
        title=row.title,
        body=row.body,
        is_done=bool(row.is_done),
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
    )


def _run(session: Session, stmt) -> Result:
    return session.execute(stmt, execution_options={"synchronize_session": False})


def _require_rows(result: Result, what: str) -> None:
    if not result.rowcount:
        raise NotFoundError(f"{what} not found")


class _SQLRepositoryBase:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or get_session

    @contextmanager
    def _transaction(self, ctx: RequestContext, *, conflict: str = "resource already exists") -> Iterator[Session]:
        """
        Open a session, yield it and commit on success. The context is checked
        before any SQL is issued and again right before commit, so a request
        cancelled mid-flight is rolled back instead of committed.
        """
        ctx.check()
        with self._session_factory() as session:
            try:
                yield session
                ctx.check()
                session.commit()
            except IntegrityError as exc:
                raise ConflictError(conflict) from exc
            except SQLAlchemyError as exc:
                raise InfrastructureError(f"storage failure: {exc.__class__.__name__}") from exc


class SQLUserRepository(_SQLRepositoryBase):
    """users table access."""

    def create(self, ctx: RequestContext, user: User) -> int:
        row = UserRow(
            username=user.username,
            password_hash=user.password_hash,
            avatar_url=user.avatar_url,
            status_text=user.status_text,
            registered_at=user.registered_at or _now(),
            last_active_at=user.last_active_at,
            is_online=user.is_online,
        )
        with self._transaction(ctx, conflict="username already taken") as session:
            session.add(row)
            session.flush()
            user_id = row.id
        return user_id

    def get_by_id(self, ctx: RequestContext, user_id: int) -> User:
        with self._transaction(ctx) as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise NotFoundError("user not found")
            return _user_from_row(row)

    def get_by_username(self, ctx: RequestContext, username: str) -> User:
        with self._transaction(ctx) as session:
            stmt = select(UserRow).where(UserRow.username == username)
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                raise NotFoundError("user not found")
            return _user_from_row(row)

    def update_profile(self, ctx: RequestContext, user_id: int, avatar_url: Optional[str], status_text: str) -> None:
        with self._transaction(ctx) as session:
            stmt = update(UserRow).where(UserRow.id == user_id).values(avatar_url=avatar_url, status_text=status_text)
            _require_rows(_run(session, stmt), "user")

    def update_password(self, ctx: RequestContext, user_id: int, password_hash: str) -> None:
        with self._transaction(ctx) as session:
            stmt = update(UserRow).where(UserRow.id == user_id).values(password_hash=password_hash)
            _require_rows(_run(session, stmt), "user")

    def set_online(self, ctx: RequestContext, user_id: int, online: bool) -> None:
        with self._transaction(ctx) as session:
            stmt = update(UserRow).where(UserRow.id == user_id).values(is_online=online)
            _require_rows(_run(session, stmt), "user")

    def update_last_active(self, ctx: RequestContext, user_id: int) -> None:
        with self._transaction(ctx) as session:
            stmt = update(UserRow).where(UserRow.id == user_id).values(last_active_at=_now())
            _require_rows(_run(session, stmt), "user")


class SQLTaskGroupRepository(_SQLRepositoryBase):
    """task_groups table access, always filtered by owner."""

    def create(self, ctx: RequestContext, group: TaskGroup) -> int:
        row = TaskGroupRow(
            user_id=group.user_id,
            title=group.title,
            status=GroupStatus(group.status).value,
            created_at=group.created_at or _now(),
        )
        with self._transaction(ctx) as session:
            session.add(row)
            session.flush()
            group_id = row.id
        return group_id

    def delete(self, ctx: RequestContext, group_id: int, user_id: int) -> None:
        owned = select(TaskGroupRow.id).where(TaskGroupRow.id == group_id, TaskGroupRow.user_id == user_id)
        with self._transaction(ctx) as session:
            _run(session, delete(TaskRow).where(TaskRow.group_id.in_(owned)))
            stmt = delete(TaskGroupRow).where(TaskGroupRow.id == group_id, TaskGroupRow.user_id == user_id)
            _require_rows(_run(session, stmt), "task group")

    def update_title(self, ctx: RequestContext, group_id: int, user_id: int, title: str) -> None:
        with self._transaction(ctx) as session:
            stmt = (
                update(TaskGroupRow)
                .where(TaskGroupRow.id == group_id, TaskGroupRow.user_id == user_id)
                .values(title=title)
            )
            _require_rows(_run(session, stmt), "task group")

    def list_by_user(self, ctx: RequestContext, user_id: int) -> list[TaskGroup]:
        with self._transaction(ctx) as session:
            stmt = select(TaskGroupRow).where(TaskGroupRow.user_id == user_id).order_by(TaskGroupRow.id)
            return [_group_from_row(row) for row in session.execute(stmt).scalars().all()]


class SQLTaskRepository(_SQLRepositoryBase):
    """tasks table access, always filtered by owner."""

    @staticmethod
    def _owned_group(group_id: int, user_id: int):
        return select(TaskGroupRow.id).where(TaskGroupRow.id == group_id, TaskGroupRow.user_id == user_id)

    def create(self, ctx: RequestContext, task: Task) -> int:
        """Insert the task and fill in the storage-assigned timestamps on ``task``."""
        now = _now()
        with self._transaction(ctx) as session:
            if session.execute(self._owned_group(task.group_id, task.user_id)).first() is None:
                raise NotFoundError("task group not found")
            row = TaskRow(
                user_id=task.user_id,
                group_id=task.group_id,
                title=task.title,
                body=task.body,
                is_done=task.is_done,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            task_id = row.id
        task.created_at = now
        task.updated_at = now
        return task_id

    def delete(self, ctx: RequestContext, task_id: int, user_id: int) -> None:
        with self._transaction(ctx) as session:
            stmt = delete(TaskRow).where(TaskRow.id == task_id, TaskRow.user_id == user_id)
            _require_rows(_run(session, stmt), "task")

    def update(self, ctx: RequestContext, task_id: int, user_id: int, title: str, body: str) -> None:
        with self._transaction(ctx) as session:
            stmt = (
                update(TaskRow)
                .where(TaskRow.id == task_id, TaskRow.user_id == user_id)
                .values(title=title, body=body, updated_at=_now())
            )
            _require_rows(_run(session, stmt), "task")

    def move_to_group(self, ctx: RequestContext, task_id: int, user_id: int, group_id: int) -> None:
        """Reassign the task; the target group must belong to the same owner."""
        with self._transaction(ctx) as session:
            stmt = (
                update(TaskRow)
                .where(
                    TaskRow.id == task_id,
                    TaskRow.user_id == user_id,
                    self._owned_group(group_id, user_id).exists(),
                )
                .values(group_id=group_id, updated_at=_now())
            )
            _require_rows(_run(session, stmt), "task")

    def set_done(self, ctx: RequestContext, task_id: int, user_id: int, done: bool) -> None:
        # updated_at is assigned first so it compares against the old flag on every dialect
        with self._transaction(ctx) as session:
            stmt = (
                update(TaskRow)
                .where(TaskRow.id == task_id, TaskRow.user_id == user_id)
                .ordered_values(
                    (TaskRow.updated_at, case((TaskRow.is_done != done, _now()), else_=TaskRow.updated_at)),
                    (TaskRow.is_done, done),
                )
            )
            _require_rows(_run(session, stmt), "task")

    def list_by_group(self, ctx: RequestContext, user_id: int, group_id: int) -> list[Task]:
        with self._transaction(ctx) as session:
            stmt = (
                select(TaskRow)
                .where(TaskRow.user_id == user_id, TaskRow.group_id == group_id)
                .order_by(TaskRow.id)
            )
            return [_task_from_row(row) for row in session.execute(stmt).scalars().all()]


@dataclass
class SQLStore:
    """One SQL implementation per repository contract."""

    users: SQLUserRepository
    task_groups: SQLTaskGroupRepository
    tasks: SQLTaskRepository

    @classmethod
    def create(cls, session_factory: SessionFactory | None = None) -> "SQLStore":
        return cls(
            users=SQLUserRepository(session_factory),
            task_groups=SQLTaskGroupRepository(session_factory),
            tasks=SQLTaskRepository(session_factory),
        )
