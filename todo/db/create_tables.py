"""Create or drop the users, task_groups and tasks tables: ``python -m todo.db.create_tables``."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers UserRow, TaskGroupRow and TaskRow on Base.metadata


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


def drop_all() -> None:
    """Drop every task tracker table; tasks go before groups and users."""
    Base.metadata.drop_all(bind=get_engine())


if __name__ == "__main__":
    try:
        create_all()
        print("Task tracker schema is ready (users, task_groups, tasks).")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not create the task tracker schema: {exc}") from exc
