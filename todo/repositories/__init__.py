"""
Persistence adapters.

Services depend on the capability sets in ``base``; ``sql_repository`` holds
the SQLAlchemy implementation of each of them.
"""

from .base import TaskGroupRepository, TaskRepository, UserRepository
from .sql_repository import SQLStore, SQLTaskGroupRepository, SQLTaskRepository, SQLUserRepository

__all__ = [
    "UserRepository",
    "TaskGroupRepository",
    "TaskRepository",
    "SQLStore",
    "SQLUserRepository",
    "SQLTaskGroupRepository",
    "SQLTaskRepository",
]
