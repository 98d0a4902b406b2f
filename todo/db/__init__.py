"""SQL storage for users, task groups and tasks: declarative base, engine and sessions."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]
