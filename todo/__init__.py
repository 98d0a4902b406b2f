"""Multi-user task tracking backend: authentication, profiles, task groups and tasks."""

__version__ = "0.1.0"
