"""Data models for Jobclock."""

from .task import Task, TIMESTAMP_FORMAT, local_now
from .session import Session
from .config import JobclockConfig

__all__ = [
    "Task",
    "TIMESTAMP_FORMAT",
    "local_now",
    "Session",
    "JobclockConfig",
]
