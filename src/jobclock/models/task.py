"""Task model for Jobclock."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

TIMESTAMP_FORMAT = "%d-%m-%Y %H:%M:%S"


def local_now() -> datetime:
    """Current wall-clock time as an offset-aware local datetime."""
    return datetime.now().astimezone()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as local time."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


@dataclass(frozen=True)
class Task:
    """A unit of work logged during a job session."""

    name: str
    created_at: datetime

    @classmethod
    def create(cls, name: str, now: datetime | None = None) -> "Task":
        """Create a task stamped with the current local time."""
        return cls(name=name, created_at=now or local_now())

    def to_dict(self) -> dict[str, Any]:
        """Convert task to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create a Task from a dictionary."""
        if not isinstance(data["name"], str):
            raise TypeError(f"task name must be a string, got {data['name']!r}")
        return cls(
            name=data["name"],
            created_at=parse_timestamp(data["created_at"]),
        )

    def format_display(self, prefix: str = "") -> str:
        """Format task as a timeline line."""
        return f"{self.created_at.strftime(TIMESTAMP_FORMAT)} - {prefix}{self.name}"
