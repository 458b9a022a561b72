"""Job session model for Jobclock."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from .task import Task, TIMESTAMP_FORMAT, local_now, parse_timestamp

if TYPE_CHECKING:
    from ..git import CommitImporter


def format_duration(duration: timedelta) -> str:
    """Format a duration as whole hours, minutes and seconds."""
    total_seconds = max(0, int(duration.total_seconds()))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours}h {minutes}m {seconds}s"


@dataclass
class Session:
    """The single current (or most recently closed) job session.

    Every operation returns the text to show the user; none of them print.
    Passing ``now`` pins the clock, otherwise the current local time is used.
    """

    start_time: datetime
    working: bool = False
    tasks: list[Task] = field(default_factory=list)

    @classmethod
    def new(cls, now: datetime | None = None) -> Session:
        """Create an idle session with no tasks."""
        return cls(start_time=now or local_now())

    def begin(self, now: datetime | None = None) -> str:
        """Open a session unless one is already open."""
        if self.working:
            return "Job session already started"

        self.start_time = now or local_now()
        self.tasks = []
        self.working = True
        return "Job session started"

    def end(self, now: datetime | None = None) -> str:
        """Close the open session and return the final report."""
        if not self.working:
            return "No job session to end"

        now = now or local_now()
        lines = ["Job session ended", "Timeline:"]
        lines.append(f"  {self.start_time.strftime(TIMESTAMP_FORMAT)} - Begin job session")
        for task in self.sorted_tasks():
            lines.append(f"  {task.format_display(prefix='Task: ')}")
        lines.append(f"  {now.strftime(TIMESTAMP_FORMAT)} - End job session")
        lines.append(f"Total time: {format_duration(self.elapsed(now))}")

        summary = self.summary()
        if summary:
            lines.append(f"\nSummary:\n{summary}")
        else:
            lines.append("No tasks added")
        lines.append(f"Hours: {self.hours_worked(now):.2f}")

        self.tasks = []
        self.working = False
        return "\n".join(lines)

    def add_task(self, name: str, now: datetime | None = None) -> str:
        """Log a task in the open session."""
        if not self.working:
            return "No job session started"
        if not name.strip():
            return "Task name is required"

        self.tasks.append(Task.create(name, now=now))
        return "Task added to job session"

    def status(self, now: datetime | None = None) -> str:
        """Describe the open session without changing it."""
        if not self.working:
            return "No job session started"

        now = now or local_now()
        lines = [
            f"Job session started at {self.start_time.strftime(TIMESTAMP_FORMAT)}",
            "Tasks:",
        ]
        tasks = self.sorted_tasks()
        if not tasks:
            lines.append("  No tasks added")
        for task in tasks:
            lines.append(f"  {task.format_display()}")
        lines.append(f"Total time: {format_duration(self.elapsed(now))}")
        return "\n".join(lines)

    def import_commits(self, importer: CommitImporter) -> str:
        """Append a task for every commit made since the session began.

        Commits are not de-duplicated, so importing twice in the same
        session adds the same commits twice.
        """
        if not self.working:
            return "No job session started"

        commits = importer.fetch_commits_since(self.start_time)
        self.tasks.extend(commit.to_task() for commit in commits)
        noun = "task" if len(commits) == 1 else "tasks"
        return f"Imported {len(commits)} {noun} from git"

    def sorted_tasks(self) -> list[Task]:
        """Tasks in chronological order; ties keep insertion order."""
        return sorted(self.tasks, key=lambda task: task.created_at)

    def elapsed(self, now: datetime | None = None) -> timedelta:
        """Time spent in the session so far, never negative."""
        duration = (now or local_now()) - self.start_time
        return max(duration, timedelta(0))

    def hours_worked(self, now: datetime | None = None) -> float:
        """Elapsed time as fractional hours, rounded to two decimals."""
        return round(int(self.elapsed(now).total_seconds()) / 3600.0, 2)

    def summary(self) -> str:
        """Task names in the order they were logged, as sentences."""
        if not self.tasks:
            return ""
        return ". ".join(task.name for task in self.tasks) + "."

    def to_dict(self) -> dict[str, Any]:
        """Convert session to dictionary for JSON serialization."""
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "start_time": self.start_time.isoformat(),
            "working": self.working,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Create a Session from a dictionary."""
        if not isinstance(data["working"], bool):
            raise TypeError(f"working must be a boolean, got {data['working']!r}")
        if not isinstance(data["tasks"], list):
            raise TypeError(f"tasks must be a list, got {data['tasks']!r}")
        return cls(
            tasks=[Task.from_dict(t) for t in data["tasks"]],
            start_time=parse_timestamp(data["start_time"]),
            working=data["working"],
        )
