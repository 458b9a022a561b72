"""Git-specific data models."""

import logging
from dataclasses import dataclass
from datetime import datetime

from ..models import Task

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

# sha, strict ISO author date, subject line
LOG_FORMAT = f"%H{FIELD_SEPARATOR}%aI{FIELD_SEPARATOR}%s{RECORD_SEPARATOR}"


@dataclass(frozen=True)
class Commit:
    """A commit read from git history."""

    sha: str
    title: str
    date: datetime  # author date, offset-aware

    def to_task(self) -> Task:
        """Turn the commit into a task logged at the commit's author date."""
        return Task(name=self.title, created_at=self.date)

    @classmethod
    def from_log_record(cls, record: str) -> "Commit | None":
        """Parse one ``git log`` record, or return None if it is malformed."""
        fields = record.strip("\n").split(FIELD_SEPARATOR)
        if len(fields) != 3:
            return None

        sha, date_str, title = fields
        if not sha.strip():
            return None

        try:
            date = datetime.fromisoformat(date_str.strip())
        except ValueError:
            return None
        if date.tzinfo is None:
            date = date.astimezone()

        return cls(sha=sha.strip(), title=title, date=date)


def parse_log(output: str) -> list[Commit]:
    """Parse ``git log`` output, skipping records that cannot be read."""
    commits = []
    for record in output.split(RECORD_SEPARATOR):
        if not record.strip():
            continue
        commit = Commit.from_log_record(record)
        if commit is None:
            logger.debug("Skipping malformed git log record: %r", record)
            continue
        commits.append(commit)
    return commits
