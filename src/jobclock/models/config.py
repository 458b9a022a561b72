"""Configuration model for Jobclock."""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

SESSION_FILENAME = "session.json"


def default_state_dir() -> Path:
    """Per-user temporary storage folder for the session file."""
    return Path(tempfile.gettempdir()) / "jobclock"


@dataclass
class JobclockConfig:
    """Jobclock runtime configuration."""

    state_dir: Path = field(default_factory=default_state_dir)
    repo_path: Path | None = None
    git_executable: str = "git"

    @property
    def session_file(self) -> Path:
        """Path of the single persisted session record."""
        return Path(self.state_dir) / SESSION_FILENAME

    @classmethod
    def default(cls) -> "JobclockConfig":
        """Build the configuration used by the command-line tool."""
        return cls()
