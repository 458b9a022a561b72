"""Import tasks from git commit history."""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Protocol

from ..models import JobclockConfig
from .models import LOG_FORMAT, Commit, parse_log

logger = logging.getLogger(__name__)


class CommitImporter(Protocol):
    """Source of commits to turn into session tasks."""

    def fetch_commits_since(self, since: datetime) -> list[Commit]: ...


class GitImporter:
    """Reads commits by running ``git log`` in a repository."""

    def __init__(self, repo_path: str | Path | None = None, git_executable: str = "git"):
        """Initialize the importer.

        Args:
            repo_path: Directory to run git in. Defaults to current directory.
            git_executable: Name or path of the git binary.
        """
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        self.git_executable = git_executable

    @classmethod
    def from_config(cls, config: JobclockConfig) -> "GitImporter":
        """Create an importer from the runtime configuration."""
        return cls(config.repo_path, config.git_executable)

    def _run_log(self) -> str:
        """Run git log over the full history and return its output."""
        result = subprocess.run(
            [self.git_executable, "log", f"--pretty=format:{LOG_FORMAT}"],
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            cwd=self.repo_path,
        )
        return result.stdout

    def fetch_commits_since(self, since: datetime) -> list[Commit]:
        """Commits authored after ``since``, oldest first.

        A git failure is logged and yields no commits.
        """
        try:
            output = self._run_log()
        except subprocess.CalledProcessError as e:
            logger.warning(
                "git log failed in %s (exit %s): %s",
                self.repo_path,
                e.returncode,
                (e.stderr or "").strip(),
            )
            return []
        except OSError as e:
            logger.warning("Could not run %s: %s", self.git_executable, e)
            return []

        commits = [c for c in parse_log(output) if c.date > since]
        commits.sort(key=lambda c: c.date)
        return commits
