"""Git commit history import for Jobclock."""

from .importer import CommitImporter, GitImporter
from .models import Commit, parse_log

__all__ = [
    "CommitImporter",
    "GitImporter",
    "Commit",
    "parse_log",
]
