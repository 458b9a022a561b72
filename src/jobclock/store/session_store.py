"""JSON file store for the job session."""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import JobclockConfig, Session

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """The session file exists but could not be read or written."""

    pass


class JsonSessionStore:
    """Store holding exactly one serialized Session in a JSON file."""

    def __init__(self, path: str | Path):
        """Initialize the store.

        Args:
            path: Location of the session file. Its directory is created on save.
        """
        self.path = Path(path)

    @classmethod
    def from_config(cls, config: JobclockConfig) -> "JsonSessionStore":
        """Create a store for the configured session file."""
        return cls(config.session_file)

    def exists(self) -> bool:
        """Check whether a session has been persisted."""
        return self.path.exists()

    def _read_json(self) -> dict[str, Any]:
        """Read and parse the session file."""
        with open(self.path) as f:
            return json.load(f)

    def _write_json(self, data: dict[str, Any]) -> None:
        """Write data to the session file atomically."""
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def load(self) -> Session | None:
        """Load the persisted session, or None if nothing was saved yet."""
        if not self.exists():
            return None

        try:
            session = Session.from_dict(self._read_json())
        except (OSError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"Cannot read session file {self.path}: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise SessionStoreError(f"Corrupt session file {self.path}: {e!r}") from e

        logger.debug("Loaded session from %s (working=%s)", self.path, session.working)
        return session

    def save(self, session: Session) -> None:
        """Persist the session, creating the containing directory if needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write_json(session.to_dict())
        except OSError as e:
            raise SessionStoreError(f"Cannot write session file {self.path}: {e}") from e

        logger.debug("Saved session to %s", self.path)

    def load_or_create(self, now: datetime | None = None) -> Session:
        """Load the session, creating and persisting a fresh one if absent."""
        session = self.load()
        if session is None:
            session = Session.new(now=now)
            self.save(session)
        return session
