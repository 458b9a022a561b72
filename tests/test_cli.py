"""Tests for the Jobclock CLI."""

import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from jobclock import __version__
from jobclock.cli import main
from jobclock.git import Commit
from jobclock.models import JobclockConfig, local_now
from jobclock.store import JsonSessionStore


class StubImporter:
    """Commit importer returning canned commits."""

    def __init__(self, commits: list[Commit] | None = None):
        self.commits = commits or []

    def fetch_commits_since(self, since: datetime) -> list[Commit]:
        return [c for c in self.commits if c.date > since]


@pytest.fixture
def config(tmp_path: Path) -> JobclockConfig:
    """Configuration isolated in a temporary state directory."""
    return JobclockConfig(state_dir=tmp_path / "jobclock", repo_path=tmp_path)


@pytest.fixture
def store(config: JobclockConfig) -> JsonSessionStore:
    return JsonSessionStore.from_config(config)


@pytest.fixture
def run(config: JobclockConfig, capsys):
    """Run the CLI and return (exit code, stdout, stderr)."""

    def _run(*argv: str, importer=None) -> tuple[int, str, str]:
        code = main(list(argv), config=config, importer=importer or StubImporter())
        out, err = capsys.readouterr()
        return code, out, err

    return _run


class TestSessionCommands:
    """Tests for begin/task/end/status."""

    def test_full_session(self, run, store: JsonSessionStore):
        """Test a begin, two tasks, end scenario."""
        assert run("begin")[1] == "Job session started\n"
        assert run("task", "Write", "report")[1] == "Task added to job session\n"
        assert run("task", "Review", "PR")[1] == "Task added to job session\n"

        code, out, _ = run("end")

        assert code == 0
        assert out.index("Task: Write report") < out.index("Task: Review PR")
        assert "Summary:\nWrite report. Review PR.\n" in out
        assert "Hours: 0.00" in out

        session = store.load()
        assert session is not None
        assert session.working is False
        assert session.tasks == []

    def test_fresh_store_end(self, run, store: JsonSessionStore):
        """Test ending when no session was ever begun."""
        code, out, _ = run("end")

        assert code == 0
        assert out == "No job session to end\n"
        assert store.load().working is False

    def test_begin_twice(self, run, store: JsonSessionStore):
        """Test that a second begin keeps the open session."""
        run("begin")
        run("task", "Write report")
        first = store.load()

        _, out, _ = run("begin")

        assert out == "Job session already started\n"
        second = store.load()
        assert second.start_time == first.start_time
        assert [t.name for t in second.tasks] == ["Write report"]

    def test_task_while_idle(self, run, store: JsonSessionStore):
        """Test that tasks need an open session."""
        _, out, _ = run("task", "Write report")

        assert out == "No job session started\n"
        assert store.load().tasks == []

    def test_empty_task(self, run, store: JsonSessionStore):
        """Test that a task without a name is rejected."""
        run("begin")

        _, out, _ = run("task")

        assert out == "Task name is required\n"
        assert store.load().tasks == []

    def test_task_words_like_options(self, run, store: JsonSessionStore):
        """Test that every word after 'task' is part of the name."""
        run("begin")
        run("task", "-v", "flag", "--help", "text")

        assert [t.name for t in store.load().tasks] == ["-v flag --help text"]

    def test_status(self, run, store: JsonSessionStore):
        """Test status output and that it does not write the store."""
        run("begin")
        run("task", "Write report")
        mtime = store.path.stat().st_mtime_ns

        code, out, _ = run("status")

        assert code == 0
        assert out.startswith("Job session started at ")
        assert "Tasks:\n" in out
        assert " - Write report\n" in out
        assert "Total time: " in out
        assert store.path.stat().st_mtime_ns == mtime

    def test_status_idle(self, run):
        """Test status without an open session."""
        assert run("status")[1] == "No job session started\n"


class TestGitCommand:
    """Tests for the git import command."""

    def test_import_nothing_new(self, run, store: JsonSessionStore):
        """Test an import with no commits since the session began."""
        run("begin")
        old = Commit("abc", "Old work", local_now() - timedelta(days=1))

        _, out, _ = run("git", importer=StubImporter([old]))

        assert out == "Imported 0 tasks from git\n"
        assert store.load().tasks == []

    def test_import_alias(self, run, store: JsonSessionStore):
        """Test importing new commits through the 'import' alias."""
        run("begin")
        new = Commit("abc", "New work", local_now() + timedelta(minutes=1))

        _, out, _ = run("import", importer=StubImporter([new]))

        assert out == "Imported 1 task from git\n"
        assert [t.name for t in store.load().tasks] == ["New work"]

    def test_import_while_idle(self, run):
        """Test that importing needs an open session."""
        assert run("git")[1] == "No job session started\n"


class TestInformationalCommands:
    """Tests for help, version and bad invocations."""

    def test_version(self, run):
        """Test version output."""
        assert run("version")[1] == f"Jobclock v{__version__}\n"

    def test_help(self, run):
        """Test help lists the subcommands."""
        code, out, _ = run("help")

        assert code == 0
        for command in ("begin", "end", "task", "status", "git"):
            assert command in out

    def test_no_subcommand(self, run):
        """Test invocation without a subcommand."""
        code, out, err = run()

        assert code == 0
        assert "ERROR: No subcommand found" in err
        assert "usage: jobclock" in out

    def test_unknown_subcommand(self, run, store: JsonSessionStore):
        """Test an unknown subcommand leaves the store untouched."""
        run("begin")
        before = store.path.read_text()

        code, out, err = run("dance", "now")

        assert code == 0
        assert "ERROR: Invalid command entered: dance" in err
        assert "usage: jobclock" in out
        assert store.path.read_text() == before

    def test_first_run_creates_store(self, run, store: JsonSessionStore):
        """Test that the session file is created on first run."""
        run("version")

        assert store.exists()
        assert store.load().working is False


class TestStorageFailure:
    """Tests for fatal store errors."""

    def test_corrupt_store(self, run, store: JsonSessionStore):
        """Test that a corrupt session file aborts with an error."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{broken")

        code, out, err = run("begin")

        assert code == 1
        assert out == ""
        assert err.startswith("Error: ")
        assert store.path.read_text() == "{broken"

    def test_save_failure(self, run, store: JsonSessionStore, monkeypatch):
        """Test that failing to persist the session exits with an error."""
        run("begin")
        before = store.path.read_text()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)

        code, out, err = run("end")

        assert code == 1
        assert out.startswith("Job session ended")
        assert err.startswith("Error: ")
        assert "disk full" in err
        assert store.path.read_text() == before

    def test_state_dir_unusable(self, run, config: JobclockConfig):
        """Test that a state directory blocked by a file aborts on first run."""
        Path(config.state_dir).write_text("not a directory")

        code, out, err = run("status")

        assert code == 1
        assert out == ""
        assert err.startswith("Error: ")


class TestHelpFlags:
    """Tests for -h/--help after a subcommand."""

    @pytest.mark.parametrize("command", ["begin", "end", "status", "git", "version", "help"])
    def test_help_flag_does_not_exit(self, run, command: str):
        """Test that main returns a code instead of raising SystemExit."""
        code, _, _ = run(command, "-h")

        assert code == 0

    def test_help_flag_after_begin_still_begins(self, run, store: JsonSessionStore):
        """Test that extra flags after a subcommand are ignored."""
        _, out, _ = run("begin", "--help")

        assert out == "Job session started\n"
        assert store.load().working is True
