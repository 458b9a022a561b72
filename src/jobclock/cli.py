"""Jobclock CLI interface."""

import argparse
import sys
from collections.abc import Callable, Sequence

from . import __version__
from .git import CommitImporter, GitImporter
from .logging_setup import setup_logging
from .models import JobclockConfig, Session
from .store import JsonSessionStore, SessionStoreError


def cmd_begin(session: Session, args: argparse.Namespace, importer: CommitImporter) -> str:
    """Start a new job session."""
    return session.begin()


def cmd_end(session: Session, args: argparse.Namespace, importer: CommitImporter) -> str:
    """End the current job session and report on it."""
    return session.end()


def cmd_task(session: Session, args: argparse.Namespace, importer: CommitImporter) -> str:
    """Add a task to the current job session."""
    return session.add_task(" ".join(args.name))


def cmd_status(session: Session, args: argparse.Namespace, importer: CommitImporter) -> str:
    """Show the current job session."""
    return session.status()


def cmd_git(session: Session, args: argparse.Namespace, importer: CommitImporter) -> str:
    """Add tasks for commits made since the session began."""
    return session.import_commits(importer)


Handler = Callable[[Session, argparse.Namespace, CommitImporter], str]

# command -> (handler, persist session afterwards)
HANDLERS: dict[str, tuple[Handler, bool]] = {
    "begin": (cmd_begin, True),
    "end": (cmd_end, True),
    "task": (cmd_task, True),
    "status": (cmd_status, False),
    "git": (cmd_git, True),
    "import": (cmd_git, True),
}

COMMANDS = set(HANDLERS) | {"help", "version"}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="jobclock",
        description="Track job sessions and the tasks done during them",
        add_help=False,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<subcommand>")

    subparsers.add_parser("begin", help="Start a new job session", add_help=False)
    subparsers.add_parser("end", help="End the current job session", add_help=False)

    task_parser = subparsers.add_parser(
        "task", help="Add a new task to the current job session", add_help=False
    )
    task_parser.add_argument("name", nargs=argparse.REMAINDER, help="Task name")

    subparsers.add_parser(
        "status", help="Show the current job session status", add_help=False
    )
    subparsers.add_parser(
        "git",
        aliases=["import"],
        help="Add tasks from git commits made since the session began",
        add_help=False,
    )
    subparsers.add_parser("help", help="Show this message", add_help=False)
    subparsers.add_parser("version", help="Show the Jobclock version", add_help=False)

    return parser


def main(
    argv: Sequence[str] | None = None,
    config: JobclockConfig | None = None,
    store: JsonSessionStore | None = None,
    importer: CommitImporter | None = None,
) -> int:
    """Main CLI entry point."""
    setup_logging()
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)

    if config is None:
        config = JobclockConfig.default()
    if store is None:
        store = JsonSessionStore.from_config(config)

    try:
        session = store.load_or_create()
    except SessionStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not argv:
        print("ERROR: No subcommand found", file=sys.stderr)
        parser.print_help()
        return 0

    if argv[0] in ("-h", "--help"):
        argv[0] = "help"
    if argv[0] not in COMMANDS:
        print(f"ERROR: Invalid command entered: {argv[0]}", file=sys.stderr)
        parser.print_help()
        return 0

    # Extra words after commands that take none are ignored
    args, _ = parser.parse_known_args(argv)
    if args.command == "task":
        # argparse drops words that look like options
        args.name = argv[1:]

    if args.command == "help":
        parser.print_help()
        return 0
    if args.command == "version":
        print(f"Jobclock v{__version__}")
        return 0

    if importer is None:
        importer = GitImporter.from_config(config)

    handler, persist = HANDLERS[args.command]
    print(handler(session, args, importer))

    if persist:
        try:
            store.save(session)
        except SessionStoreError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
