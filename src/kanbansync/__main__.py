"""CLI entry point for kanban-sync."""

import argparse
from pathlib import Path

from .config import Settings
from .logging import setup_logging


def _add_board_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by both commands; each overrides its environment variable."""
    parser.add_argument(
        "--owner",
        default=None,
        help="Organization or user owning the project (env: OWNER)",
    )
    parser.add_argument(
        "--project-number",
        type=int,
        default=None,
        help="Project number (env: PROJECT_NUMBER)",
    )
    parser.add_argument(
        "--repo",
        default=None,
        metavar="OWNER/NAME",
        help="Repository holding the issues (env: GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--tasks-dir",
        type=Path,
        default=None,
        help="Directory of active task files (env: TASKS_DIR, default: tasks)",
    )
    parser.add_argument(
        "--archive-dir",
        type=Path,
        default=None,
        help="Directory of archived task files (env: TASKS_ARCHIVE_DIR)",
    )
    parser.add_argument(
        "--status-field",
        default=None,
        help="Name of the board's status field (env: STATUS_FIELD_NAME, default: Status)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kanban-sync",
        description="Synchronize markdown task files with a GitHub Projects board",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    populate = subparsers.add_parser(
        "populate",
        help="Create issues for task files and set their board fields",
    )
    _add_board_arguments(populate)
    populate.add_argument(
        "--commit",
        action="store_true",
        default=None,
        help="Commit and push issue numbers written back to task files (env: COMMIT_CHANGES)",
    )

    sync_from = subparsers.add_parser(
        "sync-from",
        help="Write the board's items into task files",
    )
    _add_board_arguments(sync_from)

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, with CLI arguments taking precedence."""
    overrides = {
        "owner": args.owner,
        "project_number": args.project_number,
        "repository": args.repo,
        "tasks_dir": args.tasks_dir,
        "tasks_archive_dir": args.archive_dir,
        "status_field_name": args.status_field,
        "commit": getattr(args, "commit", None),
        "log_file": args.log_file,
    }
    settings_kwargs: dict = {k: v for k, v in overrides.items() if v is not None}
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose

    return Settings(**settings_kwargs)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)

    setup_logging(settings.verbose, settings.log_file)

    if args.command == "populate":
        from .cli.populate import run_populate

        exit_code = run_populate(settings)
    else:
        from .cli.sync_from import run_sync_from

        exit_code = run_sync_from(settings)

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
