"""Sync-from command: mirror the project board into local task files."""

import logging

from ..config import ConfigurationError, Settings
from ..github import GitHubAuthError, GitHubClientError
from ..models import SyncFromResult
from ..repositories import TaskFileError
from .common import create_client, create_engine
from .output import error, header, info, success

logger = logging.getLogger(__name__)


def run_sync_from(settings: Settings) -> int:
    """Write the board's items and field values into task files.

    Args:
        settings: Application settings

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        settings.require()
    except ConfigurationError as e:
        error(f"Configuration error: {e}")
        return 1

    header("Authenticating with GitHub...")
    try:
        client = create_client(settings)
    except GitHubAuthError as e:
        error(f"GitHub authentication failed: {e}")
        info("Set PROJECTS_TOKEN or GITHUB_TOKEN, or run 'gh auth login'")
        return 1

    with client:
        try:
            engine = create_engine(settings, client)
            header(f"Syncing project #{settings.project_number} into {settings.tasks_dir}...")
            result = engine.sync_from_board()
        except GitHubClientError as e:
            error(f"GitHub error: {e}")
            return 1
        except (TaskFileError, OSError) as e:
            error(str(e))
            return 1

    _display_result(result)
    return 0


def _display_result(result: SyncFromResult) -> None:
    """Display summary of a sync-from run."""
    print()
    success(f"Synced {result.synced_count} file(s)")
    if result.created:
        info(f"Created: {len(result.created)}")
    if result.updated:
        info(f"Updated: {len(result.updated)}")
    for path in result.moved:
        info(f"Moved: {path}")
    for path in result.deleted:
        info(f"Deleted: {path}")
    if result.skipped_items:
        info(f"Skipped {result.skipped_items} item(s) without an issue")
