"""Populate command: push local task files to the project board."""

import logging

from ..config import ConfigurationError, Settings
from ..github import GitHubAuthError, GitHubClientError
from ..models import PopulateResult
from ..repositories import TaskFileError
from ..vcs import PublishError
from .common import create_client, create_engine
from .output import error, header, info, success

logger = logging.getLogger(__name__)


def run_populate(settings: Settings) -> int:
    """Create or reuse issues for task files and set their board fields.

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
            engine = create_engine(settings, client, publish=settings.commit)
            header(f"Populating project #{settings.project_number} from {settings.tasks_dir}...")
            result = engine.populate()
        except GitHubClientError as e:
            error(f"GitHub error: {e}")
            return 1
        except (TaskFileError, PublishError, OSError) as e:
            error(str(e))
            return 1

    _display_result(result)
    return 0


def _display_result(result: PopulateResult) -> None:
    """Display summary of a populate run."""
    print()
    if result.processed_count == 0 and not result.skipped:
        info("No task files found - nothing to do")
        return

    success(f"Processed {result.processed_count} task(s)")
    if result.created:
        info(f"Created issues: {', '.join(f'#{n}' for n in result.created)}")
    if result.reused:
        info(f"Reused issues: {', '.join(f'#{n}' for n in result.reused)}")
    if result.skipped:
        info(f"Skipped (no title): {', '.join(result.skipped)}")
    info(f"Field values set: {result.fields_set}")
    info(f"Comments written: {result.comments_upserted}")
    if result.written_back:
        info(f"Issue numbers written to {len(result.written_back)} file(s)")
        if result.committed:
            success("Committed and pushed task file changes")
