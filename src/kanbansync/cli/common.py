"""Wiring shared by the populate and sync-from commands."""

from ..config import ConfigurationError, Settings
from ..github import GitHubClient
from ..repositories import IssueRepository, ProjectBoardRepository, TaskFileRepository
from ..sync import KanbanSyncEngine
from ..vcs import GitPublisher


def create_client(settings: Settings) -> GitHubClient:
    """Create a client from the configured token, or from the environment.

    Raises:
        GitHubAuthError: If no token is available
    """
    if settings.github_token:
        return GitHubClient(settings.github_token, settings.base_url)
    return GitHubClient.from_environment(settings.base_url)


def create_engine(
    settings: Settings,
    client: GitHubClient,
    publish: bool = False,
) -> KanbanSyncEngine:
    """Build a sync engine for validated settings.

    Args:
        settings: Settings that passed Settings.require()
        client: Authenticated GitHub client
        publish: Commit and push write-backs after populate

    Raises:
        ConfigurationError: If owner, project number or repository is missing
        PublishError: If publish is set outside a git working tree
    """
    if not (settings.owner and settings.project_number and settings.repository):
        raise ConfigurationError("OWNER, PROJECT_NUMBER and GITHUB_REPOSITORY are required")

    store = TaskFileRepository(settings.tasks_dir, settings.archive_dir)
    publisher = GitPublisher(".") if publish else None

    return KanbanSyncEngine(
        board_repo=ProjectBoardRepository(client),
        issue_repo=IssueRepository(client, settings.repository),
        store=store,
        owner=settings.owner,
        project_number=settings.project_number,
        status_field_name=settings.status_field_name,
        publisher=publisher,
    )
