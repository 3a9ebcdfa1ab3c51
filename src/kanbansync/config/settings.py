"""Application settings."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from ..github.client import DEFAULT_BASE_URL


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""

    pass


class Settings(BaseSettings):
    """Application settings.

    Read from KANBAN_SYNC_* environment variables; the plain names used by
    CI workflows (OWNER, PROJECT_NUMBER, TASKS_DIR, ...) are accepted too.
    """

    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("KANBAN_SYNC_TOKEN", "PROJECTS_TOKEN", "GITHUB_TOKEN"),
        description="Token with repo and project scopes (falls back to gh CLI)",
    )

    owner: str | None = Field(
        default=None,
        validation_alias=AliasChoices("KANBAN_SYNC_OWNER", "OWNER"),
        description="Organization or user login owning the project",
    )

    project_number: int | None = Field(
        default=None,
        validation_alias=AliasChoices("KANBAN_SYNC_PROJECT_NUMBER", "PROJECT_NUMBER"),
        description="Project (v2) number",
    )

    repository: str | None = Field(
        default=None,
        validation_alias=AliasChoices("KANBAN_SYNC_REPOSITORY", "GITHUB_REPOSITORY"),
        description="Repository holding the issues, as owner/name",
    )

    status_field_name: str = Field(
        default="Status",
        validation_alias=AliasChoices("KANBAN_SYNC_STATUS_FIELD_NAME", "STATUS_FIELD_NAME"),
        description="Display name of the board's status field",
    )

    tasks_dir: Path = Field(
        default=Path("tasks"),
        validation_alias=AliasChoices("KANBAN_SYNC_TASKS_DIR", "TASKS_DIR"),
        description="Directory holding active task files",
    )

    tasks_archive_dir: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("KANBAN_SYNC_TASKS_ARCHIVE_DIR", "TASKS_ARCHIVE_DIR"),
        description="Directory holding archived task files (default: <tasks_dir>/archive)",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias=AliasChoices("KANBAN_SYNC_BASE_URL", "GITHUB_API_HOST"),
        description="GitHub API host, for Enterprise",
    )

    commit: bool = Field(
        default=False,
        validation_alias=AliasChoices("KANBAN_SYNC_COMMIT", "COMMIT_CHANGES"),
        description="Commit and push issue numbers written back by populate",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "KANBAN_SYNC_",
        "populate_by_name": True,
    }

    @property
    def archive_dir(self) -> Path:
        """Archive directory, defaulting to an 'archive' folder in tasks_dir."""
        if self.tasks_archive_dir is not None:
            return self.tasks_archive_dir
        return self.tasks_dir / "archive"

    def require(self) -> None:
        """Check the values every run needs.

        Raises:
            ConfigurationError: Listing every missing or invalid value
        """
        problems: list[str] = []
        if not self.owner:
            problems.append("OWNER is required")
        if not self.project_number or self.project_number <= 0:
            problems.append("PROJECT_NUMBER is required (a positive integer)")
        if not self.repository:
            problems.append("GITHUB_REPOSITORY is required (owner/name)")
        elif self.repository.count("/") != 1 or not all(self.repository.split("/")):
            problems.append(f"GITHUB_REPOSITORY must be owner/name, got {self.repository!r}")

        if problems:
            raise ConfigurationError("; ".join(problems))
