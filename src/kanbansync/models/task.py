"""Task record domain model."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# Front matter keys understood by the sync
KEY_ISSUE = "issue"
KEY_TITLE = "title"
KEY_DESCRIPTION = "description"
KEY_STATUS = "status"
KEY_ASSIGNEES = "assignees"
KEY_LABELS = "labels"
KEY_MILESTONE = "milestone"
KEY_COMMENTS = "comments"
KEY_RELATIONSHIPS = "relationships"


class TaskRecord(BaseModel):
    """Represents a single task from a markdown file.

    The raw front matter is kept in `metadata` so that keys the sync does not
    know about survive a rewrite. The typed attributes are parsed from it.
    """

    path: Path
    archived: bool = False  # True when the file lives in the archive directory

    # Parsed front matter
    issue_number: int | None = None
    title: str | None = None
    description: str | None = None
    status: str | None = None
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    milestone: str | None = None
    comments: str | None = None
    relationships: list[str] = Field(default_factory=list)

    metadata: dict[str, Any] = Field(default_factory=dict)
    body: str = ""  # Markdown content after front matter

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def display_title(self) -> str:
        """Title for issues - falls back to the filename without .md."""
        if self.title and self.title.strip():
            return self.title.strip()
        return self.path.stem.strip()

    @property
    def issue_body(self) -> str:
        """Body for a new issue: description, else the markdown content."""
        return (self.description or self.body or "").strip()

    def has_key(self, key: str) -> bool:
        return key in self.metadata

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw front matter value."""
        return self.metadata.get(key, default)

    @classmethod
    def from_frontmatter(
        cls,
        path: Path,
        metadata: dict[str, Any],
        body: str,
        archived: bool = False,
    ) -> "TaskRecord":
        """Create TaskRecord from parsed front matter."""
        return cls(
            path=path,
            archived=archived,
            issue_number=_parse_issue_number(metadata.get(KEY_ISSUE)),
            title=_as_str(metadata.get(KEY_TITLE)),
            description=_as_str(metadata.get(KEY_DESCRIPTION)),
            status=_as_str(metadata.get(KEY_STATUS)),
            assignees=_as_list(metadata.get(KEY_ASSIGNEES)),
            labels=_as_list(metadata.get(KEY_LABELS)),
            milestone=_as_str(metadata.get(KEY_MILESTONE)),
            comments=_as_str(metadata.get(KEY_COMMENTS)),
            relationships=_as_list(metadata.get(KEY_RELATIONSHIPS)),
            metadata=dict(metadata),
            body=body,
        )


def _parse_issue_number(value: Any) -> int | None:
    """Parse an issue number; anything that isn't a positive integer is None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip().lstrip("#"))
    except ValueError:
        return None
    return number if number > 0 else None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_list(value: Any) -> list[str]:
    """Coerce a scalar or list front matter value to a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    text = str(value).strip()
    return [text] if text else []
