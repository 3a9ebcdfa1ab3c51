"""Issue domain models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..utils.datetime import from_iso


class CommentCategory(str, Enum):
    """Automation-owned comment slots.

    Each category owns at most one comment per issue, recognized by the
    fixed marker the comment body starts with.
    """

    RELATIONSHIPS = "relationships"
    NOTES = "notes"

    @property
    def marker(self) -> str:
        """Fixed prefix identifying comments of this category."""
        return _MARKERS[self]


_MARKERS = {
    CommentCategory.RELATIONSHIPS: "**Relationships**",
    CommentCategory.NOTES: "**Automated Notes**",
}


def is_automated_comment(body: str | None) -> bool:
    """Check if a comment body belongs to an automation category."""
    if not body:
        return False
    return any(body.startswith(category.marker) for category in CommentCategory)


class IssueRef(BaseModel):
    """Lightweight reference to a created/existing issue."""

    number: int
    node_id: str
    url: str = ""


class Issue(BaseModel):
    """A GitHub issue with the metadata the sync reads."""

    number: int
    node_id: str
    title: str = ""
    body: str = ""
    url: str = ""
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    milestone: str | None = None
    is_pull_request: bool = False

    @property
    def ref(self) -> IssueRef:
        return IssueRef(number=self.number, node_id=self.node_id, url=self.url)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Issue":
        """Create an Issue from a REST issue payload."""
        labels = []
        for label in data.get("labels") or []:
            name = label if isinstance(label, str) else label.get("name")
            if name:
                labels.append(name)
        milestone = data.get("milestone") or {}
        return cls(
            number=data["number"],
            node_id=data.get("node_id", ""),
            title=data.get("title") or "",
            body=data.get("body") or "",
            url=data.get("html_url") or "",
            assignees=[a["login"] for a in data.get("assignees") or [] if a.get("login")],
            labels=labels,
            milestone=milestone.get("title"),
            is_pull_request="pull_request" in data,
        )


class Comment(BaseModel):
    """An issue comment."""

    id: int
    body: str = ""
    author: str | None = None
    created_at: datetime | None = None

    @property
    def is_automated(self) -> bool:
        return is_automated_comment(self.body)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Comment":
        """Create a Comment from a REST comment payload."""
        user = data.get("user") or {}
        created = data.get("created_at")
        return cls(
            id=data["id"],
            body=data.get("body") or "",
            author=user.get("login"),
            created_at=from_iso(created) if created else None,
        )
