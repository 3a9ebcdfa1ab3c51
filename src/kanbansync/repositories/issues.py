"""GitHub issue access (REST API)."""

from __future__ import annotations

import logging
from typing import Any

from ..github import GitHubClient, GitHubNotFoundError
from ..models import Comment, CommentCategory, Issue, IssueRef

logger = logging.getLogger(__name__)

DEFAULT_LABEL_COLOR = "ededed"


class IssueRepository:
    """Issue CRUD, metadata and comments for one repository."""

    def __init__(self, client: GitHubClient, repository: str) -> None:
        """Initialize the repository.

        Args:
            client: Authenticated GitHub client
            repository: Repository in "owner/name" form
        """
        if "/" not in repository:
            raise ValueError(f"Repository must be 'owner/name', got {repository!r}")
        self._client = client
        self.repository = repository
        self._repo_path = f"/repos/{repository}"

        # Repository label names, fetched on first metadata update
        self._label_names: set[str] | None = None

    # --- Issues ---

    def get_issue(self, number: int) -> Issue:
        """Fetch an issue.

        Raises:
            GitHubNotFoundError: If the issue doesn't exist or is a pull request
        """
        data = self._client.request("GET", f"{self._repo_path}/issues/{number}")
        issue = Issue.from_api(data)
        if issue.is_pull_request:
            raise GitHubNotFoundError(f"#{number} is a pull request, not an issue")
        return issue

    def find_or_create(
        self,
        title: str,
        body: str,
        issue_number: int | None = None,
    ) -> tuple[IssueRef, bool]:
        """Find the issue for a task or create it.

        Resolution order:
        1. issue_number, if given and it still resolves to an issue
        2. an open or closed issue in this repository with exactly this title
        3. a newly created issue

        Returns:
            (issue reference, True if the issue was created)
        """
        if issue_number is not None:
            try:
                return self.get_issue(issue_number).ref, False
            except GitHubNotFoundError:
                logger.warning(
                    "Issue #%d no longer resolves, falling back to title search", issue_number
                )

        existing = self.search_by_title(title)
        if existing is not None:
            return existing, False

        data = self._client.request(
            "POST",
            f"{self._repo_path}/issues",
            json={"title": title, "body": body},
        )
        created = Issue.from_api(data)
        logger.info("Created issue #%d: %s", created.number, created.url)
        return created.ref, True

    def search_by_title(self, title: str) -> IssueRef | None:
        """Find an issue (not a pull request) whose title matches exactly."""
        escaped = title.replace('"', '\\"')
        query = f'repo:{self.repository} is:issue "{escaped}" in:title'
        data = self._client.request("GET", "/search/issues", params={"q": query})

        for item in (data or {}).get("items", []):
            if item.get("title") == title and "pull_request" not in item:
                return Issue.from_api(item).ref
        return None

    def update_metadata(
        self,
        number: int,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        milestone: str | None = None,
    ) -> bool:
        """Update assignees, labels and milestone of an issue.

        Only arguments that are not None are sent. A milestone title that
        matches no open milestone is left out. Labels missing from the
        repository are created first.

        Returns:
            True if an update was sent
        """
        payload: dict[str, Any] = {}

        if assignees is not None:
            payload["assignees"] = list(assignees)

        if labels is not None:
            self._ensure_labels(labels)
            payload["labels"] = list(labels)

        if milestone:
            milestone_number = self._resolve_milestone(milestone)
            if milestone_number is not None:
                payload["milestone"] = milestone_number
            else:
                logger.warning("Milestone %r not found among open milestones", milestone)

        if not payload:
            return False

        self._client.request("PATCH", f"{self._repo_path}/issues/{number}", json=payload)
        logger.debug("Updated metadata of #%d: %s", number, sorted(payload))
        return True

    # --- Comments ---

    def list_comments(self, number: int) -> list[Comment]:
        """Fetch every comment of an issue, oldest first."""
        return [
            Comment.from_api(data)
            for data in self._client.paginate(f"{self._repo_path}/issues/{number}/comments")
        ]

    def upsert_categorized_comment(
        self,
        number: int,
        category: CommentCategory,
        body: str | None,
    ) -> Comment | None:
        """Create or replace the single comment owned by a category.

        The first comment starting with the category marker is edited;
        without one a new comment is added. An empty body does nothing.

        Returns:
            The written comment, or None if nothing was written
        """
        text = (body or "").strip()
        if not text:
            return None

        full_body = f"{category.marker}\n\n{text}"

        for comment in self.list_comments(number):
            if not comment.body.startswith(category.marker):
                continue
            if comment.body == full_body:
                logger.debug("%s comment on #%d unchanged", category.value, number)
                return None
            data = self._client.request(
                "PATCH",
                f"{self._repo_path}/issues/comments/{comment.id}",
                json={"body": full_body},
            )
            logger.debug("Updated %s comment on #%d", category.value, number)
            return Comment.from_api(data)

        data = self._client.request(
            "POST",
            f"{self._repo_path}/issues/{number}/comments",
            json={"body": full_body},
        )
        logger.debug("Added %s comment on #%d", category.value, number)
        return Comment.from_api(data)

    # --- Private Methods ---

    def _resolve_milestone(self, title: str) -> int | None:
        """Find an open milestone by case-insensitive title."""
        wanted = title.strip().lower()
        for milestone in self._client.paginate(
            f"{self._repo_path}/milestones", params={"state": "open"}
        ):
            if str(milestone.get("title", "")).lower() == wanted:
                return milestone["number"]
        return None

    def _ensure_labels(self, labels: list[str]) -> None:
        """Create any label that doesn't exist in the repository yet."""
        if self._label_names is None:
            self._label_names = {
                label["name"] for label in self._client.paginate(f"{self._repo_path}/labels")
            }
            logger.debug("Fetched %d labels from %s", len(self._label_names), self.repository)

        known = {name.lower() for name in self._label_names}
        for name in labels:
            if name.lower() in known:
                continue
            self._client.request(
                "POST",
                f"{self._repo_path}/labels",
                json={"name": name, "color": DEFAULT_LABEL_COLOR},
            )
            self._label_names.add(name)
            known.add(name.lower())
            logger.info("Created label %r in %s", name, self.repository)
