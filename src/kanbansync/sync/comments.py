"""Formatting of issue comments for task front matter."""

import re

from ..models import Comment


def format_comment_line(comment: Comment) -> str:
    """Format a comment as a single front matter line.

    Example: "- [2024-01-05] @octocat: Looks good, merging"
    """
    created = comment.created_at.date().isoformat() if comment.created_at else ""
    author = f"@{comment.author}" if comment.author else "@unknown"
    text = re.sub(r"(\r?\n)+", " ", comment.body).strip()
    return f"- [{created}] {author}: {text}"


def format_comments(comments: list[Comment]) -> str | None:
    """Format user comments as one line each, skipping automation comments.

    Returns:
        The joined lines, or None if no user comments remain
    """
    lines = [format_comment_line(c) for c in comments if not c.is_automated]
    return "\n".join(lines) if lines else None
