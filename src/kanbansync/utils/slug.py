"""Utilities for generating filesystem-safe slugs."""

import re
import unicodedata

MAX_SLUG_LENGTH = 80


def slugify(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """
    Convert text to a filesystem-safe slug.

    Example: "Fix Login Bug!" -> "fix-login-bug"
    """
    # Normalize unicode characters
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")

    text = text.lower()

    # Collapse every run of non-alphanumerics into a single hyphen
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")

    return text[:max_length].rstrip("-")


def generate_filename(issue_number: int, title: str) -> str:
    """Generate the .md filename for an issue's task file.

    Files written for board items are named {issue_number}-{slug}.md.
    Locally authored files can have any name; they are matched to issues
    by the `issue` key in their front matter, never by filename.

    Example: (42, "Fix login") -> "42-fix-login.md"
    """
    slug = slugify(title) or "task"
    return f"{issue_number}-{slug}.md"
