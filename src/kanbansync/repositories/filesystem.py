"""Filesystem-based store for task files."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from ..models import TaskRecord
from ..models.task import KEY_DESCRIPTION
from ..utils.slug import generate_filename

logger = logging.getLogger(__name__)


class TaskFileError(Exception):
    """A task file could not be read or written."""

    pass


class TaskFileRepository:
    """
    Store for task files kept on the filesystem.

    Tasks are individual .md files with YAML front matter, split between an
    active directory and an archive directory.
    """

    def __init__(self, tasks_dir: Path, archive_dir: Path) -> None:
        """
        Initialize the store.

        Args:
            tasks_dir: Directory holding active task files (e.g., tasks/)
            archive_dir: Directory holding archived task files (e.g., tasks/archive/)
        """
        self.tasks_dir = tasks_dir
        self.archive_dir = archive_dir

    def directory_for(self, archived: bool) -> Path:
        return self.archive_dir if archived else self.tasks_dir

    def ensure_directories(self) -> None:
        """Create both directories if they don't exist."""
        self.tasks_dir.mkdir(parents=True, exist_ok=True)
        self.archive_dir.mkdir(parents=True, exist_ok=True)

    # --- Reading ---

    def list_records(self, archived: bool = False) -> list[TaskRecord]:
        """Load every task file from the active or archive directory."""
        return [
            self.load(filepath, archived=archived)
            for filepath in self._iter_task_files(self.directory_for(archived))
        ]

    def list_all(self) -> list[TaskRecord]:
        """Load active records followed by archived records."""
        return self.list_records(archived=False) + self.list_records(archived=True)

    def load(self, filepath: Path, archived: bool = False) -> TaskRecord:
        """Parse a single task file.

        Raises:
            TaskFileError: If the file can't be read or its front matter is invalid
        """
        try:
            post = frontmatter.load(filepath)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise TaskFileError(f"Cannot read task file {filepath}: {e}") from e

        return TaskRecord.from_frontmatter(
            path=filepath,
            metadata=dict(post.metadata),
            body=post.content,
            archived=archived,
        )

    # --- Writing ---

    def new_record(self, issue_number: int, title: str, archived: bool = False) -> TaskRecord:
        """Create an unsaved, empty record for an issue with no local file."""
        filepath = self.directory_for(archived) / generate_filename(issue_number, title)
        return TaskRecord(path=filepath, archived=archived)

    def upsert(self, record: TaskRecord, updates: dict[str, Any]) -> TaskRecord:
        """
        Merge updates into a record's front matter and write the file.

        Keys in `updates` replace existing keys; all other keys are kept.
        A non-empty description already in the file is never replaced.

        Returns:
            The record as written
        """
        metadata = dict(record.metadata)
        existing_description = metadata.get(KEY_DESCRIPTION)

        metadata.update(updates)
        if existing_description is not None and str(existing_description).strip():
            metadata[KEY_DESCRIPTION] = existing_description

        post = frontmatter.Post(record.body)
        post.metadata = metadata

        try:
            record.path.parent.mkdir(parents=True, exist_ok=True)
            # sort_keys=False preserves original key order
            with record.path.open("w", encoding="utf-8") as f:
                f.write(frontmatter.dumps(post, sort_keys=False))
                f.write("\n")
        except OSError as e:
            raise TaskFileError(f"Cannot write task file {record.path}: {e}") from e

        return TaskRecord.from_frontmatter(
            path=record.path,
            metadata=metadata,
            body=record.body,
            archived=record.archived,
        )

    def relocate(self, record: TaskRecord, archived: bool) -> TaskRecord:
        """
        Move a task file between the active and archive directories.

        The filename is preserved unless another file already has it in the
        target directory; then the record moves to its {issue}-{slug}.md name.
        Returns the record at its new path.

        Raises:
            TaskFileError: If both names are taken or the move fails
        """
        if record.archived == archived:
            return record

        target = self.directory_for(archived) / record.filename
        if target.exists() and record.issue_number is not None:
            target = self.directory_for(archived) / generate_filename(
                record.issue_number, record.display_title
            )
        if target.exists():
            raise TaskFileError(f"Cannot move {record.path}: {target} already exists")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            record.path.rename(target)
        except OSError as e:
            raise TaskFileError(f"Cannot move {record.path} to {target}: {e}") from e

        logger.debug("Moved %s -> %s", record.path, target)
        return record.model_copy(update={"path": target, "archived": archived})

    def remove(self, record: TaskRecord) -> None:
        """Delete a task file."""
        try:
            record.path.unlink(missing_ok=True)
        except OSError as e:
            raise TaskFileError(f"Cannot delete {record.path}: {e}") from e

    # --- Private Methods ---

    def _iter_task_files(self, directory: Path) -> Iterator[Path]:
        """Iterate over the .md files of a directory in filename order."""
        if not directory.is_dir():
            return
        yield from sorted(p for p in directory.glob("*.md") if p.is_file())
