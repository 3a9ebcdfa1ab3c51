"""Result models for populate and sync-from runs."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class PopulateResult:
    """Result of a populate (local -> board) run."""

    created: list[int] = field(default_factory=list)  # Issue numbers created
    reused: list[int] = field(default_factory=list)  # Existing issues matched
    skipped: list[str] = field(default_factory=list)  # Filenames without a usable title
    fields_set: int = 0  # Board field values written
    comments_upserted: int = 0  # Category comments created or edited
    written_back: list[Path] = field(default_factory=list)  # Files given an issue number
    committed: bool = False

    @property
    def processed_count(self) -> int:
        """Number of records that reached the board."""
        return len(self.created) + len(self.reused)

    @property
    def has_write_back(self) -> bool:
        return len(self.written_back) > 0


@dataclass
class SyncFromResult:
    """Result of a sync-from (board -> local) run."""

    created: list[Path] = field(default_factory=list)  # New local files
    updated: list[Path] = field(default_factory=list)  # Existing files rewritten
    moved: list[Path] = field(default_factory=list)  # Files relocated (new path)
    deleted: list[Path] = field(default_factory=list)  # Files removed
    skipped_items: int = 0  # Board items without issue content

    @property
    def synced_count(self) -> int:
        """Number of files written this run."""
        return len(self.created) + len(self.updated)
