"""In-memory index of local task records keyed by issue number."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..models import TaskRecord
from ..repositories.filesystem import TaskFileRepository

logger = logging.getLogger(__name__)


class LocalIndex:
    """Issue number -> task record, built once per sync-from run.

    Records without an issue number are not indexed; they are never matched
    against board items and never deleted by a sync.
    """

    def __init__(self, records: list[TaskRecord] | None = None) -> None:
        self._records: dict[int, TaskRecord] = {}
        for record in records or []:
            if record.issue_number is None:
                continue
            existing = self._records.get(record.issue_number)
            if existing is not None:
                logger.warning(
                    "Issue #%d is claimed by both %s and %s; using %s",
                    record.issue_number,
                    existing.path,
                    record.path,
                    record.path,
                )
            self._records[record.issue_number] = record

    @classmethod
    def build(cls, store: TaskFileRepository) -> LocalIndex:
        """Index the active and archived records of a store."""
        index = cls(store.list_all())
        logger.debug("Indexed %d local task records", len(index))
        return index

    def get(self, issue_number: int) -> TaskRecord | None:
        return self._records.get(issue_number)

    def put(self, record: TaskRecord) -> None:
        """Add or replace a record (it must have an issue number)."""
        if record.issue_number is None:
            raise ValueError(f"Cannot index {record.path}: no issue number")
        self._records[record.issue_number] = record

    def items(self) -> Iterator[tuple[int, TaskRecord]]:
        yield from list(self._records.items())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, issue_number: object) -> bool:
        return issue_number in self._records
