"""Sync engine between local task files and a GitHub Projects board.

This module provides the KanbanSyncEngine class which handles:
- populate: push local task files to GitHub as issues on the board
- sync-from: pull board items and issue metadata back into task files

Each run is sequential and fail-fast: the first failing API call or file
operation raises and aborts the run. Work already done is kept.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..models import (
    Board,
    BoardItem,
    Comment,
    CommentCategory,
    Issue,
    IssueContent,
    PopulateResult,
    SyncFromResult,
    TaskRecord,
)
from ..models.task import (
    KEY_ASSIGNEES,
    KEY_COMMENTS,
    KEY_DESCRIPTION,
    KEY_ISSUE,
    KEY_LABELS,
    KEY_MILESTONE,
    KEY_TITLE,
)
from .comments import format_comments
from .fields import DEFAULT_STATUS_FIELD, board_field_mappings, is_empty, to_frontmatter_value
from .index import LocalIndex

if TYPE_CHECKING:
    from ..repositories.board import ProjectBoardRepository
    from ..repositories.filesystem import TaskFileRepository
    from ..repositories.issues import IssueRepository
    from ..vcs import GitPublisher

logger = logging.getLogger(__name__)

WRITE_BACK_COMMIT_MESSAGE = "Record issue numbers in task files"


class KanbanSyncEngine:
    """Engine for two-way sync between task files and a project board.

    populate (local -> board):
    1. Find or create the issue for each active task file
    2. Write new issue numbers back into the files
    3. Add the issue to the board, push assignees/labels/milestone
    4. Upsert the relationships and automated notes comments
    5. Set the board field values present in the file
    6. Commit and push the written-back files (when a publisher is set)

    sync-from (board -> local):
    1. Index local files by issue number
    2. Create, move or update a file for every issue on the board
    3. Delete files whose issue is no longer on the board
    """

    def __init__(
        self,
        board_repo: ProjectBoardRepository,
        issue_repo: IssueRepository,
        store: TaskFileRepository,
        owner: str,
        project_number: int,
        status_field_name: str = DEFAULT_STATUS_FIELD,
        publisher: GitPublisher | None = None,
    ) -> None:
        """Initialize the sync engine.

        Args:
            board_repo: Project board access
            issue_repo: Issue access for the repository backing the tasks
            store: Local task file store
            owner: Organization or user login that owns the project
            project_number: Project number
            status_field_name: Display name of the board's status field
            publisher: Commits write-backs after populate; None disables it
        """
        self._board_repo = board_repo
        self._issue_repo = issue_repo
        self._store = store
        self._owner = owner
        self._project_number = project_number
        self._field_mappings = board_field_mappings(status_field_name)
        self._publisher = publisher

    def _resolve_board(self) -> Board:
        return self._board_repo.resolve_board(self._owner, self._project_number)

    # --- Public API: populate ---

    def populate(self) -> PopulateResult:
        """Push every active task file to the board.

        Returns:
            PopulateResult with created/reused issues and written-back files
        """
        result = PopulateResult()

        records = self._store.list_records(archived=False)
        if not records:
            logger.info("No task files in %s - nothing to do", self._store.tasks_dir)
            return result

        board = self._resolve_board()
        self._board_repo.fetch_schema(board)

        for record in records:
            self._populate_record(board, record, result)

        if result.has_write_back and self._publisher is not None:
            result.committed = self._publisher.commit_and_push(
                result.written_back, WRITE_BACK_COMMIT_MESSAGE
            )

        return result

    def _populate_record(self, board: Board, record: TaskRecord, result: PopulateResult) -> None:
        title = record.display_title
        if not title:
            logger.warning("Skipping %s - missing title", record.filename)
            result.skipped.append(record.filename)
            return

        ref, created = self._issue_repo.find_or_create(
            title, record.issue_body, issue_number=record.issue_number
        )
        logger.info("%s issue #%d: %s", "Created" if created else "Found", ref.number, ref.url)
        (result.created if created else result.reused).append(ref.number)

        # The issue number must be on disk before any further remote call
        if record.issue_number != ref.number:
            record = self._store.upsert(record, {KEY_ISSUE: ref.number})
            result.written_back.append(record.path)
            logger.info("Wrote issue #%d into %s", ref.number, record.filename)

        item_id = self._board_repo.add_item(board, ref.node_id)
        logger.info("Added issue #%d to project item: %s", ref.number, item_id)

        self._issue_repo.update_metadata(
            ref.number,
            assignees=record.assignees if record.has_key(KEY_ASSIGNEES) else None,
            labels=record.labels if record.has_key(KEY_LABELS) else None,
            milestone=record.milestone,
        )

        comment_bodies = (
            (CommentCategory.RELATIONSHIPS, "\n".join(record.relationships)),
            (CommentCategory.NOTES, record.comments),
        )
        for category, text in comment_bodies:
            if self._issue_repo.upsert_categorized_comment(ref.number, category, text) is not None:
                result.comments_upserted += 1

        result.fields_set += self._push_fields(board, item_id, record)

    def _push_fields(self, board: Board, item_id: str, record: TaskRecord) -> int:
        """Set every mapped field the record has a value for."""
        count = 0
        for mapping in self._field_mappings:
            value = record.get(mapping.key)
            if is_empty(value):
                continue
            field = board.get_field(mapping.board_name)
            if field is None:
                logger.debug("Board has no %r field, skipping %s", mapping.board_name, mapping.key)
                continue
            if self._board_repo.set_field_value(board, item_id, field, value):
                count += 1
        return count

    # --- Public API: sync-from ---

    def sync_from_board(self) -> SyncFromResult:
        """Mirror the board into the task files.

        Returns:
            SyncFromResult with created, updated, moved and deleted files
        """
        result = SyncFromResult()

        self._store.ensure_directories()
        index = LocalIndex.build(self._store)

        board = self._resolve_board()
        items = self._board_repo.list_items(board)

        present: set[int] = set()
        for item in items:
            content = item.issue
            if content is None:
                result.skipped_items += 1
                continue
            present.add(content.number)
            self._sync_item(item, content, index, result)

        # Only after every item was written: drop files that left the board
        self._delete_removed(index, present, result)
        return result

    def _sync_item(
        self,
        item: BoardItem,
        content: IssueContent,
        index: LocalIndex,
        result: SyncFromResult,
    ) -> None:
        number = content.number

        issue = self._issue_repo.get_issue(number)
        comments = self._issue_repo.list_comments(number)

        record = index.get(number)
        is_new = record is None
        if record is None:
            record = self._store.new_record(number, issue.title, archived=item.is_archived)
        elif record.archived != item.is_archived:
            # Move first so the rewrite below targets the new path
            record = self._store.relocate(record, archived=item.is_archived)
            result.moved.append(record.path)

        updates = self._build_updates(item, issue, comments, record)
        record = self._store.upsert(record, updates)
        index.put(record)

        (result.created if is_new else result.updated).append(record.path)
        logger.info(
            "Synced %s (%s)", record.path, "archived" if item.is_archived else "active"
        )

    def _build_updates(
        self,
        item: BoardItem,
        issue: Issue,
        comments: list[Comment],
        record: TaskRecord,
    ) -> dict[str, Any]:
        """Compute the front matter fields a board item dictates."""
        updates: dict[str, Any] = {KEY_TITLE: issue.title}

        if issue.body and is_empty(record.description):
            updates[KEY_DESCRIPTION] = issue.body

        updates[KEY_ISSUE] = issue.number

        for mapping in self._field_mappings:
            value = item.get_value(mapping.board_name)
            if value is not None:
                updates[mapping.key] = to_frontmatter_value(value)

        updates[KEY_ASSIGNEES] = issue.assignees
        updates[KEY_LABELS] = issue.labels
        if issue.milestone:
            updates[KEY_MILESTONE] = issue.milestone

        user_comments = format_comments(comments)
        if user_comments:
            updates[KEY_COMMENTS] = user_comments + "\n"

        return updates

    def _delete_removed(
        self, index: LocalIndex, present: set[int], result: SyncFromResult
    ) -> None:
        for number, record in index.items():
            if number in present:
                continue
            self._store.remove(record)
            result.deleted.append(record.path)
            logger.info("Deleted %s - issue #%d is no longer on the board", record.path, number)
