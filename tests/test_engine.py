"""Tests for KanbanSyncEngine using a real task directory and mocked GitHub access."""

from datetime import UTC, date, datetime
from pathlib import Path
from unittest.mock import MagicMock

import frontmatter
import pytest

from kanbansync.github import GitHubClientError
from kanbansync.models import (
    Board,
    BoardItem,
    Comment,
    CommentCategory,
    DateValue,
    FieldOption,
    Issue,
    IssueContent,
    IssueRef,
    NumberValue,
    ProjectField,
    SingleSelectValue,
)
from kanbansync.repositories import IssueRepository, TaskFileRepository
from kanbansync.sync import KanbanSyncEngine
from kanbansync.sync.engine import WRITE_BACK_COMMIT_MESSAGE


def _ref(number: int) -> IssueRef:
    return IssueRef(number=number, node_id=f"I_{number}", url=f"https://x/issues/{number}")


def _issue(number: int, title: str, **extra) -> Issue:
    return Issue(number=number, node_id=f"I_{number}", title=title, **extra)


def _item(number: int, title: str = "", archived: bool = False, **values) -> BoardItem:
    return BoardItem(
        id=f"PVTI_{number}",
        is_archived=archived,
        issue=IssueContent(node_id=f"I_{number}", number=number, title=title),
        field_values=values,
    )


@pytest.fixture
def tasks_dir(tmp_path: Path) -> Path:
    path = tmp_path / "tasks"
    path.mkdir()
    return path


@pytest.fixture
def store(tasks_dir: Path) -> TaskFileRepository:
    return TaskFileRepository(tasks_dir, tasks_dir / "archive")


@pytest.fixture
def board() -> Board:
    return Board(
        id="PVT_1",
        owner="acme",
        number=7,
        fields=[
            ProjectField(
                id="F_status",
                name="Status",
                data_type="SINGLE_SELECT",
                options=[FieldOption(id="o_todo", name="Todo")],
            ),
            ProjectField(id="F_est", name="Estimate", data_type="NUMBER"),
        ],
    )


@pytest.fixture
def board_repo(board: Board) -> MagicMock:
    repo = MagicMock()
    repo.resolve_board.return_value = board
    repo.add_item.return_value = "PVTI_42"
    repo.set_field_value.return_value = True
    repo.list_items.return_value = []
    return repo


@pytest.fixture
def issue_repo() -> MagicMock:
    repo = MagicMock()
    repo.upsert_categorized_comment.return_value = None
    repo.list_comments.return_value = []
    return repo


@pytest.fixture
def engine(board_repo, issue_repo, store) -> KanbanSyncEngine:
    return KanbanSyncEngine(board_repo, issue_repo, store, owner="acme", project_number=7)


class TestPopulate:
    """Tests for populate (task files -> board)."""

    def test_creates_issue_and_writes_number_back(
        self, engine, board_repo, issue_repo, tasks_dir, board
    ):
        """A new task gets an issue, its number on disk and its status on the board."""
        path = tasks_dir / "fix-login.md"
        path.write_text("---\ntitle: Fix login\nstatus: Todo\n---\n")
        issue_repo.find_or_create.return_value = (_ref(42), True)

        result = engine.populate()

        assert result.created == [42]
        assert result.written_back == [path]
        assert frontmatter.load(path)["issue"] == 42
        issue_repo.find_or_create.assert_called_once_with("Fix login", "", issue_number=None)
        board_repo.add_item.assert_called_once_with(board, "I_42")
        board_repo.set_field_value.assert_called_once_with(
            board, "PVTI_42", board.get_field("Status"), "Todo"
        )
        assert result.fields_set == 1

    def test_rerun_reuses_issue_without_write_back(self, engine, issue_repo, tasks_dir):
        """A file that already has its issue number is not rewritten."""
        path = tasks_dir / "fix-login.md"
        path.write_text("---\ntitle: Fix login\nissue: 42\n---\n")
        before = path.read_text()
        issue_repo.find_or_create.return_value = (_ref(42), False)

        result = engine.populate()

        assert result.reused == [42]
        assert result.written_back == []
        assert path.read_text() == before
        issue_repo.find_or_create.assert_called_once_with("Fix login", "", issue_number=42)

    def test_metadata_only_for_present_keys(self, engine, issue_repo, tasks_dir):
        """Assignees and labels are pushed only when the file has the key."""
        (tasks_dir / "a.md").write_text(
            "---\ntitle: A\nissue: 1\nlabels: [bug]\nmilestone: v1\n---\n"
        )
        issue_repo.find_or_create.return_value = (_ref(1), False)

        engine.populate()

        issue_repo.update_metadata.assert_called_once_with(
            1, assignees=None, labels=["bug"], milestone="v1"
        )

    def test_category_comments(self, engine, issue_repo, tasks_dir):
        """Relationships go one per line; notes come from the comments key."""
        (tasks_dir / "a.md").write_text(
            "---\ntitle: A\nissue: 1\n"
            "relationships: [blocks #2, relates to #3]\n"
            "comments: Remember the edge case\n---\n"
        )
        issue_repo.find_or_create.return_value = (_ref(1), False)
        issue_repo.upsert_categorized_comment.side_effect = [MagicMock(), None]

        result = engine.populate()

        calls = issue_repo.upsert_categorized_comment.call_args_list
        assert calls[0].args == (1, CommentCategory.RELATIONSHIPS, "blocks #2\nrelates to #3")
        assert calls[1].args == (1, CommentCategory.NOTES, "Remember the edge case")
        assert result.comments_upserted == 1

    def test_fields_missing_from_board_skipped(self, engine, board_repo, issue_repo, tasks_dir):
        """Keys whose board field doesn't exist, and empty values, are not pushed."""
        (tasks_dir / "a.md").write_text(
            "---\ntitle: A\nissue: 1\nstatus: ''\nestimate: 3\npriority: High\n---\n"
        )
        issue_repo.find_or_create.return_value = (_ref(1), False)

        engine.populate()

        pushed = [c.args[2].name for c in board_repo.set_field_value.call_args_list]
        assert pushed == ["Estimate"]

    def test_empty_directory_makes_no_calls(self, engine, board_repo):
        result = engine.populate()

        assert result.processed_count == 0
        board_repo.resolve_board.assert_not_called()

    def test_archive_not_populated(self, engine, issue_repo, tasks_dir):
        """Only the active directory is pushed."""
        (tasks_dir / "archive").mkdir()
        (tasks_dir / "archive" / "old.md").write_text("---\ntitle: Old\n---\n")

        engine.populate()

        issue_repo.find_or_create.assert_not_called()

    def test_failure_keeps_written_number(self, engine, board_repo, issue_repo, tasks_dir):
        """A failure after issue creation still leaves the number in the file."""
        path = tasks_dir / "a.md"
        path.write_text("---\ntitle: A\n---\n")
        issue_repo.find_or_create.return_value = (_ref(9), True)
        board_repo.add_item.side_effect = GitHubClientError("boom")

        with pytest.raises(GitHubClientError):
            engine.populate()

        assert frontmatter.load(path)["issue"] == 9

    def test_publisher_commits_written_back_files(
        self, board_repo, issue_repo, store, tasks_dir
    ):
        publisher = MagicMock()
        publisher.commit_and_push.return_value = True
        engine = KanbanSyncEngine(
            board_repo, issue_repo, store, owner="acme", project_number=7, publisher=publisher
        )
        path = tasks_dir / "a.md"
        path.write_text("---\ntitle: A\n---\n")
        issue_repo.find_or_create.return_value = (_ref(3), True)

        result = engine.populate()

        publisher.commit_and_push.assert_called_once_with([path], WRITE_BACK_COMMIT_MESSAGE)
        assert result.committed is True

    def test_publisher_skipped_without_write_back(self, board_repo, issue_repo, store, tasks_dir):
        publisher = MagicMock()
        engine = KanbanSyncEngine(
            board_repo, issue_repo, store, owner="acme", project_number=7, publisher=publisher
        )
        (tasks_dir / "a.md").write_text("---\ntitle: A\nissue: 3\n---\n")
        issue_repo.find_or_create.return_value = (_ref(3), False)

        engine.populate()

        publisher.commit_and_push.assert_not_called()


class TestSyncFromBoard:
    """Tests for sync-from (board -> task files)."""

    def test_creates_file_for_new_item(self, engine, board_repo, issue_repo, tasks_dir):
        board_repo.list_items.return_value = [
            _item(
                42,
                Status=SingleSelectValue(value="Todo"),
                Estimate=NumberValue(value=3.0),
                **{"Planned Start": DateValue(value=date(2024, 3, 1))},
            )
        ]
        issue_repo.get_issue.return_value = _issue(
            42,
            "Fix login",
            body="Users cannot log in",
            assignees=["alice"],
            labels=["bug"],
            milestone="v1",
        )
        issue_repo.list_comments.return_value = [
            Comment(
                id=1,
                body="Looks good",
                author="bob",
                created_at=datetime(2024, 1, 5, tzinfo=UTC),
            ),
            Comment(id=2, body="**Automated Notes**\n\nmine", author="bot"),
        ]

        result = engine.sync_from_board()

        path = tasks_dir / "42-fix-login.md"
        assert result.created == [path]
        post = frontmatter.load(path)
        assert post["title"] == "Fix login"
        assert post["description"] == "Users cannot log in"
        assert post["issue"] == 42
        assert post["status"] == "Todo"
        assert post["estimate"] == 3
        assert post["plannedStart"] == date(2024, 3, 1)
        assert post["assignees"] == ["alice"]
        assert post["labels"] == ["bug"]
        assert post["milestone"] == "v1"
        assert post["comments"].strip() == "- [2024-01-05] @bob: Looks good"

    def test_updates_existing_file_in_place(self, engine, board_repo, issue_repo, tasks_dir):
        """Existing files keep their name, description and unknown keys."""
        path = tasks_dir / "my-own-name.md"
        path.write_text(
            "---\ntitle: Old\nissue: 5\ndescription: Local text\nowner: team-a\n---\nNotes\n"
        )
        board_repo.list_items.return_value = [_item(5, Status=SingleSelectValue(value="Todo"))]
        issue_repo.get_issue.return_value = _issue(5, "New title", body="Remote text")

        result = engine.sync_from_board()

        assert result.updated == [path]
        post = frontmatter.load(path)
        assert post["title"] == "New title"
        assert post["description"] == "Local text"
        assert post["owner"] == "team-a"
        assert post["status"] == "Todo"
        assert post.content.strip() == "Notes"
        assert list(tasks_dir.glob("*.md")) == [path]

    def test_archived_item_moves_file(self, engine, board_repo, issue_repo, tasks_dir):
        path = tasks_dir / "5-task.md"
        path.write_text("---\ntitle: Task\nissue: 5\n---\n")
        board_repo.list_items.return_value = [_item(5, archived=True)]
        issue_repo.get_issue.return_value = _issue(5, "Task")

        result = engine.sync_from_board()

        archived = tasks_dir / "archive" / "5-task.md"
        assert result.moved == [archived]
        assert not path.exists()
        assert frontmatter.load(archived)["issue"] == 5

    def test_unarchived_item_moves_back(self, engine, board_repo, issue_repo, tasks_dir):
        (tasks_dir / "archive").mkdir()
        (tasks_dir / "archive" / "5-task.md").write_text("---\ntitle: Task\nissue: 5\n---\n")
        board_repo.list_items.return_value = [_item(5)]
        issue_repo.get_issue.return_value = _issue(5, "Task")

        engine.sync_from_board()

        assert (tasks_dir / "5-task.md").exists()

    def test_deletes_files_no_longer_on_board(self, engine, board_repo, issue_repo, tasks_dir):
        """Numbered files without a board item are deleted; unnumbered ones are kept."""
        (tasks_dir / "gone.md").write_text("---\ntitle: Gone\nissue: 8\n---\n")
        (tasks_dir / "draft.md").write_text("---\ntitle: Draft\n---\n")
        board_repo.list_items.return_value = []

        result = engine.sync_from_board()

        assert result.deleted == [tasks_dir / "gone.md"]
        assert not (tasks_dir / "gone.md").exists()
        assert (tasks_dir / "draft.md").exists()

    def test_no_deletion_when_an_item_fails(self, engine, board_repo, issue_repo, tasks_dir):
        """Deletion runs only after every item was written."""
        (tasks_dir / "gone.md").write_text("---\ntitle: Gone\nissue: 8\n---\n")
        board_repo.list_items.return_value = [_item(1), _item(2)]
        issue_repo.get_issue.side_effect = [_issue(1, "One"), GitHubClientError("boom")]

        with pytest.raises(GitHubClientError):
            engine.sync_from_board()

        assert (tasks_dir / "gone.md").exists()
        assert (tasks_dir / "1-one.md").exists()

    def test_items_without_issue_skipped(self, engine, board_repo, issue_repo):
        board_repo.list_items.return_value = [BoardItem(id="PVTI_draft")]

        result = engine.sync_from_board()

        assert result.skipped_items == 1
        issue_repo.get_issue.assert_not_called()

    def test_does_not_fetch_schema(self, engine, board_repo):
        engine.sync_from_board()
        board_repo.fetch_schema.assert_not_called()



    def test_archiving_never_overwrites_another_issue(
        self, engine, board_repo, issue_repo, tasks_dir
    ):
        """Two issues with the same filename both keep a file when archived."""
        (tasks_dir / "archive").mkdir()
        (tasks_dir / "bug.md").write_text("---\ntitle: Bug one\nissue: 1\n---\n")
        (tasks_dir / "archive" / "bug.md").write_text(
            "---\ntitle: Bug two\nissue: 2\nowner: team-b\n---\nKeep this body\n"
        )
        board_repo.list_items.return_value = [_item(1, archived=True), _item(2, archived=True)]
        issue_repo.get_issue.side_effect = [_issue(1, "Bug one"), _issue(2, "Bug two")]

        result = engine.sync_from_board()

        archive = tasks_dir / "archive"
        assert sorted(p.name for p in archive.glob("*.md")) == ["1-bug-one.md", "bug.md"]
        assert result.moved == [archive / "1-bug-one.md"]
        assert result.deleted == []
        kept = frontmatter.load(archive / "bug.md")
        assert kept["issue"] == 2
        assert kept["owner"] == "team-b"
        assert kept.content.strip() == "Keep this body"
        assert frontmatter.load(archive / "1-bug-one.md")["issue"] == 1


class TestRoundTrip:
    """populate followed by sync-from leaves the file unchanged."""

    def test_round_trip_is_stable(self, engine, board_repo, issue_repo, tasks_dir):
        path = tasks_dir / "42-fix-login.md"
        path.write_text(
            "---\n"
            "title: Fix login\n"
            "issue: 42\n"
            "status: Todo\n"
            "priority: High\n"
            "size: M\n"
            "estimate: 3\n"
            "devHours: 1.5\n"
            "qaHours: 2\n"
            "plannedStart: 2024-01-05\n"
            "plannedEnd: 2024-01-12\n"
            "actualStart: 2024-01-06\n"
            "actualEnd: 2024-01-11\n"
            "assignees:\n- alice\n"
            "labels:\n- bug\n"
            "comments: |\n"
            "  - [2024-01-05] @bob: Looks good\n"
            "---\n"
        )
        before = frontmatter.load(path).metadata
        issue_repo.find_or_create.return_value = (_ref(42), False)
        engine.populate()

        board_repo.list_items.return_value = [
            _item(
                42,
                Status=SingleSelectValue(value="Todo"),
                Priority=SingleSelectValue(value="High"),
                Size=SingleSelectValue(value="M"),
                Estimate=NumberValue(value=3.0),
                **{
                    "Dev Hours": NumberValue(value=1.5),
                    "QA Hours": NumberValue(value=2.0),
                    "Planned Start": DateValue(value=date(2024, 1, 5)),
                    "Planned End": DateValue(value=date(2024, 1, 12)),
                    "Actual Start": DateValue(value=date(2024, 1, 6)),
                    "Actual End": DateValue(value=date(2024, 1, 11)),
                },
            )
        ]
        issue_repo.get_issue.return_value = _issue(
            42, "Fix login", assignees=["alice"], labels=["bug"]
        )
        issue_repo.list_comments.return_value = [
            Comment(
                id=1,
                body="Looks good",
                author="bob",
                created_at=datetime(2024, 1, 5, 9, 0, tzinfo=UTC),
            ),
            Comment(id=2, body="**Relationships**\n\n#7", author="bot"),
            Comment(id=3, body="**Automated Notes**\n\n- [2024-01-05] @bob: x", author="bot"),
        ]
        engine.sync_from_board()

        after = frontmatter.load(path).metadata
        assert after == before
        assert after["plannedStart"] == date(2024, 1, 5)
        assert "Relationships" not in after["comments"]
        assert "Automated Notes" not in after["comments"]


class _CommentStoreClient:
    """In-memory stand-in for the REST calls made for one issue's comments."""

    def __init__(self) -> None:
        self.comments: list[dict] = []

    def paginate(self, path, params=None, per_page=100):
        if path.endswith("/comments"):
            return iter([dict(c) for c in self.comments])
        return iter([])

    def request(self, method, path, params=None, json=None):
        if method == "GET" and path.endswith("/issues/1"):
            return {"number": 1, "node_id": "I_1", "title": "A"}
        if method == "POST" and path.endswith("/comments"):
            comment = {"id": len(self.comments) + 1, "body": json["body"]}
            self.comments.append(comment)
            return comment
        if method == "PATCH" and "/issues/comments/" in path:
            comment_id = int(path.rsplit("/", 1)[1])
            comment = next(c for c in self.comments if c["id"] == comment_id)
            comment["body"] = json["body"]
            return comment
        return None


class TestCommentIdempotence:
    """Repeated populate runs keep one comment per category."""

    def test_populate_twice_keeps_comment_count(self, board_repo, store, tasks_dir):
        client = _CommentStoreClient()
        engine = KanbanSyncEngine(
            board_repo,
            IssueRepository(client, "acme/app"),
            store,
            owner="acme",
            project_number=7,
        )
        path = tasks_dir / "a.md"
        path.write_text(
            "---\ntitle: A\nissue: 1\nrelationships: [blocks #2]\ncomments: First note\n---\n"
        )

        first = engine.populate()
        second = engine.populate()

        assert first.comments_upserted == 2
        assert second.comments_upserted == 0
        assert [c["body"] for c in client.comments] == [
            "**Relationships**\n\nblocks #2",
            "**Automated Notes**\n\nFirst note",
        ]

        path.write_text(
            "---\ntitle: A\nissue: 1\nrelationships: [blocks #2]\ncomments: Second note\n---\n"
        )
        engine.populate()

        assert len(client.comments) == 2
        assert client.comments[1]["body"] == "**Automated Notes**\n\nSecond note"
