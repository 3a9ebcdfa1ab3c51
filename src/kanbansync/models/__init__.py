"""Data models."""

from .board import (
    Board,
    BoardItem,
    DateValue,
    FieldDataType,
    FieldOption,
    FieldValue,
    IssueContent,
    NumberValue,
    ProjectField,
    SingleSelectValue,
    TextValue,
)
from .issue import Comment, CommentCategory, Issue, IssueRef, is_automated_comment
from .sync import PopulateResult, SyncFromResult
from .task import TaskRecord

__all__ = [
    "Board",
    "BoardItem",
    "Comment",
    "CommentCategory",
    "DateValue",
    "FieldDataType",
    "FieldOption",
    "FieldValue",
    "Issue",
    "IssueContent",
    "IssueRef",
    "NumberValue",
    "PopulateResult",
    "ProjectField",
    "SingleSelectValue",
    "SyncFromResult",
    "TaskRecord",
    "TextValue",
    "is_automated_comment",
]
