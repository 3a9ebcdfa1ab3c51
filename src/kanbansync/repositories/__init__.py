"""Repository layer for board, issue and task file access."""

from .board import BoardNotFoundError, ProjectBoardRepository
from .filesystem import TaskFileError, TaskFileRepository
from .issues import IssueRepository

__all__ = [
    "BoardNotFoundError",
    "IssueRepository",
    "ProjectBoardRepository",
    "TaskFileError",
    "TaskFileRepository",
]
