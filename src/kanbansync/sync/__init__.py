"""Task file <-> project board sync package."""

from .comments import format_comment_line, format_comments
from .engine import KanbanSyncEngine
from .fields import FieldMapping, board_field_mappings
from .index import LocalIndex

__all__ = [
    "FieldMapping",
    "KanbanSyncEngine",
    "LocalIndex",
    "board_field_mappings",
    "format_comment_line",
    "format_comments",
]
