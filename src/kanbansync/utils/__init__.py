"""Utility functions."""

from .datetime import from_iso, to_calendar_date
from .slug import generate_filename, slugify

__all__ = [
    "from_iso",
    "generate_filename",
    "slugify",
    "to_calendar_date",
]
