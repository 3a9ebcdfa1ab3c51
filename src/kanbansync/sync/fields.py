"""Mapping between board fields and task front matter keys."""

from dataclasses import dataclass
from typing import Any

from ..models import FieldValue, NumberValue

DEFAULT_STATUS_FIELD = "Status"


@dataclass(frozen=True)
class FieldMapping:
    """A board field (by display name) paired with a front matter key."""

    board_name: str
    key: str


# Fields synced in both directions, in push order. Status comes first and
# its display name is configurable.
_FIXED_FIELDS = (
    FieldMapping("Priority", "priority"),
    FieldMapping("Size", "size"),
    FieldMapping("Estimate", "estimate"),
    FieldMapping("Dev Hours", "devHours"),
    FieldMapping("QA Hours", "qaHours"),
    FieldMapping("Planned Start", "plannedStart"),
    FieldMapping("Planned End", "plannedEnd"),
    FieldMapping("Actual Start", "actualStart"),
    FieldMapping("Actual End", "actualEnd"),
)


def board_field_mappings(status_field_name: str = DEFAULT_STATUS_FIELD) -> list[FieldMapping]:
    """Get the synced field mappings for a board."""
    return [FieldMapping(status_field_name, "status"), *_FIXED_FIELDS]


def is_empty(value: Any) -> bool:
    """Whether a front matter value counts as absent."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def to_frontmatter_value(field_value: FieldValue) -> Any:
    """Convert a board field value to the value stored in front matter.

    Whole numbers come back as int (3.0 -> 3) and dates as date objects so
    that a file survives a populate/sync-from round trip unchanged.
    """
    if isinstance(field_value, NumberValue):
        number = field_value.value
        return int(number) if float(number).is_integer() else number
    return field_value.value
