"""Project board domain models.

Field values use a discriminated union: each variant carries a `kind`
literal so values can be narrowed with isinstance() or by `kind`.
"""

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class FieldDataType(str, Enum):
    """Project field data types handled by the sync."""

    SINGLE_SELECT = "SINGLE_SELECT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    TEXT = "TEXT"


class FieldOption(BaseModel):
    """One option of a single-select field."""

    id: str
    name: str


class ProjectField(BaseModel):
    """A field in the board schema."""

    id: str
    name: str
    data_type: str  # FieldDataType value, or another GitHub type (ITERATION, TITLE, ...)
    options: list[FieldOption] = Field(default_factory=list)

    def find_option(self, name: str) -> FieldOption | None:
        """Find an option by case-insensitive exact name."""
        wanted = name.strip().lower()
        for option in self.options:
            if option.name.lower() == wanted:
                return option
        return None


class Board(BaseModel):
    """A resolved GitHub Projects v2 board."""

    id: str  # "PVT_..."
    title: str = ""
    owner: str
    number: int
    fields: list[ProjectField] = Field(default_factory=list)

    def get_field(self, name: str) -> ProjectField | None:
        """Get a field by its display name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


class SingleSelectValue(BaseModel):
    kind: Literal["single_select"] = "single_select"
    value: str
    option_id: str | None = None


class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: float


class DateValue(BaseModel):
    kind: Literal["date"] = "date"
    value: date


class TextValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str


# Discriminated union of item field values
FieldValue = SingleSelectValue | NumberValue | DateValue | TextValue


class IssueContent(BaseModel):
    """Issue linked to a board item."""

    node_id: str  # "I_kw..."
    number: int
    title: str = ""
    body: str = ""
    url: str = ""


class BoardItem(BaseModel):
    """One item on the board.

    `issue` is None for draft issues and pull requests; callers skip those.
    """

    id: str  # "PVTI_..."
    is_archived: bool = False
    issue: IssueContent | None = None
    field_values: dict[str, FieldValue] = Field(default_factory=dict)

    def get_value(self, field_name: str) -> FieldValue | None:
        """Get the value of a field by display name."""
        return self.field_values.get(field_name)
