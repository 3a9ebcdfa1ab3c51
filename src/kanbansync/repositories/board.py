"""GitHub Projects v2 board access."""

from __future__ import annotations

import logging
import math
from typing import Any

from ..github import GitHubClient, GitHubNotFoundError
from ..github.queries import (
    ADD_ITEM_TO_PROJECT,
    GET_ORG_PROJECT,
    GET_PROJECT_FIELDS,
    GET_PROJECT_ITEMS,
    GET_USER_PROJECT,
    UPDATE_ITEM_FIELD,
)
from ..models import (
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
from ..utils.datetime import to_calendar_date

logger = logging.getLogger(__name__)


class BoardNotFoundError(GitHubNotFoundError):
    """The project could not be resolved as an organization or user project."""

    pass


class ProjectBoardRepository:
    """Reads and writes a GitHub Projects v2 board via GraphQL."""

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    # --- Board & schema ---

    def resolve_board(self, owner: str, number: int) -> Board:
        """Find a project by owner and number.

        Tries the owner as an organization first, then as a user.

        Raises:
            BoardNotFoundError: If neither lookup finds the project
        """
        for query, owner_key in ((GET_ORG_PROJECT, "organization"), (GET_USER_PROJECT, "user")):
            try:
                result = self._client.query(query, {"owner": owner, "number": number})
            except GitHubNotFoundError as e:
                # GraphQL reports an unknown org/user login as NOT_FOUND
                logger.debug("Project lookup as %s failed: %s", owner_key, e)
                continue

            project_data = (result.get(owner_key) or {}).get("projectV2")
            if project_data:
                logger.info(
                    "Project found as %s: %s (%s)",
                    owner_key,
                    project_data.get("title", ""),
                    project_data["id"],
                )
                return Board(
                    id=project_data["id"],
                    title=project_data.get("title", ""),
                    owner=owner,
                    number=number,
                )

        raise BoardNotFoundError(
            f"Project v2 number {number} not found for owner {owner} (org or user)."
        )

    def fetch_schema(self, board: Board) -> list[ProjectField]:
        """Fetch the board's fields and attach them to the board."""
        result = self._client.query(GET_PROJECT_FIELDS, {"projectId": board.id})
        nodes = (result.get("node") or {}).get("fields", {}).get("nodes", [])

        fields: list[ProjectField] = []
        for node in nodes:
            # Fields outside the queried fragments come back empty
            if not node or "id" not in node:
                continue
            fields.append(
                ProjectField(
                    id=node["id"],
                    name=node.get("name", ""),
                    data_type=node.get("dataType", ""),
                    options=[FieldOption(**opt) for opt in node.get("options") or []],
                )
            )

        board.fields = fields
        logger.debug(
            "Fetched %d fields: %s",
            len(fields),
            ", ".join(f"{f.name} [{f.data_type}]" for f in fields),
        )
        return fields

    # --- Items ---

    def list_items(self, board: Board) -> list[BoardItem]:
        """Fetch all board items with pagination."""
        items: list[BoardItem] = []
        cursor = None
        page_count = 0

        while True:
            page_count += 1
            result = self._client.query(
                GET_PROJECT_ITEMS,
                {"projectId": board.id, "cursor": cursor},
            )

            items_data = (result.get("node") or {}).get("items", {})
            nodes = items_data.get("nodes", [])
            logger.debug("Page %d: fetched %d items", page_count, len(nodes))

            for node in nodes:
                items.append(self._map_item(node))

            page_info = items_data.get("pageInfo", {})
            if page_info.get("hasNextPage"):
                cursor = page_info.get("endCursor")
            else:
                break

        logger.info("Fetched %d total items from project", len(items))
        return items

    def add_item(self, board: Board, issue_node_id: str) -> str:
        """Add an issue to the board and return the item id.

        Adding an issue that is already on the board returns its existing item.
        """
        result = self._client.mutate(
            ADD_ITEM_TO_PROJECT,
            {"projectId": board.id, "contentId": issue_node_id},
        )
        return result["addProjectV2ItemById"]["item"]["id"]

    def set_field_value(
        self,
        board: Board,
        item_id: str,
        field: ProjectField,
        value: Any,
    ) -> bool:
        """Set a field value on an item, dispatching on the field's data type.

        Values that are empty, fail to parse, or name no option of a
        single-select field are skipped without a mutation.

        Returns:
            True if the field was updated
        """
        field_value = self._build_field_value(field, value)
        if field_value is None:
            logger.debug("Skipping %s: value %r not applicable", field.name, value)
            return False

        self._client.mutate(
            UPDATE_ITEM_FIELD,
            {
                "projectId": board.id,
                "itemId": item_id,
                "fieldId": field.id,
                "value": field_value,
            },
        )
        logger.debug("Set %s=%r on item %s", field.name, value, item_id)
        return True

    # --- Private Methods ---

    def _build_field_value(self, field: ProjectField, value: Any) -> dict[str, Any] | None:
        """Build the ProjectV2FieldValue input for a value, or None to skip."""
        if value is None or isinstance(value, bool):
            return None
        text = str(value).strip()
        if not text:
            return None

        if field.data_type == FieldDataType.SINGLE_SELECT:
            option = field.find_option(text)
            if option is None:
                available = ", ".join(opt.name for opt in field.options)
                logger.warning(
                    "Value %r not found in %s options. Available: %s", text, field.name, available
                )
                return None
            return {"singleSelectOptionId": option.id}

        if field.data_type == FieldDataType.NUMBER:
            try:
                number = float(text)
            except ValueError:
                return None
            # nan and inf are not valid JSON numbers
            return {"number": number} if math.isfinite(number) else None

        if field.data_type == FieldDataType.DATE:
            parsed = to_calendar_date(value)
            return {"date": parsed.isoformat()} if parsed else None

        if field.data_type == FieldDataType.TEXT:
            return {"text": text}

        logger.debug("Unsupported data type %s for field %s", field.data_type, field.name)
        return None

    def _map_item(self, node: dict[str, Any]) -> BoardItem:
        """Map a GraphQL item node to a BoardItem."""
        content = node.get("content") or {}
        issue = None
        if content.get("__typename", "Issue") == "Issue" and "number" in content:
            issue = IssueContent(
                node_id=content.get("id", ""),
                number=content["number"],
                title=content.get("title") or "",
                body=content.get("body") or "",
                url=content.get("url") or "",
            )

        field_values: dict[str, FieldValue] = {}
        for fv in (node.get("fieldValues") or {}).get("nodes", []):
            parsed = _parse_field_value(fv or {})
            if parsed is None:
                continue
            name, value = parsed
            # First non-null value per field wins
            field_values.setdefault(name, value)

        return BoardItem(
            id=node["id"],
            is_archived=bool(node.get("isArchived")),
            issue=issue,
            field_values=field_values,
        )


def _parse_field_value(fv: dict[str, Any]) -> tuple[str, FieldValue] | None:
    """Parse one fieldValues node into (field name, typed value)."""
    name = (fv.get("field") or {}).get("name")
    if not name:
        return None

    typename = fv.get("__typename")
    if typename == "ProjectV2ItemFieldSingleSelectValue" and fv.get("name") is not None:
        return name, SingleSelectValue(value=fv["name"], option_id=fv.get("optionId"))
    if typename == "ProjectV2ItemFieldNumberValue" and fv.get("number") is not None:
        return name, NumberValue(value=fv["number"])
    if typename == "ProjectV2ItemFieldDateValue" and fv.get("date") is not None:
        return name, DateValue(value=fv["date"])
    if typename == "ProjectV2ItemFieldTextValue" and fv.get("text") is not None:
        return name, TextValue(value=fv["text"])
    return None
