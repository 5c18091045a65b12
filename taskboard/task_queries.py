"""
Parsing of the task list query string and of task identifiers.

Nothing here raises on bad input: malformed values fall back to their
defaults, mirroring how the list endpoint tolerates sloppy clients.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from taskboard.db_models import SORT_COLUMNS, TASK_STATUSES


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_QUERY_INT = 2**31 - 1
MAX_TASK_ID = 2**63 - 1


@dataclass(frozen=True)
class TaskOrdering:
    field: str = "created_at"
    descending: bool = True


DEFAULT_ORDERING = TaskOrdering()


@dataclass(frozen=True)
class TaskListQuery:
    """
    A validated task list request.

    Attributes:
        page: 1-based page number
        limit: Page size
        status: Status filter, or None to return every status
        ordering: Sort column and direction
    """
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    status: Optional[str] = None
    ordering: TaskOrdering = field(default_factory=TaskOrdering)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: Optional[str], default: int, maximum: int = MAX_QUERY_INT) -> int:
    """
    Parse a positive decimal integer, returning `default` for anything else.

    Non-numeric text, zero, negative numbers and values above `maximum` all
    yield the default.
    """
    if value is None:
        return default

    value = value.strip()
    if not value or not (value.isascii() and value.isdigit()):
        return default
    if len(value) > len(str(maximum)):
        return default

    number = int(value)
    if number < 1 or number > maximum:
        return default
    return number


def parse_status_filter(value: Optional[str]) -> Optional[str]:
    """Return the status if it is a known one; unknown values disable the filter."""
    return value if value in TASK_STATUSES else None


def parse_sort(value: Optional[str]) -> TaskOrdering:
    """
    Parse a `field:direction` sort expression.

    The field must be sortable, otherwise the default ordering is returned.
    The direction is descending only when it is exactly `desc`.
    """
    if not value:
        return DEFAULT_ORDERING

    parts = value.split(":")
    sort_field = parts[0]
    direction = parts[1] if len(parts) > 1 else None
    if sort_field not in SORT_COLUMNS:
        return DEFAULT_ORDERING

    return TaskOrdering(field=sort_field, descending=direction == "desc")


def parse_list_query(params: Mapping[str, Optional[str]]) -> TaskListQuery:
    return TaskListQuery(
        page=parse_positive_int(params.get("page"), DEFAULT_PAGE),
        limit=parse_positive_int(params.get("limit"), DEFAULT_LIMIT),
        status=parse_status_filter(params.get("status")),
        ordering=parse_sort(params.get("sort")),
    )


def parse_task_id(value: str | int) -> Optional[int]:
    """Parse a task ID from a path segment, or return None if it cannot name a stored task."""
    if isinstance(value, int):
        return value if 1 <= value <= MAX_TASK_ID else None

    number = parse_positive_int(value, default=0, maximum=MAX_TASK_ID)
    return number or None
