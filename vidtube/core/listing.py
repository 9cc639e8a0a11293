"""Listing Rules — pure pagination, sorting and search helpers for read paths.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - skip = (page - 1) * limit; page and limit are >= 1
    - Unknown sort keys or directions raise InputValidationError (never silently ignored)
    - Default ordering is most-recent-first (createdAt desc)

Design Decisions:
    - Sort keys are the public camelCase names; the composer maps them to columns
    - LIKE wildcards in user search terms are escaped: "%" matches a literal percent
"""

from vidtube.core.domain_types import SortDirection, VideoSortField
from vidtube.core.errors import InputValidationError

LIKE_ESCAPE_CHAR = "\\"


def page_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-based page."""
    if page < 1 or limit < 1:
        raise InputValidationError(
            "page and limit must be positive integers", fields=["page", "limit"],
        )
    return (page - 1) * limit


def resolve_sort(
    sort_by: str | None, sort_type: str | None,
) -> tuple[VideoSortField, SortDirection]:
    """Validate caller-supplied sort; default createdAt desc."""
    try:
        field = VideoSortField(sort_by) if sort_by else VideoSortField.CREATED_AT
    except ValueError:
        allowed = ", ".join(f.value for f in VideoSortField)
        raise InputValidationError(
            f"sortBy must be one of: {allowed}", fields=["sortBy"],
        )
    try:
        direction = (
            SortDirection(sort_type.lower()) if sort_type else SortDirection.DESC
        )
    except ValueError:
        raise InputValidationError(
            "sortType must be 'asc' or 'desc'", fields=["sortType"],
        )
    return field, direction


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches as a literal substring."""
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def contains_pattern(term: str) -> str:
    return f"%{escape_like(term)}%"
