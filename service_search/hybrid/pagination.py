"""Offset pagination over an already-sorted result list."""

from typing import Sequence, TypeVar

from ..models import PageResult

T = TypeVar("T")


class InvalidQueryError(ValueError):
    """Caller supplied pagination parameters that cannot describe a page."""
    pass


def validate_page_params(page: int, page_size: int) -> None:
    """Reject non-positive or non-integer ``page`` / ``page_size``.

    Raises
    - InvalidQueryError: on any invalid value; nothing is clamped
    """
    for name, value in (("page", page), ("page_size", page_size)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidQueryError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidQueryError(f"{name} must be >= 1, got {value}")


def paginate(sorted_items: Sequence[T], page: int, page_size: int) -> PageResult:
    """Slice ``sorted_items`` into the requested page.

    ``has_more`` is true exactly when a later page would be non-empty.
    """
    validate_page_params(page, page_size)

    offset = (page - 1) * page_size
    total_count = len(sorted_items)
    return PageResult(
        items=list(sorted_items[offset:offset + page_size]),
        total_count=total_count,
        has_more=offset + page_size < total_count,
    )
