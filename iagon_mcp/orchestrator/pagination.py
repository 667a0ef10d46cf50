"""Offset/limit pagination over remote list and search calls."""
import logging

from ..constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..errors import InputError
from ..models import Page
from ..protocols import FetchRawFn

logger = logging.getLogger(__name__)


def validate_page_args(limit: int, offset: int) -> None:
    """Reject out-of-range pagination arguments before any remote call."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InputError(f"Limit must be an integer, got {limit!r}")
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InputError(f"Offset must be an integer, got {offset!r}")
    if limit < 1:
        raise InputError("Limit must be at least 1")
    if limit > MAX_PAGE_LIMIT:
        raise InputError(f"Limit cannot exceed {MAX_PAGE_LIMIT}")
    if offset < 0:
        raise InputError("Offset cannot be negative")


async def paginate(
    fetch_raw: FetchRawFn,
    limit: int = DEFAULT_PAGE_LIMIT,
    offset: int = 0,
) -> Page:
    """
    Fetch one page and derive its navigation fields.

    Args:
        fetch_raw: ``fetch_raw(limit, offset)`` returning a RawPage
        limit: Page size, 1..100
        offset: Items to skip, >= 0

    Returns:
        Page with count/has_more/next_offset derived from the remote total

    Raises:
        InputError: limit or offset out of range (fetch_raw is not called)
    """
    validate_page_args(limit, offset)

    raw = await fetch_raw(limit, offset)
    items = tuple(raw.items)
    if len(items) > limit:
        logger.debug(f"Remote returned {len(items)} items for limit {limit}; truncating")
        items = items[:limit]

    return Page(items=items, total=raw.total, offset=offset)
