"""
Client-side shaping of repository listings.

The registry catalog returns repository names in server-defined batches.
Each batch is filtered, bounded and then handed back in fixed-size pages
driven by a cursor the caller owns.
"""
from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

__all__ = ["DEFAULT_PAGE_SIZE", "filter_repositories", "cut", "paginate", "iter_pages"]

DEFAULT_PAGE_SIZE = 100


def filter_repositories(names: Sequence[str], startwith: str = "", endwith: str = "",
                        contains: str = "") -> List[str]:
    """
    Keep names matching every non-empty constraint, in input order.

    Args:
        names: Repository names as received from the registry
        startwith: Required prefix ("" for none)
        endwith: Required suffix ("" for none)
        contains: Required substring ("" for none)

    Returns:
        Order-preserving subsequence of ``names``
    """
    return [
        name for name in names
        if (not startwith or name.startswith(startwith))
        and (not endwith or name.endswith(endwith))
        and (not contains or contains in name)
    ]


def cut(names: Sequence[str], first: int, skip: int) -> List[str]:
    """
    Drop the first ``skip`` names, then keep at most ``first``.

    ``first <= 0`` keeps nothing; a negative ``skip`` counts as 0.
    """
    if first <= 0:
        return []
    start = max(skip, 0)
    return list(names[start:start + first])


def paginate(names: Sequence[str], cursor: int, page_size: int) -> Tuple[List[str], int]:
    """
    Return the page starting at ``cursor`` and the cursor for the next one.

    The page is ``names[cursor:cursor + page_size]`` clamped to the
    sequence bounds. An empty page means there are no more pages.

    Raises:
        ValueError: If page_size is not positive or cursor is negative
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if cursor < 0:
        raise ValueError(f"cursor must be non-negative, got {cursor}")

    page = list(names[cursor:cursor + page_size])
    return page, cursor + len(page)


def iter_pages(names: Sequence[str], page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[List[str]]:
    """Yield successive non-empty pages of ``names`` starting from cursor 0."""
    cursor = 0
    while True:
        page, cursor = paginate(names, cursor, page_size)
        if not page:
            return
        yield page
