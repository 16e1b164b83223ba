"""Page selection for the invoice list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from flask import request

PAGE_SIZES: Tuple[int, ...] = (6, 12, 24, 48)


@dataclass(frozen=True)
class PageRequest:
    page: int
    per_page: int


def page_request(default_size: int = PAGE_SIZES[0]) -> PageRequest:
    """Read ``page`` and ``per_page`` from the query string.

    Pages below 1 become 1 and sizes outside :data:`PAGE_SIZES` fall back to
    ``default_size``.
    """

    page = request.args.get("page", type=int)
    size = request.args.get("per_page", type=int)
    if size not in PAGE_SIZES:
        size = default_size if default_size in PAGE_SIZES else PAGE_SIZES[0]
    return PageRequest(page=page if page and page > 0 else 1, per_page=size)


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed for ``total`` rows; an empty result has one."""
    return max(1, -(-total // per_page))


def link_args(per_page: int) -> Dict[str, str]:
    """Query arguments for page links, keeping the current search."""
    args = {
        key: value
        for key, value in request.args.items()
        if key not in ("page", "per_page") and value
    }
    args["per_page"] = str(per_page)
    return args
