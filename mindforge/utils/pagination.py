"""Pagination utilities for list endpoints."""

import math
import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Query as SQLAlchemyQuery

from mindforge.core.responses import dump

# Pagination limits
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Pagination:
    """Normalized pagination parameters."""
    page: int
    limit: int
    skip: int


def _parse_int(value: str | int | None, default: int) -> int:
    """Parse leading digits ("12abc" -> 12); anything else yields the default."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(value)
    if not match:
        return default
    return int(match.group(1))


def parse_pagination(page: str | int | None = None, limit: str | int | None = None) -> Pagination:
    """
    Normalize raw `page` / `limit` query values.

    page >= 1, 1 <= limit <= 100, skip = (page - 1) * limit. Never raises.
    Defaults apply only to absent or unparsable values; zero and negatives
    clamp to 1.
    """
    page_value = _parse_int(page, DEFAULT_PAGE)
    limit_value = _parse_int(limit, DEFAULT_LIMIT)

    page_value = max(1, page_value)
    limit_value = min(MAX_LIMIT, max(1, limit_value))
    return Pagination(page=page_value, limit=limit_value, skip=(page_value - 1) * limit_value)


def create_paginated_response(
    data: list[Any],
    total: int,
    page: int,
    limit: int,
    key: str = "results",
) -> dict:
    """Build the paginated success envelope. `data` is the current page."""
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "status": "success",
        "results": len(data),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
        "data": {key: dump(data)},
    }


def paginate_query(query: SQLAlchemyQuery, pagination: Pagination) -> tuple[list, int]:
    """
    Apply pagination to a SQLAlchemy query.

    Returns:
        (items, total_count)
    """
    total = query.order_by(None).count()
    items = query.offset(pagination.skip).limit(pagination.limit).all()
    return items, total
