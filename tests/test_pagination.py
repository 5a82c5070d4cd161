"""Tests for pagination parsing and the paginated envelope."""
import math

import pytest

from mindforge.utils.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    Pagination,
    create_paginated_response,
    parse_pagination,
)


def test_defaults_when_missing():
    assert parse_pagination(None, None) == Pagination(page=1, limit=DEFAULT_LIMIT, skip=0)


def test_zero_page_and_huge_limit_are_clamped():
    assert parse_pagination("0", "1000") == Pagination(page=1, limit=MAX_LIMIT, skip=0)


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        ("3", "20", Pagination(page=3, limit=20, skip=40)),
        ("-4", "-1", Pagination(page=1, limit=1, skip=0)),
        ("1", "0", Pagination(page=1, limit=1, skip=0)),
        ("2abc", "5xyz", Pagination(page=2, limit=5, skip=5)),
        ("abc", "??", Pagination(page=1, limit=DEFAULT_LIMIT, skip=0)),
        ("", "", Pagination(page=1, limit=DEFAULT_LIMIT, skip=0)),
        (" 7", "100", Pagination(page=7, limit=100, skip=600)),
    ],
)
def test_lenient_parsing(page, limit, expected):
    assert parse_pagination(page, limit) == expected


def test_envelope_shape():
    body = create_paginated_response([{"id": 1}, {"id": 2}], total=25, page=2, limit=10, key="items")

    assert body["status"] == "success"
    assert body["results"] == 2
    assert body["data"] == {"items": [{"id": 1}, {"id": 2}]}
    assert body["pagination"] == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }


@pytest.mark.parametrize("total,limit", [(0, 10), (1, 10), (10, 10), (11, 10), (99, 7)])
def test_total_pages_is_ceiling(total, limit):
    body = create_paginated_response([], total=total, page=1, limit=limit)
    assert body["pagination"]["totalPages"] == math.ceil(total / limit)
    assert body["pagination"]["hasPrev"] is False


def test_last_page_has_no_next():
    body = create_paginated_response([], total=20, page=2, limit=10)
    assert body["pagination"]["hasNext"] is False
    assert body["data"] == {"results": []}
