"""Utility modules."""

from mindforge.utils.normalization import (
    normalize_email,
    normalize_list,
    normalize_name,
)
from mindforge.utils.pagination import (
    Pagination,
    create_paginated_response,
    paginate_query,
    parse_pagination,
)

__all__ = [
    # Normalization
    "normalize_email",
    "normalize_list",
    "normalize_name",
    # Pagination
    "Pagination",
    "create_paginated_response",
    "paginate_query",
    "parse_pagination",
]
