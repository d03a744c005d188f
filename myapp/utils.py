import math
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator


def clamp_page(page: Optional[int]) -> int:
    try:
        return max(1, int(page))
    except (TypeError, ValueError):
        return 1


def clamp_limit(limit: Optional[int], default: Optional[int] = None) -> int:
    default = default or settings.PAGINATION_DEFAULT_LIMIT
    try:
        limit = int(limit) if limit is not None else default
    except (TypeError, ValueError):
        limit = default
    return min(settings.PAGINATION_MAX_LIMIT, max(1, limit))


def paginate(
    queryset, page: Optional[int], limit: Optional[int], default_limit: Optional[int] = None
) -> Tuple[List[Any], Dict[str, int]]:
    """
    Slice ``queryset`` into one page and build the pagination block
    ``{total, pages, current_page, limit}``. Pages past the end are empty.
    """
    page = clamp_page(page)
    limit = clamp_limit(limit, default_limit)

    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []

    total = paginator.count
    return items, {
        "total": total,
        "pages": math.ceil(total / limit),
        "current_page": page,
        "limit": limit,
    }
