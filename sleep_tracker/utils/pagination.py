"""
Cursor and page/limit pagination over SQLAlchemy selects.
"""
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def normalize_page(page: Optional[int]) -> int:
    if page is None or page < 1:
        return 1
    return page


def normalize_limit(limit: Optional[int]) -> int:
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


async def paginate_by_cursor(
    db: AsyncSession, query: Select, id_column, cursor: int, limit: int
) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Rows with id strictly below ``cursor``; one extra row is fetched to tell
    whether another page exists.
    """
    result = await db.execute(query.where(id_column < cursor).limit(limit + 1))
    rows = list(result.scalars().all())

    has_more = len(rows) > limit
    rows = rows[:limit]
    next_cursor = rows[-1].id if rows else None

    return rows, {
        "type": "cursor",
        "has_more": has_more,
        "next_cursor": next_cursor,
        "limit": limit,
    }


async def paginate_by_offset(
    db: AsyncSession, query: Select, page: int, limit: int, scalars: bool = True
) -> Tuple[List[Any], Dict[str, Any]]:
    """Classic page/limit pagination with total counts."""
    count_result = await db.execute(
        select(func.count()).select_from(query.order_by(None).subquery())
    )
    total_count = count_result.scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    rows = list(result.scalars().all()) if scalars else list(result.all())

    return rows, {
        "type": "traditional",
        "current_page": page,
        "total_pages": math.ceil(total_count / limit) if total_count else 0,
        "total_count": total_count,
        "per_page": limit,
    }
