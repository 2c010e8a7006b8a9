import math
from typing import Any, Dict, List, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def normalize_page(page: int = None, limit: int = None, default_limit: int = DEFAULT_LIMIT) -> Tuple[int, int]:
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, MAX_LIMIT)


def paginate(query, page: int = None, limit: int = None, default_limit: int = DEFAULT_LIMIT) -> Tuple[List[Any], Dict[str, int]]:
    """Offset-пагинация SQLAlchemy-запроса.
    
    Фильтры должны быть применены к query заранее: total считается
    по тому же запросу без offset/limit.
    """
    page, limit = normalize_page(page, limit, default_limit)
    
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    
    meta = {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }
    return items, meta
