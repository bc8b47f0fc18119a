"""Helpers shared by the MongoDB stores."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(id_str: Optional[str]) -> Optional[ObjectId]:
    """Parse an id string; None when it is not a valid ObjectId."""
    if not id_str:
        return None
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None


def page_window(page: int, limit: int) -> Dict[str, int]:
    """Translate 1-based page/limit into skip/limit."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or 1), 1)
    return {"page": page, "limit": limit, "skip": (page - 1) * limit}


def page_meta(total: int, page: int, limit: int, count: int) -> Dict[str, Any]:
    return {
        "count": count,
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if limit else 0,
    }
