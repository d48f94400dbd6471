"""
List query builder shared by every content type.

Turns query-string parameters into a MongoDB filter, a sort and a page
window, then runs the find/count pair. Each resource only declares a
`ListSpec`; the rules below are the same everywhere:

- a filter value of None, "" or "all" places no constraint
- `search` becomes an OR of case-insensitive substring matches
- public listings start from the resource's published constraint, which
  user parameters can never overwrite
- skip = (page - 1) * limit, totalPages = ceil(total / limit)

The find and the count are separate reads. Writes landing between them can
make totalPages momentarily disagree with the returned page; callers accept
that window.
"""
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from utils.errors import ValidationError

NO_CONSTRAINT = (None, "", "all")

SortSpec = List[Tuple[str, int]]


@dataclass(frozen=True)
class FilterField:
    param: str
    field: Optional[str] = None
    kind: str = "exact"  # exact | regex | bool

    @property
    def target(self) -> str:
        return self.field or self.param


@dataclass(frozen=True)
class ListSpec:
    filters: Sequence[FilterField] = ()
    search_fields: Sequence[str] = ()
    default_sort: SortSpec = field(default_factory=lambda: [("createdAt", -1)])
    sortable: Sequence[str] = ("createdAt", "updatedAt", "title")
    default_limit: int = 10
    max_limit: int = 100
    # Public listings: fixed published constraint, featured-first sort and
    # parameters that are ignored outside the admin panel
    public_sort: Optional[SortSpec] = None
    published: Optional[Dict[str, Any]] = None
    public_exclude: Sequence[str] = ()


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(name: str, raw: Any, default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {name}",
            errors=[{"field": name, "message": f"{name} must be a positive integer"}],
        )
    if value < 1:
        raise ValidationError(
            f"Invalid {name}",
            errors=[{"field": name, "message": f"{name} must be at least 1"}],
        )
    return value


def parse_page_window(page: Any, limit: Any, spec: ListSpec) -> PageWindow:
    """Validate page/limit; limit above the listing maximum is clamped."""
    page_value = _positive_int("page", page, 1)
    limit_value = _positive_int("limit", limit, spec.default_limit)
    return PageWindow(page=page_value, limit=min(limit_value, spec.max_limit))


def parse_bool(param: str, value: Any) -> bool:
    """Strict boolean for query and form values: true/false, case-insensitive."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValidationError(
        f"Invalid {param}",
        errors=[{"field": param, "message": f"{param} must be 'true' or 'false'"}],
    )


def substring_match(value: str) -> Dict[str, str]:
    return {"$regex": re.escape(str(value)), "$options": "i"}


def build_filter(
    spec: ListSpec,
    params: Mapping[str, Any],
    public: bool = False,
) -> Dict[str, Any]:
    """
    Build the Mongo filter for a list request.

    In public mode the query starts from `spec.published`; a user parameter
    targeting one of its keys, or named in `public_exclude`, is ignored.
    """
    query: Dict[str, Any] = dict(spec.published or {}) if public else {}
    locked = set(query)

    for filter_field in spec.filters:
        if public and filter_field.param in spec.public_exclude:
            continue
        value = params.get(filter_field.param)
        if value in NO_CONSTRAINT or filter_field.target in locked:
            continue
        if filter_field.kind == "bool":
            query[filter_field.target] = parse_bool(filter_field.param, value)
        elif filter_field.kind == "regex":
            query[filter_field.target] = substring_match(value)
        else:
            query[filter_field.target] = value

    search = params.get("search")
    if isinstance(search, str):
        search = search.strip()
    if search and spec.search_fields:
        query["$or"] = [{name: substring_match(search)} for name in spec.search_fields]

    return query


def build_sort(
    spec: ListSpec,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    public: bool = False,
) -> SortSpec:
    """Explicit sortBy/sortOrder, or the default ordering when sortBy is absent."""
    if not sort_by:
        if public and spec.public_sort:
            return list(spec.public_sort)
        return list(spec.default_sort)
    if sort_by not in spec.sortable:
        raise ValidationError(
            "Invalid sortBy",
            errors=[{"field": "sortBy", "message": f"sortBy must be one of: {', '.join(spec.sortable)}"}],
        )
    order = (sort_order or "desc").lower()
    if order not in ("asc", "desc"):
        raise ValidationError(
            "Invalid sortOrder",
            errors=[{"field": "sortOrder", "message": "sortOrder must be 'asc' or 'desc'"}],
        )
    return [(sort_by, -1 if order == "desc" else 1)]


def build_pagination(total: int, window: PageWindow) -> Dict[str, Any]:
    total_pages = math.ceil(total / window.limit) if total else 0
    return {
        "currentPage": window.page,
        "totalPages": total_pages,
        "totalItems": total,
        "limit": window.limit,
        "hasNext": window.page < total_pages,
        "hasPrev": window.page > 1,
    }


async def paginate(
    collection,
    query: Dict[str, Any],
    sort: SortSpec,
    window: PageWindow,
    projection: Optional[Dict[str, int]] = None,
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Run one find() and one count_documents() with the same filter."""
    cursor = collection.find(query, projection) if projection else collection.find(query)
    cursor = cursor.sort(sort).skip(window.skip).limit(window.limit)
    items = await cursor.to_list(length=window.limit)

    total = await collection.count_documents(query)
    return items, build_pagination(total, window)
