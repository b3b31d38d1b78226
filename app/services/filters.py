"""
Filtering for the catalogue list endpoints.

Lists are small and fetched whole, then narrowed here: a case-insensitive
substring search over one or more fields (dotted paths reach into joined
rows, e.g. "oferta.title") ANDed with exact-match classification filters.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence


def resolve_field(item: Any, path: str) -> Any:
    """Follow a dotted attribute path, returning None on any missing link."""
    value = item
    for part in path.split("."):
        if value is None:
            return None
        value = getattr(value, part, None)
    return value


def matches_search(item: Any, search: Optional[str], fields: Sequence[str]) -> bool:
    if not search:
        return True
    needle = search.strip().lower()
    if not needle:
        return True
    for path in fields:
        value = resolve_field(item, path)
        if value and needle in str(value).lower():
            return True
    return False


def matches_exact(item: Any, criteria: Dict[str, Any]) -> bool:
    for path, expected in criteria.items():
        if expected is None or expected == "":
            continue
        if resolve_field(item, path) != expected:
            return False
    return True


def filter_items(
    items: Iterable[Any],
    search: Optional[str] = None,
    search_fields: Sequence[str] = ("title",),
    **exact: Any,
) -> List[Any]:
    """Apply search and exact filters, all ANDed, preserving input order."""
    return [
        item for item in items
        if matches_exact(item, exact) and matches_search(item, search, search_fields)
    ]


def distinct_values(items: Iterable[Any], path: str) -> List[str]:
    """Sorted non-empty values of a field, used to build filter menus."""
    return sorted({value for value in (resolve_field(item, path) for item in items) if value})
