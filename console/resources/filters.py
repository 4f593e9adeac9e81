"""
Search and filter over a loaded resource list.

Pure functions: the same inputs always give the same output and nothing is
mutated. Items may be dicts or model objects.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

# Filter value that disables a dimension
ALL = "ALL"

Matcher = Callable[[Any, str], bool]


def get_path(item: Any, path: str) -> Any:
    """
    Resolve a dotted path against dicts and attributes.

    Returns None as soon as a segment is missing.
    """
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _as_text(value: Any) -> str:
    # str-valued enums compare by value
    return str(getattr(value, "value", value))


def matches_search(item: Any, search_term: str, search_fields: Sequence[str]) -> bool:
    term = (search_term or "").strip().lower()
    if not term:
        return True

    for path in search_fields:
        value = get_path(item, path)
        if value is None:
            continue
        if term in _as_text(value).lower():
            return True
    return False


def is_disabled(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.upper() == ALL)


def equals_field(field: str) -> Matcher:
    """Default matcher: the item's field equals the filter value."""

    def matcher(item: Any, value: str) -> bool:
        return _as_text(get_path(item, field)) == value

    return matcher


def filter_items(
    items: Iterable[T],
    search_term: str,
    filters: Mapping[str, Any],
    *,
    search_fields: Sequence[str],
    matchers: Mapping[str, Matcher] | None = None,
) -> list[T]:
    """
    Filter items by a free-text search term and filter dimensions.

    Args:
        items: Loaded resource list
        search_term: Case-insensitive substring, trimmed; empty matches all
        filters: Dimension -> selected value; "ALL"/None disables a dimension
        search_fields: Field paths searched, dotted for nested values
        matchers: Optional per-dimension predicates; default is field equality

    Returns:
        New list of matching items, in input order
    """
    matchers = matchers or {}
    active = [
        (matchers.get(name) or equals_field(name), value)
        for name, value in filters.items()
        if not is_disabled(value)
    ]

    return [
        item
        for item in items
        if matches_search(item, search_term, search_fields)
        and all(matcher(item, value) for matcher, value in active)
    ]
