"""Relevance scoring and text matching over raw record documents.

Both functions are pure: same (record, query) in, same answer out.
Matching is plain case-insensitive substring containment, no tokenizing.
"""

from typing import Any, Iterator

# Field-specific weights, applied when the field contains the query
FIELD_WEIGHTS = {
    "contractName": 10,
    "name": 10,
    "vendor": 8,
    "contractNumber": 8,
    "description": 5,
}

# Every one of these that contains the query adds GENERIC_MATCH_BONUS on top
# of its field weight above, so a name match counts 10 + 2.
GENERIC_MATCH_FIELDS = ("contractName", "name", "vendor", "description")
GENERIC_MATCH_BONUS = 2

SEARCHABLE_FIELDS = (
    "contractName",
    "name",
    "contractNumber",
    "vendor",
    "contractType",
    "department",
    "status",
    "priority",
    "assignedManagers",
    "compliance",
    "amount",
    "contractExpiryDate",
)


def calculate_search_score(record: dict[str, Any], query: str) -> int:
    """Score a record against a query. Non-string fields are skipped."""
    query_lower = query.lower()
    score = 0

    for field, weight in FIELD_WEIGHTS.items():
        if _contains(record.get(field), query_lower):
            score += weight

    for field in GENERIC_MATCH_FIELDS:
        if _contains(record.get(field), query_lower):
            score += GENERIC_MATCH_BONUS

    return score


def matches_query(record: dict[str, Any], query: str) -> bool:
    """True when any searchable field contains the query (case-insensitive)."""
    query_lower = query.lower()
    return any(query_lower in value.lower() for value in searchable_values(record))


def searchable_values(record: dict[str, Any]) -> Iterator[str]:
    """Yield the text surface of a record: strings, list elements and the amount."""
    for field in SEARCHABLE_FIELDS:
        value = record.get(field)
        if field == "amount":
            text = stringify_amount(value)
            if text:
                yield text
        elif isinstance(value, list):
            yield from (item for item in value if isinstance(item, str) and item)
        elif isinstance(value, str) and value:
            yield value


def stringify_amount(value: Any) -> str | None:
    """Render an amount the way it is displayed: 5000 not 5000.0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _contains(value: Any, query_lower: str) -> bool:
    return isinstance(value, str) and query_lower in value.lower()
