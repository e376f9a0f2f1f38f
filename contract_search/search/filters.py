"""Input validation and translation of SearchFilters into store predicates."""

from typing import Any

from contract_search.errors import SearchValidationError
from contract_search.schemas import SearchFilters
from contract_search.storage.base import Predicate
from contract_search.utils.timestamps import parse_timestamp

RECORD_KINDS = ("contract", "file")
SORT_ORDERS = ("asc", "desc")

# Public sort names for the backend's system attributes
SYSTEM_ATTRIBUTES = {
    "createdAt": "$createdAt",
    "updatedAt": "$updatedAt",
    "id": "$id",
}

# (filter field, document attribute)
EQUALITY_FILTERS = (
    ("department", "department"),
    ("status", "status"),
    ("priority", "priority"),
    ("vendor", "vendor"),
    ("contract_type", "contractType"),
)
MEMBERSHIP_FILTERS = (
    ("assigned_managers", "assignedManagers"),
    ("compliance", "compliance"),
)
# (start field, start wire name, end field, end wire name, document attribute)
DATE_RANGES = (
    ("start_date", "startDate", "end_date", "endDate", "$createdAt"),
    ("expiry_date_start", "expiryDateStart", "expiry_date_end", "expiryDateEnd", "contractExpiryDate"),
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_pagination(limit: Any, offset: Any) -> None:
    if not _is_int(limit) or limit <= 0:
        raise SearchValidationError("limit", f"limit must be a positive integer, got {limit!r}")
    if not _is_int(offset) or offset < 0:
        raise SearchValidationError("offset", f"offset must be a non-negative integer, got {offset!r}")


def validate_sort(sort_by: Any, sort_order: Any) -> None:
    if not isinstance(sort_by, str) or not sort_by:
        raise SearchValidationError("sortBy", "sortBy must be a non-empty field name")
    if sort_order not in SORT_ORDERS:
        raise SearchValidationError("sortOrder", f"sortOrder must be 'asc' or 'desc', got {sort_order!r}")


def validate_filters(filters: SearchFilters) -> None:
    """Reject filter sets that can't be evaluated consistently."""
    if filters.type is not None:
        unknown = [t for t in filters.type if t not in RECORD_KINDS]
        if unknown:
            raise SearchValidationError("type", f"Unknown record type(s): {', '.join(unknown)}")

    if (
        filters.amount_min is not None
        and filters.amount_max is not None
        and filters.amount_min > filters.amount_max
    ):
        raise SearchValidationError("amountMin", "amountMin must not exceed amountMax")

    for start_field, start_name, end_field, end_name, _ in DATE_RANGES:
        start = _parse_bound(filters, start_field, start_name)
        end = _parse_bound(filters, end_field, end_name)
        if start and end and start > end:
            raise SearchValidationError(start_name, f"{start_name} must not be after {end_name}")


def _parse_bound(filters: SearchFilters, field: str, name: str):
    raw = getattr(filters, field)
    if raw is None:
        return None
    parsed = parse_timestamp(raw)
    if parsed is None:
        raise SearchValidationError(name, f"{name} is not a valid ISO-8601 date: {raw!r}")
    return parsed


def selected_kinds(filters: SearchFilters) -> tuple[str, ...]:
    """Record kinds to fetch. An absent or empty type filter means all of them."""
    if not filters.type:
        return RECORD_KINDS
    return tuple(k for k in RECORD_KINDS if k in filters.type)


def build_filter_predicates(filters: SearchFilters) -> list[Predicate]:
    """Translate each present filter into an equality or range predicate."""
    predicates: list[Predicate] = []

    for field, attribute in EQUALITY_FILTERS:
        value = getattr(filters, field)
        if value:
            predicates.append(Predicate.equal(attribute, value))

    if filters.amount_min is not None:
        predicates.append(Predicate.greater_than_equal("amount", _number(filters.amount_min)))
    if filters.amount_max is not None:
        predicates.append(Predicate.less_than_equal("amount", _number(filters.amount_max)))

    for field, attribute in MEMBERSHIP_FILTERS:
        values = getattr(filters, field)
        if values:
            predicates.append(Predicate.equal(attribute, values))

    for start_field, _, end_field, _, attribute in DATE_RANGES:
        start = getattr(filters, start_field)
        end = getattr(filters, end_field)
        if start:
            predicates.append(Predicate.greater_than_equal(attribute, start))
        if end:
            predicates.append(Predicate.less_than_equal(attribute, end))

    return predicates


def build_order_predicate(sort_by: str, sort_order: str) -> Predicate:
    attribute = SYSTEM_ATTRIBUTES.get(sort_by, sort_by)
    if sort_order == "asc":
        return Predicate.order_asc(attribute)
    return Predicate.order_desc(attribute)


def _number(value: float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def encode_filters(filters: SearchFilters) -> str:
    """Serialize filters for storage: the backend has no nested object attributes."""
    return filters.model_dump_json(by_alias=True, exclude_none=True)


def decode_filters(value: Any) -> SearchFilters:
    if isinstance(value, str) and value:
        return SearchFilters.model_validate_json(value)
    if isinstance(value, dict):
        return SearchFilters.model_validate(value)
    return SearchFilters()
