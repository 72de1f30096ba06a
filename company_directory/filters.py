"""Filter state helpers: merging, validation, display and URL encoding."""

import logging
import re
from dataclasses import fields, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional, Tuple

from .constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    MAX_SEARCH_LENGTH,
)
from .models import ActiveFilter, FilterState, PaginationState, ValidationResult

logger = logging.getLogger(__name__)

# FilterState attribute -> URL query parameter
QUERY_PARAM_NAMES = {
    "search": "search",
    "growth_stage": "growthStage",
    "customer_focus": "customerFocus",
    "funding_type": "fundingType",
    "min_rank": "minRank",
    "max_rank": "maxRank",
    "min_funding": "minFunding",
    "max_funding": "maxFunding",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
}

_STRING_FIELDS = ("search", "growth_stage", "customer_focus", "funding_type")
_INT_FIELDS = ("min_rank", "max_rank", "min_funding", "max_funding")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FILTER_FIELDS = {f.name for f in fields(FilterState)}


def merge_filters(state: FilterState, patch: Mapping) -> FilterState:
    """
    Apply a filter patch (e.g. from smart search) on top of a filter state.

    Keys missing from the patch keep their current value. Unknown keys are
    ignored.

    Args:
        state: Current filter state
        patch: Partial mapping of FilterState attributes

    Returns:
        New FilterState
    """
    changes = {}
    for key, value in patch.items():
        if key in _FILTER_FIELDS:
            changes[key] = value
        else:
            logger.debug("Ignoring unknown filter key: %s", key)
    return replace(state, **changes)


def merge_smart_search(state: FilterState, patch: Mapping) -> FilterState:
    """
    Merge a smart search patch without losing an explicit search term.

    The parser always sets "search", even to "" when every word was a filter
    token; in that case the current search text is kept.
    """
    if not patch.get("search"):
        patch = {key: value for key, value in patch.items() if key != "search"}
    return merge_filters(state, patch)


def reset_filters(state: FilterState) -> FilterState:
    """Clear every filter except the search text."""
    return FilterState(search=state.search)


def _fixed(value: float, digits: int) -> str:
    quantum = Decimal(1).scaleb(-digits)
    return f"{Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP):f}"


def _grouped(amount: float) -> str:
    """Thousands-separated amount, up to three decimals: 5882352.941."""
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def format_funding(amount: Optional[float]) -> str:
    """
    Short funding text for tables: $1.5M, $250K, $999.

    Args:
        amount: Amount in USD (None or 0 for unknown)

    Returns:
        Display string, "N/A" when unknown
    """
    if not amount:
        return "N/A"
    if amount >= 1_000_000:
        return f"${_fixed(amount / 1_000_000, 1)}M"
    if amount >= 1_000:
        return f"${_fixed(amount / 1_000, 0)}K"
    return f"${_grouped(amount)}"


def get_active_filters(state: FilterState) -> list[ActiveFilter]:
    """List the filters currently applied, with display labels."""
    active = []
    if state.search:
        active.append(ActiveFilter("search", f'Search: "{state.search}"'))
    if state.growth_stage:
        active.append(ActiveFilter("growth_stage", f"Stage: {state.growth_stage}"))
    if state.customer_focus:
        active.append(ActiveFilter("customer_focus", f"Focus: {state.customer_focus}"))
    if state.funding_type:
        active.append(ActiveFilter("funding_type", f"Funding: {state.funding_type}"))
    if state.min_rank:
        active.append(ActiveFilter("min_rank", f"Min Rank: {state.min_rank}"))
    if state.max_rank:
        active.append(ActiveFilter("max_rank", f"Max Rank: {state.max_rank}"))
    if state.min_funding:
        active.append(ActiveFilter("min_funding", f"Min Funding: ${_grouped(state.min_funding)}"))
    if state.max_funding:
        active.append(ActiveFilter("max_funding", f"Max Funding: ${_grouped(state.max_funding)}"))
    return active


def count_active_filters(state: FilterState) -> int:
    """Number of set filters, not counting sort settings."""
    count = 0
    for key, value in state.to_dict().items():
        if key in ("sort_by", "sort_order"):
            continue
        if value != "" and value is not None:
            count += 1
    return count


def validate_filters(state: FilterState) -> ValidationResult:
    """
    Check a filter state for contradictory or out-of-range values.

    Args:
        state: Filter state to validate

    Returns:
        ValidationResult listing every problem found
    """
    errors = []

    # Funding range
    if state.min_funding is not None and state.max_funding is not None:
        if state.min_funding > state.max_funding:
            errors.append("Minimum funding cannot be greater than maximum funding")
    if state.min_funding is not None and state.min_funding < 0:
        errors.append("Minimum funding cannot be negative")
    if state.max_funding is not None and state.max_funding < 0:
        errors.append("Maximum funding cannot be negative")

    # Rank range
    if state.min_rank is not None and state.max_rank is not None:
        if state.min_rank > state.max_rank:
            errors.append("Minimum rank cannot be greater than maximum rank")
    if state.min_rank is not None and state.min_rank < 1:
        errors.append("Minimum rank must be at least 1")
    if state.max_rank is not None and state.max_rank < 1:
        errors.append("Maximum rank must be at least 1")

    if len(state.search) > MAX_SEARCH_LENGTH:
        errors.append(f"Search query cannot exceed {MAX_SEARCH_LENGTH} characters")

    return ValidationResult(is_valid=not errors, errors=errors)


def _parse_string(value: Optional[str]) -> str:
    if not value or value in ("undefined", "null"):
        return ""
    return value


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Leading integer of value ("12px" -> 12), or None."""
    if not value or value in ("undefined", "null"):
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_query_params(params: Mapping[str, str]) -> Tuple[FilterState, PaginationState]:
    """
    Decode filter and pagination state from URL query parameters.

    Never raises: missing, "undefined", "null" or non-numeric values are
    treated as unset.

    Args:
        params: Query parameters (e.g. request.query_params)

    Returns:
        Tuple of (filter_state, pagination_state)
    """
    values = {}
    for attr in _STRING_FIELDS:
        values[attr] = _parse_string(params.get(QUERY_PARAM_NAMES[attr]))
    for attr in _INT_FIELDS:
        values[attr] = _parse_int(params.get(QUERY_PARAM_NAMES[attr]))

    values["sort_by"] = _parse_string(params.get("sortBy")) or DEFAULT_SORT_BY
    values["sort_order"] = "desc" if params.get("sortOrder") == "desc" else DEFAULT_SORT_ORDER

    pagination = PaginationState(
        page=_parse_int(params.get("page")) or DEFAULT_PAGE,
        limit=_parse_int(params.get("limit")) or DEFAULT_LIMIT,
    )
    return FilterState(**values), pagination


def _param_value(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_query_params(
    state: FilterState,
    pagination: Optional[PaginationState] = None,
) -> dict[str, str]:
    """
    Encode filter and pagination state as URL query parameters.

    Unset values and defaults are left out so URLs stay short.

    Args:
        state: Filter state
        pagination: Optional pagination state

    Returns:
        Dict of query parameter name to string value
    """
    params = {}
    for attr in _STRING_FIELDS + _INT_FIELDS:
        value = getattr(state, attr)
        if value:
            params[QUERY_PARAM_NAMES[attr]] = _param_value(value)

    if state.sort_by and state.sort_by != DEFAULT_SORT_BY:
        params["sortBy"] = state.sort_by
    if state.sort_order != DEFAULT_SORT_ORDER:
        params["sortOrder"] = state.sort_order

    if pagination:
        if pagination.page != DEFAULT_PAGE:
            params["page"] = str(pagination.page)
        if pagination.limit != DEFAULT_LIMIT:
            params["limit"] = str(pagination.limit)

    return params
