"""
Smart search: pull structured filters out of a free-text query.

"early stage b2b $1M+ top 50" becomes growth_stage=early, customer_focus=b2b,
min_funding=1000000 (in USD) and max_rank=50, with nothing left over to use as
a plain text search.

Rules are applied in order. Every rule matches against the original query;
each matched text is then removed once from a working copy, and whatever is
left becomes the free-text search term.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from .constants import FILTER_COLORS
from .currency import convert_to_usd, format_currency_label
from .models import ParsedFilter, SmartSearchResult

logger = logging.getLogger(__name__)

UNIT_MULTIPLIERS = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

CUSTOMER_FOCUS_ALIASES = {
    "business": "b2b",
    "consumer": "b2c",
}

# NOTE: "ipo" maps to "Initial Coin Offering". Kept as-is until the label is
# confirmed with product; tests pin the current value.
FUNDING_TYPE_NAMES = {
    "series a": "Series A",
    "series b": "Series B",
    "series c": "Series C",
    "seed": "Seed",
    "angel": "Angel",
    "grant": "Grant",
    "debt": "Debt Financing",
    "convertible": "Convertible Note",
    "ipo": "Initial Coin Offering",
}


def extract_funding_amount(match: re.Match) -> float:
    """Turn a "$1.5M" style match into a plain number (1500000.0)."""
    amount = float(match.group(1))
    unit = (match.group(2) or "").lower()
    return amount * UNIT_MULTIPLIERS.get(unit, 1)


@dataclass(frozen=True)
class SearchPattern:
    """One smart search rule."""

    pattern: re.Pattern
    type: str
    extract: Optional[Callable[[re.Match], float]] = None
    mapping: Mapping[str, str] = field(default_factory=dict)


# ASCII so that word boundaries and digits behave the same for every input
_FLAGS = re.IGNORECASE | re.ASCII

SEARCH_PATTERNS = (
    # Funding amounts: $1M, 5m+, 2.5B-. The lookbehind keeps B2B/B2C from
    # being read as "2B".
    SearchPattern(
        pattern=re.compile(r"(?<![a-zA-Z])\$?(\d+(?:\.\d+)?)\s*([kmb])[+\-]?", _FLAGS),
        type="funding",
        extract=extract_funding_amount,
    ),
    SearchPattern(
        pattern=re.compile(r"\b(early|seed|growing|late|exit)\s*(stage)?\b", _FLAGS),
        type="growth_stage",
    ),
    SearchPattern(
        pattern=re.compile(r"\b(b2b|b2c|business|consumer)\b", _FLAGS),
        type="customer_focus",
        mapping=CUSTOMER_FOCUS_ALIASES,
    ),
    SearchPattern(
        pattern=re.compile(r"\b(series\s*[a-z]|seed|angel|grant|debt|convertible|ipo)\b", _FLAGS),
        type="funding_type",
        mapping=FUNDING_TYPE_NAMES,
    ),
    SearchPattern(
        pattern=re.compile(r"\b(?:rank|position|top)\s*(\d+)", _FLAGS),
        type="rank",
    ),
)


def _format_number(value: float) -> str:
    """Print a number the way the browser does: 5000000, not 5000000.0."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _as_amount(value: float):
    """Whole amounts become ints so they serialize without a trailing .0."""
    if float(value).is_integer():
        return int(value)
    return value


def _apply_funding(
    value: float,
    filters: dict,
    currency: str,
    is_minimum: bool,
    rates: Optional[Mapping[str, float]],
) -> Optional[ParsedFilter]:
    if not math.isfinite(value):
        logger.debug("Ignoring non-numeric funding amount: %r", value)
        return None

    # Companies are stored in USD; the user typed the amount in their currency
    usd_amount = convert_to_usd(value, currency, rates)
    if not math.isfinite(usd_amount):
        logger.debug("Ignoring funding amount that does not convert: %r", value)
        return None

    kind = "min" if is_minimum else "max"
    key = f"{kind}_funding"
    filters[key] = _as_amount(usd_amount)

    return ParsedFilter(
        type=key,
        value=_format_number(value),
        label=format_currency_label(value, kind, currency),
        color=FILTER_COLORS["funding"],
    )


def _apply_match(
    rule_type: str,
    value,
    filters: dict,
    currency: str,
    is_minimum: bool,
    rates: Optional[Mapping[str, float]],
) -> Optional[ParsedFilter]:
    """Write one matched value into the filter patch and build its badge."""
    if rule_type == "funding":
        return _apply_funding(value, filters, currency, is_minimum, rates)

    elif rule_type == "growth_stage":
        filters["growth_stage"] = value.lower()
        return ParsedFilter(
            type="growth_stage",
            value=value.lower(),
            label=f"{value} Stage",
            color=FILTER_COLORS["growth_stage"],
        )

    elif rule_type == "customer_focus":
        filters["customer_focus"] = value.lower()
        return ParsedFilter(
            type="customer_focus",
            value=value.lower(),
            label=value.upper(),
            color=FILTER_COLORS["customer_focus"],
        )

    elif rule_type == "funding_type":
        filters["funding_type"] = value
        return ParsedFilter(
            type="funding_type",
            value=value,
            label=value,
            color=FILTER_COLORS["funding_type"],
        )

    elif rule_type == "rank":
        try:
            rank = int(value)
        except ValueError:
            logger.debug("Ignoring non-numeric rank: %r", value)
            return None
        filters["max_rank"] = rank
        return ParsedFilter(
            type="max_rank",
            value=value,
            label=f"Top {value}",
            color=FILTER_COLORS["rank"],
        )

    raise ValueError(f"Unknown smart search rule: {rule_type}")


def parse_smart_search(
    query: str,
    current_currency: str = "USD",
    rates: Optional[Mapping[str, float]] = None,
) -> SmartSearchResult:
    """
    Parse a smart search query into filters.

    Funding amounts are read in current_currency and converted to USD. Whether
    they become a minimum or a maximum is decided once for the whole query:
    a "+" or the word "above" anywhere makes every amount a minimum, so
    "$1M $5M+" yields two minimums.

    The patch only ever gains keys; clearing a filter is up to the caller.

    Args:
        query: Free text typed by the user (may be empty)
        current_currency: ISO code of the currency the user is browsing in
        rates: Optional exchange rate table (defaults to EXCHANGE_RATES)

    Returns:
        SmartSearchResult with the filter patch, leftover text and badges
    """
    query = query or ""
    remaining = query
    filters: dict = {}
    parsed_filters: list[ParsedFilter] = []

    is_minimum = "+" in query or "above" in query

    for rule in SEARCH_PATTERNS:
        for match in rule.pattern.finditer(query):
            text = match.group(0)
            raw = match.group(1) or text

            if rule.extract:
                value = rule.extract(match)
            else:
                value = rule.mapping.get(raw.lower(), raw)

            parsed = _apply_match(
                rule.type, value, filters, current_currency, is_minimum, rates
            )
            if parsed is None:
                continue

            parsed_filters.append(parsed)

            # First literal occurrence only; trimming waits until every rule ran
            remaining = remaining.replace(text, "", 1)

    remaining = remaining.strip()
    filters["search"] = remaining

    if parsed_filters:
        logger.debug(
            "Smart search %r -> %s",
            query,
            ", ".join(f"{p.type}={p.value}" for p in parsed_filters),
        )

    return SmartSearchResult(
        filters=filters,
        remaining_query=remaining,
        parsed_filters=parsed_filters,
    )
