"""Data models for the company directory."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ParsedFilter:
    """A filter detected by smart search, shown to the user as a badge."""

    type: str  # Filter key, e.g. "growth_stage" or "min_funding"
    value: str
    label: str
    color: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "value": self.value,
            "label": self.label,
            "color": self.color,
        }


@dataclass
class SmartSearchResult:
    """Outcome of parsing one smart search query."""

    filters: dict = field(default_factory=dict)
    remaining_query: str = ""
    parsed_filters: list[ParsedFilter] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "filters": dict(self.filters),
            "remaining_query": self.remaining_query,
            "parsed_filters": [f.to_dict() for f in self.parsed_filters],
        }


@dataclass
class FilterState:
    """Full filter state of the company listing."""

    search: str = ""
    growth_stage: str = ""
    customer_focus: str = ""
    funding_type: str = ""
    min_rank: Optional[int] = None
    max_rank: Optional[int] = None
    min_funding: Optional[float] = None
    max_funding: Optional[float] = None
    sort_by: str = "rank"
    sort_order: str = "asc"

    def to_dict(self) -> dict:
        return {
            "search": self.search,
            "growth_stage": self.growth_stage,
            "customer_focus": self.customer_focus,
            "funding_type": self.funding_type,
            "min_rank": self.min_rank,
            "max_rank": self.max_rank,
            "min_funding": self.min_funding,
            "max_funding": self.max_funding,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }


@dataclass
class PaginationState:
    """Page number (1-based) and page size."""

    page: int = 1
    limit: int = 12


@dataclass
class ActiveFilter:
    """An applied filter, as listed in the active filters bar."""

    key: str
    label: str


@dataclass
class ValidationResult:
    """Result of validating a filter state."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class PaginatedResult:
    """One page of results plus totals."""

    data: list[Any]
    total: int
    page: int
    limit: int
    total_pages: int
