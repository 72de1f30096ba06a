"""Tests for filter state merging, validation, display and URL encoding."""

from company_directory.filters import (
    count_active_filters,
    encode_query_params,
    format_funding,
    get_active_filters,
    merge_filters,
    merge_smart_search,
    parse_query_params,
    reset_filters,
    validate_filters,
)
from company_directory.models import FilterState, PaginationState
from company_directory.smart_search import parse_smart_search


class TestMerge:
    """Applying patches to filter state."""

    def test_patch_overrides_only_given_keys(self):
        """Keys not in the patch keep their value."""
        state = FilterState(funding_type="Seed", min_rank=5)
        merged = merge_filters(state, {"customer_focus": "b2b", "search": "robots"})
        assert merged.customer_focus == "b2b"
        assert merged.search == "robots"
        assert merged.funding_type == "Seed"
        assert merged.min_rank == 5

    def test_original_untouched(self):
        """Merging returns a new state."""
        state = FilterState()
        merge_filters(state, {"growth_stage": "early"})
        assert state.growth_stage == ""

    def test_unknown_keys_ignored(self):
        """Keys that are not filters are dropped."""
        merged = merge_filters(FilterState(), {"colour": "red", "max_rank": 10})
        assert merged.max_rank == 10
        assert not hasattr(merged, "colour")

    def test_smart_search_patch(self):
        """A smart search result merges straight into the state."""
        result = parse_smart_search("early stage b2b top 50 fintech", "USD")
        merged = merge_filters(FilterState(sort_by="name"), result.filters)
        assert merged.growth_stage == "early"
        assert merged.customer_focus == "b2b"
        assert merged.max_rank == 50
        assert merged.search == "fintech"
        assert merged.sort_by == "name"

    def test_smart_merge_keeps_explicit_search(self):
        """A patch with an empty search leaves the current search alone."""
        state = FilterState(search="acme")
        merged = merge_smart_search(state, parse_smart_search("b2b", "USD").filters)
        assert merged.search == "acme"
        assert merged.customer_focus == "b2b"

    def test_smart_merge_replaces_search_with_text(self):
        """Leftover text replaces the current search."""
        state = FilterState(search="acme")
        merged = merge_smart_search(state, parse_smart_search("b2b robots", "USD").filters)
        assert merged.search == "robots"

    def test_smart_merge_does_not_touch_patch(self):
        """The caller's patch is left as it was."""
        patch = {"search": "", "max_rank": 5}
        merge_smart_search(FilterState(), patch)
        assert patch == {"search": "", "max_rank": 5}

    def test_reset_keeps_search(self):
        """Reset clears everything but the search text."""
        state = FilterState(search="acme", growth_stage="late", max_rank=3, sort_order="desc")
        assert reset_filters(state) == FilterState(search="acme")


class TestFormatFunding:
    """Short funding text for tables."""

    def test_millions(self):
        """Millions keep one decimal."""
        assert format_funding(1_500_000) == "$1.5M"
        assert format_funding(50_000_000) == "$50.0M"

    def test_thousands(self):
        """Thousands are whole numbers, rounded half up."""
        assert format_funding(250_000) == "$250K"
        assert format_funding(2_500) == "$3K"

    def test_small_and_missing(self):
        """Small amounts print as is; missing is N/A."""
        assert format_funding(999) == "$999"
        assert format_funding(None) == "N/A"
        assert format_funding(0) == "N/A"


class TestActiveFilters:
    """Active filter labels and counts."""

    def test_labels(self):
        """Each set filter gets a readable label."""
        state = FilterState(
            search="acme",
            growth_stage="early",
            customer_focus="b2b",
            funding_type="Series A",
            max_rank=10,
            min_funding=5_000_000,
        )
        labels = [f.label for f in get_active_filters(state)]
        assert labels == [
            'Search: "acme"',
            "Stage: early",
            "Focus: b2b",
            "Funding: Series A",
            "Max Rank: 10",
            "Min Funding: $5,000,000",
        ]

    def test_default_state_has_none(self):
        """A fresh state has no active filters."""
        assert get_active_filters(FilterState()) == []
        assert count_active_filters(FilterState()) == 0

    def test_count_ignores_sort(self):
        """Sort settings are not filters."""
        state = FilterState(growth_stage="late", min_rank=1, sort_by="name", sort_order="desc")
        assert count_active_filters(state) == 2


class TestValidation:
    """Filter validation."""

    def test_valid(self):
        """Consistent filters pass."""
        result = validate_filters(FilterState(min_rank=1, max_rank=10, min_funding=0, max_funding=5))
        assert result.is_valid
        assert result.errors == []

    def test_inverted_ranges(self):
        """Min above max is rejected for funding and rank."""
        result = validate_filters(FilterState(min_funding=10, max_funding=5, min_rank=9, max_rank=2))
        assert not result.is_valid
        assert "Minimum funding cannot be greater than maximum funding" in result.errors
        assert "Minimum rank cannot be greater than maximum rank" in result.errors

    def test_out_of_range(self):
        """Negative funding and ranks below 1 are rejected."""
        result = validate_filters(FilterState(min_funding=-1, max_funding=-1, min_rank=0, max_rank=0))
        assert result.errors == [
            "Minimum funding cannot be negative",
            "Maximum funding cannot be negative",
            "Minimum rank must be at least 1",
            "Maximum rank must be at least 1",
        ]

    def test_search_too_long(self):
        """Search text is limited to 100 characters."""
        assert validate_filters(FilterState(search="x" * 100)).is_valid
        result = validate_filters(FilterState(search="x" * 101))
        assert result.errors == ["Search query cannot exceed 100 characters"]


class TestQueryParams:
    """URL query parameter decoding and encoding."""

    def test_parse(self):
        """camelCase params decode into state."""
        state, pagination = parse_query_params({
            "search": "acme",
            "growthStage": "early",
            "minRank": "5",
            "maxFunding": "1000000",
            "sortBy": "name",
            "sortOrder": "desc",
            "page": "3",
            "limit": "24",
        })
        assert state.search == "acme"
        assert state.growth_stage == "early"
        assert state.min_rank == 5
        assert state.max_funding == 1_000_000
        assert state.sort_by == "name"
        assert state.sort_order == "desc"
        assert pagination == PaginationState(page=3, limit=24)

    def test_parse_garbage(self):
        """Bad values fall back to defaults instead of raising."""
        state, pagination = parse_query_params({
            "search": "undefined",
            "customerFocus": "null",
            "maxRank": "abc",
            "minRank": "12px",
            "sortOrder": "sideways",
            "page": "0",
            "limit": "null",
        })
        assert state.search == ""
        assert state.customer_focus == ""
        assert state.max_rank is None
        assert state.min_rank == 12
        assert state.sort_by == "rank"
        assert state.sort_order == "asc"
        assert pagination == PaginationState()

    def test_parse_empty(self):
        """No params means the default state."""
        state, pagination = parse_query_params({})
        assert state == FilterState()
        assert pagination == PaginationState()

    def test_encode_defaults_omitted(self):
        """Defaults and unset values are left out."""
        assert encode_query_params(FilterState(), PaginationState()) == {}

    def test_encode(self):
        """Set values are encoded with camelCase names."""
        state = FilterState(customer_focus="b2c", min_funding=5_000_000.0, sort_order="desc")
        params = encode_query_params(state, PaginationState(page=2))
        assert params == {
            "customerFocus": "b2c",
            "minFunding": "5000000",
            "sortOrder": "desc",
            "page": "2",
        }

    def test_encode_then_parse(self):
        """Encoded params decode back to the same state."""
        state = FilterState(search="robots", growth_stage="late", max_rank=20, sort_by="name")
        pagination = PaginationState(page=4, limit=6)
        assert parse_query_params(encode_query_params(state, pagination)) == (state, pagination)
