"""Tests for smart search: filter extraction from free text."""

import pytest

from company_directory.currency import EXCHANGE_RATES, convert_currency
from company_directory.smart_search import SEARCH_PATTERNS, _apply_match, parse_smart_search


def filter_types(result):
    return [p.type for p in result.parsed_filters]


class TestPlainText:
    """Queries with nothing recognisable pass straight through."""

    def test_empty_query(self):
        """Empty query yields only an empty search term."""
        for currency in ("USD", "EUR", "XYZ"):
            result = parse_smart_search("", currency)
            assert result.filters == {"search": ""}
            assert result.remaining_query == ""
            assert result.parsed_filters == []

    def test_none_query_treated_as_empty(self):
        """None behaves like an empty query."""
        result = parse_smart_search(None, "USD")
        assert result.filters == {"search": ""}

    def test_text_without_tokens(self):
        """Plain text becomes the search term unchanged."""
        result = parse_smart_search("acme robotics", "USD")
        assert result.parsed_filters == []
        assert result.filters == {"search": "acme robotics"}

    def test_search_is_trimmed(self):
        """Surrounding whitespace is trimmed from the search term."""
        result = parse_smart_search("   fintech   ", "USD")
        assert result.filters["search"] == "fintech"
        assert result.remaining_query == "fintech"


class TestWordBoundaries:
    """Terms inside larger words must not match."""

    def test_b2b2c_is_not_b2b(self):
        """B2B2C is not read as B2B, nor as a 2B funding amount."""
        result = parse_smart_search("B2B2C companies", "USD")
        assert "customer_focus" not in result.filters
        assert "max_funding" not in result.filters
        assert result.parsed_filters == []
        assert result.filters["search"] == "B2B2C companies"

    def test_earlybird_is_not_early(self):
        """earlybird does not match the early growth stage."""
        result = parse_smart_search("earlybird companies", "USD")
        assert "growth_stage" not in result.filters
        assert result.parsed_filters == []

    def test_b2b_is_not_funding(self):
        """The 2B in B2B is never a $2B funding amount."""
        result = parse_smart_search("B2B SaaS", "USD")
        assert result.filters["customer_focus"] == "b2b"
        assert "max_funding" not in result.filters
        assert "min_funding" not in result.filters
        assert result.filters["search"] == "SaaS"

    def test_amount_glued_to_word_is_ignored(self):
        """An amount directly after a letter is not a funding amount."""
        result = parse_smart_search("acme1m", "USD")
        assert result.parsed_filters == []


class TestFundingAmounts:
    """Funding amounts, units and min/max classification."""

    def test_plus_makes_minimum(self):
        """$5M+ sets a minimum."""
        result = parse_smart_search("$5M+", "USD")
        assert result.filters["min_funding"] == 5_000_000
        assert "max_funding" not in result.filters
        assert result.filters["search"] == ""

    def test_bare_amount_is_maximum(self):
        """$5M with no + or "above" sets a maximum."""
        result = parse_smart_search("$5M", "USD")
        assert result.filters["max_funding"] == 5_000_000
        assert "min_funding" not in result.filters

    def test_above_makes_minimum(self):
        """The word "above" anywhere in the query makes amounts minimums."""
        result = parse_smart_search("companies above 2m", "USD")
        assert result.filters["min_funding"] == 2_000_000
        assert result.filters["search"] == "companies above"

    def test_classification_is_for_whole_query(self):
        """A single + turns every amount in the query into a minimum."""
        result = parse_smart_search("$1M $5M+", "USD")
        assert filter_types(result) == ["min_funding", "min_funding"]
        # Later matches overwrite earlier ones
        assert result.filters["min_funding"] == 5_000_000
        assert "max_funding" not in result.filters

    def test_units(self):
        """k, m and b multiply by thousand, million and billion."""
        assert parse_smart_search("500k", "USD").filters["max_funding"] == 500_000
        assert parse_smart_search("3M", "USD").filters["max_funding"] == 3_000_000
        assert parse_smart_search("1.5b", "USD").filters["max_funding"] == 1_500_000_000

    def test_whole_usd_amounts_are_ints(self):
        """Whole USD amounts come back as ints."""
        amount = parse_smart_search("$5M", "USD").filters["max_funding"]
        assert isinstance(amount, int)

    def test_badge_for_funding(self):
        """Funding badges show the typed amount and a compact label."""
        result = parse_smart_search("$2.5M+", "USD")
        badge = result.parsed_filters[0]
        assert badge.type == "min_funding"
        assert badge.value == "2500000"
        assert badge.label == "Min $2.5M"
        assert badge.color == "orange"

    def test_max_badge_label(self):
        """Maximum badges are labelled Max."""
        badge = parse_smart_search("$5M", "USD").parsed_filters[0]
        assert badge.label == "Max $5M"

    def test_minus_suffix_is_consumed(self):
        """A trailing - is part of the match and removed from the text."""
        result = parse_smart_search("fintech 10m-", "USD")
        assert result.filters["max_funding"] == 10_000_000
        assert result.filters["search"] == "fintech"


class TestCurrency:
    """Amounts are typed in the current currency and stored in USD."""

    def test_eur_amount_converted_to_usd(self):
        """5M typed in EUR is stored as its USD value."""
        result = parse_smart_search("5M", "EUR")
        expected = 5_000_000 / EXCHANGE_RATES["EUR"]
        assert result.filters["max_funding"] == pytest.approx(expected)
        assert result.filters["max_funding"] != 5_000_000

    def test_eur_round_trip(self):
        """Converting the stored USD value back to EUR gives the typed amount."""
        result = parse_smart_search("5M", "EUR")
        back = convert_currency(result.filters["max_funding"], "EUR")
        assert back == pytest.approx(5_000_000)

    def test_same_text_differs_by_currency(self):
        """The same literal parses to different USD values per currency."""
        usd = parse_smart_search("5m", "USD").filters["max_funding"]
        gbp = parse_smart_search("5m", "GBP").filters["max_funding"]
        jpy = parse_smart_search("5m", "JPY").filters["max_funding"]
        assert usd == 5_000_000
        assert gbp > usd
        assert jpy < usd

    def test_label_uses_typed_currency(self):
        """The badge label shows the amount in the currency it was typed in."""
        badge = parse_smart_search("5M", "EUR").parsed_filters[0]
        assert badge.value == "5000000"
        assert badge.label == "Max €5M"

    def test_unknown_currency_is_one_to_one(self):
        """Unknown currencies convert without changing the amount."""
        result = parse_smart_search("5m", "XYZ")
        assert result.filters["max_funding"] == 5_000_000
        assert result.parsed_filters[0].label == "Max XYZ 5M"

    def test_custom_rates(self):
        """A rate table can be passed in."""
        result = parse_smart_search("5m", "EUR", rates={"USD": 1.0, "EUR": 0.5})
        assert result.filters["max_funding"] == 10_000_000


class TestGrowthStage:
    """Growth stage detection."""

    def test_early_stage(self):
        """"early stage" sets the early growth stage."""
        result = parse_smart_search("early stage fintech", "USD")
        assert result.filters["growth_stage"] == "early"
        assert result.filters["search"] == "fintech"

    def test_value_lowercased_label_as_typed(self):
        """Stored value is lowercase; the label keeps the typed word."""
        result = parse_smart_search("Late Stage", "USD")
        badge = result.parsed_filters[0]
        assert result.filters["growth_stage"] == "late"
        assert badge.value == "late"
        assert badge.label == "Late Stage"
        assert badge.color == "blue"

    def test_without_stage_word(self):
        """The word "stage" is optional."""
        result = parse_smart_search("growing", "USD")
        assert result.filters["growth_stage"] == "growing"

    def test_seed_is_stage_and_funding_type(self):
        """"seed" is both a growth stage and a funding type."""
        result = parse_smart_search("seed", "USD")
        assert result.filters["growth_stage"] == "seed"
        assert result.filters["funding_type"] == "Seed"
        assert filter_types(result) == ["growth_stage", "funding_type"]
        assert result.filters["search"] == ""


class TestCustomerFocus:
    """Customer focus detection and aliases."""

    def test_b2b(self):
        """b2b is stored lowercase and labelled uppercase."""
        result = parse_smart_search("B2B", "USD")
        badge = result.parsed_filters[0]
        assert result.filters["customer_focus"] == "b2b"
        assert badge.label == "B2B"
        assert badge.color == "purple"

    def test_business_alias(self):
        """"business" means b2b."""
        assert parse_smart_search("business", "USD").filters["customer_focus"] == "b2b"

    def test_consumer_alias(self):
        """"consumer" means b2c."""
        result = parse_smart_search("consumer apps", "USD")
        assert result.filters["customer_focus"] == "b2c"
        assert result.parsed_filters[0].label == "B2C"
        assert result.filters["search"] == "apps"


class TestFundingType:
    """Funding type detection and display names."""

    def test_series_a(self):
        """"series a" maps to "Series A"."""
        result = parse_smart_search("series a", "USD")
        assert result.filters["funding_type"] == "Series A"
        assert result.parsed_filters[0].label == "Series A"
        assert result.parsed_filters[0].color == "orange"

    def test_case_insensitive(self):
        """Funding types match regardless of case."""
        assert parse_smart_search("SERIES B", "USD").filters["funding_type"] == "Series B"

    def test_debt_and_convertible(self):
        """Short names map to full display names."""
        assert parse_smart_search("debt", "USD").filters["funding_type"] == "Debt Financing"
        assert parse_smart_search("convertible", "USD").filters["funding_type"] == "Convertible Note"

    def test_ipo_label(self):
        """"ipo" currently maps to "Initial Coin Offering"."""
        assert parse_smart_search("ipo", "USD").filters["funding_type"] == "Initial Coin Offering"

    def test_unmapped_series_passes_through(self):
        """Series without a display name keep the typed text."""
        assert parse_smart_search("series d", "USD").filters["funding_type"] == "series d"


class TestRank:
    """Rank detection."""

    def test_top_100(self):
        """"top 100" sets max_rank 100."""
        result = parse_smart_search("top 100", "USD")
        assert len(result.parsed_filters) == 1
        badge = result.parsed_filters[0]
        assert badge.type == "max_rank"
        assert badge.value == "100"
        assert badge.label == "Top 100"
        assert badge.color == "yellow"
        assert result.filters["max_rank"] == 100
        assert result.filters["search"] == ""

    def test_rank_and_position(self):
        """"rank" and "position" work like "top"."""
        assert parse_smart_search("rank 10", "USD").filters["max_rank"] == 10
        assert parse_smart_search("position 3", "USD").filters["max_rank"] == 3
        assert parse_smart_search("rank10", "USD").filters["max_rank"] == 10


class TestCombinedQueries:
    """Several filters in one query."""

    def test_everything_at_once(self):
        """All four filter kinds are detected and nothing is left over."""
        result = parse_smart_search("early stage b2b $1M+ top 50", "USD")
        assert result.filters["growth_stage"] == "early"
        assert result.filters["customer_focus"] == "b2b"
        assert result.filters["min_funding"] == 1_000_000
        assert result.filters["max_rank"] == 50
        assert result.remaining_query.strip() == ""
        assert result.filters["search"] == ""

    def test_badges_follow_rule_order(self):
        """Badges are listed by rule, not by position in the text."""
        result = parse_smart_search("b2b early top 50 $1M+", "USD")
        assert filter_types(result) == ["min_funding", "growth_stage", "customer_focus", "max_rank"]
        assert result.filters["search"] == ""

    def test_number_then_b_reads_as_billions(self):
        """A number followed by a word starting with b is a funding amount."""
        # "50 b2b": the space is allowed between amount and unit, so "50 b" is $50B
        result = parse_smart_search("top 50 b2b", "USD")
        assert filter_types(result) == ["max_funding", "customer_focus", "max_rank"]
        assert result.filters["max_funding"] == 50_000_000_000
        assert result.filters["customer_focus"] == "b2b"
        assert result.filters["max_rank"] == 50
        assert result.filters["search"] == "top 2b"

    def test_stage_before_amount(self):
        """A stage match ending in a space is removed after the amount goes."""
        result = parse_smart_search("early 1.3m+", "GBP")
        assert result.filters["growth_stage"] == "early"
        assert result.filters["min_funding"] == pytest.approx(1_300_000 / 0.73)
        assert result.filters["search"] == ""

    def test_inner_spacing_kept_until_end(self):
        """Only the final text is trimmed."""
        result = parse_smart_search("b2b  robotics  top 5", "USD")
        assert result.remaining_query == "robotics"

    def test_leftover_text_becomes_search(self):
        """Unmatched words stay as the search term."""
        result = parse_smart_search("robotics series a top 20", "USD")
        assert result.filters["funding_type"] == "Series A"
        assert result.filters["max_rank"] == 20
        assert result.filters["search"] == "robotics"

    def test_repeated_term_removed_per_match(self):
        """Each match removes one occurrence of its text."""
        result = parse_smart_search("b2b b2b", "USD")
        assert len(result.parsed_filters) == 2
        assert result.remaining_query == ""

    def test_first_literal_occurrence_is_removed(self):
        """Removal is by literal text, so the first occurrence goes."""
        # Only the standalone "1m" matches, but "acme1m" holds the first "1m"
        result = parse_smart_search("acme1m 1m", "USD")
        assert result.filters["max_funding"] == 1_000_000
        assert result.remaining_query == "acme 1m"

    def test_patch_only_has_detected_keys(self):
        """Undetected filters are absent from the patch, not reset."""
        result = parse_smart_search("b2b", "USD")
        assert set(result.filters) == {"customer_focus", "search"}

    def test_to_dict(self):
        """Results serialize to plain dicts."""
        data = parse_smart_search("top 5 fintech", "USD").to_dict()
        assert data["filters"] == {"max_rank": 5, "search": "fintech"}
        assert data["remaining_query"] == "fintech"
        assert data["parsed_filters"] == [
            {"type": "max_rank", "value": "5", "label": "Top 5", "color": "yellow"}
        ]


class TestRules:
    """Rule table and value guards."""

    def test_rule_order(self):
        """Rules run funding first and rank last."""
        assert [p.type for p in SEARCH_PATTERNS] == [
            "funding", "growth_stage", "customer_focus", "funding_type", "rank",
        ]

    def test_nan_funding_is_dropped(self):
        """Non-numeric funding values never reach the patch."""
        filters = {}
        assert _apply_match("funding", float("nan"), filters, "USD", False, None) is None
        assert filters == {}

    def test_infinite_funding_is_dropped(self):
        """Infinite funding values never reach the patch."""
        filters = {}
        assert _apply_match("funding", float("inf"), filters, "USD", True, None) is None
        assert filters == {}
