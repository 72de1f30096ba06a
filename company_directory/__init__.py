"""
Company Directory - filterable company listings with smart search.

Type what you are looking for and let smart search turn it into filters:
"early stage b2b $1M+ top 50" means growth stage early, B2B customers,
at least $1M last raised and ranked in the top 50.

CLI Usage:
    company-directory parse "series a fintech 5m" --currency EUR
    company-directory companies "early stage b2b" -f json
    company-directory web  # Start the HTTP API

Library Usage:
    from company_directory import parse_smart_search

    result = parse_smart_search("early stage b2b $1M+ top 50", "USD")
    result.filters
    # {'min_funding': 1000000, 'growth_stage': 'early',
    #  'customer_focus': 'b2b', 'max_rank': 50, 'search': ''}
"""

__version__ = "1.0.0"

from company_directory.models import FilterState, PaginationState, ParsedFilter, SmartSearchResult
from company_directory.smart_search import parse_smart_search
from company_directory.filters import merge_filters

__all__ = [
    "parse_smart_search",
    "merge_filters",
    "FilterState",
    "PaginationState",
    "ParsedFilter",
    "SmartSearchResult",
    "__version__",
]
