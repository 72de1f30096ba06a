"""Pydantic models for API v1."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes field names in camelCase, like the URL filter state."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanyResponse(BaseModel):
    """Company row."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    domain: Optional[str] = None
    rank: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    growth_stage: Optional[str] = None
    last_funding_type: Optional[str] = None
    last_funding_amount: Optional[int] = None
    customer_focus: Optional[str] = None


class CompanyPage(CamelModel):
    """One page of companies."""
    data: List[CompanyResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class FilterPatch(CamelModel):
    """Filters detected by smart search. Unset filters are omitted."""
    search: str = ""
    growth_stage: Optional[str] = None
    customer_focus: Optional[str] = None
    funding_type: Optional[str] = None
    min_funding: Optional[Union[int, float]] = None
    max_funding: Optional[Union[int, float]] = None
    max_rank: Optional[int] = None


class ParsedFilterResponse(BaseModel):
    """Detected filter badge."""
    type: str
    value: str
    label: str
    color: str


class SmartSearchResponse(CamelModel):
    """Smart search parse result."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "currency": "USD",
                "filters": {
                    "search": "",
                    "growthStage": "early",
                    "customerFocus": "b2b",
                    "minFunding": 1000000,
                    "maxRank": 50,
                },
                "remainingQuery": "",
                "parsedFilters": [
                    {"type": "minFunding", "value": "1000000", "label": "Min $1M", "color": "orange"},
                ],
            }
        },
    )

    currency: str
    filters: FilterPatch
    remaining_query: str
    parsed_filters: List[ParsedFilterResponse]


class CurrencyResponse(BaseModel):
    """Known currency."""
    code: str
    name: str
    symbol: str
    rate: float


class ConversionResponse(CamelModel):
    """Currency conversion result."""
    amount: float
    from_currency: str
    to_currency: str
    amount_usd: float
    result: float
    formatted: str


class LocaleCurrencyResponse(CamelModel):
    """Currency detected for a locale."""
    locale: str
    currency: str
    currency_name: str
    symbol: str


class ConfigResponse(CamelModel):
    """Configuration response."""
    default_currency: str
    page_size: int
    max_page_size: int
    search_limit: int
    version: str


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    version: str
    uptime_seconds: int


class FilterOption(BaseModel):
    """Selectable value for a filter dropdown."""
    value: str
    label: str


class FilterOptionsResponse(CamelModel):
    """Choices and bounds for the filter controls."""
    growth_stages: List[FilterOption]
    customer_focus: List[FilterOption]
    funding_types: List[FilterOption]
    ranges: dict
    sortable_columns: List[str]


class ActiveFilterResponse(BaseModel):
    """Applied filter with its display label."""
    key: str
    label: str


class FilterStateResponse(CamelModel):
    """Filter and page state decoded from URL query parameters."""
    filters: dict
    page: int
    limit: int
    active_filters: List[ActiveFilterResponse]
    active_filter_count: int
    query: str
