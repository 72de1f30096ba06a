"""Smart search endpoint."""

from typing import Optional

from fastapi import APIRouter, Query, Request
from pydantic.alias_generators import to_camel

from company_directory.smart_search import parse_smart_search
from company_directory.web.api.v1.models import (
    FilterPatch,
    ParsedFilterResponse,
    SmartSearchResponse,
)

router = APIRouter()


@router.get("/smart-search", response_model=SmartSearchResponse, response_model_exclude_none=True)
def smart_search(
    request: Request,
    q: str = Query(default="", max_length=500),
    currency: Optional[str] = Query(default=None, min_length=3, max_length=3),
):
    """
    Parse free text into filters.

    Funding amounts in q are read in the given currency (default: the
    configured currency) and returned in USD.
    """
    settings = request.app.state.settings
    currency = (currency or settings.default_currency).upper()

    result = parse_smart_search(q, currency, rates=settings.rates())

    return SmartSearchResponse(
        currency=currency,
        filters=FilterPatch(**result.filters),
        remaining_query=result.remaining_query,
        parsed_filters=[
            ParsedFilterResponse(
                type=to_camel(p.type),
                value=p.value,
                label=p.label,
                color=p.color,
            )
            for p in result.parsed_filters
        ],
    )
