"""Configuration endpoints."""

import time

from fastapi import APIRouter, Request

from company_directory.constants import (
    CUSTOMER_FOCUS_OPTIONS,
    FILTER_RANGES,
    FUNDING_TYPE_OPTIONS,
    GROWTH_STAGE_OPTIONS,
    SORTABLE_COLUMNS,
)
from company_directory.web.api.v1.models import (
    ConfigResponse,
    FilterOption,
    FilterOptionsResponse,
    HealthResponse,
)

router = APIRouter()

_start_time = time.time()


@router.get("/config", response_model=ConfigResponse)
def get_config(request: Request):
    """Get current configuration."""
    from company_directory import __version__

    settings = request.app.state.settings
    return ConfigResponse(
        default_currency=settings.default_currency,
        page_size=settings.page_size,
        max_page_size=settings.max_page_size,
        search_limit=settings.search_limit,
        version=__version__,
    )


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    from company_directory import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=int(time.time() - _start_time),
    )


@router.get("/filter-options", response_model=FilterOptionsResponse)
def get_filter_options():
    """Options and ranges for building filter controls."""

    def options(pairs):
        return [FilterOption(value=value, label=label) for value, label in pairs]

    return FilterOptionsResponse(
        growth_stages=options(GROWTH_STAGE_OPTIONS),
        customer_focus=options(CUSTOMER_FOCUS_OPTIONS),
        funding_types=options(FUNDING_TYPE_OPTIONS),
        ranges=FILTER_RANGES,
        sortable_columns=list(SORTABLE_COLUMNS),
    )
