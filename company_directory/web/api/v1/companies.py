"""Company listing endpoints."""

import logging
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from company_directory.filters import (
    QUERY_PARAM_NAMES,
    count_active_filters,
    encode_query_params,
    get_active_filters,
    merge_smart_search,
    parse_query_params,
    reset_filters,
    validate_filters,
)
from company_directory.models import FilterState, PaginationState
from company_directory.smart_search import parse_smart_search
from company_directory.web.api.v1.models import (
    ActiveFilterResponse,
    CompanyPage,
    CompanyResponse,
    FilterStateResponse,
)
from company_directory.web.database import Company, get_companies, get_db, search_companies

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies")


@router.get("", response_model=CompanyPage)
def list_companies(
    request: Request,
    db: Session = Depends(get_db),
    search: str = "",
    growth_stage: str = Query(default="", alias="growthStage"),
    customer_focus: str = Query(default="", alias="customerFocus"),
    funding_type: str = Query(default="", alias="fundingType"),
    min_rank: Optional[int] = Query(default=None, alias="minRank"),
    max_rank: Optional[int] = Query(default=None, alias="maxRank"),
    min_funding: Optional[float] = Query(default=None, alias="minFunding"),
    max_funding: Optional[float] = Query(default=None, alias="maxFunding"),
    sort_by: str = Query(default="rank", alias="sortBy"),
    sort_order: str = Query(default="asc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    q: Optional[str] = Query(default=None, description="Smart search text, merged over the filters"),
    currency: Optional[str] = Query(default=None, description="Currency amounts in q are typed in"),
):
    """
    List companies with filtering, sorting and pagination.

    Funding bounds are in USD. When q is given it is parsed with smart search
    and the detected filters are applied on top of the explicit ones.
    """
    settings = request.app.state.settings
    limit = min(limit or settings.page_size, settings.max_page_size)

    state = FilterState(
        search=search,
        growth_stage=growth_stage,
        customer_focus=customer_focus,
        funding_type=funding_type,
        min_rank=min_rank,
        max_rank=max_rank,
        min_funding=min_funding,
        max_funding=max_funding,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    if q:
        parsed = parse_smart_search(
            q, (currency or settings.default_currency).upper(), rates=settings.rates()
        )
        state = merge_smart_search(state, parsed.filters)

    validation = validate_filters(state)
    if not validation.is_valid:
        raise HTTPException(status_code=422, detail=validation.errors)

    result = get_companies(db, state, PaginationState(page=page, limit=limit))

    return CompanyPage(
        data=[CompanyResponse.model_validate(c) for c in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/search", response_model=List[CompanyResponse])
def quick_search(
    request: Request,
    q: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Quick search by name, domain or description."""
    settings = request.app.state.settings
    companies = search_companies(db, q, limit=settings.search_limit)
    return [CompanyResponse.model_validate(c) for c in companies]


@router.get("/filter-state", response_model=FilterStateResponse)
def filter_state(request: Request, reset: bool = False):
    """
    Normalize URL filter state.

    Decodes the query string the way the listing page does (bad values become
    unset), and returns the canonical query string, active filter labels and
    count. With reset=true every filter but the search text is cleared.
    """
    state, pagination = parse_query_params(request.query_params)
    if reset:
        state = reset_filters(state)

    return FilterStateResponse(
        filters={QUERY_PARAM_NAMES[key]: value for key, value in state.to_dict().items()},
        page=pagination.page,
        limit=pagination.limit,
        active_filters=[
            ActiveFilterResponse(key=f.key, label=f.label) for f in get_active_filters(state)
        ],
        active_filter_count=count_active_filters(state),
        query=urlencode(encode_query_params(state, pagination)),
    )


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: str, db: Session = Depends(get_db)):
    """Get a single company."""
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return CompanyResponse.model_validate(company)
