"""API v1 router."""

from fastapi import APIRouter

from company_directory.web.api.v1 import companies, config, currencies, smart_search

router = APIRouter(prefix="/api/v1")

router.include_router(companies.router, tags=["companies"])
router.include_router(smart_search.router, tags=["search"])
router.include_router(currencies.router, tags=["currencies"])
router.include_router(config.router, tags=["config"])
