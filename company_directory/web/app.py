"""FastAPI application factory."""

import os
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from company_directory.config import Settings, load_config
from company_directory.web.database import init_db

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    from company_directory import __version__

    if settings is None:
        settings = load_config(os.environ.get("COMPANY_DIRECTORY_CONFIG"))

    # Initialize database
    init_db()

    app = FastAPI(
        title="Company Directory",
        description="Filterable, sortable company listing with smart search",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # CORS middleware for production
    origins = os.environ.get("ALLOWED_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",")]
    else:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from company_directory.web.api.v1.router import router as api_router
    app.include_router(api_router)

    logger.info("API ready (default currency %s)", settings.default_currency)
    return app


# Create default app instance
app = create_app()
