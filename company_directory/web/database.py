"""Database models and queries for the company listing."""

import logging
import math
import os
import uuid
from datetime import datetime
from typing import Generator, Iterable, List, Optional

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
    or_,
)
from sqlalchemy.orm import Query, Session, declarative_base, sessionmaker

from company_directory.config import DEFAULT_DATABASE_URL
from company_directory.constants import SORTABLE_COLUMNS
from company_directory.models import FilterState, PaginatedResult, PaginationState

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """
    Get database URL based on environment.

    DATABASE_URL wins when set; otherwise a SQLite file in the working
    directory is used.
    """
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


def create_db_engine(database_url: str):
    """Create an engine, with SQLite tweaks where needed."""
    # SQLite connections are shared across FastAPI worker threads
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(database_url, connect_args=connect_args)


DATABASE_URL = get_database_url()
engine = create_db_engine(DATABASE_URL)
SessionLocal = sessionmaker(autoflush=False, bind=engine)
Base = declarative_base()


class Company(Base):
    """A company in the directory. Funding amounts are in USD."""
    __tablename__ = "companies"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    domain = Column(String(255), index=True)
    rank = Column(Integer, index=True, nullable=False)
    description = Column(Text, default="")
    created_at = Column(DateTime, nullable=True)

    growth_stage = Column(String(50), nullable=True)
    last_funding_type = Column(String(100), nullable=True)
    last_funding_amount = Column(BigInteger, nullable=True)
    customer_focus = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<Company #{self.rank}: {self.name}>"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "rank": self.rank,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "growth_stage": self.growth_stage,
            "last_funding_type": self.last_funding_type,
            "last_funding_amount": self.last_funding_amount,
            "customer_focus": self.customer_focus,
        }


def init_db(bind=None):
    """Initialize database tables."""
    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI routes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def build_company_query(db: Session, state: FilterState) -> Query:
    """
    Translate a filter state into a company query (no ordering or paging).

    Text search matches name, domain or description, case-insensitively.
    Range bounds are inclusive and only applied when set.
    """
    query = db.query(Company)

    if state.search:
        # Literal substring: % and _ in the text are not wildcards
        query = query.filter(
            or_(
                Company.name.icontains(state.search, autoescape=True),
                Company.domain.icontains(state.search, autoescape=True),
                Company.description.icontains(state.search, autoescape=True),
            )
        )

    if state.growth_stage:
        query = query.filter(Company.growth_stage == state.growth_stage)
    if state.customer_focus:
        query = query.filter(Company.customer_focus == state.customer_focus)
    if state.funding_type:
        query = query.filter(Company.last_funding_type == state.funding_type)

    if state.min_rank is not None:
        query = query.filter(Company.rank >= state.min_rank)
    if state.max_rank is not None:
        query = query.filter(Company.rank <= state.max_rank)

    if state.min_funding is not None:
        query = query.filter(Company.last_funding_amount >= state.min_funding)
    if state.max_funding is not None:
        query = query.filter(Company.last_funding_amount <= state.max_funding)

    return query


def get_companies(
    db: Session,
    state: FilterState,
    pagination: PaginationState,
) -> PaginatedResult:
    """
    Fetch one page of companies matching a filter state.

    Args:
        db: Database session
        state: Filters and sort settings
        pagination: Page number and size

    Returns:
        PaginatedResult of Company rows
    """
    query = build_company_query(db, state)
    total = query.count()

    # Unknown sort keys fall back to rank
    sort_column = getattr(Company, SORTABLE_COLUMNS.get(state.sort_by, "rank"))
    if state.sort_order == "desc":
        query = query.order_by(sort_column.desc(), Company.id)
    else:
        query = query.order_by(sort_column.asc(), Company.id)

    skip = (pagination.page - 1) * pagination.limit
    companies = query.offset(skip).limit(pagination.limit).all()

    return PaginatedResult(
        data=companies,
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        total_pages=math.ceil(total / pagination.limit),
    )


def search_companies(db: Session, text: str, limit: int = 10) -> List[Company]:
    """Quick search by name, domain or description, best ranked first."""
    return (
        build_company_query(db, FilterState(search=text))
        .order_by(Company.rank.asc())
        .limit(limit)
        .all()
    )


def _parse_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _parse_amount(value) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(float(value))


def load_companies(db: Session, records: Iterable[dict]) -> List[Company]:
    """
    Insert or update companies from plain records (CSV rows, JSON objects).

    Records with an existing id replace the stored row.

    Args:
        db: Database session
        records: Dicts with Company column names as keys

    Returns:
        List of saved Company rows
    """
    saved = []
    for record in records:
        company = Company(
            id=str(record.get("id") or uuid.uuid4()),
            name=record["name"],
            domain=record.get("domain") or "",
            rank=int(record["rank"]),
            description=record.get("description") or "",
            created_at=_parse_datetime(record.get("created_at")),
            growth_stage=record.get("growth_stage") or None,
            last_funding_type=record.get("last_funding_type") or None,
            last_funding_amount=_parse_amount(record.get("last_funding_amount")),
            customer_focus=record.get("customer_focus") or None,
        )
        saved.append(db.merge(company))

    db.commit()
    logger.info("Loaded %d companies", len(saved))
    return saved
