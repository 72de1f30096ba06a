"""
Filter option tables and display colours.

Shared by the smart search parser, the filter helpers and the API so that
badge colours and option labels stay consistent everywhere.
"""

# Growth stages (value, label)
GROWTH_STAGE_OPTIONS = [
    ("early", "Early"),
    ("seed", "Seed"),
    ("growing", "Growing"),
    ("late", "Late"),
    ("exit", "Exit"),
]

CUSTOMER_FOCUS_OPTIONS = [
    ("b2b", "B2B"),
    ("b2c", "B2C"),
    ("b2b_b2c", "B2B & B2C"),
    ("b2c_b2b", "B2C & B2B"),
]

FUNDING_TYPE_OPTIONS = [
    ("Seed", "Seed"),
    ("Pre Seed", "Pre Seed"),
    ("Series A", "Series A"),
    ("Series B", "Series B"),
    ("Series C", "Series C"),
    ("Series Unknown", "Series Unknown"),
    ("Angel", "Angel"),
    ("Grant", "Grant"),
    ("Debt Financing", "Debt Financing"),
    ("Convertible Note", "Convertible Note"),
    ("Corporate Round", "Corporate Round"),
    ("Undisclosed", "Undisclosed"),
]

# Badge colours for detected smart search filters
FILTER_COLORS = {
    "funding": "orange",
    "growth_stage": "blue",
    "customer_focus": "purple",
    "funding_type": "orange",
    "rank": "yellow",
    "search": "gray",
}

# Colour per growth stage / customer focus on company rows
GROWTH_STAGE_COLORS = {
    "early": "green",
    "seed": "yellow",
    "growing": "blue",
    "late": "purple",
    "exit": "red",
}

CUSTOMER_FOCUS_COLORS = {
    "b2b": "blue",
    "b2c": "pink",
    "b2b_b2c": "teal",
    "b2c_b2b": "orange",
}

# Validation ranges
FILTER_RANGES = {
    "rank": {"min": 1, "max": 1000, "step": 1},
    "funding": {"min": 0, "max": 1_000_000_000, "step": 100_000},  # 0 to 1B
}

MAX_SEARCH_LENGTH = 100

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
DEFAULT_SORT_BY = "rank"
DEFAULT_SORT_ORDER = "asc"

# Columns the listing may be ordered by (API name -> Company attribute)
SORTABLE_COLUMNS = {
    "rank": "rank",
    "name": "name",
    "domain": "domain",
    "growth_stage": "growth_stage",
    "customer_focus": "customer_focus",
    "last_funding_type": "last_funding_type",
    "last_funding_amount": "last_funding_amount",
    "funding": "last_funding_amount",
    "created_at": "created_at",
}


def get_growth_stage_color(stage) -> str:
    """Badge colour for a growth stage value."""
    return GROWTH_STAGE_COLORS.get((stage or "").lower(), "gray")


def get_customer_focus_color(focus) -> str:
    """Badge colour for a customer focus value."""
    return CUSTOMER_FOCUS_COLORS.get((focus or "").lower(), "gray")
