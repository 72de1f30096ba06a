"""
Company Directory CLI

Examples:
    # See what smart search makes of a query
    company-directory parse "early stage b2b $1M+ top 50"

    # Amounts typed in euros
    company-directory parse "seed 5m" --currency EUR -f json

    # List companies, smart query plus explicit filters
    company-directory companies "series a b2b" --max-rank 100 -f json | jq '.[:5]'

    # Import a dataset
    company-directory load companies.csv

    # Currency helpers
    company-directory currencies
    company-directory convert 5000000 EUR USD

    # Start the API
    company-directory web --port 8000
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.orm import Session, sessionmaker

from . import __version__
from .config import load_config
from .constants import get_customer_focus_color, get_growth_stage_color
from .currency import (
    convert_currency,
    convert_filter_from_usd,
    convert_filter_to_usd,
    convert_to_usd,
    format_compact,
    get_currency_name,
    get_currency_symbol,
)
from .export import format_companies, read_companies
from .filters import format_funding, get_active_filters, merge_smart_search, validate_filters
from .models import FilterState, PaginationState, SmartSearchResult
from .smart_search import parse_smart_search
from .web.database import create_db_engine, get_companies, init_db, load_companies

# Progress to stderr, data to stdout
console = Console(stderr=True)
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, quiet: bool, debug: bool) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Suppress noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _open_session(database_url: str) -> Session:
    engine = create_db_engine(database_url)
    init_db(engine)
    return sessionmaker(autoflush=False, bind=engine)()


def display_parse_result(result: SmartSearchResult) -> None:
    """Show detected filters as a table."""
    table = Table(title="Detected Filters", show_header=True, header_style="bold magenta")

    table.add_column("Filter", style="cyan")
    table.add_column("Value")
    table.add_column("Label")

    for parsed in result.parsed_filters:
        table.add_row(parsed.type, parsed.value, f"[{parsed.color}]{parsed.label}[/{parsed.color}]")

    console.print(table)
    console.print(f"Search text: [bold]{result.remaining_query or '-'}[/bold]")


def display_companies(companies: list, total: int, currency: str, rates: dict) -> None:
    """Display a page of companies."""
    table = Table(title=f"Companies ({total} total)", show_header=True, header_style="bold magenta")

    table.add_column("Rank", justify="right")
    table.add_column("Name", style="cyan", max_width=30)
    table.add_column("Stage")
    table.add_column("Focus")
    table.add_column("Funding Type")
    table.add_column("Last Funding", justify="right")

    for c in companies:
        stage_color = get_growth_stage_color(c.growth_stage)
        focus_color = get_customer_focus_color(c.customer_focus)
        local_amount = convert_filter_from_usd(c.last_funding_amount, currency, rates)
        if currency == "USD" or local_amount is None:
            funding = format_funding(c.last_funding_amount)
        else:
            funding = format_compact(local_amount, currency)

        table.add_row(
            str(c.rank),
            (c.name or "")[:30],
            f"[{stage_color}]{c.growth_stage or '-'}[/{stage_color}]",
            f"[{focus_color}]{(c.customer_focus or '-').upper()}[/{focus_color}]",
            c.last_funding_type or "-",
            funding,
        )

    console.print(table)


# ============================================================================
# CLI Group
# ============================================================================

@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Company directory: smart search and filtered company listings."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# Parse Command
# ============================================================================

@cli.command()
@click.argument("query")
@click.option("-c", "--currency", help="Currency amounts are typed in (default: configured)")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["json", "table"]), default="json", help="Output format")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def parse(query: str, currency: Optional[str], output_format: str, config: Optional[str],
          verbose: bool, debug: bool):
    """
    Parse a smart search query into filters.

    Examples:

        company-directory parse "early stage b2b $1M+ top 50"

        company-directory parse "series a 5m" --currency EUR -f table
    """
    setup_logging(verbose, False, debug)
    settings = load_config(config)
    currency = (currency or settings.default_currency).upper()

    result = parse_smart_search(query, currency, rates=settings.rates())

    if output_format == "table":
        display_parse_result(result)
    else:
        click.echo(json.dumps(result.to_dict(), indent=2))


# ============================================================================
# Companies Command
# ============================================================================

@cli.command()
@click.argument("query", required=False, default="")
@click.option("-c", "--currency", help="Currency for amounts in QUERY and for display")
@click.option("--search", default="", help="Plain text search")
@click.option("--growth-stage", default="", help="early, seed, growing, late, exit")
@click.option("--customer-focus", default="", help="b2b, b2c, b2b_b2c, b2c_b2b")
@click.option("--funding-type", default="", help='e.g. "Series A"')
@click.option("--min-rank", type=int, help="Minimum rank")
@click.option("--max-rank", type=int, help="Maximum rank")
@click.option("--min-funding", type=float, help="Minimum last funding, in --currency")
@click.option("--max-funding", type=float, help="Maximum last funding, in --currency")
@click.option("--sort-by", default="rank", help="Sort column")
@click.option("--sort-order", type=click.Choice(["asc", "desc"]), default="asc")
@click.option("-p", "--page", type=click.IntRange(min=1), default=1, help="Page number")
@click.option("-l", "--limit", type=click.IntRange(min=1), help="Page size")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["table", "csv", "tsv", "json", "jsonl"]),
              default="table", help="Output format")
@click.option("-o", "--output", type=click.Path(), help="Output file (default: stdout)")
@click.option("--no-headers", is_flag=True, help="Omit headers in CSV/TSV")
@click.option("--database-url", envvar="DATABASE_URL", help="Database URL")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def companies(
    query: str,
    currency: Optional[str],
    search: str,
    growth_stage: str,
    customer_focus: str,
    funding_type: str,
    min_rank: Optional[int],
    max_rank: Optional[int],
    min_funding: Optional[float],
    max_funding: Optional[float],
    sort_by: str,
    sort_order: str,
    page: int,
    limit: Optional[int],
    output_format: str,
    output: Optional[str],
    no_headers: bool,
    database_url: Optional[str],
    config: Optional[str],
    quiet: bool,
    verbose: bool,
):
    """
    List companies matching filters.

    QUERY is smart search text; the filters it detects are applied on top
    of the explicit options.

    Examples:

        company-directory companies "early stage b2b"

        company-directory companies --growth-stage seed --sort-by funding --sort-order desc -f csv
    """
    setup_logging(verbose, quiet, False)
    settings = load_config(config)
    currency = (currency or settings.default_currency).upper()
    rates = settings.rates()

    # Stored amounts are USD; bounds are typed in the display currency
    state = FilterState(
        search=search,
        growth_stage=growth_stage,
        customer_focus=customer_focus,
        funding_type=funding_type,
        min_rank=min_rank,
        max_rank=max_rank,
        min_funding=convert_filter_to_usd(min_funding, currency, rates),
        max_funding=convert_filter_to_usd(max_funding, currency, rates),
        sort_by=sort_by,
        sort_order=sort_order,
    )

    if query:
        parsed = parse_smart_search(query, currency, rates=rates)
        state = merge_smart_search(state, parsed.filters)

    validation = validate_filters(state)
    if not validation.is_valid:
        for error in validation.errors:
            console.print(f"[red]Invalid filters:[/red] {error}")
        sys.exit(1)

    if not quiet:
        active = get_active_filters(state)
        if active:
            console.print("[dim]" + " | ".join(f.label for f in active) + "[/dim]")

    pagination = PaginationState(page=page, limit=min(limit or settings.page_size, settings.max_page_size))

    db = _open_session(database_url or settings.database_url)
    try:
        result = get_companies(db, state, pagination)

        if output_format == "table":
            display_companies(result.data, result.total, currency, rates)
            if not quiet:
                console.print(f"[dim]Page {result.page} of {max(result.total_pages, 1)}[/dim]")
            return

        text = format_companies([c.to_dict() for c in result.data], output_format, no_headers)
    finally:
        db.close()

    if output:
        Path(output).write_text(text, encoding="utf-8")
        if not quiet:
            console.print(f"[green]✓[/green] Wrote {len(result.data)} companies to {output}")
    else:
        click.echo(text)


# ============================================================================
# Load Command
# ============================================================================

@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option("--database-url", envvar="DATABASE_URL", help="Database URL")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output")
def load(input_file: str, database_url: Optional[str], config: Optional[str], quiet: bool):
    """
    Import companies from a CSV, JSON or JSONL file.

    Columns: id, name, domain, rank, description, created_at, growth_stage,
    last_funding_type, last_funding_amount (USD), customer_focus.
    Rows with an existing id replace the stored company.
    """
    setup_logging(False, quiet, False)
    settings = load_config(config)

    try:
        records = read_companies(input_file)
    except (ValueError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read {input_file}:[/red] {e}")
        sys.exit(1)

    db = _open_session(database_url or settings.database_url)
    try:
        saved = load_companies(db, records)
    except (KeyError, ValueError, OverflowError) as e:
        db.rollback()
        console.print(f"[red]Invalid company record:[/red] {e}")
        sys.exit(1)
    finally:
        db.close()

    if not quiet:
        console.print(f"[green]✓[/green] Loaded {len(saved)} companies from {input_file}")


# ============================================================================
# Currency Commands
# ============================================================================

@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def currencies(config: Optional[str]):
    """List supported currencies and their USD rates."""
    settings = load_config(config)

    table = Table(title="Currencies", show_header=True, header_style="bold magenta")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Symbol", justify="center")
    table.add_column("Per USD", justify="right")

    for code, rate in settings.rates().items():
        table.add_row(code, get_currency_name(code), get_currency_symbol(code), f"{rate:g}")

    Console().print(table)


@cli.command()
@click.argument("amount", type=float)
@click.argument("from_currency")
@click.argument("to_currency", default="USD")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def convert(amount: float, from_currency: str, to_currency: str, config: Optional[str]):
    """
    Convert AMOUNT from one currency to another (via USD).

    Example:

        company-directory convert 5000000 EUR USD
    """
    settings = load_config(config)
    rates = settings.rates()
    from_currency = from_currency.upper()
    to_currency = to_currency.upper()

    result = convert_currency(convert_to_usd(amount, from_currency, rates), to_currency, rates)
    click.echo(f"{result:.2f} {to_currency} ({format_compact(result, to_currency)})")


# ============================================================================
# Version Command
# ============================================================================

@cli.command()
def version():
    """Show version info."""
    click.echo(f"company-directory {__version__}")


# ============================================================================
# Web Command
# ============================================================================

@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--port", default=8000, help="Port to bind to.")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def web(host: str, port: int, reload: bool) -> None:
    """Start the HTTP API."""
    import uvicorn

    console.print(
        Panel.fit(
            f"[bold]Company Directory API[/bold]\n"
            f"Running at: [cyan]http://{host}:{port}/docs[/cyan]",
            border_style="blue",
        )
    )
    console.print("Press Ctrl+C to stop\n")

    uvicorn.run(
        "company_directory.web.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    cli()
