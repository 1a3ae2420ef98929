# listing_engine/cli/runner.py

"""Headless CLI runner: drives the comparison pipeline from a terminal."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from listing_engine.config.settings import Settings
from listing_engine.exceptions import InvalidQueryError
from listing_engine.filters.price_normalizer import PriceNormalizer
from listing_engine.filters.rating import format_rating
from listing_engine.models.comparison import ComparisonReport
from listing_engine.models.external_product import ExternalProduct
from listing_engine.services.comparison_orchestrator import (
    ComparisonOrchestrator,
)
from listing_engine.services.external_search import ExternalComparisonEngine
from listing_engine.services.listing_catalog import LocalCatalog
from listing_engine.storage.history_storage import build_storage
from listing_engine.storage.search_history import SearchHistoryStore

logger = logging.getLogger("listing_engine.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_history(backend: str | None = None) -> SearchHistoryStore:
    """Open the persisted search history."""
    return SearchHistoryStore(build_storage(backend))


def build_orchestrator(
    listings_path: Path | None = None,
    no_delay: bool = False,
    backend: str | None = None,
) -> ComparisonOrchestrator:
    """Wire catalog, external engine and history from settings."""
    path = listings_path or Settings.SAMPLE_LISTINGS_PATH
    catalog = LocalCatalog.load(path)
    engine = ExternalComparisonEngine(delay=0.0 if no_delay else None)
    return ComparisonOrchestrator(catalog, engine, build_history(backend))


def _external_to_dict(product: ExternalProduct) -> dict[str, object]:
    """Serialise an external product for JSON output."""
    display = PriceNormalizer.normalize(product.price)
    return {
        "id": product.id,
        "title": product.title,
        "platform": product.platform.value,
        "price": display.to_json(),
        "formatted_price": display.format(Settings.CURRENCY_SYMBOL),
        "rating": product.rating,
        "reviews": product.reviews,
        "url": product.url,
        "shipping": product.shipping,
        "estimated_delivery": product.estimated_delivery,
    }


def report_to_dict(report: ComparisonReport) -> dict[str, object]:
    """Serialise a comparison report to plain JSON-compatible values."""
    return {
        "query": report.query,
        "category": report.category,
        "local": [
            {k: v for k, v in listing.to_dict().items()
             if k != "original_data"}
            for listing in report.local
        ],
        "external": [_external_to_dict(p) for p in report.external],
        "comparison": {
            "local_advantages": report.comparison.local_advantages,
            "external_advantages": report.comparison.external_advantages,
            "recommendations": report.comparison.recommendations,
        },
        "error": (
            {
                "type": report.error.type.value,
                "message": report.error.message,
            }
            if report.error
            else None
        ),
    }


def _print_tables(report: ComparisonReport) -> None:
    """Render local and external results as Rich tables on stdout."""
    console = Console()

    local = Table(
        title=f"Local listings for '{report.query}'",
        show_lines=True,
        title_style="bold cyan",
    )
    local.add_column("#", style="dim", width=4)
    local.add_column("Title", max_width=50)
    local.add_column("Type", style="magenta")
    local.add_column("Price", justify="right", style="green")
    local.add_column("Rating", justify="center")
    local.add_column("Location", style="dim")
    for idx, listing in enumerate(report.local, 1):
        local.add_row(
            str(idx),
            listing.title[:50],
            "service" if listing.is_service else "product",
            listing.price.format(listing.currency_symbol),
            f"{format_rating(listing.rating)} ({listing.rating_count})",
            listing.location,
        )
    console.print(local)

    external = Table(
        title="Elsewhere",
        show_lines=True,
        title_style="bold cyan",
    )
    external.add_column("#", style="dim", width=4)
    external.add_column("Title", max_width=50)
    external.add_column("Platform", style="magenta")
    external.add_column("Price", justify="right", style="green")
    external.add_column("Rating", justify="center")
    external.add_column("Delivery", style="dim")
    for idx, product in enumerate(report.external, 1):
        external.add_row(
            str(idx),
            product.title[:50],
            product.platform.value,
            PriceNormalizer.format(product.price, Settings.CURRENCY_SYMBOL),
            f"{format_rating(product.rating)} ({product.reviews})",
            product.estimated_delivery or "—",
        )
    console.print(external)

    for tip in report.comparison.recommendations:
        console.print(f"[bold]•[/bold] {tip}")


async def cli_compare(
    query: str,
    category: str | None,
    listings_path: str | None,
    output_format: str,
    no_delay: bool = False,
) -> int:
    """Run one comparison and return an exit code (0=ok, 1=fail)."""
    try:
        orchestrator = build_orchestrator(
            Path(listings_path) if listings_path else None,
            no_delay=no_delay,
        )
    except (OSError, ValueError) as exc:
        logger.error("Could not load listings: %s", exc, exc_info=True)
        _err.print(f"[red]Could not load listings: {exc}[/red]")
        return 1

    _err.print(f"[bold]Comparing:[/bold] {query}")
    try:
        report = await orchestrator.run(query, category)
    except InvalidQueryError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    finally:
        orchestrator.history.close()

    if report.error is not None:
        _err.print(
            f"[yellow]{report.error.type.value}: "
            f"{report.error.message}[/yellow]"
        )

    if not report.local and not report.external:
        _err.print("[yellow]No listings found.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(report.local)} local, "
        f"{len(report.external)} external[/green]"
    )

    if output_format == "table":
        _print_tables(report)
    else:
        json.dump(
            report_to_dict(report),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


def run_show_history(
    limit: int | None = None,
    category: str | None = None,
) -> int:
    """Print recent queries (or those in *category*), newest first."""
    history = build_history()
    try:
        queries = (
            list(history.by_category(category))
            if category
            else list(history.recent(limit))
        )
    finally:
        history.close()
    if not queries:
        _err.print("[yellow]No search history.[/yellow]")
        return 0
    for query in queries:
        sys.stdout.write(f"{query}\n")
    return 0


def run_clear_history() -> int:
    """Forget every recorded query."""
    history = build_history()
    try:
        removed = history.clear()
    finally:
        history.close()
    _err.print(f"[green]✓ Cleared {removed} searches[/green]")
    return 0


def run_list_platforms() -> int:
    """Show the registered external platforms."""
    engine = ExternalComparisonEngine(delay=0.0)
    table = Table(
        title="External Platforms",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Search URL", overflow="fold", style="dim")
    for platform in engine.platforms:
        table.add_row(
            platform.id,
            f"{platform.logo} {platform.name}",
            platform.search_url("example"),
        )
    Console().print(table)
    return 0
