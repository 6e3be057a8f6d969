# src/cli/runner.py

"""Headless CLI runner around the async price aggregator."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.price_listing import PriceListing
from src.models.provider_outcome import OutcomeStatus
from src.services.price_aggregator import AggregationResult, PriceAggregator
from src.storage.file_manager import FileManager

logger = logging.getLogger("price_aggregator.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sources(
    source_csv: str | None,
) -> list[dict[str, Any]]:
    """Map a comma-separated list of source IDs to their config dicts.

    Returns all sources when *source_csv* is ``None``.  Requested
    sources keep the canonical registry order.
    Raises ``SystemExit`` on unknown IDs.
    """
    available = {
        s["id"]: s for s in Settings.AVAILABLE_SOURCES
    }
    if source_csv is None:
        return Settings.AVAILABLE_SOURCES

    requested = {
        s.strip() for s in source_csv.split(",") if s.strip()
    }
    unknown = sorted(r for r in requested if r not in available)
    if unknown:
        valid = ", ".join(sorted(available))
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    return [
        s for s in Settings.AVAILABLE_SOURCES if s["id"] in requested
    ]


def _fmt_optional(value: object) -> str:
    return "—" if value is None else str(value)


def _print_table(listings: list[PriceListing]) -> None:
    """Render a Rich table of listings to stdout, in aggregation order."""
    table = Table(
        title="Price Comparison",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Store", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("MRP", justify="right", style="dim")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Delivery")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, p in enumerate(listings, 1):
        table.add_row(
            str(idx),
            p.store,
            f"{p.price:,.2f}",
            (
                f"{p.original_price:,.2f}"
                if p.original_price is not None
                else "—"
            ),
            _fmt_optional(p.rating),
            _fmt_optional(p.review_count),
            p.delivery_days or "—",
            p.url,
        )

    Console().print(table)


def _print_outcomes(result: AggregationResult) -> None:
    """Summarise each provider's outcome on stderr."""
    for o in result.outcomes:
        if o.status is OutcomeStatus.FAILED:
            tag = "[red]required[/red] " if o.required else ""
            _err.print(
                f"[red]✗ {o.store}[/red] {tag}"
                f"[dim]({o.error_kind.value if o.error_kind else 'error'})"
                f"[/dim] {o.message}"
            )
        else:
            dropped = (
                f", {o.dropped_count} dropped"
                if o.dropped_count
                else ""
            )
            _err.print(
                f"[green]✓ {o.store}[/green] "
                f"{len(o.listings)} listings{dropped} "
                f"[dim]{o.latency_ms:.0f}ms[/dim]"
            )


async def cli_search(
    query: str,
    source_csv: str | None,
    output_format: str,
    output_dir: str | None,
    save: bool = True,
    export_csv: bool = False,
) -> int:
    """Run a headless aggregation and return an exit code (0=ok, 1=fail)."""
    sources = resolve_sources(source_csv)

    if output_dir is not None:
        Settings.RESULTS_DIR = Path(output_dir)

    aggregator = PriceAggregator(sources=sources)

    source_labels = ", ".join(s["label"] for s in sources)
    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]sources={source_labels}[/dim]"
    )

    result = await aggregator.aggregate(query)
    _print_outcomes(result)

    if result.required_failures:
        _err.print("[red]Failed to fetch product prices.[/red]")
        return 1

    listings = result.listings
    if not listings:
        _err.print("[yellow]No listings found.[/yellow]")
        return 1

    if save or export_csv:
        try:
            file_manager = FileManager()
            if save:
                path = file_manager.save_results(
                    query, listings, "combined"
                )
                _err.print(f"[dim]Saved → {path}[/dim]")
            if export_csv:
                path = file_manager.export_csv(
                    query, listings, "combined"
                )
                _err.print(f"[dim]Exported → {path}[/dim]")
        except OSError as exc:
            logger.error("Save failed: %s", exc, exc_info=True)
            _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(listings)
    else:
        json.dump(
            [p.to_dict() for p in listings],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all providers."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running provider health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Provider Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.source_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
