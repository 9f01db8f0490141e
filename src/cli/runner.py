# src/cli/runner.py

"""Headless command implementations behind ``main.py``."""

import argparse
import asyncio
import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.config.settings import Settings
from src.models.errors import AlreadyTracked, FetchFailed, ItemNotFound
from src.models.tracked_item import TrackedItem
from src.notifications.embeds import (
    enhancement_label,
    format_relative_time,
    format_silver,
)
from src.notifications.webhook_notifier import WebhookNotifier
from src.services.price_monitor import PassReport, PriceMonitor
from src.services.watchlist import track_item, untrack_item
from src.sources.item_catalog import search_items
from src.sources.market_client import MarketClient
from src.storage.item_store import ItemStore, create_store

logger = logging.getLogger("market_watch.cli")

# Stderr console for status messages so stdout stays clean for tables
_err = Console(stderr=True)


@dataclass
class Services:
    """The object graph shared by every command."""

    store: ItemStore
    client: MarketClient
    notifier: WebhookNotifier
    monitor: PriceMonitor

    def close(self) -> None:
        self.store.close()


def build_services(
    region: str | None = None,
    backend: str | None = None,
) -> Services:
    """Construct store, market client, notifier and monitor once."""
    store = create_store(backend)
    client = MarketClient(region=region)
    notifier = WebhookNotifier(region=client.region)
    monitor = PriceMonitor(store, client, notifier)
    return Services(store, client, notifier, monitor)


def _print_items(items: list[TrackedItem]) -> None:
    """Render the tracked items as a Rich table on stdout."""
    table = Table(
        title=f"Tracked Items ({len(items)})",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("SID", style="dim", justify="right")
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")
    table.add_column("Last Sold", style="magenta")

    for item in sorted(items, key=lambda i: (i.item_id, i.variant_id)):
        table.add_row(
            str(item.item_id),
            str(item.variant_id),
            item.name + enhancement_label(item.variant_id),
            format_silver(item.last_price),
            str(item.last_stock),
            format_relative_time(item.last_sold_time),
        )
    Console().print(table)


def _print_report(report: PassReport) -> None:
    """Render a pass report as a Rich table on stdout."""
    table = Table(
        title=(
            f"Price Check ({report.succeeded}/{report.checked} ok)"
        ),
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Item")
    table.add_column("Result", justify="center")
    table.add_column("Change", justify="right")
    table.add_column("Alert", justify="center")

    for r in report.results:
        label = f"{r.name}{enhancement_label(r.variant_id)} ({r.item_id})"
        if not r.ok:
            table.add_row(label, "[red]failed[/red]", r.error, "—")
            continue
        if r.change is None:
            table.add_row(label, "[green]ok[/green]", "—", "—")
            continue
        arrow = "▲" if r.change.direction.value == "increase" else "▼"
        alert = r.notification.status.value if r.notification else "—"
        table.add_row(
            label,
            "[green]ok[/green]",
            f"{format_silver(r.change.old_price)} {arrow} "
            f"{format_silver(r.change.new_price)}",
            alert,
        )
    Console().print(table)


def run_list(services: Services) -> int:
    """Print every tracked item."""
    items = services.store.list()
    if not items:
        _err.print(
            "[yellow]No items tracked. Use `add <id> \\[sid]` to start.[/yellow]"
        )
        return 0
    _print_items(items)
    return 0


def run_add(services: Services, item_id: int, variant_id: int) -> int:
    """Track a new item after resolving it on the market."""
    try:
        item = track_item(
            services.store,
            services.client,
            item_id,
            variant_id,
            services.notifier,
        )
    except AlreadyTracked:
        _err.print(
            f"[red]Item {item_id} (SID {variant_id}) is already "
            "being tracked.[/red]"
        )
        return 1
    except ItemNotFound:
        _err.print(
            f"[red]Could not find item {item_id} (SID {variant_id}) "
            f"in the {services.client.region.upper()} market.[/red]"
        )
        return 1
    except FetchFailed as exc:
        logger.error("Add failed: %s", exc)
        _err.print(f"[red]Market API unavailable: {exc}[/red]")
        return 1

    _err.print(
        f"[green]✓ Now tracking {item.name}"
        f"{enhancement_label(item.variant_id)} at "
        f"{format_silver(item.last_price)} silver[/green]"
    )
    return 0


def run_remove(
    services: Services, item_id: int, variant_id: int | None,
) -> int:
    """Stop tracking one variant, or all variants of an item."""
    try:
        name = untrack_item(
            services.store, item_id, variant_id, services.notifier,
        )
    except ItemNotFound:
        where = f" and SID {variant_id}" if variant_id is not None else ""
        _err.print(
            f"[red]Item with ID {item_id}{where} is not being tracked.[/red]"
        )
        return 1
    _err.print(f"[green]✓ Stopped tracking {name}[/green]")
    return 0


async def run_check(services: Services) -> int:
    """Run one pass now and print its report."""
    _err.print(
        f"[bold]Checking prices[/bold] "
        f"[dim]region={services.client.region.upper()}[/dim]"
    )
    report = await services.monitor.run_pass()
    if report.checked:
        _print_report(report)
    else:
        _err.print("[yellow]No items to check.[/yellow]")
    return 1 if report.failed else 0


async def run_monitor(services: Services) -> int:
    """Run the scheduler in the foreground until interrupted."""
    monitor = services.monitor
    _err.print(
        f"[bold]Monitoring {len(services.store)} items[/bold] "
        f"[dim]every {monitor.interval_ms / 1000:.0f}s, "
        f"region={services.client.region.upper()}[/dim]"
    )
    if not services.notifier.enabled:
        _err.print(
            "[yellow]DISCORD_WEBHOOK_URL not set, alerts are disabled."
            "[/yellow]"
        )
    await monitor.start()
    try:
        await monitor.wait()
    finally:
        await monitor.stop()
    return 0


def run_history(
    services: Services, item_id: int, variant_id: int,
) -> int:
    """Print the recent price history for one pair."""
    try:
        history = services.client.fetch_price_history(item_id, variant_id)
    except FetchFailed as exc:
        _err.print(f"[red]Market API unavailable: {exc}[/red]")
        return 1
    if not history:
        _err.print("[yellow]No price history available.[/yellow]")
        return 1

    table = Table(
        title=f"Price History ({item_id}{enhancement_label(variant_id)})",
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Price", justify="right", style="green")
    for idx, price in enumerate(history, 1):
        table.add_row(str(idx), format_silver(price))
    Console().print(table)
    return 0


def run_search(query: str) -> int:
    """Look up item IDs by name in the curated item list."""
    matches = search_items(query)
    if not matches:
        _err.print(
            f"[yellow]No known items match '{escape(query)}'.[/yellow]"
        )
        return 1
    table = Table(
        title=f"Items matching '{escape(query)}'",
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name")
    for entry in matches:
        table.add_row(str(entry.id), entry.name)
    Console().print(table)
    return 0


def run_test_alert(services: Services) -> int:
    """Send the sample alert through the configured webhook."""
    outcome = services.notifier.send_test_alert()
    if outcome.delivered:
        _err.print("[green]✓ Test alert sent successfully![/green]")
        return 0
    _err.print(f"[red]Failed to send test alert: {outcome.detail}[/red]")
    return 1


def run_serve(
    services: Services,
    host: str | None = None,
    port: int | None = None,
) -> int:
    """Serve the HTTP API (the monitor runs inside its lifespan)."""
    import uvicorn

    from src.web.app import create_app

    app = create_app(
        services.store,
        services.client,
        services.notifier,
        services.monitor,
    )
    uvicorn.run(
        app,
        host=host or Settings.API_HOST,
        port=port or Settings.API_PORT,
        log_config=None,
    )
    return 0


async def run_health_check(services: Services) -> int:
    """Probe the market API and report webhook configuration."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running health check...[/bold]")
    checker = HealthChecker(services.client, services.notifier.webhook_url)
    results = await checker.check_all()

    table = Table(
        title="Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "disabled":
            status = "[yellow]➖ OFF[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.target, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0


def run_command(command: str, args: argparse.Namespace) -> int:
    """Dispatch a parsed CLI command; returns the process exit code."""
    services = build_services(
        region=getattr(args, "region", None),
        backend=getattr(args, "backend", None),
    )
    try:
        if command == "list":
            return run_list(services)
        if command == "add":
            return run_add(services, args.item_id, args.sid)
        if command == "remove":
            return run_remove(services, args.item_id, args.sid)
        if command == "history":
            return run_history(services, args.item_id, args.sid)
        if command == "check":
            return asyncio.run(run_check(services))
        if command == "search":
            return run_search(args.query)
        if command == "test-alert":
            return run_test_alert(services)
        if command == "health":
            return asyncio.run(run_health_check(services))
        if command == "serve":
            return run_serve(
                services,
                getattr(args, "host", None),
                getattr(args, "port", None),
            )
        return asyncio.run(run_monitor(services))
    finally:
        services.close()
