"""Click CLI for swcache — drive the cache router from the command line."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from swcache.cache.base import CacheStorage
from swcache.cache.disk import DiskCacheStorage
from swcache.cache.memory import MemoryCacheStorage
from swcache.config.hierarchy import load_config_hierarchy
from swcache.config.schema import build_router_config
from swcache.errors.exceptions import SwCacheError
from swcache.network.fetcher import offline_transport
from swcache.router.rules import build_rules, classify
from swcache.router.worker import ServiceWorker
from swcache.types import Credentials, Destination, FetchRequest, RequestMode

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="swcache")
@click.option(
    "--config", "config_file", type=click.Path(exists=True), help="Config YAML to use."
)
@click.option("--cache-version", type=str, default=None, help="Override the cache version.")
@click.option("--db", "db_path", type=click.Path(), default=None, help="Cache database path.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    cache_version: str | None,
    db_path: str | None,
    verbose: int,
) -> None:
    """swcache — versioned response cache with a rule-based router."""
    config = load_config_hierarchy(
        config_file=config_file,
        version=cache_version,
        cache_db_path=db_path,
    )
    _setup_logging(verbose, config.get("log_level", "WARNING"))
    ctx.obj = config


def _open_storage(config: dict[str, Any]) -> CacheStorage:
    if config.get("storage") == "memory":
        return MemoryCacheStorage()
    return DiskCacheStorage(db_path=Path(config["cache_db_path"]))


def _build_worker(config: dict[str, Any], offline: bool = False) -> ServiceWorker:
    try:
        router_config = build_router_config(config)
    except SwCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    return ServiceWorker(
        router_config,
        storage=_open_storage(config),
        transport=offline_transport() if offline else None,
    )


@cli.command()
@click.option("--offline", is_flag=True, default=False, help="Simulate an unreachable network.")
@click.pass_obj
def install(config: dict[str, Any], offline: bool) -> None:
    """Run the install event: precache the seed routes."""
    worker = _build_worker(config, offline=offline)

    async def _run() -> bool:
        try:
            return await worker.install()
        finally:
            await worker.close()

    if asyncio.run(_run()):
        console.print("[green]Installed; static routes precached.[/green]")
    else:
        console.print("[yellow]Installed; precache failed (see log).[/yellow]")


@cli.command()
@click.pass_obj
def activate(config: dict[str, Any]) -> None:
    """Run the activate event: delete other versions' partitions."""
    worker = _build_worker(config)

    async def _run() -> list[str]:
        try:
            return await worker.activate()
        finally:
            await worker.close()

    deleted = asyncio.run(_run())
    for name in deleted:
        console.print(f"Deleted [cyan]{name}[/cyan]")
    console.print(f"[green]Activated {worker.config.version}.[/green]")


def _request_options(fn: Any) -> Any:
    fn = click.option(
        "--destination",
        type=click.Choice([d.value for d in Destination]),
        default=Destination.EMPTY.value,
        help="Request destination.",
    )(fn)
    fn = click.option(
        "--mode",
        type=click.Choice([m.value for m in RequestMode]),
        default=RequestMode.NO_CORS.value,
        help="Request mode.",
    )(fn)
    fn = click.option(
        "--credentials",
        type=click.Choice([c.value for c in Credentials]),
        default=Credentials.SAME_ORIGIN.value,
        help="Credentials mode.",
    )(fn)
    return fn


def _make_request(url: str, destination: str, mode: str, credentials: str) -> FetchRequest:
    return FetchRequest(
        url=url,
        destination=Destination(destination),
        mode=RequestMode(mode),
        credentials=Credentials(credentials),
    )


@cli.command()
@click.argument("url")
@_request_options
@click.option("--offline", is_flag=True, default=False, help="Simulate an unreachable network.")
@click.option("-o", "--output", type=click.Path(), help="Write the response body to a file.")
@click.pass_obj
def fetch(
    config: dict[str, Any],
    url: str,
    destination: str,
    mode: str,
    credentials: str,
    offline: bool,
    output: str | None,
) -> None:
    """Route one request through the cache router."""
    worker = _build_worker(config, offline=offline)
    request = _make_request(url, destination, mode, credentials)

    async def _run():
        try:
            outcome = await worker.route(request)
            if outcome.response is None:
                outcome.response = await worker.fetcher.fetch(request)
            return outcome
        finally:
            await worker.close()

    try:
        outcome = asyncio.run(_run())
    except SwCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(title="Fetch", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("URL", url)
    table.add_row("Rule", outcome.classification.rule)
    table.add_row("Strategy", outcome.classification.route.strategy.value)
    table.add_row("Source", outcome.source.value)
    table.add_row("Status", str(outcome.response.status_code))
    table.add_row("Bytes", str(len(outcome.response.content)))
    console.print(table)

    if output:
        Path(output).write_bytes(outcome.response.content)
        console.print(f"[green]Written to {output}[/green]")


@cli.command("classify")
@click.argument("urls", nargs=-1, required=True)
@_request_options
@click.pass_obj
def classify_cmd(
    config: dict[str, Any],
    urls: tuple[str, ...],
    destination: str,
    mode: str,
    credentials: str,
) -> None:
    """Show which rule each URL matches, without touching the network."""
    try:
        router_config = build_router_config(config)
    except SwCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    rules = build_rules(router_config)

    table = Table(title="Classification", show_header=True)
    table.add_column("URL", style="cyan")
    table.add_column("Rule")
    table.add_column("Strategy")
    table.add_column("Partition")

    for url in urls:
        result = classify(_make_request(url, destination, mode, credentials), rules)
        kind = result.route.kind
        table.add_row(
            url,
            result.rule,
            result.route.strategy.value,
            router_config.partition_name(kind) if kind else "-",
        )
    console.print(table)


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.pass_obj
def cache_stats(config: dict[str, Any]) -> None:
    """Show stored partitions, entry counts and size.

    Hit and miss counters live only as long as one router, so a fresh
    process reports what the storage holds.
    """
    worker = _build_worker(config)
    storage = worker.cache_manager.storage

    async def _run() -> tuple[list[tuple[str, int]], int]:
        try:
            counts = [(name, await storage.entry_count(name)) for name in await storage.keys()]
            return counts, await storage.size_bytes()
        finally:
            await worker.close()

    counts, size_bytes = asyncio.run(_run())

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    for name, count in counts:
        table.add_row(name, f"{count} entries")
    table.add_row("Partitions", str(len(counts)))
    table.add_row("Entries", str(sum(count for _, count in counts)))
    table.add_row("Size (MB)", f"{size_bytes / (1024 * 1024):.1f}")
    console.print(table)


@cache.command("list")
@click.pass_obj
def cache_list(config: dict[str, Any]) -> None:
    """List partitions and their entries."""
    worker = _build_worker(config)
    manager = worker.cache_manager

    async def _run() -> list[tuple[str, list[str]]]:
        try:
            storage = manager.storage
            return [(name, await storage.open(name).keys()) for name in await storage.keys()]
        finally:
            await worker.close()

    listing = asyncio.run(_run())

    table = Table(title="Cache Partitions", show_header=True)
    table.add_column("Partition", style="cyan")
    table.add_column("Status")
    table.add_column("Entries")

    for name, keys in listing:
        status = "[yellow]stale[/yellow]" if manager.is_stale(name) else "current"
        table.add_row(name, status, "\n".join(keys) or "-")
    console.print(table)


@cache.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
@click.pass_obj
def cache_clear(config: dict[str, Any]) -> None:
    """Delete all partitions carrying the cache prefix."""
    worker = _build_worker(config)

    async def _run() -> None:
        try:
            await worker.cache_manager.clear()
        finally:
            await worker.close()

    asyncio.run(_run())
    console.print("[green]Cache cleared.[/green]")


@cli.command("config")
@click.pass_obj
def show_config(config: dict[str, Any]) -> None:
    """Print the resolved configuration."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(config):
        value = config[key]
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        table.add_row(key, str(value))
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()
