"""Typer CLI for the publisher directory client."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from publisher_directory.config.loader import load_directory_config
from publisher_directory.config.models import DirectoryConfig
from publisher_directory.config.options import ConfigOptionStore
from publisher_directory.publisher.endpoints import (
    hash_prefix_hex,
    publisher_info_url,
    publisher_list_url,
)
from publisher_directory.publisher.fetcher import ServerPublisherFetcher
from publisher_directory.publisher.freshness import FreshnessPolicy
from publisher_directory.publisher.memory import InMemoryPublisherStore
from publisher_directory.publisher.models import PublisherStatus, ServerPublisherInfo
from publisher_directory.publisher.transport import HttpxTransport

logger = structlog.get_logger()
console = Console()
app = typer.Typer(name="publisher-directory", help="Publisher directory CLI")

_STATUS_STYLES = {
    PublisherStatus.VERIFIED: "green",
    PublisherStatus.CONNECTED: "yellow",
    PublisherStatus.NOT_VERIFIED: "red",
}


def _load(config_path: str | None) -> DirectoryConfig:
    if config_path is not None and not Path(config_path).exists():
        console.print(f"[red]Config file not found: {config_path}[/red]")
        raise typer.Exit(1)
    try:
        return load_directory_config(config_path)
    except (ValueError, TypeError) as exc:
        console.print(f"[red]Validation error:[/red] {exc}")
        raise typer.Exit(1) from exc


@app.command()
def validate(
    config_path: str | None = typer.Option(None, "--config", help="Directory YAML"),
) -> None:
    """Validate a directory configuration file."""
    config = _load(config_path)
    console.print(f"[green]Valid[/green] server={config.server_url}")
    console.print(f"  environment:   {config.environment}")
    console.print(f"  prefix bytes:  {config.query_prefix_bytes}")
    console.print(f"  image prefix:  {config.image_url_prefix}")
    console.print(f"  timeout:       {config.transport.timeout_seconds}s")
    for key, value in sorted(config.options.items()):
        console.print(f"  option {key}: {value}")


@app.command()
def prefix(
    publisher_key: str = typer.Argument(..., help="Publisher key"),
    config_path: str | None = typer.Option(None, "--config", help="Directory YAML"),
) -> None:
    """Show the hashed prefix and request URL used to look up a publisher."""
    config = _load(config_path)
    hex_prefix = hash_prefix_hex(publisher_key, config.query_prefix_bytes)
    console.print(f"prefix: {hex_prefix}")
    console.print(f"url:    {publisher_info_url(config.server_url, hex_prefix)}")
    console.print(f"index:  {publisher_list_url(config.server_url)}")


@app.command()
def lookup(
    publisher_keys: list[str] = typer.Argument(..., help="Publisher keys"),
    config_path: str | None = typer.Option(None, "--config", help="Directory YAML"),
) -> None:
    """Fetch publisher records concurrently and print their status."""
    config = _load(config_path)
    freshness = FreshnessPolicy(ConfigOptionStore(config))

    async def _lookup() -> list[ServerPublisherInfo | None]:
        async with HttpxTransport(config.transport) as transport:
            fetcher = ServerPublisherFetcher(
                transport=transport,
                store=InMemoryPublisherStore(),
                config=config,
            )
            return await asyncio.gather(*(fetcher.fetch(k) for k in publisher_keys))

    results = asyncio.run(_lookup())

    table = Table(title="Publishers")
    table.add_column("Publisher", style="cyan")
    table.add_column("Status")
    table.add_column("Wallet")
    table.add_column("Banner")
    table.add_column("Expired")

    failed = False
    for key, info in zip(publisher_keys, results, strict=True):
        if info is None:
            failed = True
            table.add_row(key, "[red]unavailable[/red]", "", "", "")
            continue
        style = _STATUS_STYLES[info.status]
        banner = info.banner.title if info.banner is not None else ""
        table.add_row(
            key,
            f"[{style}]{info.status}[/{style}]",
            info.address,
            banner,
            str(freshness.is_expired(info)),
        )

    console.print(table)
    if failed:
        raise typer.Exit(1)
