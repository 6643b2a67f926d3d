"""Click CLI for agentchat — inspect the asset cache and message store."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from agentchat.core import AgentChat
from agentchat.errors.exceptions import SerializationFailure
from agentchat.storage.records import decode_records, encode_records

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _open(ctx: click.Context) -> AgentChat:
    overrides = ctx.obj or {}
    try:
        return AgentChat.from_config(**overrides)
    except ValidationError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="agentchat")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Image cache directory.")
@click.option("--store", type=click.Path(dir_okay=False), help="Message store database path.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, cache_dir: str | None, store: str | None, verbose: int) -> None:
    """agentchat — image cache and message store tools."""
    _setup_logging(verbose)
    ctx.obj = {"cache_dir": cache_dir, "store_path": store}


# ── cache ──


@cli.group()
def cache() -> None:
    """Image cache commands."""


@cache.command("stats")
@click.pass_context
def cache_stats(ctx: click.Context) -> None:
    """Show cache statistics."""
    app = _open(ctx)
    try:
        stats = app.assets.stats()
        table = Table(title="Cache Statistics", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value")
        table.add_row("Directory", str(app.config.cache_dir))
        table.add_row("Disk files", str(stats.disk_files))
        table.add_row("Disk size (MB)", f"{stats.disk_size_mb:.2f}")
        table.add_row("Memory entries", str(stats.memory_entries))
        console.print(table)
    finally:
        asyncio.run(app.close())


@cache.command("fetch")
@click.argument("key")
@click.pass_context
def cache_fetch(ctx: click.Context, key: str) -> None:
    """Resolve KEY (URL or local path) through the cache."""
    app = _open(ctx)

    async def _run():
        try:
            return await app.assets.resolve(key)
        finally:
            await app.close()

    image = asyncio.run(_run())
    if image is None:
        error_console.print(f"[red]Could not resolve:[/red] {key}")
        sys.exit(1)
    console.print(f"[green]Resolved[/green] {key}: {image.width}x{image.height} {image.mode}")


@cache.command("save")
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", type=str, default=None, help="Base filename (default: random).")
@click.pass_context
def cache_save(ctx: click.Context, image_path: str, name: str | None) -> None:
    """Compress IMAGE_PATH into the cache with a thumbnail."""
    app = _open(ctx)
    try:
        saved = app.assets.save_locally(Path(image_path).read_bytes(), filename_hint=name)
    finally:
        asyncio.run(app.close())
    if saved is None:
        error_console.print(f"[red]Failed to save:[/red] {image_path}")
        sys.exit(1)
    console.print(f"[green]Saved[/green] {saved.path} ({saved.byte_size:,} bytes)")
    if saved.thumbnail_path:
        console.print(f"  Thumbnail: {saved.thumbnail_path}")


# ── messages ──


@cli.group()
def messages() -> None:
    """Message store commands."""


@messages.command("list")
@click.pass_context
def messages_list(ctx: click.Context) -> None:
    """List stored messages, oldest first."""
    app = _open(ctx)
    try:
        records = app.records.load()
        seeded = app.records.has_seeded()
    finally:
        asyncio.run(app.close())

    table = Table(title="Messages", show_header=True)
    table.add_column("Time", style="cyan")
    table.add_column("Sender")
    table.add_column("Kind")
    table.add_column("Text")
    for record in records:
        text = record.text
        if record.file:
            text = f"{text} [{record.file.path}, {record.file.formatted_size}]".strip()
        table.add_row(
            record.sent_at.strftime("%Y-%m-%d %H:%M"),
            record.sender.value,
            record.kind.value,
            text,
        )
    console.print(table)
    console.print(f"{len(records)} messages (seeded: {'yes' if seeded else 'no'})")


@messages.command("import")
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--seed", is_flag=True, default=False, help="Also mark seed data as loaded.")
@click.pass_context
def messages_import(ctx: click.Context, json_file: str, seed: bool) -> None:
    """Replace stored messages with the JSON array in JSON_FILE."""
    try:
        records = decode_records(Path(json_file).read_bytes())
    except SerializationFailure as e:
        error_console.print(f"[red]Invalid messages file:[/red] {e.message}")
        sys.exit(1)

    app = _open(ctx)
    try:
        ok = app.records.save(records)
        if ok and seed:
            app.records.mark_seeded()
    finally:
        asyncio.run(app.close())
    if not ok:
        error_console.print("[red]Failed to store messages.[/red]")
        sys.exit(1)
    console.print(f"[green]Imported {len(records)} messages.[/green]")


@messages.command("export")
@click.argument("json_file", type=click.Path(dir_okay=False))
@click.pass_context
def messages_export(ctx: click.Context, json_file: str) -> None:
    """Write stored messages to JSON_FILE."""
    app = _open(ctx)
    try:
        records = app.records.load()
    finally:
        asyncio.run(app.close())
    payload = json.loads(encode_records(records))
    Path(json_file).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    console.print(f"[green]Exported {len(records)} messages to {json_file}[/green]")


@messages.command("clear")
@click.confirmation_option(prompt="Are you sure you want to delete all stored messages?")
@click.pass_context
def messages_clear(ctx: click.Context) -> None:
    """Delete stored messages and the seed flag."""
    app = _open(ctx)
    try:
        app.records.clear()
    finally:
        asyncio.run(app.close())
    console.print("[green]Messages cleared.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
