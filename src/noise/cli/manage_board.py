#!/usr/bin/env python3
"""Command-line tool for administering the board database and uploaded files.

Commands:
- init-db: create the board tables
- stats: show item counts and database statistics
- clear-board: delete every item and every uploaded file
- prune-uploads: delete uploaded files no audio item references
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click

from noise.board.manager import BoardManager
from noise.config import ConfigManager, NoiseConfig
from noise.database import DatabaseService
from noise.storage import LocalStorage, StorageBackend, create_storage
from noise.system.path_resolver import PathResolver

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class BoardAdmin:
    """Services the admin commands operate on."""

    def __init__(self, path_resolver: PathResolver | None = None) -> None:
        self.path_resolver = path_resolver or PathResolver()
        self.config: NoiseConfig = ConfigManager(self.path_resolver).load()
        self.database_service = DatabaseService(self.path_resolver.get_database_path())
        self.storage: StorageBackend = create_storage(self.config, self.path_resolver)
        self.board_manager = BoardManager(
            self.database_service, self.storage, max_text_length=self.config.text.max_length
        )

    def local_storage(self) -> LocalStorage:
        if not isinstance(self.storage, LocalStorage):
            raise click.ClickException("This command only supports local storage")
        return self.storage


def print_section(title: str, content: str = "") -> None:
    """Print a formatted section header.

    Args:
        title: Section title
        content: Optional content to print after header
    """
    click.echo(f"\n{'=' * 60}")
    click.echo(f" {title}")
    click.echo(f"{'=' * 60}")
    if content:
        click.echo(content)


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def run_with_database(
    admin: BoardAdmin, operation: Callable[[BoardAdmin], Awaitable[Any]] | None = None
) -> Any:  # noqa: ANN401
    """Initialize the database, run one async operation, then release the engine."""

    async def runner() -> Any:  # noqa: ANN401
        try:
            await admin.database_service.initialize()
            if operation is None:
                return None
            return await operation(admin)
        finally:
            await admin.database_service.dispose()

    return asyncio.run(runner())


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Administer the NOISE board."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.ensure_object(dict)
    if "admin" not in ctx.obj:
        ctx.obj["admin"] = BoardAdmin()


@cli.command("init-db")
@click.pass_obj
def init_db(obj: dict[str, Any]) -> None:
    """Create the board tables."""
    admin: BoardAdmin = obj["admin"]
    run_with_database(admin)
    click.echo(
        click.style(
            f"Database ready at {admin.path_resolver.get_database_path()}", fg="green"
        )
    )


@cli.command()
@click.pass_obj
def stats(obj: dict[str, Any]) -> None:
    """Show item counts and database statistics."""
    admin: BoardAdmin = obj["admin"]

    async def collect(a: BoardAdmin) -> tuple[dict[str, int], dict[str, Any]]:
        counts = await a.board_manager.count_items()
        db_stats = await a.database_service.get_database_stats()
        return counts, db_stats

    counts, db_stats = run_with_database(admin, collect)

    print_section("Board Items")
    click.echo(f"  Audio items: {counts['audio_items']:,}")
    click.echo(f"  Text items:  {counts['text_items']:,}")
    click.echo(f"  Total:       {counts['audio_items'] + counts['text_items']:,}")

    print_section("Database")
    if "total_size" in db_stats:
        click.echo(f"  Size:         {_format_size(db_stats['total_size'])}")
    click.echo(f"  Pages:        {db_stats.get('page_count', 0):,}")
    click.echo(f"  Journal mode: {db_stats.get('journal_mode', 'unknown')}")

    if isinstance(admin.storage, LocalStorage):
        files = admin.storage.list_files()
        print_section("Uploads")
        click.echo(f"  Directory: {admin.storage.upload_dir}")
        click.echo(f"  Files:     {len(files):,}")
        click.echo(f"  Size:      {_format_size(sum(f.stat().st_size for f in files))}")


@cli.command("clear-board")
@click.option("--yes", is_flag=True, help="Confirm deletion of every item and upload")
@click.pass_obj
def clear_board(obj: dict[str, Any], yes: bool) -> None:
    """Delete every item and every uploaded file."""
    if not yes:
        click.echo(click.style("Refusing to clear the board without --yes", fg="red"), err=True)
        sys.exit(1)

    admin: BoardAdmin = obj["admin"]

    async def clear(a: BoardAdmin) -> dict[str, int]:
        counts = await a.board_manager.count_items()
        await a.database_service.clear_database()
        return counts

    counts = run_with_database(admin, clear)

    removed_files = 0
    if isinstance(admin.storage, LocalStorage):
        for file_path in admin.storage.list_files():
            file_path.unlink()
            removed_files += 1

    click.echo(
        click.style(
            f"Removed {counts['audio_items']} audio items, {counts['text_items']} text items "
            f"and {removed_files} files",
            fg="green",
        )
    )


@cli.command("prune-uploads")
@click.option("--dry-run", is_flag=True, help="List orphaned files without deleting them")
@click.pass_obj
def prune_uploads(obj: dict[str, Any], dry_run: bool) -> None:
    """Delete uploaded files no audio item references."""
    admin: BoardAdmin = obj["admin"]
    storage = admin.local_storage()

    async def referenced(a: BoardAdmin) -> set[str]:
        return await a.board_manager.referenced_audio_urls()

    referenced_urls = run_with_database(admin, referenced)
    orphans = [f for f in storage.list_files() if storage.url_for(f) not in referenced_urls]

    if not orphans:
        click.echo("No orphaned uploads found")
        return

    print_section("Orphaned Uploads" + (" (dry run)" if dry_run else ""))
    for file_path in orphans:
        click.echo(f"  • {file_path.name}")
        if not dry_run:
            file_path.unlink()

    verb = "Would remove" if dry_run else "Removed"
    click.echo(click.style(f"\n{verb} {len(orphans)} files", fg="yellow" if dry_run else "green"))


def main() -> None:
    """Entry point for the board admin CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
