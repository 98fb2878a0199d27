"""Sync commands for the s3sync CLI.

Commands:
- sync: Push the build directory to the bucket
- status: Show the status of every path
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click

from s3sync.cli.config import load_cli_options
from s3sync.storage import StoreError, create_store
from s3sync.sync import SyncEngine, SyncError
from s3sync.sync.executor import ACTION_EXCEPTIONS

if TYPE_CHECKING:
    from s3sync.core.config import SyncOptions
    from s3sync.storage import ObjectStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool) -> None:
    """Configure the s3sync logger to write to stderr.

    Args:
        verbose: Log at DEBUG level instead of WARNING.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    s3sync_logger = logging.getLogger("s3sync")
    # Remove any existing handlers
    for existing in s3sync_logger.handlers[:]:
        s3sync_logger.removeHandler(existing)
    s3sync_logger.addHandler(handler)
    s3sync_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Prevent propagation to root logger
    s3sync_logger.propagate = False


def _open_store(options: SyncOptions) -> ObjectStore:
    try:
        return create_store(options.store_config())
    except (ValueError, StoreError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command()
@click.option("--config", "-c", type=click.Path(dir_okay=False), default=None, help="Config file (default: ./.s3sync.json).")
@click.option("--dry-run", "-n", is_flag=True, help="Report actions without changing the bucket.")
@click.option("--force", "-f", is_flag=True, help="Re-upload objects even if unchanged.")
@click.option("--no-delete", is_flag=True, help="Keep remote objects that no longer exist locally.")
@click.option("--verbose", "-v", is_flag=True, help="Show paths and hashes for every action.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Number of concurrent workers.")
def sync(
    config: str | None,
    dry_run: bool | None,
    force: bool | None,
    no_delete: bool,
    verbose: bool | None,
    workers: int | None,
) -> None:
    """Push the build directory to the bucket.

    Creates new objects, updates changed ones and deletes objects that no
    longer exist locally. Redirect objects are never deleted.
    """
    options = load_cli_options(
        config,
        dry_run=dry_run or None,
        force=force or None,
        delete=False if no_delete else None,
        verbose=verbose or None,
        max_workers=workers,
    )
    setup_logging(options.verbose)
    store = _open_store(options)

    click.echo(f"Syncing {options.build_dir} to {store.location}")
    if options.dry_run:
        click.echo(click.style("Dry run: the bucket will not be changed.", fg="yellow"))
    click.echo("")

    engine = SyncEngine(store, options)
    try:
        result = engine.run()
    except (SyncError, StoreError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result.errors:
        click.echo(click.style("\nErrors:", fg="red"))
        for error in result.errors:
            click.echo(f"  ✗ {error}")

    if result.mutation_count == 0 and not result.errors:
        click.echo("Everything is up to date.")
    else:
        label = "Dry run complete" if result.dry_run else "Sync complete"
        click.echo(
            f"\n{label}: {len(result.created)} created, "
            f"{len(result.updated)} updated, "
            f"{len(result.deleted)} deleted, "
            f"{len(result.ignored)} ignored"
        )

    if result.has_errors:
        sys.exit(1)


@click.command()
@click.option("--config", "-c", type=click.Path(dir_okay=False), default=None, help="Config file (default: ./.s3sync.json).")
@click.option("--all", "show_all", is_flag=True, help="Also list identical paths.")
def status(config: str | None, show_all: bool) -> None:
    """Show the status of every path without changing the bucket."""
    options = load_cli_options(config)
    setup_logging(options.verbose)
    store = _open_store(options)

    engine = SyncEngine(store, options)
    try:
        resources = engine.plan()
    except (SyncError, StoreError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    failed = False
    for resource in resources:
        try:
            resource_status = resource.status
        except ACTION_EXCEPTIONS as e:
            click.echo(click.style(f"{'error':<20}{resource.path}: {e}", fg="red"))
            failed = True
            continue
        if resource.is_identical and not show_all:
            continue
        click.echo(f"{resource_status.value:<20}{resource.path}")

    if failed:
        sys.exit(1)
