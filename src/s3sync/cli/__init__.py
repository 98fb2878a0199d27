"""Command-line interface for s3sync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- sync: Push the build directory to the bucket
- status: Show the status of every path without changing anything
"""

from __future__ import annotations

import click

from s3sync.cli.config import get_config_file, load_cli_options
from s3sync.cli.sync import status, sync


@click.group()
@click.version_option(package_name="s3sync")
def cli() -> None:
    """s3sync - Push a local build directory to an S3 bucket."""


cli.add_command(sync)
cli.add_command(status)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_file",
    "load_cli_options",
]
