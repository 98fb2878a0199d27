"""Configuration utilities for the s3sync CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from s3sync.core.config import DEFAULT_CONFIG_FILE, ConfigError, SyncOptions, load_options


def get_config_file(config: str | None = None) -> Path:
    """Get the path to the config file.

    Args:
        config: Path given on the command line, if any.

    Returns:
        The given path, or .s3sync.json in the working directory.
    """
    if config:
        return Path(config).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_cli_options(config: str | None, **overrides: Any) -> SyncOptions:
    """Load options for a command, exiting with an error message on failure.

    Args:
        config: Path given with --config, if any.
        **overrides: Command-line values overriding the file (None is skipped).

    Returns:
        Parsed SyncOptions.
    """
    config_file = get_config_file(config)
    try:
        return load_options(config_file, **overrides)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
