"""Human-readable reporting of resource actions.

This module provides:
- Reporter: Prints one colored line per resource action
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from s3sync.sync.resource import Resource

logger = logging.getLogger(__name__)

# Verb -> color
VERB_COLORS = {
    "Creating": "green",
    "Updating": "blue",
    "Deleting": "red",
    "Ignoring": "yellow",
    "Identical": "white",
}


class Reporter:
    """Prints one line per resource action.

    Lines from concurrent workers are serialized so they never interleave.
    In verbose mode, paths and hashes are printed under the action line.
    """

    def __init__(self, verbose: bool = False, dry_run: bool = False, err: bool = False) -> None:
        """Initialize the reporter.

        Args:
            verbose: Print detail lines (paths, hashes).
            dry_run: Prefix every line with "[dry run]".
            err: Write to stderr instead of stdout.
        """
        self.verbose = verbose
        self.dry_run = dry_run
        self._err = err
        self._lock = threading.Lock()

    def report(self, verb: str, path: str, detail: str | None = None) -> None:
        """Print an action line.

        Args:
            verb: Action verb (e.g. "Creating").
            path: Logical path of the resource.
            detail: Optional trailing detail (e.g. "(gzipped)").
        """
        self.report_lines(verb, path, detail, [])

    def report_lines(
        self,
        verb: str,
        path: str,
        detail: str | None,
        details: list[tuple[str, str]],
    ) -> None:
        """Print an action line followed by verbose detail lines.

        Args:
            verb: Action verb.
            path: Logical path of the resource.
            detail: Optional trailing detail.
            details: (label, value) pairs, printed only in verbose mode.
        """
        line = f"{click.style(verb, fg=VERB_COLORS.get(verb))} {path}"
        if detail:
            line += f" {click.style(detail, fg='white')}"
        if self.dry_run:
            line = f"[dry run] {line}"

        with self._lock:
            click.echo(line, err=self._err)
            if self.verbose:
                for label, value in details:
                    click.echo(f"  {label + ':':<13}{value}", err=self._err)
        logger.debug(f"{verb} {path}{' ' + detail if detail else ''}")

    def creating(self, resource: Resource) -> None:
        details: list[tuple[str, str]] = []
        if self.verbose:
            details = [
                ("Original", str(resource.original_path)),
                ("Local Path", str(resource.local_path)),
                ("content md5", resource.local_content_md5),
            ]
        self.report_lines("Creating", resource.path, _gzip_detail(resource), details)

    def updating(self, resource: Resource) -> None:
        """Remote hashes are only looked up in verbose mode (HEAD request)."""
        details: list[tuple[str, str]] = []
        if self.verbose:
            details = [
                ("Original", str(resource.original_path)),
                ("Local Path", str(resource.local_path)),
                ("remote md5", f"{resource.remote_object_md5} / {resource.remote_content_md5}"),
                ("content md5", f"{resource.local_object_md5} / {resource.local_content_md5}"),
            ]
        self.report_lines("Updating", resource.path, _gzip_detail(resource), details)

    def deleting(self, resource: Resource) -> None:
        self.report("Deleting", resource.path)

    def ignoring(self, resource: Resource, reason: str | None = None) -> None:
        reason = reason or resource.ignore_reason
        self.report("Ignoring", resource.path, f"({reason})" if reason else None)

    def identical(self, resource: Resource) -> None:
        """Identical resources are only reported in verbose mode."""
        if self.verbose:
            self.report("Identical", resource.path)


def _gzip_detail(resource: Resource) -> str | None:
    return "(gzipped)" if resource.gzipped else None
