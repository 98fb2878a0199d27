"""Ignore patterns for logical paths.

This module provides:
- IgnoreRule: One parsed gitignore-style line
- IgnorePatterns: Ordered rules, the last matching rule decides
- DEFAULT_IGNORE_PATTERNS: Files that are never uploaded

Supported syntax:
- ``*.map``: matches the file name in any directory
- ``drafts/``: matches everything under any directory named drafts
- ``/robots.txt``: anchored to the root of the build directory
- ``assets/**/*.psd``: patterns with a slash match the whole path
- ``!keep.map``: re-includes a path an earlier rule excluded
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path

IGNORE_FILE_NAME = ".s3syncignore"

# Editor and OS droppings
DEFAULT_IGNORE_PATTERNS = [
    ".DS_Store",
    "Thumbs.db",
    "*.swp",
    "*.swo",
    IGNORE_FILE_NAME,
]


@dataclass(frozen=True)
class IgnoreRule:
    """A single ignore pattern."""

    pattern: str
    negated: bool = False
    anchored: bool = False
    directory: bool = False

    @classmethod
    def parse(cls, line: str) -> IgnoreRule:
        negated = line.startswith("!")
        if negated:
            line = line[1:]
        anchored = line.startswith("/")
        directory = line.endswith("/")
        return cls(
            pattern=line.strip("/"),
            negated=negated,
            anchored=anchored,
            directory=directory,
        )

    @property
    def _whole_path(self) -> bool:
        return self.anchored or "/" in self.pattern

    def matches(self, rel_path: str) -> bool:
        """Check a "/" separated path relative to the build directory."""
        parts = rel_path.split("/")
        if self.directory:
            parents = parts[:-1]
            if self._whole_path:
                return any(
                    fnmatch.fnmatchcase("/".join(parents[:i]), self.pattern)
                    for i in range(1, len(parents) + 1)
                )
            return any(fnmatch.fnmatchcase(part, self.pattern) for part in parents)

        if self._whole_path:
            return fnmatch.fnmatchcase(rel_path, self.pattern)
        return fnmatch.fnmatchcase(parts[-1], self.pattern)


class IgnorePatterns:
    """Ordered ignore rules for logical paths.

    Usage:
        ignore = IgnorePatterns(["*.map", "!vendor.js.map"])
        ignore.load_from_file(build_dir / IGNORE_FILE_NAME)
        if ignore.should_ignore("js/app.js.map"):
            ...
    """

    def __init__(self, patterns: list[str] | None = None) -> None:
        """Initialize with the default patterns followed by extra ones.

        Args:
            patterns: Gitignore-style patterns, applied in order.
        """
        self._rules: list[IgnoreRule] = []
        for pattern in DEFAULT_IGNORE_PATTERNS + list(patterns or []):
            self.add_pattern(pattern)

    @property
    def patterns(self) -> list[str]:
        """Patterns as given, in evaluation order."""
        return [
            f"{'!' if r.negated else ''}{'/' if r.anchored else ''}{r.pattern}{'/' if r.directory else ''}"
            for r in self._rules
        ]

    def add_pattern(self, pattern: str) -> None:
        """Append a pattern; it takes precedence over earlier ones."""
        self._rules.append(IgnoreRule.parse(pattern))

    def load_from_file(self, path: Path) -> None:
        """Append the patterns of an ignore file, if it exists."""
        if not path.exists():
            return
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    self.add_pattern(line)

    def should_ignore(self, rel_path: str) -> bool:
        """Check if a logical path is excluded from the sync.

        Args:
            rel_path: Path relative to the build directory, "/" separated.

        Returns:
            True if the last rule matching the path is not a negation.
        """
        ignored = False
        for rule in self._rules:
            if rule.matches(rel_path):
                ignored = not rule.negated
        return ignored
