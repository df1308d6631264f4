"""
Backtrace Filter Module

Keeps infrastructure files out of the failure backtraces that PHPUnit prints.
"""

import os
import re
from typing import List

# Matches "/path/File.php:42" (PHPUnit) and "#0 /path/File.php(42): ..." (PHP).
# Paths may contain spaces, so the match runs up to the line number suffix.
TRACE_PATH_PATTERN = re.compile(r"(?P<path>(?:[A-Za-z]:)?[\\/][^:()\r\n]*?)(?::|\()\d+")
# Where a path could begin inside a match that also caught preceding words
PATH_START_PATTERN = re.compile(r"(?<=\s)(?:[A-Za-z]:)?[\\/]")


class TraceFilter:
    """Set of directories and files to hide from backtraces."""

    def __init__(self):
        self.directories: List[str] = []
        self.files: List[str] = []

    def add_directory(self, path: str) -> "TraceFilter":
        if path:
            normalized = os.path.realpath(path)
            if normalized not in self.directories:
                self.directories.append(normalized)
        return self

    def add_file(self, path: str) -> "TraceFilter":
        if path:
            normalized = os.path.realpath(path)
            if normalized not in self.files:
                self.files.append(normalized)
        return self

    def is_filtered(self, path: str) -> bool:
        """Whether a path is one of the files or lies below one of the directories."""
        normalized = os.path.realpath(path)
        if normalized in self.files:
            return True

        for directory in self.directories:
            if normalized == directory or normalized.startswith(directory + os.sep):
                return True

        return False

    def filter_trace(self, text: str) -> str:
        """
        Remove backtrace lines that point into filtered locations.

        Args:
            text: PHPUnit output or a failure message

        Returns:
            The text without the filtered lines
        """
        if not text or not (self.directories or self.files):
            return text

        kept = []
        for line in text.splitlines(keepends=True):
            match = TRACE_PATH_PATTERN.search(line)
            if match and self._matches(match.group("path")):
                continue
            kept.append(line)

        return "".join(kept)

    def _matches(self, candidate: str) -> bool:
        """Try the whole candidate, then each tail of it that starts a new path."""
        if self.is_filtered(candidate):
            return True

        return any(
            self.is_filtered(candidate[start.start():])
            for start in PATH_START_PATTERN.finditer(candidate)
        )
