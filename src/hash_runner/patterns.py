"""Gitignore-style include/exclude pattern matching for hash-runner."""

from typing import Iterable, List

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from .constants import VENDOR_DIR_PATTERN
from .errors import FileEnumerationError


def _compile(patterns: List[str], kind: str) -> PathSpec:
    try:
        return PathSpec.from_lines(GitWildMatchPattern, patterns)
    except (TypeError, ValueError) as e:
        raise FileEnumerationError(f"Invalid {kind} pattern: {e}") from e


class PatternSet:
    """Compiled include and exclude patterns for one base directory.

    Patterns follow .gitignore rules, not shell glob rules: a pattern with
    no slash (`*.ts`) matches at any depth, a leading or middle slash
    anchors it to the base directory (`/*.ts`, `src/*.ts`), a trailing
    slash matches a directory and everything below it, and `!` negates.
    """

    def __init__(self, include: Iterable[str], exclude: Iterable[str] = ()):
        """Compile patterns once.

        Args:
            include: Patterns selecting files to track
            exclude: Patterns dropping files; the vendor directory is
                always appended

        Raises:
            FileEnumerationError: If any pattern is malformed
        """
        self.include_patterns = [p for p in include if p.strip()]
        self.exclude_patterns = [p for p in exclude if p.strip()]
        self.exclude_patterns.append(VENDOR_DIR_PATTERN)

        self._include = _compile(self.include_patterns, "include")
        self._exclude = _compile(self.exclude_patterns, "exclude")

    def matches(self, relpath: str) -> bool:
        """Check if a base-relative POSIX file path is tracked.

        Args:
            relpath: Base-relative path in POSIX format (forward slashes)

        Returns:
            True if included and not excluded
        """
        return self._include.match_file(relpath) and not self._exclude.match_file(relpath)

    def is_excluded(self, relpath: str) -> bool:
        return self._exclude.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Check if a directory should be descended into during scanning.

        Only an optimization: files are filtered individually anyway.

        Args:
            dirpath: Base-relative directory path in POSIX format

        Returns:
            True if the directory is not excluded as a whole
        """
        if not dirpath.endswith("/"):
            dirpath = dirpath + "/"
        return not self._exclude.match_file(dirpath)
