"""Resolve include/exclude patterns into the tracked file list."""

import logging
import os
from pathlib import Path
from typing import Iterable, List

from .errors import FileEnumerationError
from .patterns import PatternSet

logger = logging.getLogger(__name__)


def discover_files(
    base_dir: Path,
    include: Iterable[str],
    exclude: Iterable[str] = (),
) -> List[Path]:
    """Find all regular files under base_dir selected by the patterns.

    Patterns are gitignore-style and matched against base-relative POSIX
    paths. Dotfiles are considered like any other file; directories are
    never returned, even when a pattern matches one. The vendor directory
    is always excluded.

    Args:
        base_dir: Directory patterns are relative to
        include: Patterns selecting files
        exclude: Patterns dropping files

    Returns:
        Sorted, deduplicated absolute paths

    Unreadable subdirectories are skipped with a warning; only a failure
    to read base_dir itself is fatal.

    Raises:
        FileEnumerationError: If a pattern is invalid or base_dir cannot be walked
    """
    patterns = PatternSet(include, exclude)
    root = Path(base_dir).resolve()

    if not root.is_dir():
        raise FileEnumerationError(f"Base directory does not exist: {root}")
    if not patterns.include_patterns:
        logger.debug("No include patterns configured; nothing to track")
        return []

    def _on_error(error: OSError) -> None:
        if error.filename is None or Path(error.filename) == root:
            raise FileEnumerationError(f"Failed to scan {error.filename}: {error.strerror}") from error
        # Unreadable subdirectories are skipped, like a glob would
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror)

    found = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"

        # Prune excluded directories in place
        dirnames[:] = sorted(d for d in dirnames if patterns.should_traverse(prefix + d))

        for name in filenames:
            relpath = prefix + name
            if not patterns.matches(relpath):
                continue
            path = Path(dirpath) / name
            # Skips sockets, fifos and dangling symlinks
            if path.is_file():
                found.add(path)

    logger.debug("Discovered %d files under %s", len(found), root)
    return sorted(found)
