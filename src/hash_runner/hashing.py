"""Hashing utilities for content snapshots.

Every run rehashes the full tracked file set; there is no digest cache.
"""

import hashlib
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .errors import FileReadError
from .snapshot import Snapshot
from .workers import run_all

logger = logging.getLogger(__name__)


def compute_file_digest(path: Path) -> str:
    """Compute SHA256 hash of file contents.

    Simple byte-for-byte hashing - any change invalidates the digest.

    Args:
        path: Path to file to hash

    Returns:
        64-character lowercase hex digest

    Raises:
        FileReadError: If the file cannot be opened or read
    """
    sha256 = hashlib.sha256()
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
    except OSError as e:
        raise FileReadError(path, e) from e
    return sha256.hexdigest()


def build_snapshot(
    base_dir: Path,
    paths: Iterable[Path],
    max_workers: Optional[int] = None,
) -> Snapshot:
    """Hash files in parallel and assemble a snapshot.

    Args:
        base_dir: Directory snapshot keys are relative to
        paths: File paths under base_dir, in the order keys should appear
        max_workers: Thread cap; None uses the executor's default

    Returns:
        Snapshot keyed by base-relative POSIX path

    Raises:
        FileReadError: If any single file fails to hash
    """
    root = Path(base_dir)

    def hash_one(path: Path) -> Tuple[str, str]:
        return path.relative_to(root).as_posix(), compute_file_digest(path)

    results = run_all(hash_one, paths, max_workers=max_workers)
    logger.debug("Hashed %d files", len(results))
    return Snapshot.from_mapping(dict(results))
