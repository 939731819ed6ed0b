"""Change detection between the current snapshot and the baseline.

Cheap checks run first (force flag, missing baseline, file count). Only
when those are inconclusive are digests compared, in contiguous chunks of
paths scanned concurrently. The first chunk to find a mismatch cancels
the shared token and every other chunk stops at its next path.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .constants import DEFAULT_CHUNK_SIZE
from .snapshot import Snapshot
from .workers import run_all

logger = logging.getLogger(__name__)


class ChangeReason(str, Enum):
    """Why a decision came out the way it did."""
    FORCED = "forced"
    NO_BASELINE = "no baseline"
    COUNT_CHANGED = "file count changed"
    CONTENT_CHANGED = "content changed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ChangeDecision:
    """Outcome of change detection; truthy when the command should run."""
    changed: bool
    reason: ChangeReason

    def __bool__(self) -> bool:
        return self.changed


class CancellationToken:
    """Shared one-way flag for sibling comparison tasks.

    Only ever goes from unset to set; cancelling twice is harmless.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def partition(paths: List[str], chunk_size: int) -> List[List[str]]:
    """Split paths into contiguous chunks; the last one may be shorter."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [paths[i:i + chunk_size] for i in range(0, len(paths), chunk_size)]


def compare_chunk(
    paths: List[str],
    current: Snapshot,
    baseline: Snapshot,
    token: CancellationToken,
) -> None:
    """Scan one chunk, cancelling the token on the first mismatch.

    The token is checked before each path, so a chunk stops within one
    comparison of another chunk finding a difference.
    """
    for path in paths:
        if token.cancelled:
            return
        # A path missing from the baseline compares against None
        if current.digest_for(path) != baseline.digest_for(path):
            logger.debug("Digest mismatch for %s", path)
            token.cancel()
            return


def contents_differ(current: Snapshot, baseline: Snapshot, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    """Compare digests chunk by chunk in parallel.

    Returns:
        True if any path in current has a different (or no) baseline digest
    """
    chunks = partition(current.paths(), chunk_size)
    token = CancellationToken()

    logger.debug("Comparing %d paths in %d chunks", len(current), len(chunks))
    run_all(lambda chunk: compare_chunk(chunk, current, baseline, token), chunks)

    return token.cancelled


def detect_changes(
    current: Snapshot,
    baseline: Optional[Snapshot],
    force: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ChangeDecision:
    """Decide whether the tracked files changed since the baseline.

    Rules are evaluated in order and the first applicable one wins:
    force, missing baseline, differing file count, digest comparison.

    Args:
        current: Snapshot built from the filesystem this run
        baseline: Snapshot from the store, or None if there is none
        force: Treat as changed without comparing
        chunk_size: Paths per concurrent comparison unit

    Returns:
        ChangeDecision, truthy if changed
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    if force:
        decision = ChangeDecision(True, ChangeReason.FORCED)
    elif baseline is None:
        decision = ChangeDecision(True, ChangeReason.NO_BASELINE)
    elif len(current) != len(baseline):
        decision = ChangeDecision(True, ChangeReason.COUNT_CHANGED)
    elif contents_differ(current, baseline, chunk_size):
        decision = ChangeDecision(True, ChangeReason.CONTENT_CHANGED)
    else:
        decision = ChangeDecision(False, ChangeReason.UNCHANGED)

    logger.debug("Change decision: %s", decision.reason.value)
    return decision
