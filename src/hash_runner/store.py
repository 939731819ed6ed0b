"""Persisted baseline snapshot."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .errors import StoreWriteError
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


def _atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to file.

    Writes to a temp file in the same directory, fsyncs it, then renames
    it over the target so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class SnapshotStore:
    """JSON file holding the snapshot from the last run that took the changed branch."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Snapshot]:
        """Read the baseline.

        A missing, unreadable or malformed store is not an error.

        Returns:
            The stored snapshot, or None when there is no usable baseline
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No snapshot store at %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Unreadable snapshot store %s: %s", self.path, e)
            return None

        try:
            data = json.loads(content)
            return Snapshot.from_mapping(data)
        except (json.JSONDecodeError, ValidationError, TypeError, ValueError) as e:
            logger.debug("Corrupt snapshot store %s: %s", self.path, e)
            return None

    def save(self, snapshot: Snapshot) -> None:
        """Overwrite the store with snapshot.

        Raises:
            StoreWriteError: If the file cannot be written
        """
        text = json.dumps(snapshot.to_mapping(), indent=2)
        try:
            _atomic_write_text(self.path, text)
        except OSError as e:
            raise StoreWriteError(self.path, e) from e
        logger.debug("Wrote %d entries to %s", len(snapshot), self.path)
