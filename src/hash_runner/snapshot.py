"""Content snapshot of the tracked file set."""

from pathlib import PurePosixPath
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Snapshot(BaseModel):
    """
    Mapping of base-relative POSIX path to SHA256 hex digest.

    Immutable once built. Iteration order is the order files were added,
    which the engine keeps deterministic (sorted paths) so comparison
    chunks are stable across runs.
    """
    model_config = ConfigDict(frozen=True)

    files: Dict[str, str] = Field(default_factory=dict)

    @field_validator("files")
    @classmethod
    def _relative_paths_only(cls, files: Dict[str, str]) -> Dict[str, str]:
        for path in files:
            pure = PurePosixPath(path)
            if not path or pure.is_absolute() or ".." in pure.parts:
                raise ValueError(f"Snapshot path must be relative to the base directory: {path!r}")
        return files

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "Snapshot":
        return cls(files=dict(mapping))

    def to_mapping(self) -> Dict[str, str]:
        return dict(self.files)

    def paths(self) -> List[str]:
        """Paths in snapshot iteration order."""
        return list(self.files)

    def digest_for(self, path: str) -> Optional[str]:
        return self.files.get(path)

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files
