"""Tests for the Snapshot model."""

import pytest
from pydantic import ValidationError

from hash_runner.snapshot import Snapshot


class TestSnapshot:

    def test_preserves_insertion_order(self):
        snapshot = Snapshot.from_mapping({"b.txt": "2", "a.txt": "1"})
        assert snapshot.paths() == ["b.txt", "a.txt"]

    def test_lookup(self):
        snapshot = Snapshot.from_mapping({"a.txt": "1"})
        assert "a.txt" in snapshot
        assert snapshot.digest_for("a.txt") == "1"
        assert snapshot.digest_for("missing.txt") is None
        assert len(snapshot) == 1

    def test_equality_ignores_order(self):
        assert Snapshot.from_mapping({"a": "1", "b": "2"}) == Snapshot.from_mapping({"b": "2", "a": "1"})

    def test_frozen(self):
        snapshot = Snapshot.from_mapping({"a.txt": "1"})
        with pytest.raises(ValidationError):
            snapshot.files = {}

    def test_mapping_is_a_copy(self):
        snapshot = Snapshot.from_mapping({"a.txt": "1"})
        mapping = snapshot.to_mapping()
        mapping["b.txt"] = "2"
        assert "b.txt" not in snapshot

    @pytest.mark.parametrize("path", ["/etc/passwd", "../outside.txt", "src/../../x", ""])
    def test_rejects_paths_outside_base(self, path):
        with pytest.raises(ValidationError):
            Snapshot.from_mapping({path: "1"})

    def test_rejects_non_string_digest(self):
        with pytest.raises(ValidationError):
            Snapshot.from_mapping({"a.txt": 123})

    def test_backslash_is_an_ordinary_filename_character(self):
        """POSIX filenames may contain a backslash; it is not a separator."""
        snapshot = Snapshot.from_mapping({"src/weird\\name.txt": "1"})
        assert snapshot.paths() == ["src/weird\\name.txt"]
