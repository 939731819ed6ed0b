"""Tests for change detection."""

import pytest

from hash_runner.detector import (
    CancellationToken,
    ChangeReason,
    compare_chunk,
    contents_differ,
    detect_changes,
    partition,
)
from hash_runner.snapshot import Snapshot


def snap(**files) -> Snapshot:
    return Snapshot.from_mapping({k.replace("_", "."): v for k, v in files.items()})


def many(count: int, digest: str = "h", **overrides) -> Snapshot:
    files = {f"src/file{i:04d}.txt": digest for i in range(count)}
    files.update(overrides)
    return Snapshot.from_mapping(files)


class TestShortCircuits:
    """Test the rules that decide before any digest comparison."""

    def test_force_always_changed(self):
        """force wins even when baseline equals current."""
        current = snap(a_txt="H1")
        decision = detect_changes(current, snap(a_txt="H1"), force=True)
        assert decision.changed
        assert decision.reason == ChangeReason.FORCED

    def test_no_baseline_changed(self):
        """Absent baseline is changed, even for an empty current snapshot."""
        decision = detect_changes(Snapshot(), None)
        assert decision.changed
        assert decision.reason == ChangeReason.NO_BASELINE

    def test_empty_baseline_is_not_absent(self):
        """A stored empty snapshot is a real baseline."""
        decision = detect_changes(Snapshot(), Snapshot())
        assert not decision.changed
        assert decision.reason == ChangeReason.UNCHANGED

    def test_count_mismatch_skips_digest_scan(self, monkeypatch):
        """Removed file is caught by count without comparing digests."""
        def fail(*args, **kwargs):
            raise AssertionError("digests should not be compared")

        monkeypatch.setattr("hash_runner.detector.contents_differ", fail)

        decision = detect_changes(snap(a_txt="H1"), snap(a_txt="H1", b_txt="H2"))
        assert decision.changed
        assert decision.reason == ChangeReason.COUNT_CHANGED

    def test_count_mismatch_regardless_of_digests(self):
        """Added file is changed even though shared digests match."""
        assert detect_changes(snap(a_txt="H1", b_txt="H2"), snap(a_txt="H1"))

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            detect_changes(snap(a_txt="H1"), snap(a_txt="H1"), chunk_size=0)


class TestContentComparison:
    """Test the chunked digest comparison."""

    def test_identical_snapshots_unchanged(self):
        """Equal keys and digests mean no change."""
        current = snap(a_txt="H1", b_txt="H2")
        decision = detect_changes(current, snap(b_txt="H2", a_txt="H1"))
        assert not decision.changed
        assert not decision

    def test_modified_digest_changed(self):
        """Single modified file is detected."""
        decision = detect_changes(snap(a_txt="H2"), snap(a_txt="H1"))
        assert decision.changed
        assert decision.reason == ChangeReason.CONTENT_CHANGED

    def test_renamed_file_changed(self):
        """Same count, different key: missing baseline entry is a mismatch."""
        assert detect_changes(snap(a_txt="H1"), snap(z_txt="H1"))

    @pytest.mark.parametrize("chunk_size", [1, 7, 50, 1000])
    def test_chunk_size_does_not_affect_result(self, chunk_size):
        """Mismatch is found whatever the chunk size."""
        baseline = many(50)
        current = many(50, **{"src/file0031.txt": "other"})

        assert detect_changes(current, baseline, chunk_size=chunk_size).changed
        assert not detect_changes(baseline, many(50), chunk_size=chunk_size).changed

    def test_mismatches_in_several_chunks(self):
        """Several chunks finding mismatches still yield one True result."""
        baseline = many(40)
        current = many(40, digest="changed")
        assert contents_differ(current, baseline, chunk_size=3)


class TestChunking:
    """Test partitioning and per-chunk scanning."""

    def test_partition_contiguous(self):
        assert partition(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]

    def test_partition_larger_than_keys(self):
        assert partition(["a", "b"], 10) == [["a", "b"]]

    def test_partition_empty(self):
        assert partition([], 3) == []

    def test_compare_chunk_signals_token(self):
        token = CancellationToken()
        compare_chunk(["a.txt"], snap(a_txt="H2"), snap(a_txt="H1"), token)
        assert token.cancelled

    def test_compare_chunk_leaves_token_on_match(self):
        token = CancellationToken()
        compare_chunk(["a.txt"], snap(a_txt="H1"), snap(a_txt="H1"), token)
        assert not token.cancelled

    def test_compare_chunk_stops_when_cancelled(self):
        """Already-cancelled token stops the scan before the first key."""
        class CountingSnapshot:
            def __init__(self):
                self.lookups = 0

            def digest_for(self, path):
                self.lookups += 1
                return "H1"

        current = CountingSnapshot()
        token = CancellationToken()
        token.cancel()

        compare_chunk(["a.txt", "b.txt"], current, current, token)
        assert current.lookups == 0

    def test_cancel_is_idempotent(self):
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.cancelled
