"""Shared test fixtures and utilities."""

import json
import os

import pytest

# Entry point returns its exit code instead of terminating the test process
os.environ["IS_TEST"] = "true"


@pytest.fixture(autouse=True)
def no_ci(monkeypatch):
    """Tests run the hashing path unless they opt into CI mode."""
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.setenv("IS_TEST", "true")


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content: str = "test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def make_config(tmp_path):
    """Factory fixture to write a .hash-runner.yaml in tmp_path."""
    def _make(command: str = "echo ran >> ran.log", **fields):
        data = {
            "include": ["src/**"],
            "exclude": [],
            "command": command,
            "store_path": ".hashes.json",
        }
        data.update(fields)
        config_path = tmp_path / ".hash-runner.yaml"
        # JSON is valid YAML
        config_path.write_text(json.dumps(data, indent=2))
        return config_path
    return _make


@pytest.fixture
def test_files(write_file):
    """Create a small tracked source tree."""
    def make_files():
        return {
            "src/a.txt": write_file("src/a.txt", "alpha"),
            "src/b.txt": write_file("src/b.txt", "beta"),
            "src/lib/c.py": write_file("src/lib/c.py", "print('c')"),
        }
    return make_files
