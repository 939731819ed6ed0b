"""Custom exceptions for hash-runner.

Every fatal condition in a run surfaces as a subclass of HashRunnerError.
A missing or corrupt snapshot store and a failing wrapped command are not
errors and have no exception type here.
"""

from pathlib import Path
from typing import Optional, Union


class HashRunnerError(RuntimeError):
    """Base class for all hash-runner errors."""
    pass


# Configuration Errors
class ConfigError(HashRunnerError):
    """Base class for configuration errors."""
    pass


class ConfigNotFoundError(ConfigError):
    """No config file was resolved, or the resolved one is empty."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = path
        message = "Config file not found or is empty"
        if path is not None:
            message += f": {path}"
        super().__init__(message)


class InvalidConfigError(ConfigError):
    """Config file was found but its content does not validate."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


# File Errors
class FileEnumerationError(HashRunnerError):
    """Include/exclude patterns could not be resolved into a file list."""
    pass


class FileReadError(HashRunnerError):
    """A tracked file could not be read while hashing."""

    def __init__(self, path: Union[str, Path], cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read {path}: {cause.strerror or cause}")


# Execution Errors
class SpawnError(HashRunnerError):
    """The configured command could not be launched at all."""

    def __init__(self, command: str, cause: OSError):
        self.command = command
        self.cause = cause
        super().__init__(f"Failed to run command \"{command}\": {cause.strerror or cause}")


# Store Errors
class StoreWriteError(HashRunnerError):
    """The snapshot store could not be written."""

    def __init__(self, path: Union[str, Path], cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write snapshot store {path}: {cause.strerror or cause}")
