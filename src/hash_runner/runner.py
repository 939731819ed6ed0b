"""Run orchestration: config → snapshot → decision → command → store.

A run moves through these steps:

    load config
      └─ CI detected? run command, exit with its code (no hashing, no store)
    load baseline ∥ build current snapshot
    detect changes
      ├─ unchanged: report, exit 0
      └─ changed: run command, save current snapshot, exit with command's code

The snapshot is saved even when the command fails, so a failing build is
not retried until inputs change again or --force is used.
"""

import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Mapping, Optional

from pathspec.patterns import GitWildMatchPattern
from rich.console import Console
from rich.markup import escape

from .config import RunConfig, load_run_config
from .constants import AFFIRMATIVE_VALUES, CI_ENV_VAR, TEST_MODE_ENV_VAR
from .detector import detect_changes
from .discovery import discover_files
from .executor import run_command
from .hashing import build_snapshot
from .snapshot import Snapshot
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether the CI bypass is enabled."""
    env = os.environ if environ is None else environ
    return env.get(CI_ENV_VAR, "").strip().lower() in AFFIRMATIVE_VALUES


def is_test_mode(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get(TEST_MODE_ENV_VAR))


def exit_process(code: int, environ: Optional[Mapping[str, str]] = None) -> int:
    """Terminate with code, unless running under test mode.

    Returns:
        code, only when in test mode
    """
    if is_test_mode(environ):
        return code
    sys.exit(code)


def scan_current(config: RunConfig) -> Snapshot:
    """Enumerate and hash the tracked files for config."""
    exclude = list(config.exclude)
    store_file = config.store_file.resolve()
    base_dir = config.base_dir.resolve()
    if store_file.is_relative_to(base_dir):
        # Never track our own store file
        exclude.append("/" + GitWildMatchPattern.escape(store_file.relative_to(base_dir).as_posix()))

    paths = discover_files(base_dir, config.include, exclude)
    return build_snapshot(base_dir, paths)


class Runner:
    """Executes one run for a resolved RunConfig."""

    def __init__(
        self,
        config: RunConfig,
        console: Optional[Console] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.console = console or Console()
        self.environ = os.environ if environ is None else environ
        self.store = SnapshotStore(config.store_file)

    def status(self, message: str) -> None:
        if not self.config.silent:
            self.console.print(message)

    def execute(self) -> int:
        self.status(f"Running command: \"{escape(self.config.command)}\"")
        return run_command(self.config.command, self.config.base_dir)

    def run(self) -> int:
        """Run to completion and return the exit code to terminate with."""
        if is_ci(self.environ):
            self.status("CI environment detected. Bypassing hash check.")
            return self.execute()

        with ThreadPoolExecutor(max_workers=2) as executor:
            baseline_future = executor.submit(self.store.load)
            current_future = executor.submit(scan_current, self.config)
            current = current_future.result()
            baseline = baseline_future.result()

        decision = detect_changes(
            current,
            baseline,
            force=self.config.force,
            chunk_size=self.config.chunk_size,
        )

        if not decision.changed:
            self.status("No changes detected.")
            return 0

        logger.info("Changes detected (%s)", decision.reason.value)
        code = self.execute()

        # Saved regardless of the command's exit code
        self.store.save(current)
        if code != 0:
            logger.info("Command exited with code %d; snapshot saved anyway", code)
        return code


def run(
    config_path: Optional[Path] = None,
    *,
    force: Optional[bool] = None,
    silent: Optional[bool] = None,
    start: Optional[Path] = None,
    console: Optional[Console] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Load configuration and perform one run.

    Args:
        config_path: Explicit config file (default: discover from start)
        force: Override the config's force flag
        silent: Override the config's silent flag
        start: Directory config discovery starts from (default: cwd)
        console: Console for status lines
        environ: Environment to read CI flag from (default: os.environ)

    Returns:
        Exit code: the command's code, or 0 when nothing changed

    Raises:
        HashRunnerError: On any fatal error before the command completed
    """
    config = load_run_config(config_path, start=start, force=force, silent=silent)
    return Runner(config, console=console, environ=environ).run()


def hash_runner(config_path: Optional[Path] = None, **kwargs) -> int:
    """Top-level entry point: run, then terminate with the resulting code.

    With IS_TEST set the process is not terminated and the code is returned.
    """
    code = run(config_path, **kwargs)
    return exit_process(code, kwargs.get("environ"))
