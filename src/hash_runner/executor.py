"""Run the configured command through the shell."""

import logging
import subprocess
from pathlib import Path

from .errors import SpawnError

logger = logging.getLogger(__name__)


def run_command(command: str, cwd: Path) -> int:
    """Run command in a shell with inherited stdin/stdout/stderr.

    Blocks until the command exits; there is no timeout.

    Args:
        command: Shell command line
        cwd: Working directory for the command

    Returns:
        The command's exit code, or 0 if it was terminated by a signal

    Raises:
        SpawnError: If the shell could not be started
    """
    logger.debug("Spawning %r in %s", command, cwd)
    try:
        process = subprocess.Popen(command, shell=True, cwd=str(cwd))
    except OSError as e:
        raise SpawnError(command, e) from e

    returncode = process.wait()
    if returncode < 0:
        # Killed by signal -returncode; reported as 0
        logger.debug("Command terminated by signal %d", -returncode)
        return 0
    return returncode
