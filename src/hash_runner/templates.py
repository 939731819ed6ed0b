"""Starter config generation for hash-runner init."""

import json

from .constants import DEFAULT_STORE_FILE


def create_config_yaml(command: str = "make build") -> str:
    """Generate .hash-runner.yaml content for a new project.

    Args:
        command: Command to run when tracked files change

    Returns:
        Content for .hash-runner.yaml
    """
    return f'''# hash-runner configuration
# Runs `command` only when files matched by `include` changed since the last run.

# .gitignore-style patterns (not shell globs), relative to this file's directory:
# "*.ts" matches at any depth; anchor with a slash ("/*.ts", "src/*.ts")
# to match only at one level. "dir/" covers a whole directory, "!" negates.
include:
  - "src/**"

# node_modules/ is always excluded
exclude:
  - "dist/"
  - "build/"

command: {json.dumps(command)}

# Where file digests from the last run are kept (add it to .gitignore)
store_path: "{DEFAULT_STORE_FILE}"
'''


def create_gitignore_entry() -> str:
    """Generate .gitignore entry for the snapshot store."""
    return f"\n# hash-runner\n{DEFAULT_STORE_FILE}\n"
