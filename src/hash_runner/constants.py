"""Constants for hash-runner."""

# Tool name (config table key, pyproject section)
TOOL_NAME = "hash-runner"

# Config files searched in each directory, in priority order
CONFIG_FILENAMES = (
    ".hash-runner.yaml",
    ".hash-runner.yml",
    ".hash-runner.json",
    "hash-runner.config.yaml",
    "hash-runner.config.json",
)
PYPROJECT_FILE = "pyproject.toml"

# Defaults
DEFAULT_STORE_FILE = ".hashes.json"
DEFAULT_CHUNK_SIZE = 100

# Dependency vendor directory, always excluded from enumeration
VENDOR_DIR_PATTERN = "node_modules/"

# Environment
CI_ENV_VAR = "CI"
TEST_MODE_ENV_VAR = "IS_TEST"
AFFIRMATIVE_VALUES = ("true", "1", "yes")
