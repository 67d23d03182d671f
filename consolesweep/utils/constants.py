"""Centralized constants for consolesweep.

Single source of truth for paths, file types and default limits used across
the engine, the pipeline and the CLI.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Per-project state directory (config, error log)
STATE_DIR = Path("./.consolesweep")

ERROR_LOG_FILE = STATE_DIR / "error.log"
CONFIG_FILE_NAME = "config.json"

# Backups live beside the state directory so `sweep backups --purge` can drop
# them without touching config
DEFAULT_BACKUP_DIR = ".consolesweep-backups"
BACKUP_MANIFEST = "manifest.json"

# ============================================================================
# SCANNING
# ============================================================================

DEFAULT_CALL_TOKEN = "console.log"
DEFAULT_ERROR_CALL = "console.error"
DEFAULT_INFO_CALL = "console.info"

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")

# Directory names never descended into
SKIP_DIRS = frozenset([
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    DEFAULT_BACKUP_DIR,
    ".consolesweep",
])

# Lines shown before/after an occurrence during review
DEFAULT_CONTEXT_LINES = 3

# ============================================================================
# SCOPE HEURISTICS
# ============================================================================

CATCH_LOOKBACK = 15
FUNCTION_LOOKBACK = 20
CONDITIONAL_LOOKBACK = 5

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "CONSOLESWEEP"
ENV_LOG_LEVEL = "CONSOLESWEEP_LOG_LEVEL"
ENV_LOG_JSON = "CONSOLESWEEP_LOG_JSON"
ENV_LOG_FILE = "CONSOLESWEEP_LOG_FILE"
