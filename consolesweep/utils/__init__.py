"""consolesweep utilities package."""

from .constants import (
    DEFAULT_BACKUP_DIR,
    DEFAULT_CALL_TOKEN,
    ERROR_LOG_FILE,
    SOURCE_EXTENSIONS,
    STATE_DIR,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .helpers import (
    compute_file_hash,
    load_json_file,
    normalize_relative_path,
    read_source_text,
    save_json_file,
    write_source_text,
)
from .logging import logger

__all__ = [
    "STATE_DIR",
    "ERROR_LOG_FILE",
    "DEFAULT_BACKUP_DIR",
    "DEFAULT_CALL_TOKEN",
    "SOURCE_EXTENSIONS",
    "handle_exceptions",
    "ExitCodes",
    "compute_file_hash",
    "load_json_file",
    "save_json_file",
    "normalize_relative_path",
    "read_source_text",
    "write_source_text",
    "logger",
]
