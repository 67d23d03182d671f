"""Helper utility functions for consolesweep.

IMPORTANT UTILITIES:
- normalize_relative_path(): Use this for ANY path stored in a backup
  manifest or matched against an --exclude glob. Manifests store Unix-style
  paths relative to the project root so they survive moving between
  Windows and POSIX checkouts.
"""

import hashlib
import json
from pathlib import Path
from typing import Any

from .logging import logger


def normalize_relative_path(file_path: Path | str, project_root: Path | str | None = None) -> str:
    """Normalize a file path to a root-relative POSIX string.

    Transformations:
    1. Convert backslashes to forward slashes (Windows -> Unix)
    2. Strip project root prefix if provided (absolute -> relative)
    3. Strip leading slashes

    Examples:
        >>> normalize_relative_path("src\\\\app.js")
        'src/app.js'

        >>> normalize_relative_path("/work/proj/src/app.js", "/work/proj")
        'src/app.js'
    """
    normalized = str(file_path).replace("\\", "/")

    if project_root is not None:
        root_str = str(project_root).replace("\\", "/").rstrip("/")

        if normalized.startswith(root_str + "/"):
            normalized = normalized[len(root_str) + 1 :]
        elif normalized == root_str:
            normalized = ""

    return normalized.lstrip("/")


def compute_file_hash(file_path: Path) -> str:
    """
    Compute SHA256 hash of a file.

    Args:
        file_path: Path to the file

    Returns:
        Hex digest of SHA256 hash
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(4096), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()


def load_json_file(file_path: Path | str) -> dict[str, Any]:
    """
    Load and parse a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
        PermissionError: If file cannot be read
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"JSON file not found: {file_path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise
    except PermissionError:
        logger.error(f"Permission denied reading file: {file_path}")
        raise


def save_json_file(data: dict[str, Any] | list, file_path: Path | str) -> None:
    """Save data as JSON to file."""
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def read_source_text(file_path: Path) -> str:
    """Read a source file as UTF-8 without translating line endings.

    Files are written back byte-for-byte apart from the edited lines, so
    CRLF endings must reach the engine untouched.
    """
    with open(file_path, encoding="utf-8", newline="") as f:
        return f.read()


def write_source_text(file_path: Path, content: str) -> None:
    """Write source text back without newline translation."""
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
