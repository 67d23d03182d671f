"""Source file discovery.

Walks the project once and yields the script files worth analyzing. Only
directory names in SKIP_DIRS (plus --exclude directory patterns) stop the
walk; everything else is filtered per file.
"""

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

from consolesweep.utils.constants import SKIP_DIRS, SOURCE_EXTENSIONS
from consolesweep.utils.helpers import normalize_relative_path
from consolesweep.utils.logging import logger


class SourceWalker:
    """Collect source files under a root with extension and glob filtering."""

    def __init__(
        self,
        root_path: Path,
        extensions: tuple[str, ...] | list[str] = SOURCE_EXTENSIONS,
        exclude_patterns: list[str] | None = None,
        extra_skip_dirs: set[str] | None = None,
        follow_symlinks: bool = False,
    ):
        self.root_path = Path(root_path)
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.follow_symlinks = follow_symlinks
        self.skip_dirs = set(SKIP_DIRS) | (extra_skip_dirs or set())
        self.exclude_file_patterns: list[str] = []

        for pattern in exclude_patterns or []:
            # "dist/**" or "generated/" skip a whole directory name
            if pattern.endswith("/**"):
                self.skip_dirs.add(pattern[:-3].rstrip("/"))
            elif pattern.endswith("/"):
                self.skip_dirs.add(pattern.rstrip("/"))
            else:
                self.exclude_file_patterns.append(pattern)

        self.stats = {
            "total_files": 0,
            "source_files": 0,
            "excluded_files": 0,
            "skipped_dirs": 0,
        }

    def is_excluded(self, file: Path) -> bool:
        rel = normalize_relative_path(file.resolve(), self.root_path.resolve())
        return any(fnmatch(rel, p) or fnmatch(file.name, p) for p in self.exclude_file_patterns)

    def walk(self) -> tuple[list[Path], dict[str, Any]]:
        """Walk the root and return (sorted source files, statistics)."""
        if self.root_path.is_file():
            files = [self.root_path] if self.root_path.suffix.lower() in self.extensions else []
            self.stats["total_files"] = 1
            self.stats["source_files"] = len(files)
            return files, self.stats

        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root_path, followlinks=self.follow_symlinks):
            skipped = [d for d in dirnames if d in self.skip_dirs]
            self.stats["skipped_dirs"] += len(skipped)
            dirnames[:] = [d for d in dirnames if d not in self.skip_dirs]

            for filename in filenames:
                self.stats["total_files"] += 1
                file = Path(dirpath) / filename
                if file.suffix.lower() not in self.extensions:
                    continue
                if self.is_excluded(file):
                    self.stats["excluded_files"] += 1
                    continue
                files.append(file)

        files.sort()
        self.stats["source_files"] = len(files)
        logger.debug("Discovered {count} source file(s) under {root}", count=len(files), root=self.root_path)
        return files, self.stats


def find_source_files(
    root: Path | str,
    extensions: tuple[str, ...] | list[str] = SOURCE_EXTENSIONS,
    exclude_patterns: list[str] | None = None,
    extra_skip_dirs: set[str] | None = None,
) -> list[Path]:
    """Sorted source files under ``root`` (or ``root`` itself when it is a file)."""
    files, _ = SourceWalker(Path(root), extensions, exclude_patterns, extra_skip_dirs).walk()
    return files
