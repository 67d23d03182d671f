"""Run a cleanup over a project tree, one file at a time."""

import time
from dataclasses import dataclass, field
from pathlib import Path

from consolesweep.backup import BackupError, BackupManager
from consolesweep.engine.models import FileResult, Occurrence, SessionStatistics
from consolesweep.engine.policy import Prompter
from consolesweep.utils.constants import SOURCE_EXTENSIONS
from consolesweep.utils.helpers import read_source_text, write_source_text
from consolesweep.utils.logging import logger

from .discovery import find_source_files
from .processor import FileProcessor, ProcessorConfig


@dataclass
class RunResult:
    """Everything one run produced."""

    stats: SessionStatistics
    results: list[FileResult] = field(default_factory=list)
    backup_manager: BackupManager | None = None
    failed_files: list[tuple[str, str]] = field(default_factory=list)

    @property
    def modified_files(self) -> list[str]:
        return [r.path for r in self.results if r.modified]

    def remaining_sensitive(self) -> list[Occurrence]:
        remaining = []
        for result in self.results:
            remaining.extend(result.remaining_sensitive())
        return remaining


def run_cleanup(
    root: Path | str,
    config: ProcessorConfig,
    prompter: Prompter | None = None,
    backup_manager: BackupManager | None = None,
    extensions: tuple[str, ...] | list[str] = SOURCE_EXTENSIONS,
    exclude_patterns: list[str] | None = None,
    extra_skip_dirs: set[str] | None = None,
) -> RunResult:
    """Process every source file under ``root``.

    Files are read, classified, decided, edited and written one after the
    other. A file that cannot be read, backed up or written is recorded and
    the run moves on; a failed write is restored from its backup.
    """
    started = time.perf_counter()
    stats = SessionStatistics()
    run = RunResult(stats=stats, backup_manager=backup_manager)
    processor = FileProcessor(config, prompter, backup_manager, stats)

    files = find_source_files(root, extensions, exclude_patterns, extra_skip_dirs)
    stats.files_scanned = len(files)

    for position, file in enumerate(files, start=1):
        try:
            content = read_source_text(file)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read {path}: {err}", path=file, err=e)
            run.failed_files.append((str(file), str(e)))
            stats.files_failed += 1
            stats.errors += 1
            continue

        if config.call_token not in content:
            continue

        logger.debug("[{n}/{total}] {path}", n=position, total=len(files), path=file)
        result = processor.process_file(file, content)
        run.results.append(result)

        if result.errors:
            run.failed_files.extend((result.path, e) for e in result.errors)

        if not result.modified:
            continue

        stats.files_modified += 1
        if config.dry_run:
            continue

        try:
            write_source_text(file, result.new_content)
        except OSError as e:
            logger.error("Failed to write {path}: {err}", path=file, err=e)
            run.failed_files.append((str(file), str(e)))
            stats.files_modified -= 1
            stats.files_failed += 1
            stats.errors += 1
            result.modified = False
            _restore(backup_manager, file)

    stats.elapsed_seconds = time.perf_counter() - started
    return run


def _restore(backup_manager: BackupManager | None, file: Path) -> None:
    if backup_manager is None:
        return
    try:
        backup_manager.restore_from_backup(file)
        logger.info("Restored {path} from backup", path=file)
    except BackupError as e:
        logger.error("Could not restore {path}: {err}", path=file, err=e)
