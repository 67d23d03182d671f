"""Per-run file backups with a manifest, restore and rollback.

Layout under the project root:

    .consolesweep-backups/
        20261016-142501-a1b2c3/
            manifest.json
            src/app.js
            src/lib/util.ts

Each run is one session directory. Backups are byte copies so line endings
and encodings come back exactly; the manifest records the SHA-256 of every
copy so ``validate_backups`` can detect tampering or truncation.
"""

import shutil
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from consolesweep.utils.constants import BACKUP_MANIFEST, DEFAULT_BACKUP_DIR
from consolesweep.utils.helpers import (
    compute_file_hash,
    load_json_file,
    normalize_relative_path,
    save_json_file,
)
from consolesweep.utils.logging import logger


class BackupError(Exception):
    """A backup could not be created, found or restored."""


@dataclass
class BackupRecord:
    path: str  # root-relative POSIX path of the original
    backup: str  # session-relative POSIX path of the copy
    sha256: str
    size: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "backup": self.backup,
            "sha256": self.sha256,
            "size": self.size,
            "created_at": self.created_at,
        }


@dataclass
class RollbackResult:
    successful: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)


@dataclass
class CleanupResult:
    cleaned: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    bytes_freed: int = 0


@dataclass
class SessionInfo:
    session_id: str
    created_at: str
    files: int
    path: Path


def _new_session_id() -> str:
    return f"{datetime.now().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:6]}"


class BackupManager:
    """Copies files aside before they are edited and puts them back on request."""

    def __init__(self, root: Path | str, backup_dir: str = DEFAULT_BACKUP_DIR, session_id: str | None = None):
        self.root = Path(root).resolve()
        self.base_dir = self.root / backup_dir
        self.session_id = session_id or _new_session_id()
        self.session_dir = self.base_dir / self.session_id
        self.created_at = datetime.now().isoformat(timespec="seconds")
        self.records: dict[str, BackupRecord] = {}
        self.failures: list[str] = []

    def _relative(self, file_path: Path | str) -> str:
        return normalize_relative_path(Path(file_path).resolve(), self.root)

    def create_backup(self, file_path: Path | str) -> Path:
        """Copy ``file_path`` into the session and record it.

        A file already backed up in this session keeps its first copy.

        Raises:
            BackupError: If the file is missing or the copy fails
        """
        source = Path(file_path)
        rel = self._relative(source)

        if rel in self.records:
            return self.session_dir / self.records[rel].backup

        if not source.is_file():
            self.failures.append(rel)
            raise BackupError(f"File does not exist: {source}")

        target = self.session_dir / rel
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            record = BackupRecord(
                path=rel,
                backup=rel,
                sha256=compute_file_hash(target),
                size=target.stat().st_size,
                created_at=datetime.now().isoformat(timespec="seconds"),
            )
        except OSError as e:
            self.failures.append(rel)
            raise BackupError(f"Failed to create backup for {source}: {e}") from e

        self.records[rel] = record
        self._write_manifest()
        logger.debug("Backed up {path} -> {target}", path=rel, target=target)
        return target

    def restore_from_backup(self, file_path: Path | str) -> Path:
        """Copy the session's backup of ``file_path`` back over the original.

        Raises:
            BackupError: If no backup exists or the copy fails
        """
        # Accept a manifest key as well as a real path
        record = self.records.get(str(file_path).replace("\\", "/")) or self.records.get(self._relative(file_path))
        if record is None:
            raise BackupError(f"No backup found for file: {file_path}")

        backup = self.session_dir / record.backup
        if not backup.is_file():
            raise BackupError(f"Backup file missing: {backup}")

        destination = self.root / record.path
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(backup, destination)
        except OSError as e:
            raise BackupError(f"Failed to restore {record.path}: {e}") from e

        logger.debug("Restored {path} from {backup}", path=record.path, backup=backup)
        return destination

    def rollback_session(self) -> RollbackResult:
        """Restore every file backed up in this session."""
        result = RollbackResult()
        for rel in sorted(self.records):
            try:
                self.restore_from_backup(rel)
                result.successful.append(rel)
            except BackupError as e:
                result.failed.append((rel, str(e)))
        logger.info(
            "Rollback of {session}: {ok} restored, {bad} failed",
            session=self.session_id,
            ok=len(result.successful),
            bad=len(result.failed),
        )
        return result

    def cleanup_backups(self, force: bool = False) -> CleanupResult:
        """Delete this session's backups.

        Raises:
            BackupError: If the session recorded failures and ``force`` is False
        """
        if self.failures and not force:
            raise BackupError(
                "Cannot cleanup backups: session has failures. Use force=True to override."
            )

        result = CleanupResult()
        for record in self.records.values():
            backup = self.session_dir / record.backup
            try:
                size = backup.stat().st_size
                backup.unlink()
                result.cleaned.append(record.path)
                result.bytes_freed += size
            except OSError as e:
                result.failed.append((record.path, str(e)))

        if not result.failed and self.session_dir.exists():
            shutil.rmtree(self.session_dir, ignore_errors=True)
            self.records.clear()
        self._remove_empty_base()
        return result

    def validate_backups(self) -> list[str]:
        """Problems found in this session's backups; empty means all intact."""
        problems = []
        for record in self.records.values():
            backup = self.session_dir / record.backup
            if not backup.is_file():
                problems.append(f"{record.path}: backup missing")
                continue
            try:
                digest = compute_file_hash(backup)
            except OSError as e:
                problems.append(f"{record.path}: unreadable ({e})")
                continue
            if digest != record.sha256:
                problems.append(f"{record.path}: checksum mismatch")
        return problems

    @property
    def total_size(self) -> int:
        return sum(record.size for record in self.records.values())

    def _write_manifest(self) -> None:
        self.session_dir.mkdir(parents=True, exist_ok=True)
        manifest = {
            "session_id": self.session_id,
            "created_at": self.created_at,
            "root": str(self.root),
            "files": [record.to_dict() for record in self.records.values()],
            "failures": list(self.failures),
        }
        save_json_file(manifest, self.session_dir / BACKUP_MANIFEST)

    def _remove_empty_base(self) -> None:
        try:
            if self.base_dir.exists() and not any(self.base_dir.iterdir()):
                self.base_dir.rmdir()
        except OSError as e:
            logger.debug("Could not remove {dir}: {err}", dir=self.base_dir, err=e)

    # ------------------------------------------------------------------
    # Sessions on disk
    # ------------------------------------------------------------------

    @classmethod
    def list_sessions(cls, root: Path | str, backup_dir: str = DEFAULT_BACKUP_DIR) -> list[SessionInfo]:
        """Sessions with a readable manifest, oldest first."""
        base = Path(root).resolve() / backup_dir
        if not base.is_dir():
            return []

        sessions = []
        for entry in sorted(base.iterdir()):
            manifest = entry / BACKUP_MANIFEST
            if not manifest.is_file():
                continue
            try:
                data = load_json_file(manifest)
            except (OSError, ValueError):
                logger.warning("Skipping unreadable backup manifest {path}", path=manifest)
                continue
            sessions.append(
                SessionInfo(
                    session_id=data.get("session_id", entry.name),
                    created_at=data.get("created_at", ""),
                    files=len(data.get("files", [])),
                    path=entry,
                )
            )
        return sessions

    @classmethod
    def load_session(
        cls, root: Path | str, backup_dir: str = DEFAULT_BACKUP_DIR, session_id: str | None = None
    ) -> "BackupManager":
        """Reopen a session from its manifest; the latest one when ``session_id`` is None.

        Raises:
            BackupError: If there is no such session
        """
        sessions = cls.list_sessions(root, backup_dir)
        if not sessions:
            raise BackupError(f"No backup sessions found in {Path(root) / backup_dir}")

        if session_id is None:
            info = sessions[-1]
        else:
            matches = [s for s in sessions if s.session_id == session_id]
            if not matches:
                raise BackupError(f"Backup session not found: {session_id}")
            info = matches[0]

        data = load_json_file(info.path / BACKUP_MANIFEST)
        manager = cls(root, backup_dir, session_id=info.session_id)
        manager.created_at = data.get("created_at", "")
        manager.failures = list(data.get("failures", []))
        for entry in data.get("files", []):
            record = BackupRecord(
                path=entry["path"],
                backup=entry.get("backup", entry["path"]),
                sha256=entry.get("sha256", ""),
                size=entry.get("size", 0),
                created_at=entry.get("created_at", ""),
            )
            manager.records[record.path] = record
        return manager

    @classmethod
    def purge_all(cls, root: Path | str, backup_dir: str = DEFAULT_BACKUP_DIR) -> int:
        """Delete every session; returns how many were removed."""
        sessions = cls.list_sessions(root, backup_dir)
        for info in sessions:
            shutil.rmtree(info.path)
        base = Path(root).resolve() / backup_dir
        if base.is_dir() and not any(base.iterdir()):
            base.rmdir()
        return len(sessions)
