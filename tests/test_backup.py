"""Tests for per-run backups, rollback and cleanup."""

import json

import pytest

from consolesweep.backup import BackupError, BackupManager
from consolesweep.utils.constants import BACKUP_MANIFEST, DEFAULT_BACKUP_DIR


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "src" / "a.js").write_text("console.log(1);\r\n", encoding="utf-8", newline="")
    (root / "b.js").write_text("console.log(2);\n", encoding="utf-8")
    return root


class TestCreateAndRestore:
    def test_backup_and_restore(self, project):
        manager = BackupManager(project, session_id="s1")
        target = manager.create_backup(project / "src" / "a.js")
        assert target == project / DEFAULT_BACKUP_DIR / "s1" / "src" / "a.js"

        (project / "src" / "a.js").write_text("changed\n", encoding="utf-8")
        manager.restore_from_backup(project / "src" / "a.js")
        assert (project / "src" / "a.js").read_bytes() == b"console.log(1);\r\n"

    def test_restore_by_manifest_key(self, project):
        manager = BackupManager(project)
        manager.create_backup(project / "b.js")
        (project / "b.js").unlink()
        manager.restore_from_backup("b.js")
        assert (project / "b.js").exists()

    def test_first_copy_wins(self, project):
        manager = BackupManager(project)
        manager.create_backup(project / "b.js")
        (project / "b.js").write_text("second\n", encoding="utf-8")
        manager.create_backup(project / "b.js")
        manager.restore_from_backup(project / "b.js")
        assert (project / "b.js").read_text(encoding="utf-8") == "console.log(2);\n"

    def test_manifest(self, project):
        manager = BackupManager(project, session_id="s1")
        manager.create_backup(project / "b.js")
        manifest = json.loads((project / DEFAULT_BACKUP_DIR / "s1" / BACKUP_MANIFEST).read_text(encoding="utf-8"))
        assert manifest["session_id"] == "s1"
        [entry] = manifest["files"]
        assert entry["path"] == "b.js"
        assert len(entry["sha256"]) == 64

    def test_missing_file(self, project):
        manager = BackupManager(project)
        with pytest.raises(BackupError, match="does not exist"):
            manager.create_backup(project / "nope.js")
        assert manager.failures == ["nope.js"]

    def test_restore_without_backup(self, project):
        with pytest.raises(BackupError, match="No backup found"):
            BackupManager(project).restore_from_backup(project / "b.js")


class TestSession:
    def test_rollback(self, project):
        manager = BackupManager(project)
        manager.create_backup(project / "src" / "a.js")
        manager.create_backup(project / "b.js")
        (project / "src" / "a.js").write_text("", encoding="utf-8")
        (project / "b.js").write_text("", encoding="utf-8")

        result = manager.rollback_session()
        assert sorted(result.successful) == ["b.js", "src/a.js"]
        assert result.failed == []
        assert result.total == 2
        assert (project / "b.js").read_text(encoding="utf-8") == "console.log(2);\n"

    def test_cleanup(self, project):
        manager = BackupManager(project, session_id="s1")
        manager.create_backup(project / "b.js")
        result = manager.cleanup_backups()
        assert result.cleaned == ["b.js"]
        assert result.bytes_freed == len("console.log(2);\n")
        assert not (project / DEFAULT_BACKUP_DIR).exists()

    def test_cleanup_refused_after_failure(self, project):
        manager = BackupManager(project)
        manager.create_backup(project / "b.js")
        with pytest.raises(BackupError):
            manager.create_backup(project / "nope.js")
        with pytest.raises(BackupError, match="session has failures"):
            manager.cleanup_backups()
        assert manager.cleanup_backups(force=True).cleaned == ["b.js"]

    def test_validate_detects_tampering(self, project):
        manager = BackupManager(project, session_id="s1")
        manager.create_backup(project / "b.js")
        assert manager.validate_backups() == []

        (project / DEFAULT_BACKUP_DIR / "s1" / "b.js").write_text("tampered", encoding="utf-8")
        assert manager.validate_backups() == ["b.js: checksum mismatch"]

        (project / DEFAULT_BACKUP_DIR / "s1" / "b.js").unlink()
        assert manager.validate_backups() == ["b.js: backup missing"]


class TestStoredSessions:
    def test_list_and_load(self, project):
        for session_id in ("20260101-000000-aaaaaa", "20260102-000000-bbbbbb"):
            BackupManager(project, session_id=session_id).create_backup(project / "b.js")

        sessions = BackupManager.list_sessions(project)
        assert [s.session_id for s in sessions] == ["20260101-000000-aaaaaa", "20260102-000000-bbbbbb"]
        assert all(s.files == 1 for s in sessions)

        latest = BackupManager.load_session(project)
        assert latest.session_id == "20260102-000000-bbbbbb"
        assert "b.js" in latest.records

        older = BackupManager.load_session(project, session_id="20260101-000000-aaaaaa")
        (project / "b.js").write_text("", encoding="utf-8")
        assert older.rollback_session().successful == ["b.js"]
        assert (project / "b.js").read_text(encoding="utf-8") == "console.log(2);\n"

    def test_unknown_session(self, project):
        BackupManager(project, session_id="s1").create_backup(project / "b.js")
        with pytest.raises(BackupError, match="not found"):
            BackupManager.load_session(project, session_id="s2")

    def test_no_sessions(self, project):
        assert BackupManager.list_sessions(project) == []
        with pytest.raises(BackupError, match="No backup sessions"):
            BackupManager.load_session(project)

    def test_purge(self, project):
        BackupManager(project, session_id="s1").create_backup(project / "b.js")
        BackupManager(project, session_id="s2").create_backup(project / "b.js")
        assert BackupManager.purge_all(project) == 2
        assert not (project / DEFAULT_BACKUP_DIR).exists()
