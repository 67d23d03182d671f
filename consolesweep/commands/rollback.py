"""Restore files from a backup session.

Usage: sweep rollback [PATH] [--session ID]
"""

import sys

import click

from consolesweep.backup import BackupError, BackupManager
from consolesweep.config_runtime import load_runtime_config
from consolesweep.pipeline.ui import console, print_error, print_success, print_warning
from consolesweep.utils.error_handler import handle_exceptions
from consolesweep.utils.exit_codes import ExitCodes

from .clean import project_root


@click.command("rollback")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--session", "session_id", default=None, help="Session to restore (default: latest)")
@click.option("--backup-dir", default=None, help="Backup directory relative to the project root")
@click.option("--keep-backups", is_flag=True, help="Leave the session in place after restoring")
@handle_exceptions
def rollback(path, session_id, backup_dir, keep_backups):
    """Restore every file a cleanup session modified.

    Files are copied back byte for byte from .consolesweep-backups/<session>/.
    The session is deleted afterwards unless --keep-backups is given or some
    files failed to restore.

    \b
    EXAMPLES:
      sweep rollback
      sweep rollback --session 20261016-142501-a1b2c3

    \b
    EXIT CODES:
      0 = All files restored
      2 = Some files could not be restored
      3 = No backup session to restore
    """
    root = project_root(path)
    cfg = load_runtime_config(root)
    backup_dir = backup_dir or cfg["backup"]["dir"]

    try:
        manager = BackupManager.load_session(root, backup_dir, session_id)
    except BackupError as e:
        print_error(str(e))
        sys.exit(ExitCodes.TASK_INCOMPLETE)

    for problem in manager.validate_backups():
        print_warning(f"Backup problem: {problem}")

    console.print(f"[info]Rolling back session[/info] [cmd]{manager.session_id}[/cmd]")
    result = manager.rollback_session()

    for rel in result.successful:
        console.print(f"  [success]restored[/success] [path]{rel}[/path]")
    for rel, error in result.failed:
        print_error(f"{rel}: {error}")

    if result.failed:
        sys.exit(ExitCodes.FILE_ERRORS)

    print_success(f"Restored {len(result.successful)} file(s)")
    if not keep_backups:
        manager.cleanup_backups(force=True)
