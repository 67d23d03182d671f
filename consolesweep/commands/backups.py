"""List or purge backup sessions.

Usage: sweep backups [PATH] [--purge]
"""

import click
from rich.table import Table

from consolesweep.backup import BackupManager
from consolesweep.config_runtime import load_runtime_config
from consolesweep.pipeline.ui import console, print_success
from consolesweep.utils.error_handler import handle_exceptions

from .clean import project_root


@click.command("backups")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--backup-dir", default=None, help="Backup directory relative to the project root")
@click.option("--purge", is_flag=True, help="Delete every backup session")
@click.option("--yes", "-y", is_flag=True, help="Do not ask before purging")
@handle_exceptions
def backups(path, backup_dir, purge, yes):
    """List backup sessions written by 'sweep clean'.

    \b
    EXAMPLES:
      sweep backups
      sweep backups --purge -y
    """
    root = project_root(path)
    cfg = load_runtime_config(root)
    backup_dir = backup_dir or cfg["backup"]["dir"]

    sessions = BackupManager.list_sessions(root, backup_dir)
    if not sessions:
        console.print("[dim]No backup sessions[/dim]")
        return

    if purge:
        if not yes:
            click.confirm(f"Delete {len(sessions)} backup session(s)?", abort=True)
        removed = BackupManager.purge_all(root, backup_dir)
        print_success(f"Removed {removed} backup session(s)")
        return

    table = Table(title=f"Backup sessions in {backup_dir}", title_justify="left")
    table.add_column("Session", style="cmd")
    table.add_column("Created")
    table.add_column("Files", justify="right")
    for info in reversed(sessions):
        table.add_row(info.session_id, info.created_at, str(info.files))
    console.print(table)
