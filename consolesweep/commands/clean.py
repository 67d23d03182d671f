"""Remove, convert or keep console.log calls across a project.

Usage: sweep clean [PATH]
"""

import sys
from pathlib import Path

import click

from consolesweep.backup import BackupError, BackupManager
from consolesweep.config_runtime import load_runtime_config
from consolesweep.engine.classifier import ArrowBodyRule
from consolesweep.pipeline.processor import Mode, ProcessorConfig
from consolesweep.pipeline.runner import RunResult, run_cleanup
from consolesweep.pipeline.ui import console, print_error, print_success, print_warning
from consolesweep.prompts import ConsolePrompter
from consolesweep.report import render_sensitive, render_summary
from consolesweep.utils.error_handler import handle_exceptions, set_error_log_enabled
from consolesweep.utils.exit_codes import ExitCodes
from consolesweep.utils.logging import logger, set_verbose


def project_root(path: str) -> Path:
    """Directory that holds config and backups for ``path``."""
    target = Path(path).resolve()
    return target if target.is_dir() else target.parent


@click.command("clean")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option(
    "--mode",
    type=click.Choice(["manual", "auto"]),
    default="manual",
    help="manual asks per statement, auto applies the fixed rule table",
)
@click.option("--dry-run", is_flag=True, help="Decide and report without writing files")
@click.option("--verbose", "-v", is_flag=True, help="Show per-statement decisions and engine warnings")
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Prompt in manual mode (default: only when stdin is a terminal)",
)
@click.option("--exclude", multiple=True, help="Glob of paths to skip (repeatable)")
@click.option("--backup-dir", default=None, help="Backup directory relative to the project root")
@click.option(
    "--backup-cleanup/--no-backup-cleanup",
    default=None,
    help="Delete this run's backups after a clean run (default: backup.auto_cleanup)",
)
@click.option(
    "--arrow-rule",
    type=click.Choice([rule.value for rule in ArrowBodyRule]),
    default=None,
    help="Whether a bare arrow-function body is functional on its own",
)
@click.option("--report/--no-report", default=True, help="Print the summary report")
@click.option("--fail-on-sensitive", is_flag=True, help="Exit 1 if sensitive statements remain")
@click.option("--no-error-log", is_flag=True, help="Do not append tracebacks to .consolesweep/error.log")
@handle_exceptions
def clean(
    path,
    mode,
    dry_run,
    verbose,
    interactive,
    exclude,
    backup_dir,
    backup_cleanup,
    arrow_rule,
    report,
    fail_on_sensitive,
    no_error_log,
):
    """Remove, convert or keep console.log calls in JavaScript and TypeScript files.

    Every call site is classified before anything is edited: commented out,
    inside a catch block, used as a value (ternary branch, method chain,
    arrow body, expression operand, return value) and whether its arguments
    look like credentials or personal data. Each edit is checked for
    delimiter balance and a file whose structure would change is left
    untouched.

    \b
    AUTO MODE RULES (first match wins):
      commented out            -> remove the comment
      used as a value          -> keep
      inside a catch block     -> convert to console.error
      high-risk arguments      -> keep for review
      anything else            -> delete

    \b
    MANUAL MODE KEYS:
      d delete   k keep   i console.info   e console.error
      s skip similar statements in this file   q stop with this file

    \b
    EXAMPLES:
      # Preview the automatic rules without touching files
      sweep clean --mode auto --dry-run

      # Review one directory interactively
      sweep clean src/components

      # CI gate: clean up, fail if secrets are still being logged
      sweep clean --mode auto --fail-on-sensitive

      # Skip generated code
      sweep clean --exclude 'generated/**' --exclude '*.min.js'

    \b
    BACKUPS:
      Every modified file is copied to .consolesweep-backups/<session>/
      before it is written. Undo a run with 'sweep rollback'.

    \b
    EXIT CODES:
      0 = Success
      1 = Sensitive statements remain and --fail-on-sensitive is set
      2 = One or more files could not be read, backed up or written
    """
    root = project_root(path)
    cfg = load_runtime_config(root)

    set_error_log_enabled(cfg["logging"]["error_log"] and not no_error_log)
    if verbose:
        set_verbose(True)

    if interactive is None:
        interactive = sys.stdin.isatty()

    config = ProcessorConfig.from_runtime(
        cfg,
        mode=Mode(mode),
        interactive=interactive,
        dry_run=dry_run,
        verbose=verbose,
        arrow_rule=ArrowBodyRule(arrow_rule) if arrow_rule else None,
    )

    if config.mode is Mode.MANUAL and not config.interactive:
        print_warning("No terminal for manual review; applying the automatic rules instead")

    backup_dir = backup_dir or cfg["backup"]["dir"]
    backup_manager = None if dry_run else BackupManager(root, backup_dir)
    prompter = ConsolePrompter() if config.uses_prompter else None

    console.print(
        f"[info]Sweeping[/info] [path]{path}[/path] "
        f"[dim](mode: {config.mode.value}{', dry run' if dry_run else ''})[/dim]"
    )

    run = run_cleanup(
        path,
        config,
        prompter=prompter,
        backup_manager=backup_manager,
        extensions=cfg["scan"]["extensions"],
        exclude_patterns=list(cfg["scan"]["exclude"]) + list(exclude),
        extra_skip_dirs={Path(backup_dir).name},
    )

    if verbose:
        _print_warnings(run)

    for file_path, error in run.failed_files:
        print_error(f"{file_path}: {error}")

    if report:
        render_summary(run.stats, config.mode.value, dry_run=dry_run, call=config.call_token)

    remaining = run.remaining_sensitive()
    if remaining:
        render_sensitive(remaining)

    if backup_cleanup is None:
        backup_cleanup = cfg["backup"]["auto_cleanup"]
    _finish_backups(backup_manager, backup_cleanup, failed=bool(run.failed_files))

    if run.failed_files:
        sys.exit(ExitCodes.FILE_ERRORS)
    if fail_on_sensitive and remaining:
        sys.exit(ExitCodes.SENSITIVE_REMAINING)


def _print_warnings(run: RunResult) -> None:
    for result in run.results:
        for warning in result.warnings:
            print_warning(f"{result.path}: {warning}")


def _finish_backups(backup_manager: BackupManager | None, cleanup: bool, failed: bool) -> None:
    if backup_manager is None or not backup_manager.records:
        return

    if cleanup and not failed:
        try:
            result = backup_manager.cleanup_backups()
        except BackupError as e:
            print_warning(str(e))
            return
        print_success(f"Removed {len(result.cleaned)} backup file(s), {result.bytes_freed} bytes freed")
        return

    problems = backup_manager.validate_backups()
    for problem in problems:
        logger.warning("Backup problem: {problem}", problem=problem)
    console.print(
        f"[dim]Backups saved in session[/dim] [cmd]{backup_manager.session_id}[/cmd] "
        f"[dim]({len(backup_manager.records)} file(s)); undo with 'sweep rollback'[/dim]"
    )
