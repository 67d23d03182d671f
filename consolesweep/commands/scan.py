"""Read-only analysis of console.log call sites.

Usage: sweep scan [PATH]
"""

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.markup import escape
from rich.table import Table

from consolesweep.config_runtime import load_runtime_config
from consolesweep.engine.classifier import ArrowBodyRule
from consolesweep.engine.models import Occurrence, RiskLevel
from consolesweep.engine.policy import explain_automatic
from consolesweep.pipeline.discovery import find_source_files
from consolesweep.pipeline.processor import FileProcessor, ProcessorConfig
from consolesweep.pipeline.ui import console, print_header, print_warning, styled_action, styled_risk
from consolesweep.utils.error_handler import handle_exceptions, set_error_log_enabled
from consolesweep.utils.exit_codes import ExitCodes
from consolesweep.utils.helpers import normalize_relative_path, read_source_text
from consolesweep.utils.logging import logger

from .clean import project_root


def scan_occurrences(
    path: str | Path,
    config: ProcessorConfig,
    cfg: dict[str, Any],
    exclude: tuple[str, ...] = (),
) -> tuple[list[Occurrence], list[tuple[str, str]], int]:
    """(occurrences, unreadable files, files scanned) for ``path``."""
    root = project_root(str(path))
    processor = FileProcessor(config)
    files = find_source_files(
        path,
        cfg["scan"]["extensions"],
        list(cfg["scan"]["exclude"]) + list(exclude),
        {Path(cfg["backup"]["dir"]).name},
    )

    occurrences: list[Occurrence] = []
    failed: list[tuple[str, str]] = []
    for file in files:
        try:
            content = read_source_text(file)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read {path}: {err}", path=file, err=e)
            failed.append((str(file), str(e)))
            continue
        if config.call_token not in content:
            continue
        occurrences.extend(processor.analyze(normalize_relative_path(file.resolve(), root), content))

    return occurrences, failed, len(files)


def _as_json(occurrences: list[Occurrence], files_scanned: int) -> str:
    entries = []
    by_action: dict[str, int] = {}
    for occurrence in occurrences:
        action, rule = explain_automatic(occurrence)
        entry = occurrence.to_dict()
        entry["auto_action"] = action.value
        entry["auto_rule"] = rule
        entries.append(entry)
        by_action[action.value] = by_action.get(action.value, 0) + 1

    summary = {
        "files_scanned": files_scanned,
        "files_with_calls": len({o.file_path for o in occurrences}),
        "occurrences": len(occurrences),
        "sensitive": sum(1 for o in occurrences if o.sensitivity.is_sensitive),
        "auto_actions": by_action,
    }
    return json.dumps({"occurrences": entries, "summary": summary}, indent=2)


def _flags(occurrence: Occurrence) -> str:
    marks = []
    if occurrence.is_commented:
        marks.append("commented")
    if occurrence.is_in_error_handler:
        marks.append("catch")
    if occurrence.is_functional:
        marks.append("functional")
    return ", ".join(marks)


def _print_text(occurrences: list[Occurrence], files_scanned: int) -> None:
    print_header("CONSOLE.LOG SCAN")
    if not occurrences:
        console.print(f"[success]No statements found[/success] [dim]({files_scanned} file(s) scanned)[/dim]")
        return

    table = Table(show_lines=False)
    table.add_column("Location", style="path")
    table.add_column("Flags", style="dim")
    table.add_column("Risk")
    table.add_column("Auto action")
    table.add_column("Code", overflow="fold")
    for occurrence in occurrences:
        action, rule = explain_automatic(occurrence)
        table.add_row(
            f"{occurrence.file_path}:{occurrence.line_number}",
            _flags(occurrence),
            styled_risk(occurrence.sensitivity.risk_level),
            f"{styled_action(action)} [dim]({rule})[/dim]",
            escape(occurrence.content),
        )
    console.print(table)

    files = len({o.file_path for o in occurrences})
    high = sum(1 for o in occurrences if o.sensitivity.risk_level is RiskLevel.HIGH)
    console.print(
        f"\n{len(occurrences)} statement(s) in {files} of {files_scanned} file(s)"
        + (f", [high]{high} high-risk[/high]" if high else "")
    )


@click.command("scan")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--save", type=click.Path(), help="Also write the JSON report to this file")
@click.option("--exclude", multiple=True, help="Glob of paths to skip (repeatable)")
@click.option(
    "--arrow-rule",
    type=click.Choice([rule.value for rule in ArrowBodyRule]),
    default=None,
    help="Whether a bare arrow-function body is functional on its own",
)
@handle_exceptions
def scan(path, output_format, save, exclude, arrow_rule):
    """List console.log statements with their context and the auto-mode action.

    Nothing is written to source files. Use this to preview 'sweep clean
    --mode auto' or to feed the findings to other tools as JSON.

    \b
    EXAMPLES:
      sweep scan
      sweep scan src --format json
      sweep scan --save .consolesweep/scan.json

    \b
    EXIT CODES:
      0 = Success
      2 = One or more files could not be read
    """
    root = project_root(path)
    cfg = load_runtime_config(root)
    set_error_log_enabled(cfg["logging"]["error_log"])

    config = ProcessorConfig.from_runtime(
        cfg,
        arrow_rule=ArrowBodyRule(arrow_rule) if arrow_rule else None,
    )
    occurrences, failed, files_scanned = scan_occurrences(path, config, cfg, exclude)

    if output_format == "json":
        click.echo(_as_json(occurrences, files_scanned))
    else:
        _print_text(occurrences, files_scanned)

    if save:
        save_path = Path(save)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        save_path.write_text(_as_json(occurrences, files_scanned), encoding="utf-8")
        click.echo(f"Saved to: {save_path}", err=True)

    for file_path, error in failed:
        print_warning(f"{file_path}: {error}")
    if failed:
        sys.exit(ExitCodes.FILE_ERRORS)
