"""Summary report for a cleanup run.

Rendering only reads SessionStatistics; nothing here changes counters.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from consolesweep.engine.models import Occurrence, SessionStatistics
from consolesweep.pipeline.ui import console as default_console
from consolesweep.pipeline.ui import SWEEP_THEME, print_header, print_status_panel, styled_risk
from consolesweep.utils.constants import DEFAULT_CALL_TOKEN

# Above this many files, slow runs suggest tighter exclusions
LARGE_RUN_FILES = 100
SLOW_FILE_MS = 50


def generate_recommendations(stats: SessionStatistics, mode: str, call: str = DEFAULT_CALL_TOKEN) -> list[str]:
    """Follow-up advice derived from the run's counters."""
    recommendations = []

    if stats.sensitive_kept > 0:
        if stats.sensitive_by_risk["high"] > 0:
            recommendations.append(
                f"URGENT: Review {stats.sensitive_by_risk['high']} high-risk {call} "
                "statements that may expose credentials"
            )
        if stats.sensitive_by_risk["medium"] > 0:
            recommendations.append(
                f"Review {stats.sensitive_by_risk['medium']} medium-risk {call} statements for privacy concerns"
            )
        recommendations.append("Consider implementing a logging framework with proper log levels")

    if stats.functional_preserved > 0:
        recommendations.append(
            f"Consider converting {stats.functional_preserved} functional {call} statements "
            "to appropriate log levels (info, warn, error)"
        )

    unconverted = stats.catch_block_found - stats.catch_block_converted
    if stats.catch_block_found > 0 and unconverted > 0:
        recommendations.append(
            f"Convert remaining {unconverted} {call} statements in catch blocks to error logging"
        )

    if mode == "auto" and stats.functional_preserved > 0:
        recommendations.append(
            f"Run in manual mode to review {stats.functional_preserved} preserved statements individually"
        )

    if stats.files_processed > LARGE_RUN_FILES:
        per_file_ms = stats.elapsed_seconds * 1000 / stats.files_processed
        if per_file_ms > SLOW_FILE_MS:
            recommendations.append(
                "Consider using exclusion patterns to skip non-essential directories for better performance"
            )

    if stats.deleted > 0 or stats.converted > 0:
        recommendations.append(f"Set up pre-commit hooks to prevent {call} statements from entering the codebase")
        recommendations.append(f"Consider using a linting rule to catch {call} statements during development")

    return recommendations


def _section(title: str, rows: list[tuple[str, object]], console: Console) -> None:
    table = Table(title=title, show_header=False, box=None, padding=(0, 2, 0, 2), title_justify="left")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    for label, value in rows:
        table.add_row(label, str(value))
    console.print(table)


def render_summary(
    stats: SessionStatistics,
    mode: str,
    dry_run: bool = False,
    call: str = DEFAULT_CALL_TOKEN,
    console: Console | None = None,
) -> None:
    """Print the end-of-run report."""
    console = console or default_console
    with console.use_theme(SWEEP_THEME):
        _render_summary(stats, mode, dry_run, call, console)


def _render_summary(stats: SessionStatistics, mode: str, dry_run: bool, call: str, console: Console) -> None:
    print_header("CLEANUP SUMMARY" + (" (DRY RUN)" if dry_run else ""))

    _section("Files", [
        ("Scanned", stats.files_scanned),
        (f"With {call}", stats.files_with_calls),
        ("Would be modified" if dry_run else "Modified", stats.files_modified),
        ("Failed", stats.files_failed),
    ], console)

    _section("Occurrences", [
        ("Found", stats.found),
        ("Reviewed", stats.reviewed),
        ("Removed", stats.deleted),
        ("Converted to info", stats.converted_to_info),
        ("Converted to error", stats.converted_to_error),
        ("Kept", stats.kept),
        ("Skipped (similar)", stats.skipped),
        ("Commented removed", f"{stats.commented_removed}/{stats.commented_found}"),
    ], console)

    if stats.potentially_sensitive:
        _section("Security", [
            ("Potentially sensitive", stats.potentially_sensitive),
            (styled_risk_label("high"), stats.sensitive_by_risk["high"]),
            (styled_risk_label("medium"), stats.sensitive_by_risk["medium"]),
            (styled_risk_label("low"), stats.sensitive_by_risk["low"]),
            ("Removed", stats.sensitive_removed),
            ("Kept for review", stats.sensitive_kept),
        ], console)

    _section("Context analysis", [
        ("Functional detected", stats.functional_detected),
        ("Functional preserved", stats.functional_preserved),
        ("In catch blocks", stats.catch_block_found),
        ("Catch blocks converted", stats.catch_block_converted),
    ], console)

    if stats.manual_decisions:
        _section("Manual decisions", sorted(stats.manual_decisions.items()), console)

    recommendations = generate_recommendations(stats, mode, call)
    if recommendations:
        console.print("\n[bold]Recommendations[/bold]")
        for index, text in enumerate(recommendations, start=1):
            style = "warning" if text.startswith("URGENT") else "info"
            console.print(f"  {index}. [{style}]{text}[/{style}]")

    console.print(f"\n[dim]Completed in {stats.elapsed_seconds:.2f}s[/dim]")

    if stats.files_failed:
        print_status_panel("ERRORS", f"{stats.files_failed} file(s) failed", "See warnings above", level="high")
    elif dry_run:
        print_status_panel("DRY RUN", f"{stats.files_modified} file(s) would change", "No files were written", level="info")
    elif stats.sensitive_kept:
        print_status_panel(
            "REVIEW",
            f"{stats.sensitive_kept} sensitive {call} statement(s) kept",
            "Review them before shipping",
            level="medium",
        )
    else:
        print_status_panel("CLEAN", f"{stats.files_modified} file(s) updated", f"{stats.deleted} removed, {stats.converted} converted", level="success")


def styled_risk_label(level: str) -> str:
    return f"[{level}]{level.capitalize()} risk[/{level}]"


def render_sensitive(occurrences: list[Occurrence], console: Console | None = None) -> None:
    """List sensitive occurrences left in place, worst first."""
    console = console or default_console
    if not occurrences:
        return
    with console.use_theme(SWEEP_THEME):
        _render_sensitive(occurrences, console)


def _render_sensitive(occurrences: list[Occurrence], console: Console) -> None:

    table = Table(title="Sensitive statements left in place", title_justify="left")
    table.add_column("Location", style="path")
    table.add_column("Risk")
    table.add_column("Patterns", style="dim")
    table.add_column("Code")
    ordered = sorted(occurrences, key=lambda o: o.sensitivity.risk_level.rank, reverse=True)
    for occurrence in ordered:
        table.add_row(
            f"{occurrence.file_path}:{occurrence.line_number}",
            styled_risk(occurrence.sensitivity.risk_level),
            ", ".join(occurrence.sensitivity.patterns),
            escape(occurrence.content),
        )
    console.print(table)
