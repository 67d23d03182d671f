"""Central UI handler for consolesweep.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from consolesweep.pipeline.ui import console, print_header, print_error

    console.print("[success]No console.log calls left[/success]")
    print_header("CLEANUP SUMMARY")
    print_error("Backup directory not writable")
"""

import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from consolesweep.engine.models import Action, RiskLevel

SWEEP_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "high": "bold red",
    "medium": "bold yellow",
    "low": "cyan",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
    "action.delete": "red",
    "action.convert": "blue",
    "action.keep": "green",
    "action.comment": "magenta",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=SWEEP_THEME,
    force_terminal=sys.stdout.isatty()
)

RISK_STYLES = {
    RiskLevel.HIGH: "high",
    RiskLevel.MEDIUM: "medium",
    RiskLevel.LOW: "low",
    RiskLevel.NONE: "dim",
}

ACTION_STYLES = {
    Action.DELETE: "action.delete",
    Action.CONVERT_ERROR: "action.convert",
    Action.CONVERT_INFO: "action.convert",
    Action.REMOVE_COMMENT: "action.comment",
    Action.KEEP: "action.keep",
    Action.SKIP: "dim",
}


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_error(msg: str) -> None:
    console.print(f"[error]ERROR:[/error] {msg}")


def print_warning(msg: str) -> None:
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    console.print(f"[success]OK:[/success] {msg}")


def styled_risk(level: RiskLevel) -> str:
    """Risk level as console markup, e.g. ``[high]HIGH[/high]``."""
    style = RISK_STYLES[level]
    return f"[{style}]{level.value.upper()}[/{style}]"


def styled_action(action: Action) -> str:
    style = ACTION_STYLES[action]
    return f"[{style}]{action.value}[/{style}]"


def print_status_panel(
    status: str,
    message: str,
    detail: str,
    level: str = "info"
) -> None:
    """Print a status panel with colored border.

    Args:
        status: Status label (e.g., "CLEAN", "DRY RUN")
        message: Main message line
        detail: Additional detail line
        level: One of "high", "medium", "low", "success", "info"
    """
    style_map = {
        "high": ("bold red", "red"),
        "medium": ("bold yellow", "yellow"),
        "low": ("cyan", "cyan"),
        "success": ("bold green", "green"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (f"{message}\n", border_style),
            (detail, border_style)
        ),
        border_style=border_style,
        expand=False
    )
    console.print(panel)
