"""Interactive review of occurrences in the terminal.

``ConsolePrompter`` is the manual-mode collaborator of InteractivePolicy: it
renders one occurrence with its surrounding lines and reads a single-key
answer. Input goes through click so tests can feed it with CliRunner.
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from consolesweep.engine.models import Occurrence, PromptChoice
from consolesweep.engine.policy import explain_automatic
from consolesweep.pipeline.ui import console as default_console
from consolesweep.pipeline.ui import styled_action, styled_risk

CHOICE_KEYS = {
    "d": PromptChoice.DELETE,
    "k": PromptChoice.KEEP,
    "i": PromptChoice.CONVERT_INFO,
    "e": PromptChoice.CONVERT_ERROR,
    "s": PromptChoice.SKIP,
    "q": PromptChoice.QUIT,
}

CHOICE_WORDS = {
    "delete": PromptChoice.DELETE,
    "keep": PromptChoice.KEEP,
    "info": PromptChoice.CONVERT_INFO,
    "error": PromptChoice.CONVERT_ERROR,
    "skip": PromptChoice.SKIP,
    "quit": PromptChoice.QUIT,
}

MENU = "[d]elete  [k]eep  [i]nfo  [e]rror  [s]kip similar  [q]uit"


def parse_choice(text: str | None) -> PromptChoice:
    """Map raw input to a choice; anything unrecognized is INVALID."""
    if not text:
        return PromptChoice.INVALID
    answer = text.strip().lower()
    if answer in CHOICE_KEYS:
        return CHOICE_KEYS[answer]
    return CHOICE_WORDS.get(answer, PromptChoice.INVALID)


def _lexer_for(path: str) -> str:
    return "typescript" if path.endswith((".ts", ".tsx")) else "javascript"


class ConsolePrompter:
    """Rich rendering plus click input."""

    def __init__(self, console: Console | None = None, show_suggestion: bool = True):
        self.console = console or default_console
        self.show_suggestion = show_suggestion

    def show_progress(self, current: int, total: int, file_path: str) -> None:
        self.console.print(f"[dim]({current}/{total})[/dim] [path]{file_path}[/path]")

    def render(self, occurrence: Occurrence, file_path: str) -> None:
        flags = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
        flags.add_column("Flag", style="dim")
        flags.add_column("Value")
        flags.add_row("Line", str(occurrence.line_number))
        flags.add_row("Commented", "yes" if occurrence.is_commented else "no")
        flags.add_row("Catch block", "yes" if occurrence.is_in_error_handler else "no")
        flags.add_row("Functional", "yes" if occurrence.is_functional else "no")

        risk = styled_risk(occurrence.sensitivity.risk_level)
        if occurrence.sensitivity.patterns:
            risk += f" ({', '.join(occurrence.sensitivity.patterns)})"
        flags.add_row("Sensitive", risk)

        if self.show_suggestion:
            action, rule = explain_automatic(occurrence)
            flags.add_row("Auto mode", f"{styled_action(action)} [dim]({rule})[/dim]")

        self.console.print(Panel(flags, title=f"[path]{file_path}[/path]", expand=False))

        if occurrence.surrounding_window:
            self.console.print(
                Syntax(
                    "\n".join(occurrence.surrounding_window),
                    _lexer_for(file_path),
                    line_numbers=True,
                    start_line=occurrence.window_start,
                    highlight_lines={occurrence.line_number},
                    word_wrap=True,
                )
            )

    def prompt(self, occurrence: Occurrence, file_path: str) -> PromptChoice:
        self.render(occurrence, file_path)
        answer = click.prompt(MENU, default="", show_default=False)
        choice = parse_choice(answer)
        if choice is PromptChoice.INVALID:
            self.console.print(f"[warning]Unrecognized choice:[/warning] {escape(repr(answer))}")
        return choice

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=True)
