"""consolesweep CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from consolesweep import __version__
from consolesweep.pipeline.ui import console


class VerboseGroup(click.Group):
    """Help system that groups registered commands by workflow stage."""

    def format_commands(self, ctx, formatter):
        """Suppress the default listing; format_help prints the categorized one."""
        pass

    COMMAND_CATEGORIES = {
        "INSPECT": {
            "title": "INSPECT",
            "description": "Read-only analysis of debug statements",
            "commands": ["scan"],
            "command_meta": {
                "scan": {
                    "use_when": "Preview what a cleanup would do",
                    "gives": "Occurrences with context flags and risk",
                },
            },
        },
        "CLEANUP": {
            "title": "CLEANUP",
            "description": "Remove, convert or keep console.log calls",
            "commands": ["clean"],
            "command_meta": {
                "clean": {
                    "run_when": "Before a release or when a branch is ready for review",
                },
            },
        },
        "RECOVERY": {
            "title": "RECOVERY",
            "description": "Backup sessions written by clean",
            "commands": ["rollback", "backups"],
            "command_meta": {
                "rollback": {
                    "use_when": "A cleanup removed something it should not have",
                    "gives": "Files restored from the chosen session",
                },
                "backups": {
                    "use_when": "Listing or purging old sessions",
                    "gives": "Session ids, dates and file counts",
                },
            },
        },
    }

    def format_help(self, ctx, formatter):
        """Generate Rich-styled categorized help."""
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for _category_id, category_data in self.COMMAND_CATEGORIES.items():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=12)
            table.add_column("Description", style="white")
            table.add_column("When", style="dim", width=40)

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                cmd = registered[cmd_name]

                first_line = (cmd.help or "").split("\n")[0].strip()
                period_idx = first_line.find(".")
                short_help = first_line[:period_idx] if period_idx > 0 else first_line
                if len(short_help) > 45:
                    short_help = short_help[:45].rsplit(" ", 1)[0] + "..."

                cmd_meta = category_data.get("command_meta", {}).get(cmd_name, {})
                hint = ""
                if "use_when" in cmd_meta:
                    hint = f"USE: {cmd_meta['use_when']}"
                elif "run_when" in cmd_meta:
                    hint = f"RUN: {cmd_meta['run_when']}"

                table.add_row(cmd_name, short_help, hint)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]sweep <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="sweep")
@click.help_option("-h", "--help")
def cli():
    """consolesweep - console.log cleanup for JavaScript and TypeScript

    \b
    QUICK START:
      sweep scan                # What would be removed, and why
      sweep clean --mode auto   # Apply the automatic rules
      sweep clean               # Review each statement
      sweep rollback            # Undo the last cleanup

    \b
    For detailed options: sweep <command> --help"""
    pass


from consolesweep.commands.backups import backups
from consolesweep.commands.clean import clean
from consolesweep.commands.rollback import rollback
from consolesweep.commands.scan import scan

cli.add_command(scan)
cli.add_command(clean)
cli.add_command(rollback)
cli.add_command(backups)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
