"""Main CLI entry point for PnL Tracker.

This module provides the main click group and lazy loading
for heavy imports to improve startup time.
"""

import logging

import click
from rich.console import Console

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their commands is
    actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        # Commands are usually module attributes of the same name; reserved
        # words such as 'import' are looked up by their click name instead.
        attr = getattr(module, cmd_name, None)
        if isinstance(attr, click.Command):
            cmd = attr
        else:
            cmd = None
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, click.Command) and attr.name == cmd_name:
                    cmd = attr
                    break

            if cmd is None:
                raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "init": "pnltracker.cli.configure",
    # Screenshot ingestion
    "parse": "pnltracker.cli.ingest",
    "add": "pnltracker.cli.ingest",
    "record": "pnltracker.cli.ingest",
    # Journal maintenance
    "trades": "pnltracker.cli.trades",
    "edit": "pnltracker.cli.trades",
    "delete": "pnltracker.cli.trades",
    # Reports
    "week": "pnltracker.cli.report",
    "weeks": "pnltracker.cli.report",
    "summary": "pnltracker.cli.report",
    "trend": "pnltracker.cli.report",
    # Data management
    "export": "pnltracker.cli.transfer",
    "import": "pnltracker.cli.transfer",
    "sample": "pnltracker.cli.transfer",
    "clear": "pnltracker.cli.transfer",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pnl-tracker")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """PnL Tracker - weekly performance from close-position screenshots.

    Feed it the recognized text of a trading platform's close-position
    summary; it extracts the trade, flags uncertain records for review,
    and reports weekly win rate, profit factor and drawdown.

    \b
    Quick Start:
      pnltracker init              # Create a config file
      pnltracker add summary.txt   # Record a trade from recognized text
      pnltracker week              # This week's metrics
    """
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
