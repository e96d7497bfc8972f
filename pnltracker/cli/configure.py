"""Setup command for PnL Tracker CLI."""

import click
from rich.panel import Panel

from pnltracker.cli.common import console


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      pnltracker init
      pnltracker init --force
    """
    from pnltracker.config import create_template_config, get_config_path

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists:[/yellow] {config_path}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold]Init[/bold]",
            border_style="yellow",
        ))
        return

    path = create_template_config(config_path)
    console.print(Panel(
        f"[green]Config written to[/green] {path}\n\n"
        "Edit [cyan]storage.db_path[/cyan] to move the trade journal.",
        title="[bold cyan]Init[/bold cyan]",
        border_style="cyan",
    ))
