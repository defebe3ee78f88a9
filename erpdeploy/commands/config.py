"""erpdeploy - Config commands"""

from pathlib import Path

import click
from rich.table import Table

from erpdeploy.base import BaseCommand
from erpdeploy.core.config_loader import ENV_VARS


class ConfigShowCommand(BaseCommand):
    """Print the resolved configuration with secrets masked."""

    def execute(self) -> None:
        config = self.load_config()

        self.show_header(title="Configuration", subtitle="Resolved settings")

        table = Table(padding=(0, 1))
        table.add_column("Setting", style="cyan", no_wrap=True)
        table.add_column("Environment", style="dim")
        table.add_column("Value")

        for name, value in config.masked().items():
            table.add_row(name, ENV_VARS.get(name, ""), value)

        self.console.print(table)


@click.command(name="config:show")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Skip the header")
def config_show(config_file, verbose):
    """Show resolved settings (secrets masked)"""
    cmd = ConfigShowCommand(verbose=verbose, config_file=config_file)
    cmd.run()
