"""erpdeploy - Preflight command"""

import os
import shutil
from pathlib import Path
from typing import Callable, Optional

import click
from rich.table import Table

from erpdeploy.base import BaseCommand
from erpdeploy.core.preflight import collect_preflight

INSTALLED_TOOLS = ["apt-get", "systemctl", "curl", "sudo", "mysql", "node", "pipx", "bench"]


class PreflightCommand(BaseCommand):
    """Read-only host checks: privilege, OS, and which tools are present."""

    def __init__(
        self,
        verbose: bool = False,
        config_file: Optional[Path] = None,
        env=None,
        console=None,
        geteuid: Callable[[], int] = os.geteuid,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        super().__init__(
            verbose=verbose, config_file=config_file, env=env, console=console
        )
        self.geteuid = geteuid
        self.which = which
        self.table = Table(
            title="Host Readiness Report", title_justify="left", padding=(0, 1)
        )
        self.table.add_column("Check", style="cyan", no_wrap=True)
        self.table.add_column("Status")
        self.table.add_column("Details", style="dim")

    def check_tools(self) -> None:
        for tool in INSTALLED_TOOLS:
            path = self.which(tool)
            if path:
                self.table.add_row(f"✅ {tool}", "[green]Installed[/green]", path)
            else:
                self.table.add_row(
                    f"⏳ {tool}", "[yellow]Not yet installed[/yellow]", ""
                )

    def execute(self) -> None:
        config = self.load_config()

        self.show_header(
            title="Preflight",
            subtitle="Checking privilege, operating system and installed tools",
        )

        results = collect_preflight(Path(config.os_release_path), self.geteuid)
        for result in results:
            if result.ok:
                self.table.add_row(f"✅ {result.name}", "[green]OK[/green]", result.detail)
            else:
                self.table.add_row(f"❌ {result.name}", "[red]Failed[/red]", result.detail)

        self.check_tools()
        self.console.print(self.table)

        failed = [r for r in results if not r.ok]
        if failed:
            self.exit_with_error(
                f"{len(failed)} blocking check(s) failed; install would abort"
            )
        self.print_success("Host is ready for install")


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def preflight(config_file, verbose):
    """
    Check whether this host can be provisioned

    Checks:
    - Running as root
    - Ubuntu 24.x
    - Which tools are already installed
    """
    cmd = PreflightCommand(verbose=verbose, config_file=config_file)
    cmd.run()
