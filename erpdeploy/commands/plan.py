"""erpdeploy - Plan command"""

from pathlib import Path
from typing import Callable, Optional

import click
from rich.table import Table

from erpdeploy.base import BaseCommand
from erpdeploy.core.pipeline import Services, build_steps
from erpdeploy.core.steps import StepRunner
from erpdeploy.models.results import StepStatus
from erpdeploy.services.shell import CommandRunner, ShellRunner


class PlanCommand(BaseCommand):
    """
    Show what an install would do.

    Only guards run (read-only probes such as ``id -u`` and ``node -v``);
    no step action is executed and no secrets are prompted for.
    """

    def __init__(
        self,
        verbose: bool = False,
        config_file: Optional[Path] = None,
        env=None,
        console=None,
        runner_factory: Optional[Callable[[], CommandRunner]] = None,
    ):
        super().__init__(
            verbose=verbose, config_file=config_file, env=env, console=console
        )
        self.runner_factory = runner_factory or (lambda: ShellRunner(verbose=False))
        self.results = []

    def execute(self) -> None:
        config = self.load_config()

        self.show_header(
            title="Plan",
            subtitle="Steps an install run would execute",
            details={"Site": config.site_name, "Bench": str(config.bench_path)},
        )

        services = Services.from_config(config, self.runner_factory())
        self.results = StepRunner.describe(build_steps(config, services))

        table = Table(title_justify="left", padding=(0, 1))
        table.add_column("#", style="dim", justify="right")
        table.add_column("Step", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Description", style="dim")

        for index, result in enumerate(self.results, start=1):
            if result.status == StepStatus.DONE:
                status = "[green]done[/green]"
            else:
                status = "[yellow]pending[/yellow]"
            table.add_row(str(index), result.name, status, result.description)

        self.console.print(table)

        pending = sum(1 for r in self.results if r.status == StepStatus.PENDING)
        self.print_dim(
            f"\n{pending} of {len(self.results)} step(s) would run "
            "(steps without a guard always run)"
        )


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def plan(config_file, verbose):
    """Show install steps and which are already done"""
    cmd = PlanCommand(verbose=verbose, config_file=config_file)
    cmd.run()
