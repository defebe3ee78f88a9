"""erpdeploy - Install command"""

import os
from pathlib import Path
from typing import Callable, List, Optional

import click

from erpdeploy.base import BaseCommand
from erpdeploy.core.config_loader import resolve_secrets
from erpdeploy.core.pipeline import Services, build_steps
from erpdeploy.core.preflight import check_os, require_root
from erpdeploy.core.steps import StepRunner
from erpdeploy.logger import InstallLogger
from erpdeploy.models.results import StepResult
from erpdeploy.services.shell import CommandRunner, ShellRunner


class InstallCommand(BaseCommand):
    """
    Provision this host end to end.

    Order: preflight (no mutation), secrets, then every pipeline step.
    """

    def __init__(
        self,
        verbose: bool = False,
        config_file: Optional[Path] = None,
        env=None,
        console=None,
        geteuid: Callable[[], int] = os.geteuid,
        ask: Optional[Callable[[str], str]] = None,
        runner_factory: Optional[Callable[[InstallLogger], CommandRunner]] = None,
    ):
        super().__init__(
            verbose=verbose, config_file=config_file, env=env, console=console
        )
        self.geteuid = geteuid
        self.ask = ask
        self.runner_factory = runner_factory or (
            lambda logger: ShellRunner(logger, verbose=self.verbose)
        )
        self.results: List[StepResult] = []

    def execute(self) -> None:
        config = self.load_config()

        require_root(self.geteuid)
        check_os(Path(config.os_release_path))

        if self.ask is None:
            config = resolve_secrets(config, console=self.console)
        else:
            config = resolve_secrets(config, self.ask, console=self.console)

        self.show_header(
            title="Install ERPNext",
            subtitle="Provisioning packages, MariaDB, Redis, bench and production services",
            details={
                "User": config.erp_user,
                "Bench": str(config.bench_path),
                "Site": config.site_name,
                "Branch": config.frappe_branch,
            },
        )

        with InstallLogger(
            "install",
            log_dir=Path(config.log_dir),
            verbose=self.verbose,
            stdout_console=self.console,
        ) as logger:
            self.logger = logger
            runner = self.runner_factory(logger)
            services = Services.from_config(config, runner)

            self.results = StepRunner(logger).run(build_steps(config, services))

            ran = sum(1 for r in self.results if not r.skipped)
            logger.success(
                f"{ran} step(s) ran, {len(self.results) - ran} already done"
            )

        self._print_summary(config)

    def _print_summary(self, config) -> None:
        if self.verbose:
            return
        self.console.print(
            "\n[color(248)]All done. ERPNext services run via supervisor/nginx.[/color(248)]"
        )
        self.console.print("\n[dim]Restart later with:[/dim]")
        self.console.print(
            f"  [cyan]cd {config.bench_path} && bench restart[/cyan]"
            "  [dim]or[/dim]  [cyan]sudo systemctl restart supervisor[/cyan]"
        )
        if self.logger and self.logger.log_path:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML settings file (environment variables still win)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def install(config_file, verbose):
    """
    Provision this Ubuntu 24.x host with ERPNext

    Installs system packages, Node.js, wkhtmltopdf, MariaDB and Redis,
    creates the service user, installs bench, creates the site and
    configures supervisor/nginx. Safe to re-run: finished steps are skipped.

    \b
    Secrets (prompted when unset):
      ERP_USER_PASSWORD, DB_ROOT_PASSWORD, ADMIN_PASSWORD

    \b
    Examples:
      sudo erpdeploy install
      sudo SITE_NAME=erp.example.com erpdeploy install -v
      sudo erpdeploy install --config deploy.yml
    """
    cmd = InstallCommand(verbose=verbose, config_file=config_file)
    cmd.run()
