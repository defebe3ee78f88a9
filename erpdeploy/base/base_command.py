"""
Base Command Class

Abstract base for all erpdeploy commands.
Provides common functionality and structure.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console

from erpdeploy.core.config_loader import InstallConfig, load_config
from erpdeploy.exceptions import ErpDeployError
from erpdeploy.logger import InstallLogger, err_console, utc_timestamp
from erpdeploy.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Config loading (environment + optional YAML file)
    - Header display
    - Error handling with exit codes (1 fatal, 130 cancelled)
    """

    def __init__(
        self,
        verbose: bool = False,
        config_file: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        console: Optional[Console] = None,
    ):
        self.verbose = verbose
        self.config_file = config_file
        self.env = os.environ if env is None else env
        self.console = console or Console()
        self.err_console = err_console
        self.logger: Optional[InstallLogger] = None

    def load_config(self, **overrides: str) -> InstallConfig:
        """Assemble the run configuration once."""
        return load_config(self.env, self.config_file, **overrides)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(
                title=title, subtitle=subtitle, details=details, console=self.console
            )

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        self.err_console.print(
            f"[dim][{utc_timestamp()}][/dim] [red]✗ {message}[/red]", highlight=False
        )

    def print_dim(self, message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")

    def exit_with_error(self, message: str, code: int = 1) -> None:
        """
        Print error and exit.

        Args:
            message: Error message
            code: Exit code
        """
        self.print_error(message)
        raise SystemExit(code)

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def _show_log_path(self) -> None:
        if self.logger and self.logger.log_path:
            self.err_console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._show_log_path()
            raise SystemExit(130)
        except SystemExit:
            raise
        except ErpDeployError as e:
            # Step failures are already logged by the step runner
            if not (self.logger and self.logger.has_errors):
                if self.logger:
                    self.logger.log_error(e.message, context=e.context)
                else:
                    self.print_error(e.message)
                    if e.context:
                        self.print_dim(f"Context: {e.context}")
            self._show_log_path()
            raise SystemExit(1)
        except PermissionError as e:
            self.print_error(f"Permission denied: {e}")
            self.print_dim("Try running with appropriate permissions")
            self._show_log_path()
            raise SystemExit(1)
