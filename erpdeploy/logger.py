"""
Logging system for erpdeploy
Provides real-time logging to files with clean console output
"""

import re
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, TextIO
from rich.console import Console

from erpdeploy.constants import LOG_DATE_FORMAT, LOG_DATETIME_FORMAT

console = Console()
err_console = Console(stderr=True)

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Timestamp used on every console and log line (UTC)."""
    return utc_now().strftime(LOG_DATETIME_FORMAT)


class InstallLogger:
    """
    Manages logging for provisioning runs
    - Writes all output to a log file in real-time
    - Shows clean, timestamped progress in console (unless verbose)
    - Sends errors to the error stream
    """

    def __init__(
        self,
        operation: str,
        log_dir: Optional[Path] = None,
        verbose: bool = False,
        stdout_console: Optional[Console] = None,
        stderr_console: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            operation: Operation name (e.g., 'install')
            log_dir: Root directory for log files (None disables the file)
            verbose: If True, show all output in console
            stdout_console: Rich console for progress output
            stderr_console: Rich console for errors (stderr)
        """
        self.operation = operation
        self.verbose = verbose
        self.console = stdout_console or console
        self.err_console = stderr_console or err_console
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        if log_dir is not None:
            # Structure: {log_dir}/{date}/{time}_{operation}.log
            now = utc_now()
            day_dir = Path(log_dir) / now.strftime(LOG_DATE_FORMAT)
            day_dir.mkdir(parents=True, exist_ok=True)
            self.log_path = day_dir / f"{now.strftime('%H-%M-%S')}_{operation}.log"
            self.log_file = open(self.log_path, "w", buffering=1)
            self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
erpdeploy Provisioning Log
{"=" * 80}
Operation: {self.operation}
Started: {utc_now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        log_line = f"[{utc_timestamp()}] [{level}] {message}\n"

        if self.log_file:
            self.log_file.write(log_line)
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                self.err_console.print(f"[red]{message}[/red]")
            elif level == "WARNING":
                self.console.print(f"[yellow]{message}[/yellow]")
            elif level == "DEBUG":
                self.console.print(f"[dim]{message}[/dim]", highlight=False)
            else:
                self.console.print(message)

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always written to the log file; echoed to console only when verbose
        and the caller is not already streaming it.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output or not self.log_file:
            return

        clean_output = ANSI_ESCAPE.sub("", output)
        for line in clean_output.splitlines():
            self.log_file.write(f"  [{stream}] {line}\n")
        self.log_file.flush()

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True

        if self.log_file:
            error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
            if context:
                error_block += f"\nContext: {context}\n"
            error_block += f"{'!' * 80}\n\n"
            self.log_file.write(error_block)
            self.log_file.flush()

        self.err_console.print(
            f"\n[dim][{utc_timestamp()}][/dim] [bold red]✗ ERROR: {error}[/bold red]",
            highlight=False,
        )
        if context:
            self.err_console.print(f"  [color(208)]{context}[/color(208)]", highlight=False)

    def step(self, description: str):
        """
        Start a new step

        Args:
            description: Human-readable step description
        """
        self.current_step = description
        self.log(f"Step: {description}", "INFO")

        if not self.verbose:
            self.console.print(
                f"\n[dim][{utc_timestamp()}][/dim] [color(214)]▶[/color(214)] [white]{description}[/white]",
                highlight=False,
            )

    def skip(self, message: str):
        """Log a step whose guard already holds"""
        self.log(f"Skipped: {message}", "INFO")

        if not self.verbose:
            self.console.print(
                f"[dim][{utc_timestamp()}] ↷ {message}[/dim]", highlight=False
            )

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            self.console.print(f"  [dim]✓ {message}[/dim]", highlight=False)

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            self.console.print(f"  [yellow]⚠[/yellow] [dim]{message}[/dim]")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {utc_now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        if exc_type is not None and exc_type not in (SystemExit, KeyboardInterrupt):
            if not self.has_errors:
                self.log_error(
                    str(exc_val) if exc_val else "Operation failed",
                    context=f"{exc_type.__name__}",
                )
        self.close()
        return False
