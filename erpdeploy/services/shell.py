"""Command execution service: the one seam between the installer and the host."""

import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from rich.live import Live
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from erpdeploy.constants import MASK
from erpdeploy.exceptions import CommandFailedError
from erpdeploy.logger import InstallLogger
from erpdeploy.models.results import ExecutionResult

PathLike = Union[str, Path]


def redact(text: str, secrets: Iterable[str]) -> str:
    """
    Replace every non-empty secret in text with the mask.

    Longer secrets go first so one that contains another is fully masked.
    """
    for secret in sorted(filter(None, secrets), key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


def build_argv(
    args: Sequence[str],
    user: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> List[str]:
    """
    Build the final argv for a command.

    Commands for another account go through ``sudo -u <user> -H``; since sudo
    resets the environment, extra variables are passed with ``env K=V``.
    """
    argv = list(args)
    if user:
        if env:
            argv = ["env"] + [f"{key}={value}" for key, value in env.items()] + argv
        argv = ["sudo", "-u", user, "-H"] + argv
    return argv


class CommandRunner:
    """
    Narrow interface for running external commands.

    Subclasses implement ``_execute``; ``run`` handles argv building,
    redaction, logging and the check contract.
    """

    def __init__(self, logger: Optional[InstallLogger] = None):
        self.logger = logger

    def run(
        self,
        args: Sequence[str],
        *,
        user: Optional[str] = None,
        cwd: Optional[PathLike] = None,
        env: Optional[Dict[str, str]] = None,
        input: Optional[str] = None,
        check: bool = True,
        secrets: Sequence[str] = (),
    ) -> ExecutionResult:
        """
        Run a command and return its result.

        Args:
            args: Command and arguments
            user: Run as this account (via sudo)
            cwd: Working directory
            env: Extra environment variables
            input: Text fed to stdin
            check: Raise CommandFailedError on non-zero exit
            secrets: Values to redact from logs and errors

        Returns:
            ExecutionResult with redacted command string
        """
        argv = build_argv(args, user=user, env=env)
        # Redact before quoting; shlex rewrites quotes inside secrets
        display = shlex.join(redact(arg, secrets) for arg in argv)

        if self.logger:
            self.logger.log_command(display if cwd is None else f"{display}  (cwd={cwd})")

        result = self._execute(
            argv,
            cwd=cwd,
            env=None if user else env,
            input=input,
            label=display,
            secrets=secrets,
        )
        result.command = display

        if self.logger:
            self.logger.log_output(redact(result.stdout, secrets), "stdout")
            if result.stderr != result.stdout:
                self.logger.log_output(redact(result.stderr, secrets), "stderr")
            if result.is_failure:
                self.logger.log(f"Exit code {result.returncode}: {display}", "DEBUG")

        if check and result.is_failure:
            raise CommandFailedError(
                display, result.returncode, redact(result.stderr, secrets)
            )
        return result

    def warn(self, message: str) -> None:
        """Report a tolerated failure without stopping the run."""
        if self.logger:
            self.logger.warning(message)

    def _execute(
        self,
        argv: List[str],
        cwd: Optional[PathLike],
        env: Optional[Dict[str, str]],
        input: Optional[str],
        label: str,
        secrets: Sequence[str] = (),
    ) -> ExecutionResult:
        raise NotImplementedError


class ShellRunner(CommandRunner):
    """
    Runs commands on the local host with subprocess.

    - Non-verbose: spinner while the command runs, output captured to the log
    - Verbose: output streamed line by line to the console and the log
    """

    def __init__(self, logger: Optional[InstallLogger] = None, verbose: bool = False):
        super().__init__(logger)
        self.verbose = verbose

    def _execute(self, argv, cwd, env, input, label, secrets=()) -> ExecutionResult:
        full_env = {**os.environ, **env} if env else None

        try:
            if self.verbose:
                return self._execute_streaming(argv, cwd, full_env, input, secrets)
            return self._execute_with_spinner(argv, cwd, full_env, input, label)
        except FileNotFoundError as e:
            # Missing executable behaves like a shell "command not found"
            return ExecutionResult(returncode=127, stderr=str(e))

    def _execute_streaming(self, argv, cwd, env, input, secrets=()) -> ExecutionResult:
        process = subprocess.Popen(
            argv,
            cwd=cwd,
            env=env,
            stdin=subprocess.PIPE if input is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )

        if input is not None and process.stdin:
            process.stdin.write(input)
            process.stdin.close()

        stdout_lines = []
        if process.stdout:
            for line in process.stdout:
                line_stripped = line.rstrip()
                stdout_lines.append(line_stripped)
                print(redact(line_stripped, secrets))

        process.wait()
        output = "\n".join(stdout_lines)
        # stderr is merged into stdout here; keep it as the error text on failure
        return ExecutionResult(
            returncode=process.returncode,
            stdout=output,
            stderr=output if process.returncode != 0 else "",
        )

    def _execute_with_spinner(self, argv, cwd, env, input, label) -> ExecutionResult:
        description = label if len(label) <= 72 else label[:69] + "..."
        console = self.logger.console if self.logger else None
        spinner = Spinner("dots", text=Text(f"{description} ...", style="cyan"))
        padded_spinner = Padding(spinner, (0, 0, 0, 2))

        with Live(
            padded_spinner, console=console, refresh_per_second=10, transient=True
        ):
            result = subprocess.run(
                argv,
                cwd=cwd,
                env=env,
                input=input,
                capture_output=True,
                text=True,
            )

        return ExecutionResult(
            returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )
