"""systemctl wrapper."""

from erpdeploy.services.shell import CommandRunner


class SystemctlService:
    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def enable_now(self, unit: str, tolerate_failure: bool = False) -> None:
        result = self.runner.run(
            ["systemctl", "enable", "--now", unit], check=not tolerate_failure
        )
        if result.is_failure:
            self.runner.warn(f"Could not enable {unit} (exit {result.returncode}); continuing")

    def restart(self, unit: str) -> None:
        self.runner.run(["systemctl", "restart", unit])
