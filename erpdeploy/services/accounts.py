"""Service account provisioning."""

from pathlib import Path

from erpdeploy.constants import PATH_EXPORT_LINE
from erpdeploy.services.shell import CommandRunner

SUDO_GROUP = "sudo"


class AccountService:
    """Creates the OS user that owns the bench and prepares its environment."""

    def __init__(
        self,
        runner: CommandRunner,
        user: str,
        password: str,
        home: Path,
        install_dir: Path,
    ):
        self.runner = runner
        self.user = user
        self.password = password
        self.home = Path(home)
        self.install_dir = Path(install_dir)

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"

    @property
    def owner(self) -> str:
        return f"{self.user}:{self.user}"

    def exists(self) -> bool:
        return self.runner.run(["id", "-u", self.user], check=False).is_success

    def create(self) -> None:
        """Create the account without prompts, set its password, grant sudo."""
        self.runner.run(["adduser", "--disabled-password", "--gecos", "", self.user])
        self.runner.run(
            ["chpasswd"], input=f"{self.user}:{self.password}\n", secrets=[self.password]
        )
        self.runner.run(["usermod", "-aG", SUDO_GROUP, self.user])

    def ensure_install_dir(self) -> None:
        if not self.install_dir.is_dir():
            self.install_dir.mkdir(parents=True)
        self.runner.run(["chown", "-R", self.owner, str(self.install_dir)])

    def has_path_export(self) -> bool:
        if not self.bashrc.exists():
            return False
        return PATH_EXPORT_LINE in self.bashrc.read_text().splitlines()

    def ensure_path_export(self) -> None:
        """Append the ~/.local/bin PATH export to ~/.bashrc exactly once."""
        if self.has_path_export():
            return

        existing = self.bashrc.read_text() if self.bashrc.exists() else ""
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with open(self.bashrc, "a") as f:
            f.write(f"{prefix}{PATH_EXPORT_LINE}\n")
        self.runner.run(["chown", self.owner, str(self.bashrc)])
