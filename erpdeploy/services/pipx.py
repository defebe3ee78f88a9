"""Per-user tool installs with pipx, and the system-wide bench link."""

import os
from pathlib import Path

from erpdeploy.exceptions import MissingArtifactError
from erpdeploy.services.shell import CommandRunner


class PipxService:
    """Installs Python CLI tools into the service account's pipx environment."""

    def __init__(self, runner: CommandRunner, user: str, home: Path):
        self.runner = runner
        self.user = user
        self.home = Path(home)

    @property
    def bin_dir(self) -> Path:
        return self.home / ".local" / "bin"

    def install(self, spec: str, force: bool = True) -> None:
        args = ["pipx", "install"]
        if force:
            args.append("--force")
        self.runner.run(args + [spec], user=self.user)

    def ensure_path(self) -> None:
        result = self.runner.run(["pipx", "ensurepath"], user=self.user, check=False)
        if result.is_failure:
            self.runner.warn(f"pipx ensurepath failed for {self.user}; continuing")

    def binary(self, name: str) -> Path:
        return self.bin_dir / name

    def link_binary(self, name: str, link_path: Path) -> None:
        """
        Point link_path at the user's installed binary (ln -sf semantics).

        Raises:
            MissingArtifactError: If the binary is not there after install
        """
        target = self.binary(name)
        if not (target.is_file() and os.access(target, os.X_OK)):
            raise MissingArtifactError(
                f"{name} binary not found at {target}",
                context=f"pipx install for {self.user} did not produce it",
            )

        link_path = Path(link_path)
        link_path.parent.mkdir(parents=True, exist_ok=True)
        if link_path.is_symlink() or link_path.exists():
            link_path.unlink()
        link_path.symlink_to(target)
