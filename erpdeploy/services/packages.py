"""System package, Node.js and wkhtmltopdf installers."""

from typing import Iterable

from erpdeploy.constants import (
    NODE_MAJOR_VERSION,
    WKHTML_DEB_DOWNLOAD_PATH,
    WKHTMLTOPDF_VERSION,
)
from erpdeploy.services.shell import CommandRunner

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class AptService:
    """Non-interactive apt-get/dpkg wrapper."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def update(self) -> None:
        self.runner.run(["apt-get", "update"], env=APT_ENV)

    def install(self, packages: Iterable[str]) -> None:
        self.runner.run(["apt-get", "install", "-y", *packages], env=APT_ENV)

    def remove(self, package: str, tolerate_missing: bool = True) -> None:
        result = self.runner.run(
            ["apt-get", "remove", "-y", package], env=APT_ENV, check=not tolerate_missing
        )
        if result.is_failure:
            self.runner.warn(f"{package} was not removed (not installed?); continuing")

    def install_deb(self, deb_path: str) -> None:
        """Install a local .deb, repairing dependencies if dpkg reports them missing."""
        result = self.runner.run(["dpkg", "-i", deb_path], env=APT_ENV, check=False)
        if result.is_failure:
            self.fix_broken()

    def fix_broken(self) -> None:
        self.runner.run(["apt-get", "install", "-f", "-y"], env=APT_ENV)


class NodeService:
    """Node.js runtime pinned to one major version, plus yarn."""

    def __init__(self, runner: CommandRunner, apt: AptService, setup_url: str):
        self.runner = runner
        self.apt = apt
        self.setup_url = setup_url

    def installed_version(self) -> str:
        result = self.runner.run(["node", "-v"], check=False)
        return result.stdout.strip() if result.is_success else ""

    def has_expected_major(self) -> bool:
        return self.installed_version().startswith(f"v{NODE_MAJOR_VERSION}")

    def install(self) -> None:
        # NodeSource adds its apt repository, then nodejs comes from there
        self.runner.run(["bash", "-c", f"curl -fsSL {self.setup_url} | bash -"])
        self.apt.install(["nodejs"])

    def install_yarn(self) -> None:
        self.runner.run(["npm", "install", "-g", "yarn"])


class WkhtmltopdfService:
    """PDF renderer pinned to the patched-qt upstream build."""

    PACKAGE = "wkhtmltopdf"

    def __init__(
        self,
        runner: CommandRunner,
        apt: AptService,
        deb_url: str,
        download_path: str = WKHTML_DEB_DOWNLOAD_PATH,
    ):
        self.runner = runner
        self.apt = apt
        self.deb_url = deb_url
        self.download_path = download_path

    def has_pinned_version(self) -> bool:
        result = self.runner.run([self.PACKAGE, "--version"], check=False)
        return result.is_success and WKHTMLTOPDF_VERSION in result.stdout

    def install(self) -> None:
        self.apt.remove(self.PACKAGE, tolerate_missing=True)
        self.runner.run(["curl", "-L", "-o", self.download_path, self.deb_url])
        self.apt.install_deb(self.download_path)
