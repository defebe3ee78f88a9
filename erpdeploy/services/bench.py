"""Drives the bench CLI to build the workspace, site and production services."""

import json
from pathlib import Path
from typing import Any, Dict, List

from erpdeploy.constants import BASE_APP, SYSTEM_PATH
from erpdeploy.services.shell import CommandRunner


class BenchService:
    """
    Bench workspace and site operations.

    Everything except production setup runs as the service account with
    its pipx binary directory on PATH.
    """

    def __init__(
        self,
        runner: CommandRunner,
        user: str,
        home: Path,
        bench_dir: Path,
        bench_name: str,
        site_name: str,
        branch: str,
        db_root_password: str,
        admin_password: str,
    ):
        self.runner = runner
        self.user = user
        self.home = Path(home)
        self.bench_dir = Path(bench_dir)
        self.bench_name = bench_name
        self.site_name = site_name
        self.branch = branch
        self.db_root_password = db_root_password
        self.admin_password = admin_password

    @property
    def bench_path(self) -> Path:
        return self.bench_dir / self.bench_name

    @property
    def user_env(self) -> Dict[str, str]:
        return {"PATH": f"{self.home / '.local' / 'bin'}:{SYSTEM_PATH}"}

    def _bench(self, args: List[str], cwd: Path, **kwargs: Any):
        return self.runner.run(
            ["bench"] + args, user=self.user, env=self.user_env, cwd=cwd, **kwargs
        )

    # Workspace

    def workspace_exists(self) -> bool:
        return self.bench_path.is_dir()

    def init(self) -> None:
        self._bench(
            ["init", self.bench_name, "--frappe-branch", self.branch, "--python", "python3"],
            cwd=self.bench_dir,
        )

    def app_exists(self, app: str) -> bool:
        return (self.bench_path / "apps" / app).is_dir()

    def get_app(self, app: str) -> None:
        self._bench(["get-app", "--branch", self.branch, app], cwd=self.bench_path)

    # Site

    def site_exists(self) -> bool:
        return (self.bench_path / "sites" / self.site_name).is_dir()

    def new_site(self) -> None:
        self._bench(
            [
                "new-site",
                self.site_name,
                "--db-root-password",
                self.db_root_password,
                "--admin-password",
                self.admin_password,
                "--install-app",
                BASE_APP,
            ],
            cwd=self.bench_path,
            secrets=[self.db_root_password, self.admin_password],
        )

    def install_app(self, app: str) -> None:
        self._bench(["--site", self.site_name, "install-app", app], cwd=self.bench_path)

    def set_single_value(self, doctype: str, fieldname: str, value: Any) -> None:
        kwargs = json.dumps({"doctype": doctype, "fieldname": fieldname, "value": value})
        self._bench(
            ["--site", self.site_name, "execute", "frappe.db.set_single_value", "--kwargs", kwargs],
            cwd=self.bench_path,
        )

    def use_site(self) -> None:
        self._bench(["use", self.site_name], cwd=self.bench_path)

    # Production (runs as root; bench writes supervisor and nginx config)

    def setup_production(self) -> None:
        self.runner.run(
            ["bench", "setup", "production", "--yes", self.user],
            cwd=self.bench_path,
            env={"HOME": str(self.home)},
        )

    def restart(self) -> None:
        self.runner.run(
            ["bench", "restart"], cwd=self.bench_path, env={"HOME": str(self.home)}
        )
