"""The ordered provisioning pipeline."""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from erpdeploy import constants
from erpdeploy.core.config_loader import InstallConfig
from erpdeploy.core.steps import Step
from erpdeploy.services import (
    AccountService,
    AptService,
    BenchService,
    CommandRunner,
    HostsFile,
    MariaDBService,
    NodeService,
    PipxService,
    SystemctlService,
    WkhtmltopdfService,
)


@dataclass
class Services:
    """Every external collaborator the pipeline touches."""

    apt: AptService
    node: NodeService
    wkhtmltopdf: WkhtmltopdfService
    systemctl: SystemctlService
    mariadb: MariaDBService
    accounts: AccountService
    pipx: PipxService
    bench: BenchService
    hosts: HostsFile

    @classmethod
    def from_config(cls, config: InstallConfig, runner: CommandRunner) -> "Services":
        apt = AptService(runner)
        systemctl = SystemctlService(runner)
        return cls(
            apt=apt,
            node=NodeService(runner, apt, config.node_setup_url),
            wkhtmltopdf=WkhtmltopdfService(runner, apt, config.wkhtml_deb_url),
            systemctl=systemctl,
            mariadb=MariaDBService(
                runner, systemctl, config.db_root_password, Path(config.mariadb_conf_path)
            ),
            accounts=AccountService(
                runner,
                config.erp_user,
                config.erp_user_password,
                config.user_home,
                Path(config.bench_dir),
            ),
            pipx=PipxService(runner, config.erp_user, config.user_home),
            bench=BenchService(
                runner,
                user=config.erp_user,
                home=config.user_home,
                bench_dir=Path(config.bench_dir),
                bench_name=config.bench_name,
                site_name=config.site_name,
                branch=config.frappe_branch,
                db_root_password=config.db_root_password,
                admin_password=config.admin_password,
            ),
            hosts=HostsFile(Path(config.hosts_file)),
        )


def build_steps(config: InstallConfig, services: Services) -> List[Step]:
    """
    Build the full pipeline, in dependency order.

    Steps without a check always run and must be safe to repeat.
    """
    s = services
    user = config.erp_user
    site = config.site_name
    doctype, fieldname, value = constants.SIGNUP_SETTING

    def install_bench_cli() -> None:
        s.pipx.install(f"{constants.BENCH_PACKAGE}=={config.bench_version}")
        s.pipx.ensure_path()

    return [
        # System packages and runtimes
        Step("apt-update", "Updating apt cache", s.apt.update),
        Step(
            "base-packages",
            "Installing base packages",
            lambda: s.apt.install(constants.BASE_PACKAGES),
        ),
        Step(
            "nodejs",
            f"Installing Node.js {constants.NODE_MAJOR_VERSION} LTS",
            s.node.install,
            check=s.node.has_expected_major,
            skip_message=f"Node.js {constants.NODE_MAJOR_VERSION} already present",
        ),
        Step("yarn", "Installing Yarn globally", s.node.install_yarn),
        Step("pipx", "Installing pipx", lambda: s.apt.install(["pipx"])),
        Step(
            "wkhtmltopdf",
            f"Installing wkhtmltopdf {constants.WKHTMLTOPDF_VERSION}",
            s.wkhtmltopdf.install,
            check=s.wkhtmltopdf.has_pinned_version,
            skip_message=f"wkhtmltopdf {constants.WKHTMLTOPDF_VERSION} already present",
        ),
        # Data services
        Step("mariadb", "Configuring and securing MariaDB", s.mariadb.configure),
        Step(
            "redis",
            "Enabling Redis",
            lambda: s.systemctl.enable_now("redis-server"),
        ),
        # Service account
        Step(
            "service-user",
            f"Creating user {user}",
            s.accounts.create,
            check=s.accounts.exists,
            skip_message=f"User {user} already exists",
        ),
        Step(
            "install-dir",
            f"Preparing {config.bench_dir} for {user}",
            s.accounts.ensure_install_dir,
        ),
        Step(
            "shell-profile",
            f"Adding ~/.local/bin to PATH for {user}",
            s.accounts.ensure_path_export,
            check=s.accounts.has_path_export,
            skip_message=f"PATH export already in {s.accounts.bashrc}",
        ),
        # Tooling
        Step("bench-cli", "Installing bench via pipx", install_bench_cli),
        Step(
            "bench-link",
            f"Linking bench to {config.bench_link_path}",
            lambda: s.pipx.link_binary("bench", Path(config.bench_link_path)),
        ),
        Step(
            "process-manager",
            "Installing process manager (honcho)",
            lambda: s.pipx.install(constants.PROCESS_MANAGER_PACKAGE),
        ),
        # Bench instance
        Step(
            "bench-init",
            f"Initializing bench {config.bench_name} ({config.frappe_branch})",
            s.bench.init,
            check=s.bench.workspace_exists,
            skip_message=f"Bench {config.bench_path} already initialized",
        ),
        Step(
            "get-app",
            f"Fetching {constants.ERP_APP}",
            lambda: s.bench.get_app(constants.ERP_APP),
            check=lambda: s.bench.app_exists(constants.ERP_APP),
            skip_message=f"App {constants.ERP_APP} already fetched",
        ),
        Step(
            "new-site",
            f"Creating site {site}",
            s.bench.new_site,
            check=s.bench.site_exists,
            skip_message=f"Site {site} already exists",
        ),
        Step(
            "install-app",
            f"Installing {constants.ERP_APP} on {site}",
            lambda: s.bench.install_app(constants.ERP_APP),
        ),
        Step(
            "site-settings",
            f"Setting {doctype}.{fieldname} = {value}",
            lambda: s.bench.set_single_value(doctype, fieldname, value),
        ),
        Step("default-site", f"Using {site} as default site", s.bench.use_site),
        # Production
        Step(
            "production-setup",
            "Configuring supervisor/nginx for production",
            s.bench.setup_production,
        ),
        Step("production-restart", "Restarting production services", s.bench.restart),
        Step(
            "hosts-entry",
            f"Adding {site} to {config.hosts_file}",
            lambda: s.hosts.ensure_entry(constants.LOOPBACK_IP, site),
            check=lambda: s.hosts.has_entry(site),
            skip_message=f"{site} already in {config.hosts_file}",
        ),
    ]
