"""Configuration management for erpdeploy runs"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

import yaml
from rich.console import Console
from rich.prompt import Prompt

from erpdeploy import constants
from erpdeploy.exceptions import ConfigurationError


# field name -> environment variable
ENV_VARS: Dict[str, str] = {
    "erp_user": "ERP_USER",
    "erp_user_password": "ERP_USER_PASSWORD",
    "db_root_password": "DB_ROOT_PASSWORD",
    "admin_password": "ADMIN_PASSWORD",
    "site_name": "SITE_NAME",
    "bench_dir": "BENCH_DIR",
    "bench_name": "BENCH_NAME",
    "frappe_branch": "FRAPPE_BRANCH",
    "wkhtml_deb_url": "WKHTML_DEB_URL",
    "node_setup_url": "NODE_SETUP_URL",
    "bench_version": "BENCH_VERSION",
    "log_dir": "ERPDEPLOY_LOG_DIR",
}

SECRET_FIELDS = ("erp_user_password", "db_root_password", "admin_password")


@dataclass(frozen=True)
class InstallConfig:
    """Resolved settings for one provisioning run. Immutable once built."""

    erp_user: str = constants.DEFAULT_ERP_USER
    erp_user_password: str = ""
    db_root_password: str = ""
    admin_password: str = ""
    site_name: str = constants.DEFAULT_SITE_NAME
    bench_dir: str = constants.DEFAULT_BENCH_DIR
    bench_name: str = constants.DEFAULT_BENCH_NAME
    frappe_branch: str = constants.DEFAULT_FRAPPE_BRANCH
    wkhtml_deb_url: str = constants.DEFAULT_WKHTML_DEB_URL
    node_setup_url: str = constants.DEFAULT_NODE_SETUP_URL
    bench_version: str = constants.DEFAULT_BENCH_VERSION

    # Host paths
    log_dir: str = constants.DEFAULT_LOG_DIR
    os_release_path: str = constants.OS_RELEASE_PATH
    hosts_file: str = constants.HOSTS_FILE
    mariadb_conf_path: str = constants.MARIADB_CONF_PATH
    bench_link_path: str = constants.BENCH_LINK_PATH
    home_root: str = constants.HOME_ROOT

    @property
    def user_home(self) -> Path:
        return Path(self.home_root) / self.erp_user

    @property
    def bench_path(self) -> Path:
        """Workspace directory managed by bench."""
        return Path(self.bench_dir) / self.bench_name

    @property
    def missing_secrets(self) -> list:
        return [f for f in SECRET_FIELDS if not getattr(self, f)]

    def masked(self) -> Dict[str, str]:
        """Settings as a display mapping with secrets masked."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in SECRET_FIELDS:
                value = constants.MASK if value else "(prompt)"
            result[f.name] = str(value)
        return result


def _load_yaml(config_file: Path) -> Dict[str, str]:
    """Load a YAML settings file keyed by lowercase field names."""
    if not config_file.exists():
        raise ConfigurationError(
            f"Config file not found: {config_file}",
            context="Pass an existing YAML file to --config",
        )

    try:
        data = yaml.safe_load(config_file.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}", context=str(e))

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid config file: {config_file}",
            context="Top level must be a mapping of setting: value",
        )

    known = {f.name for f in fields(InstallConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown settings in {config_file}: {', '.join(unknown)}",
            context=f"Known settings: {', '.join(sorted(known))}",
        )

    # Unquoted 5.20 would parse as the float 5.2
    not_strings = sorted(
        key for key, value in data.items() if value is not None and not isinstance(value, str)
    )
    if not_strings:
        raise ConfigurationError(
            f"Settings in {config_file} must be strings: {', '.join(not_strings)}",
            context="Quote the values, e.g. bench_version: \"5.20\"",
        )

    return {key: value for key, value in data.items() if value is not None}


def load_config(
    env: Mapping[str, str],
    config_file: Optional[Path] = None,
    **overrides: str,
) -> InstallConfig:
    """
    Assemble the run configuration.

    Precedence: defaults < YAML file < environment < explicit overrides.
    Empty environment values count as unset.

    Args:
        env: Environment mapping (usually os.environ)
        config_file: Optional YAML settings file
        **overrides: Field values that win over everything (tests, host paths)

    Returns:
        InstallConfig (secrets may still be empty)
    """
    values: Dict[str, str] = {}

    if config_file is not None:
        values.update(_load_yaml(Path(config_file)))

    for field_name, var in ENV_VARS.items():
        if env.get(var):
            values[field_name] = env[var]

    values.update({k: v for k, v in overrides.items() if v is not None})
    return InstallConfig(**values)


def prompt_secret(
    prompt_text: str,
    ask: Callable[[str], str],
    console: Optional[Console] = None,
) -> str:
    """Ask until a non-empty value is given."""
    console = console or Console()
    while True:
        value = ask(prompt_text)
        if value:
            return value
        console.print("[yellow]Value cannot be empty.[/yellow]")


def _ask_hidden(prompt_text: str) -> str:
    return Prompt.ask(prompt_text, password=True)


def resolve_secrets(
    config: InstallConfig,
    ask: Callable[[str], str] = _ask_hidden,
    console: Optional[Console] = None,
) -> InstallConfig:
    """
    Fill in every unset secret by prompting without echo.

    Pre-set, non-empty secrets are kept and never prompted for.
    """
    prompts = {
        "erp_user_password": f"Enter password for Linux user {config.erp_user}",
        "db_root_password": "Enter MariaDB root password",
        "admin_password": "Enter ERPNext Administrator password",
    }

    resolved = {}
    for field_name in config.missing_secrets:
        resolved[field_name] = prompt_secret(prompts[field_name], ask, console)

    return replace(config, **resolved) if resolved else config
