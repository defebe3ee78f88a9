"""MariaDB configuration and hardening."""

from pathlib import Path
from typing import List

from erpdeploy.constants import MARIADB_CONFIG
from erpdeploy.exceptions import CommandFailedError, ConfigurationError
from erpdeploy.services.shell import CommandRunner
from erpdeploy.services.systemd import SystemctlService

UNIT = "mariadb"
PROBE_SQL = "SELECT 1;"


def sql_quote(value: str) -> str:
    """Escape a value for a single-quoted MariaDB string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def secure_sql(root_password: str) -> str:
    """The fixed hardening batch applied on every run."""
    password = sql_quote(root_password)
    return (
        "ALTER USER 'root'@'localhost' IDENTIFIED VIA mysql_native_password;\n"
        f"SET PASSWORD FOR 'root'@'localhost' = PASSWORD('{password}');\n"
        "DELETE FROM mysql.user WHERE User='';\n"
        "DROP DATABASE IF EXISTS test;\n"
        "DELETE FROM mysql.db WHERE Db='test' OR Db='test\\_%';\n"
        "FLUSH PRIVILEGES;\n"
    )


class MariaDBService:
    """Writes the server config fragment and secures root access."""

    def __init__(
        self,
        runner: CommandRunner,
        systemctl: SystemctlService,
        root_password: str,
        conf_path: Path,
    ):
        self.runner = runner
        self.systemctl = systemctl
        self.root_password = root_password
        self.conf_path = Path(conf_path)

    def enable(self) -> None:
        self.systemctl.enable_now(UNIT, tolerate_failure=True)

    def write_config(self) -> None:
        self.conf_path.parent.mkdir(parents=True, exist_ok=True)
        self.conf_path.write_text(MARIADB_CONFIG)

    def restart(self) -> None:
        self.systemctl.restart(UNIT)

    def _password_command(self) -> List[str]:
        return ["mysql", "--user=root", f"--password={self.root_password}"]

    def admin_command(self) -> List[str]:
        """
        Pick the client invocation that can administer root.

        Fresh installs allow passwordless root over the unix socket; after the
        first run root uses the configured password instead.
        """
        passwordless = ["mysql", "--user=root"]
        probe = self.runner.run(passwordless + ["-e", PROBE_SQL], check=False)
        if probe.is_success:
            return passwordless

        try:
            self.runner.run(
                self._password_command() + ["-e", PROBE_SQL],
                secrets=[self.root_password],
            )
        except CommandFailedError as e:
            raise ConfigurationError(
                "Cannot log in to MariaDB as root (passwordless or with DB_ROOT_PASSWORD)",
                context="Root password rotation is not supported; "
                "set DB_ROOT_PASSWORD to the current root password",
            ) from e
        return self._password_command()

    def secure(self) -> None:
        self.runner.run(
            self.admin_command(),
            input=secure_sql(self.root_password),
            secrets=[self.root_password, sql_quote(self.root_password)],
        )

    def configure(self) -> None:
        """Full database step: enable, write config, restart, secure, verify."""
        self.enable()
        self.write_config()
        self.restart()
        self.secure()
        self.verify_root_password()

    def can_login_with_root_password(self) -> bool:
        result = self.runner.run(
            self._password_command() + ["-e", PROBE_SQL],
            check=False,
            secrets=[self.root_password],
        )
        return result.is_success

    def verify_root_password(self) -> None:
        """
        Confirm root now answers to the configured password.

        Raises:
            ConfigurationError: If the hardening batch did not take effect
        """
        if not self.can_login_with_root_password():
            raise ConfigurationError(
                "MariaDB root does not accept DB_ROOT_PASSWORD after hardening",
                context="Check the server log; the root account may use another auth plugin",
            )
