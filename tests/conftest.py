"""Shared fixtures: a recording command runner and a simulated host."""

import io
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from rich.console import Console

from erpdeploy.core.config_loader import InstallConfig, load_config
from erpdeploy.logger import InstallLogger
from erpdeploy.models.results import ExecutionResult
from erpdeploy.services.shell import CommandRunner

UBUNTU_24 = 'NAME="Ubuntu"\nVERSION_ID="24.04"\nID=ubuntu\nID_LIKE=debian\n'

SECRETS_ENV = {
    "ERP_USER_PASSWORD": "user-pw",
    "DB_ROOT_PASSWORD": "db-pw",
    "ADMIN_PASSWORD": "admin-pw",
}


@dataclass
class Call:
    """One recorded command."""

    argv: List[str]
    args: List[str]
    user: Optional[str]
    cwd: Optional[str]
    env: Dict[str, str]
    input: Optional[str]

    @property
    def line(self) -> str:
        return " ".join(self.args)


def split_wrapper(argv: List[str]):
    """Strip ``sudo -u USER -H`` and ``env K=V`` from argv."""
    user = None
    env = {}
    args = list(argv)
    if args[:2] == ["sudo", "-u"]:
        user = args[2]
        args = args[4:]
    if args and args[0] == "env":
        args = args[1:]
        while args and "=" in args[0]:
            key, value = args.pop(0).split("=", 1)
            env[key] = value
    return user, env, args


class RecordingRunner(CommandRunner):
    """
    CommandRunner fake.

    Records every command. Results come from ``respond`` (prefix -> result or
    callable); anything unmatched succeeds with empty output.
    """

    def __init__(self, logger=None):
        super().__init__(logger)
        self.calls: List[Call] = []
        self.responses: List[tuple] = []

    def respond(self, prefix: str, result=None, returncode: int = 0, stdout: str = ""):
        if result is None:
            result = ExecutionResult(returncode=returncode, stdout=stdout)
        self.responses.insert(0, (prefix.split(), result))

    def _execute(self, argv, cwd, env, input, label, secrets=()) -> ExecutionResult:
        user, wrapped_env, args = split_wrapper(argv)
        call = Call(
            argv=list(argv),
            args=args,
            user=user,
            cwd=str(cwd) if cwd is not None else None,
            env={**(env or {}), **wrapped_env},
            input=input,
        )
        self.calls.append(call)
        return self.handle(call)

    def handle(self, call: Call) -> ExecutionResult:
        for prefix, result in self.responses:
            if call.args[: len(prefix)] == prefix:
                if callable(result):
                    result = result(call)
                return ExecutionResult(result.returncode, result.stdout, result.stderr)
        return ExecutionResult(returncode=0)

    # Query helpers

    def lines(self) -> List[str]:
        return [c.line for c in self.calls]

    def find(self, prefix: str) -> List[Call]:
        words = prefix.split()
        return [c for c in self.calls if c.args[: len(words)] == words]

    def ran(self, prefix: str) -> bool:
        return bool(self.find(prefix))


class SimulatedHost(RecordingRunner):
    """
    RecordingRunner that imitates a fresh Ubuntu host.

    Commands that create artifacts create them under the config's paths,
    so idempotence guards see real state on the next run.
    """

    def __init__(self, config: InstallConfig, logger=None):
        super().__init__(logger)
        self.config = config
        self.users = set()
        self.node_version = ""
        self.wkhtml_version = ""
        self.root_socket_auth = True
        self.root_password: Optional[str] = None

    def handle(self, call: Call) -> ExecutionResult:
        for prefix, _ in self.responses:
            if call.args[: len(prefix)] == prefix:
                return super().handle(call)

        args = call.args
        cfg = self.config
        bench_path = Path(cfg.bench_dir) / cfg.bench_name

        if args[:2] == ["id", "-u"]:
            return ExecutionResult(0 if args[2] in self.users else 1, "1000\n")
        if args[:1] == ["adduser"]:
            self.users.add(args[-1])
            (Path(cfg.home_root) / args[-1]).mkdir(parents=True, exist_ok=True)
        elif args == ["node", "-v"]:
            if not self.node_version:
                return ExecutionResult(127, stderr="node: not found")
            return ExecutionResult(0, f"{self.node_version}\n")
        elif args[:1] == ["bash"] and "nodesource" in args[-1]:
            self.node_version = "v18.20.4"
        elif args == ["wkhtmltopdf", "--version"]:
            if not self.wkhtml_version:
                return ExecutionResult(127)
            return ExecutionResult(0, f"wkhtmltopdf {self.wkhtml_version} (with patched qt)\n")
        elif args[:2] == ["dpkg", "-i"]:
            self.wkhtml_version = "0.12.6"
        elif args[:1] == ["mysql"]:
            return self._mysql(call)
        elif args[:2] == ["pipx", "install"] and args[-1].startswith("frappe-bench"):
            bench_bin = cfg.user_home / ".local" / "bin" / "bench"
            bench_bin.parent.mkdir(parents=True, exist_ok=True)
            bench_bin.write_text("#!/bin/sh\n")
            os.chmod(bench_bin, 0o755)
        elif args[:2] == ["bench", "init"]:
            (bench_path / "apps" / "frappe").mkdir(parents=True)
            (bench_path / "sites").mkdir(parents=True)
        elif args[:2] == ["bench", "get-app"]:
            (bench_path / "apps" / args[-1]).mkdir(parents=True)
        elif args[:2] == ["bench", "new-site"]:
            (bench_path / "sites" / args[2]).mkdir(parents=True)

        return ExecutionResult(returncode=0)

    def _mysql(self, call: Call) -> ExecutionResult:
        passwords = [a.split("=", 1)[1] for a in call.args if a.startswith("--password=")]
        if passwords:
            ok = self.root_password is not None and passwords[0] == self.root_password
        else:
            ok = self.root_socket_auth

        if not ok:
            return ExecutionResult(1, stderr="ERROR 1045 (28000): Access denied")

        match = re.search(r"PASSWORD\('(.*)'\);", call.input or "")
        if match:
            self.root_password = match.group(1)
            self.root_socket_auth = False
        return ExecutionResult(0)


@pytest.fixture
def host_paths(tmp_path) -> Dict[str, str]:
    """Host paths rooted in a temporary directory."""
    etc = tmp_path / "etc"
    etc.mkdir()
    (etc / "os-release").write_text(UBUNTU_24)
    (etc / "hosts").write_text("127.0.0.1 localhost\n::1 localhost ip6-localhost\n")
    (tmp_path / "home").mkdir()

    return {
        "os_release_path": str(etc / "os-release"),
        "hosts_file": str(etc / "hosts"),
        "mariadb_conf_path": str(etc / "mysql" / "mariadb.conf.d" / "99-erpnext.cnf"),
        "bench_link_path": str(tmp_path / "usr" / "local" / "bin" / "bench"),
        "home_root": str(tmp_path / "home"),
        "bench_dir": str(tmp_path / "opt" / "erpnext"),
        "log_dir": str(tmp_path / "log"),
    }


@pytest.fixture
def config(host_paths) -> InstallConfig:
    return load_config(SECRETS_ENV, **host_paths)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def logged_runner(tmp_path):
    """RecordingRunner wired to a file logger; yields (runner, logger)."""
    quiet = Console(file=io.StringIO(), width=120)
    with InstallLogger(
        "test", log_dir=tmp_path / "log", stdout_console=quiet, stderr_console=quiet
    ) as logger:
        yield RecordingRunner(logger), logger


@pytest.fixture
def simulated_host(config) -> SimulatedHost:
    return SimulatedHost(config)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120)


def never_prompt(prompt_text: str) -> str:
    raise AssertionError(f"unexpected prompt: {prompt_text}")


def scripted_answers(*answers: str) -> Callable[[str], str]:
    """Prompt replacement returning the given answers in order."""
    remaining = list(answers)
    asked = []

    def ask(prompt_text: str) -> str:
        asked.append(prompt_text)
        return remaining.pop(0)

    ask.asked = asked
    return ask
