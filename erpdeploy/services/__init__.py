"""
erpdeploy Services Layer

One narrow wrapper per external tool; all host mutation goes through these.
"""

from .accounts import AccountService
from .bench import BenchService
from .hosts import HostsFile
from .mariadb import MariaDBService
from .packages import AptService, NodeService, WkhtmltopdfService
from .pipx import PipxService
from .shell import CommandRunner, ShellRunner
from .systemd import SystemctlService

__all__ = [
    "AccountService",
    "AptService",
    "BenchService",
    "CommandRunner",
    "HostsFile",
    "MariaDBService",
    "NodeService",
    "PipxService",
    "ShellRunner",
    "SystemctlService",
    "WkhtmltopdfService",
]
