"""Configuration, preflight checks and the step pipeline."""

from .config_loader import InstallConfig, load_config, resolve_secrets
from .pipeline import Services, build_steps
from .preflight import check_os, collect_preflight, require_root
from .steps import Step, StepRunner

__all__ = [
    "InstallConfig",
    "Services",
    "Step",
    "StepRunner",
    "build_steps",
    "check_os",
    "collect_preflight",
    "load_config",
    "require_root",
    "resolve_secrets",
]
