"""
erpdeploy Domain Models

Dataclass-based models for type-safe data handling.
"""

from .results import (
    CheckResult,
    ExecutionResult,
    StepResult,
    StepStatus,
)

__all__ = [
    "CheckResult",
    "ExecutionResult",
    "StepResult",
    "StepStatus",
]
