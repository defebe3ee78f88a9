"""
Declarative provisioning steps.

A step pairs an optional guard (``check``) with an ``action``. The runner
skips the action when the guard already holds, logs uniformly, and aborts
the whole run on the first failing action.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from erpdeploy.exceptions import ErpDeployError, StepFailedError
from erpdeploy.logger import InstallLogger
from erpdeploy.models.results import StepResult, StepStatus


@dataclass
class Step:
    """A named unit of provisioning work."""

    name: str
    description: str
    action: Callable[[], None]
    check: Optional[Callable[[], bool]] = None
    skip_message: Optional[str] = None

    def is_satisfied(self) -> bool:
        """True when the guard says the work is already done."""
        return self.check is not None and bool(self.check())


class StepRunner:
    """Runs steps in order; no retries, no rollback."""

    def __init__(self, logger: InstallLogger):
        self.logger = logger

    def run(self, steps: List[Step]) -> List[StepResult]:
        """
        Execute steps top to bottom.

        Raises:
            StepFailedError: On the first failing guard or action (the run stops there)
        """
        results = []

        for step in steps:
            try:
                if step.is_satisfied():
                    self.logger.skip(
                        step.skip_message or f"{step.description} (already done)"
                    )
                    results.append(
                        StepResult(step.name, step.description, StepStatus.SKIPPED)
                    )
                    continue

                self.logger.step(step.description)
                step.action()
            except (ErpDeployError, OSError, ValueError) as e:
                error = StepFailedError(step.name, e)
                self.logger.log_error(error.message, context=error.context)
                raise error from e

            results.append(StepResult(step.name, step.description, StepStatus.RAN))

        return results

    @staticmethod
    def describe(steps: List[Step]) -> List[StepResult]:
        """Evaluate guards only; nothing is executed."""
        return [
            StepResult(
                step.name,
                step.description,
                StepStatus.DONE if step.is_satisfied() else StepStatus.PENDING,
            )
            for step in steps
        ]
