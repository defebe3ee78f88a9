"""
erpdeploy Exception Hierarchy

Clean exception hierarchy for consistent error handling across the installer.
"""

from typing import Optional


class ErpDeployError(Exception):
    """Base exception for all erpdeploy errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(ErpDeployError):
    """Raised when configuration is invalid or missing."""

    pass


class PreflightError(ErpDeployError):
    """Raised when the host is not fit for installation (privilege or OS)."""

    pass


class MissingArtifactError(ErpDeployError):
    """Raised when something an install step should have produced is absent."""

    pass


class CommandFailedError(ErpDeployError):
    """Raised when an external command exits non-zero."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed (exit {returncode}): {command}"
        context = stderr.strip()[-500:] if stderr and stderr.strip() else None
        super().__init__(message, context)


class StepFailedError(ErpDeployError):
    """Raised by the step runner when a step aborts the run."""

    def __init__(self, step_name: str, cause: Exception):
        self.step_name = step_name
        self.cause = cause
        message = f"Step '{step_name}' failed"
        context = cause.message if isinstance(cause, ErpDeployError) else str(cause)
        super().__init__(message, context)
