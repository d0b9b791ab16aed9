"""Domain errors for OdooProvisioner."""

from typing import Optional


class ProvisionerError(RuntimeError):
    """Raised when provisioning cannot continue safely."""


class InvalidInputError(ProvisionerError):
    """Raised when user-supplied input is missing or malformed."""


class StoreIOError(ProvisionerError):
    """Raised when a checkpoint record cannot be read or written."""


class CommandError(ProvisionerError):
    """Raised when an external command is missing or exits with an error."""


class StepExecutionError(ProvisionerError):
    """Raised when a step body fails; carries where the run stopped."""

    def __init__(self, index: int, label: str, last_completed: int, cause: Optional[str] = None):
        self.index = index
        self.label = label
        self.last_completed = last_completed
        self.cause = cause
        message = f"Step {index} ({label}) failed"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)
