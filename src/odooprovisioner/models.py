"""Shared domain models for OdooProvisioner."""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .errors import ProvisionerError

STEP_PENDING = "pending"
STEP_RUNNING = "running"
STEP_COMPLETED = "completed"
STEP_FAILED = "failed"

RUN_NOT_STARTED = "not_started"
RUN_IN_PROGRESS = "in_progress"
RUN_SUCCEEDED = "succeeded"
RUN_ABORTED = "aborted"


@dataclass(frozen=True)
class InstanceIdentity:
    """User-supplied identifiers for a single Odoo instance."""

    name: str
    version: str
    port: int
    addons_repo_url: str

    @property
    def checkpoint_key(self) -> str:
        return self.name


@dataclass(frozen=True)
class RunContext:
    """Resolved names and paths shared read-only by every step body."""

    identity: InstanceIdentity
    home_dir: str
    source_dir: str
    venv_dir: str
    data_dir: str
    custom_addons_dir: str
    addons_checkout_dir: str
    ssh_dir: str
    config_path: str
    service_name: str
    service_unit_path: str
    log_file: str
    timezone: str
    odoo_repo_url: str
    admin_password: str

    @property
    def user(self) -> str:
        return self.identity.name


@dataclass(frozen=True)
class StepDefinition:
    index: int
    label: str
    body: Callable[[RunContext], None]


@dataclass
class RunResult:
    status: str = RUN_NOT_STARTED
    resumed_from: int = 0
    executed: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    step_statuses: Dict[int, str] = field(default_factory=dict)
    failed_step: Optional[int] = None


def validate_step_definitions(steps: Sequence[StepDefinition]):
    """Steps must be numbered 1..N in list order with no gaps."""
    if not steps:
        raise ProvisionerError("No provisioning steps are registered.")

    for position, step in enumerate(steps, start=1):
        if step.index != position:
            raise ProvisionerError(
                f"Step indices must be contiguous from 1; found {step.index} at position {position}."
            )
