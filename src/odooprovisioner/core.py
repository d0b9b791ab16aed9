import logging
import os
import secrets
import subprocess
from typing import Dict, List, Optional

from rich.console import Console

from .constants import (
    DEFAULT_HOME_ROOT,
    DEFAULT_ODOO_REPO_URL,
    DEFAULT_SYSTEMD_DIR,
    DEFAULT_TIMEZONE,
)
from .errors import ProvisionerError, StepExecutionError
from .errors_catalog import actionable_error
from .models import RunResult
from .services.accounts import AccountService
from .services.checkpoint import CheckpointStore
from .services.command_runner import CommandRunner
from .services.filesystem import FileSystemService
from .services.identity import IdentityResolver
from .services.packages import PackageService
from .services.python_env import VirtualEnvService
from .services.rendering import RenderingService
from .services.repository import RepositoryService
from .services.step_runner import StepRunner
from .services.systemd import ServiceManager
from .steps import ProvisioningSteps

console = Console()
logger = logging.getLogger("odooprovisioner")


class OdooProvisioner:
    def __init__(
        self,
        username: Optional[str],
        version: Optional[str],
        port,
        addons_url: Optional[str],
        timezone: str = DEFAULT_TIMEZONE,
        odoo_repo_url: str = DEFAULT_ODOO_REPO_URL,
        admin_password: Optional[str] = None,
        checkpoint_dir: Optional[str] = None,
        home_root: str = DEFAULT_HOME_ROOT,
        systemd_dir: str = DEFAULT_SYSTEMD_DIR,
        verbose: bool = False,
        dry_run: bool = False,
        require_root: bool = True,
    ):
        self.verbose = verbose
        self.dry_run = dry_run
        self.require_root = require_root

        self.identity_resolver = IdentityResolver(
            home_root=home_root,
            systemd_dir=systemd_dir,
            timezone=timezone,
            odoo_repo_url=odoo_repo_url,
        )
        self.identity = self.identity_resolver.resolve_identity(username, version, port, addons_url)
        self.admin_password_generated = not admin_password
        self.run_context = self.identity_resolver.build_run_context(
            self.identity,
            admin_password=admin_password or secrets.token_urlsafe(16),
        )

        self.command_runner = CommandRunner(logger=logger)
        self.checkpoint_store = CheckpointStore(logger=logger, checkpoint_dir=checkpoint_dir)
        self.step_runner = StepRunner(checkpoint_store=self.checkpoint_store, logger=logger)

        self.filesystem_service = FileSystemService(logger=logger, run_cmd=self._run_cmd)
        self.package_service = PackageService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.account_service = AccountService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            filesystem_service=self.filesystem_service,
        )
        self.repository_service = RepositoryService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.virtualenv_service = VirtualEnvService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.rendering_service = RenderingService()
        self.service_manager = ServiceManager(logger=logger, console=console, run_cmd=self._run_cmd)

        self.steps = ProvisioningSteps(
            logger=logger,
            package_service=self.package_service,
            account_service=self.account_service,
            repository_service=self.repository_service,
            virtualenv_service=self.virtualenv_service,
            filesystem_service=self.filesystem_service,
            rendering_service=self.rendering_service,
            service_manager=self.service_manager,
        ).definitions()

    @property
    def name(self) -> str:
        return self.identity.checkpoint_key

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        as_user: Optional[str] = None,
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(
            cmd,
            check=check,
            capture_output=capture_output,
            as_user=as_user,
            cwd=cwd,
            env=env,
        )

    def _ensure_privileges(self):
        if self.require_root and os.geteuid() != 0:
            raise ProvisionerError(actionable_error("root_required"))

    def last_completed_step(self) -> int:
        return self.step_runner.load_progress(self.name, len(self.steps))

    def _print_plan(self, result: RunResult):
        pending = len(self.steps) - len(result.skipped)
        console.print(
            f"[bold]Plan for '{self.name}':[/bold] {len(result.skipped)} step(s) already completed, "
            f"{pending} step(s) to run."
        )
        console.print(f"Checkpoint file: {self.checkpoint_store.path_for(self.name)}")

    def _print_summary(self, result: RunResult):
        context = self.run_context
        console.print("[bold green]Setup is complete![/bold green]")
        if result.skipped:
            console.print(
                f"Resumed after step {result.resumed_from}; ran {len(result.executed)} remaining step(s)."
            )
        console.print(f"You can check the service status with: sudo systemctl status {context.service_name}")
        console.print(f"The Odoo server should be accessible on port {context.identity.port}.")
        if self.admin_password_generated:
            console.print(f"The master password (admin_passwd) is stored in {context.config_path}.")

    def run(self) -> int:
        try:
            logger.info(
                "Starting OdooProvisioner for '%s' (Odoo %s, port %s)...",
                self.name,
                self.identity.version,
                self.identity.port,
            )

            if not self.dry_run:
                self._ensure_privileges()

            result = self.step_runner.run(
                self.name,
                self.steps,
                self.run_context,
                dry_run=self.dry_run,
            )

            if self.dry_run:
                self._print_plan(result)
            else:
                self._print_summary(result)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info(
                "Operation cancelled by user. Progress is saved at step %s; re-run to resume.",
                self.checkpoint_store.load(self.name),
            )
            return 1
        except StepExecutionError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.debug("Step failure details", exc_info=True)
            logger.error(
                actionable_error(
                    "step_failed",
                    index=exc.index,
                    label=exc.label,
                    last_completed=exc.last_completed,
                )
            )
            return 1
        except ProvisionerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1


def reset_checkpoint(username: Optional[str], checkpoint_dir: Optional[str] = None) -> int:
    """Forget recorded progress so the next run for ``username`` starts at step 1."""
    try:
        name = IdentityResolver().validate_username(username)
        checkpoint_store = CheckpointStore(logger=logger, checkpoint_dir=checkpoint_dir)
        if not checkpoint_store.exists(name):
            console.print(f"[yellow]No checkpoint recorded for '{name}'.[/yellow]")
            return 0
        checkpoint_store.clear(name)
    except ProvisionerError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        logger.error(str(exc))
        return 1

    console.print(f"[green]Checkpoint for '{name}' removed.[/green]")
    logger.info("Checkpoint %s removed", checkpoint_store.path_for(name))
    return 0
