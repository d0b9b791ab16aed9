"""Virtual environment management for the Odoo runtime."""

import os
from typing import Callable, Iterable

from odooprovisioner.models import RunContext


class VirtualEnvService:
    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def pip_path(self, context: RunContext) -> str:
        return os.path.join(context.venv_dir, "bin", "pip3")

    def interpreter_path(self, context: RunContext) -> str:
        return os.path.join(context.venv_dir, "bin", "python3")

    def ensure_venv(self, context: RunContext):
        if os.path.exists(self.interpreter_path(context)):
            self.logger.info("Virtual environment already exists. Skipping creation.")
            return

        # `python3 -m venv` fills in a partially created directory in place.
        self.logger.info("Creating Python virtual environment at %s...", context.venv_dir)
        self.run_cmd(["python3", "-m", "venv", context.venv_dir], as_user=context.user)

    def install_requirements(self, context: RunContext, extra_packages: Iterable[str]):
        pip = self.pip_path(context)
        requirements = os.path.join(context.source_dir, "requirements.txt")

        self.console.print("[blue]Installing Python packages from Odoo requirements.txt...[/blue]")
        self.run_cmd([pip, "install", "--no-cache-dir", "-r", requirements], as_user=context.user)

        extras = list(extra_packages)
        if extras:
            self.logger.info("Installing additional Python packages: %s", ", ".join(extras))
            self.run_cmd([pip, "install", "--no-cache-dir"] + extras, as_user=context.user)
