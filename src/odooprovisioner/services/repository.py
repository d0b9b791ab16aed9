"""Git checkout helpers for OdooProvisioner."""

import os
import shutil
from typing import Callable, Optional

from odooprovisioner.errors import ProvisionerError


class RepositoryService:
    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def clone(
        self,
        url: str,
        destination: str,
        branch: Optional[str] = None,
        depth: Optional[int] = None,
    ) -> bool:
        """Clone ``url`` into ``destination`` unless a checkout already exists.

        A directory without ``.git`` is left over from an interrupted clone and
        is removed first. Returns True when a clone was performed.
        """
        if os.path.isdir(os.path.join(destination, ".git")):
            self.logger.info("Repository %s already exists. Skipping clone.", destination)
            return False

        if os.path.exists(destination):
            self.logger.warning("Removing incomplete checkout at %s before cloning.", destination)
            try:
                shutil.rmtree(destination)
            except OSError as exc:
                raise ProvisionerError(f"Could not remove incomplete checkout {destination}: {exc}") from exc

        cmd = ["git", "clone"]
        if depth:
            cmd += ["--depth", str(depth)]
        if branch:
            cmd += ["--branch", branch]
        cmd += [url, destination]

        self.console.print(f"[blue]Cloning {url} into {destination}...[/blue]")
        self.run_cmd(cmd)
        return True
