"""Filesystem helpers for OdooProvisioner."""

import logging
import os
import tempfile
from typing import Callable, Optional

from odooprovisioner.errors import ProvisionerError


class FileSystemService:
    """Encapsulates file, directory and ownership side effects."""

    def __init__(self, logger: logging.Logger, run_cmd: Callable):
        self.logger = logger
        self.run_cmd = run_cmd

    def set_permissions(self, path: str, mode: int):
        try:
            os.chmod(path, mode)
        except OSError as exc:
            raise ProvisionerError(f"Could not set permissions on {path}: {exc}") from exc

    def ensure_directory(self, path: str, mode: Optional[int] = None):
        if os.path.isdir(path):
            self.logger.debug("Directory already exists: %s", path)
        else:
            try:
                os.makedirs(path, exist_ok=True)
            except OSError as exc:
                raise ProvisionerError(f"Could not create directory {path}: {exc}") from exc
            self.logger.debug("Created directory: %s", path)

        if mode is not None:
            self.set_permissions(path, mode)

    def chown(self, path: str, owner: str, group: Optional[str] = None, recursive: bool = False):
        if group is None:
            group = owner
        cmd = ["chown"]
        if recursive:
            cmd.append("-R")
        cmd += [f"{owner}:{group}", path]
        self.run_cmd(cmd)

    def write_file(self, path: str, content: str, mode: Optional[int] = None):
        """Atomically replace ``path`` with ``content``."""
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as file_obj:
                file_obj.write(content)
            if mode is not None:
                os.chmod(temp_path, mode)
            os.replace(temp_path, path)
        except OSError as exc:
            raise ProvisionerError(f"Could not write file '{path}': {exc}") from exc
        finally:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass

        self.logger.debug("Wrote file: %s", path)
