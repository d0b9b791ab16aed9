"""Checkpoint persistence service for resumable provisioning runs."""

import os
import re
import tempfile
from typing import Optional

from odooprovisioner.constants import CHECKPOINT_FILE_PREFIX
from odooprovisioner.errors import StoreIOError
from odooprovisioner.errors_catalog import actionable_error


class CheckpointStore:
    """Stores the index of the last completed step, one plain-text file per instance.

    The file holds a single decimal integer so an operator can inspect it or
    reset progress by hand. Writes go through a temporary file in the same
    directory followed by ``os.replace``, so a crash leaves either the old or
    the new value on disk.
    """

    def __init__(self, logger, checkpoint_dir: Optional[str] = None):
        self.logger = logger
        self.checkpoint_dir = checkpoint_dir or tempfile.gettempdir()

    def path_for(self, name: str) -> str:
        return os.path.join(self.checkpoint_dir, f"{CHECKPOINT_FILE_PREFIX}{name}")

    def exists(self, name: str) -> bool:
        return os.path.exists(self.path_for(name))

    def read(self, name: str) -> int:
        path = self.path_for(name)
        if not os.path.exists(path):
            return 0

        try:
            with open(path, "r", encoding="utf-8") as file_obj:
                raw_value = file_obj.read().strip()
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreIOError(f"Could not read checkpoint file '{path}': {exc}") from exc

        if not re.fullmatch(r"[0-9]+", raw_value):
            raise StoreIOError(f"Checkpoint file '{path}' has invalid content: {raw_value!r}")
        return int(raw_value)

    def load(self, name: str) -> int:
        try:
            return self.read(name)
        except StoreIOError as exc:
            self.logger.warning("%s Starting from the first step.", exc)
            return 0

    def save(self, name: str, index: int):
        if index < 0:
            raise StoreIOError(f"Checkpoint index must be non-negative, got {index}.")

        path = self.path_for(name)
        os.makedirs(self.checkpoint_dir, exist_ok=True)

        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{CHECKPOINT_FILE_PREFIX}{name}-",
                suffix=".tmp",
                dir=self.checkpoint_dir,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                file_obj.write(f"{index}\n")
                file_obj.flush()
                os.fsync(file_obj.fileno())
            os.replace(temp_path, path)
        except OSError as exc:
            raise StoreIOError(
                f"{actionable_error('checkpoint_unwritable', path=path)} ({exc})"
            ) from exc
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass

        self.logger.debug("Checkpoint for '%s' saved at step %s", name, index)

    def clear(self, name: str):
        path = self.path_for(name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StoreIOError(f"Could not remove checkpoint file '{path}': {exc}") from exc
        self.logger.debug("Checkpoint for '%s' cleared", name)
