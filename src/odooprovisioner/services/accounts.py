"""OS account, PostgreSQL role and SSH key management."""

import os
from typing import Callable

from odooprovisioner.constants import SSH_DIR_MODE
from odooprovisioner.models import RunContext


class AccountService:
    """Creates the instance user, its database role and its SSH keypair.

    Each ``ensure_*`` method checks whether the account or key already exists
    before creating it, so a step interrupted halfway can simply be re-run.
    """

    def __init__(self, logger, console, run_cmd: Callable, filesystem_service):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.filesystem_service = filesystem_service

    def set_system_timezone(self, timezone: str):
        self.logger.info("Setting system timezone to %s...", timezone)
        self.run_cmd(["timedatectl", "set-timezone", timezone])

    def group_exists(self, group: str) -> bool:
        result = self.run_cmd(["getent", "group", group], check=False, capture_output=True)
        return result.returncode == 0

    def user_exists(self, user: str) -> bool:
        result = self.run_cmd(["id", "-u", user], check=False, capture_output=True)
        return result.returncode == 0

    def ensure_system_user(self, context: RunContext):
        user = context.user

        if not self.group_exists(user):
            self.logger.info("Group '%s' does not exist. Creating it now...", user)
            self.run_cmd(["addgroup", "--system", user])

        if self.user_exists(user):
            self.logger.info("User '%s' already exists. Ensuring group membership...", user)
            self.run_cmd(["usermod", "-a", "-G", user, user])
            return

        self.logger.info("User '%s' does not exist. Creating it now...", user)
        self.run_cmd(
            [
                "adduser",
                "--system",
                "--shell=/bin/bash",
                "--gecos",
                "Odoo user",
                "--disabled-password",
                "--home",
                context.home_dir,
                "--ingroup",
                user,
                user,
            ]
        )
        self.run_cmd(["usermod", "-L", user])
        self.console.print(f"[green]User '{user}' created.[/green]")

    def db_role_exists(self, role: str) -> bool:
        result = self.run_cmd(
            ["psql", "-tAc", f"SELECT 1 FROM pg_roles WHERE rolname = '{role}'"],
            capture_output=True,
            as_user="postgres",
        )
        return (result.stdout or "").strip() == "1"

    def ensure_db_role(self, role: str):
        if self.db_role_exists(role):
            self.logger.info("PostgreSQL role '%s' already exists. Skipping creation.", role)
            return

        self.logger.info("Creating PostgreSQL role '%s' with superuser rights...", role)
        self.run_cmd(
            ["createuser", "--createdb", "--superuser", "--no-createrole", role],
            as_user="postgres",
        )
        self.console.print(f"[green]PostgreSQL role '{role}' created.[/green]")

    def set_db_role_timezone(self, role: str, timezone: str):
        self.run_cmd(
            ["psql", "-c", f"ALTER USER \"{role}\" SET TIMEZONE = '{timezone}';"],
            as_user="postgres",
        )

    def ensure_ssh_keypair(self, context: RunContext):
        private_key = os.path.join(context.ssh_dir, "id_rsa")
        self.filesystem_service.ensure_directory(context.ssh_dir, SSH_DIR_MODE)
        self.filesystem_service.chown(context.ssh_dir, context.user, recursive=True)

        public_key = f"{private_key}.pub"
        if os.path.exists(private_key) and os.path.exists(public_key):
            self.logger.info("SSH key %s already exists. Skipping generation.", private_key)
            return

        # ssh-keygen refuses to overwrite without a prompt; drop a half-written pair.
        for path in (private_key, public_key):
            if os.path.exists(path):
                self.logger.warning("Removing incomplete SSH key file %s.", path)
                os.remove(path)

        self.run_cmd(
            ["ssh-keygen", "-t", "rsa", "-b", "4096", "-f", private_key, "-N", "", "-q"],
            as_user=context.user,
        )
        self.console.print(f"[green]SSH key generated at {private_key}.[/green]")
