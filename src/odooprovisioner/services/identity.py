"""Instance identity and path derivation for OdooProvisioner."""

import os
import posixpath
import re
from typing import Optional
from urllib.parse import urlparse

from odooprovisioner.constants import (
    DEFAULT_HOME_ROOT,
    DEFAULT_ODOO_REPO_URL,
    DEFAULT_SYSTEMD_DIR,
    DEFAULT_TIMEZONE,
)
from odooprovisioner.errors import InvalidInputError
from odooprovisioner.errors_catalog import actionable_error
from odooprovisioner.models import InstanceIdentity, RunContext


class IdentityResolver:
    """Turns raw operator input into an identity and its derived paths."""

    USERNAME_PATTERN = re.compile(r"[a-z_][a-z0-9_-]{0,31}")
    MAX_PORT = 65535

    def __init__(
        self,
        home_root: str = DEFAULT_HOME_ROOT,
        systemd_dir: str = DEFAULT_SYSTEMD_DIR,
        timezone: str = DEFAULT_TIMEZONE,
        odoo_repo_url: str = DEFAULT_ODOO_REPO_URL,
    ):
        self.home_root = home_root
        self.systemd_dir = systemd_dir
        self.timezone = timezone
        self.odoo_repo_url = odoo_repo_url

    def resolve_identity(
        self,
        username: Optional[str],
        version: Optional[str],
        port,
        addons_url: Optional[str],
    ) -> InstanceIdentity:
        clean_username = self.validate_username(username)
        clean_version = self._require(version, "Odoo version", "version", "version")
        clean_port = self._require(port, "port", "port", "port")
        clean_addons_url = self._require(addons_url, "custom addons Git URL", "addons-url", "addons_url")

        return InstanceIdentity(
            name=clean_username,
            version=clean_version,
            port=self._parse_port(clean_port),
            addons_repo_url=clean_addons_url,
        )

    def validate_username(self, username: Optional[str]) -> str:
        clean_username = self._require(username, "username", "username", "username")
        if not self.USERNAME_PATTERN.fullmatch(clean_username):
            raise InvalidInputError(actionable_error("invalid_username", username=clean_username))
        return clean_username

    def build_run_context(self, identity: InstanceIdentity, admin_password: str) -> RunContext:
        name = identity.name
        home_dir = os.path.join(self.home_root, name)
        source_dir = os.path.join(home_dir, "odoo")
        data_dir = os.path.join(home_dir, "data")
        custom_addons_dir = os.path.join(home_dir, "custom-addons")
        service_name = f"{name}-odoo.service"

        return RunContext(
            identity=identity,
            home_dir=home_dir,
            source_dir=source_dir,
            venv_dir=os.path.join(source_dir, "venv"),
            data_dir=data_dir,
            custom_addons_dir=custom_addons_dir,
            addons_checkout_dir=os.path.join(
                custom_addons_dir, self.addons_dir_name(identity.addons_repo_url)
            ),
            ssh_dir=os.path.join(home_dir, ".ssh"),
            config_path=os.path.join(home_dir, f"{name}-odoo.conf"),
            service_name=service_name,
            service_unit_path=os.path.join(self.systemd_dir, service_name),
            log_file=os.path.join(data_dir, "odoo-server.log"),
            timezone=self.timezone,
            odoo_repo_url=self.odoo_repo_url,
            admin_password=admin_password,
        )

    @staticmethod
    def addons_dir_name(url: str) -> str:
        """Directory name `git clone` would pick for the repository URL."""
        parsed = urlparse(url)
        path = parsed.path if parsed.scheme else url.rsplit(":", 1)[-1]
        name = posixpath.basename(path.rstrip("/"))
        if name.endswith(".git"):
            name = name[: -len(".git")]
        if not name:
            raise InvalidInputError(f"Cannot derive a directory name from addons URL: {url}")
        return name

    def _parse_port(self, value: str) -> int:
        try:
            port = int(value)
        except (TypeError, ValueError):
            raise InvalidInputError(actionable_error("invalid_port", port=value)) from None

        if port < 1 or port > self.MAX_PORT:
            raise InvalidInputError(actionable_error("invalid_port", port=value))
        return port

    @staticmethod
    def _require(value, field: str, option: str, key: str) -> str:
        clean_value = str(value).strip() if value is not None else ""
        if not clean_value:
            raise InvalidInputError(
                actionable_error("missing_input", field=field, option=option, key=key)
            )
        return clean_value
