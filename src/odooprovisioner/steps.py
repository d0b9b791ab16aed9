"""The ordered provisioning steps for a single Odoo instance.

Every body must tolerate being re-entered after a crash halfway through
itself: the primary effect is guarded by an existence check, while
ownership, permission and package installation sub-actions are re-applied
unconditionally because repeating them is harmless.
"""

from typing import List

from .constants import (
    CONFIG_FILE_MODE,
    DIR_MODE,
    EXTRA_PYTHON_PACKAGES,
    NODE_PACKAGES,
    NPM_LESS_PACKAGES,
    NPM_RTL_PACKAGES,
    PDF_PACKAGES,
    POSTGRES_PACKAGES,
    SERVICE_UNIT_MODE,
    SYSTEM_PACKAGES,
)
from .models import RunContext, StepDefinition


class ProvisioningSteps:
    def __init__(
        self,
        logger,
        package_service,
        account_service,
        repository_service,
        virtualenv_service,
        filesystem_service,
        rendering_service,
        service_manager,
    ):
        self.logger = logger
        self.packages = package_service
        self.accounts = account_service
        self.repository = repository_service
        self.virtualenv = virtualenv_service
        self.filesystem = filesystem_service
        self.rendering = rendering_service
        self.service_manager = service_manager

    def definitions(self) -> List[StepDefinition]:
        bodies = [
            ("Check & Install PostgreSQL", self.install_postgresql),
            ("Set Timezone", self.set_timezone),
            ("Create System User and PostgreSQL User", self.create_users),
            ("Git Clone Odoo Source Code", self.clone_odoo_source),
            ("Install System Dependencies", self.install_system_dependencies),
            (
                "Create Virtual Environment and Install Python Dependencies",
                self.create_virtualenv,
            ),
            ("Install LESS CSS dependencies", self.install_less),
            ("Create Odoo Directories", self.create_directories),
            ("Generate SSH Key for User", self.generate_ssh_key),
            ("Clone Custom Odoo Addons", self.clone_custom_addons),
            ("Create Odoo Configuration File", self.write_config_file),
            ("Create Systemd Service File", self.write_service_unit),
            ("Set Ownership and Permissions", self.fix_ownership),
            ("Start and Enable Odoo Service", self.start_service),
        ]
        return [
            StepDefinition(index=index, label=label, body=body)
            for index, (label, body) in enumerate(bodies, start=1)
        ]

    def install_postgresql(self, context: RunContext):
        self.packages.ensure_postgresql(POSTGRES_PACKAGES)

    def set_timezone(self, context: RunContext):
        self.accounts.set_system_timezone(context.timezone)

    def create_users(self, context: RunContext):
        self.accounts.ensure_system_user(context)
        self.accounts.ensure_db_role(context.user)
        self.accounts.set_db_role_timezone(context.user, context.timezone)

    def clone_odoo_source(self, context: RunContext):
        self.repository.clone(
            context.odoo_repo_url,
            context.source_dir,
            branch=context.identity.version,
            depth=1,
        )
        self.filesystem.chown(context.source_dir, context.user, recursive=True)

    def install_system_dependencies(self, context: RunContext):
        self.packages.apt_update()
        self.packages.apt_upgrade()
        self.packages.apt_install(SYSTEM_PACKAGES)
        self.packages.apt_install(NODE_PACKAGES)
        self.packages.npm_install_global(NPM_RTL_PACKAGES)
        self.packages.apt_install(PDF_PACKAGES)

    def create_virtualenv(self, context: RunContext):
        self.virtualenv.ensure_venv(context)
        self.virtualenv.install_requirements(context, EXTRA_PYTHON_PACKAGES)

    def install_less(self, context: RunContext):
        self.packages.npm_install_global(NPM_LESS_PACKAGES)

    def create_directories(self, context: RunContext):
        for path in (context.data_dir, context.custom_addons_dir):
            self.filesystem.ensure_directory(path, DIR_MODE)
            self.filesystem.chown(path, context.user)

    def generate_ssh_key(self, context: RunContext):
        self.accounts.ensure_ssh_keypair(context)

    def clone_custom_addons(self, context: RunContext):
        self.repository.clone(context.identity.addons_repo_url, context.addons_checkout_dir)
        self.filesystem.chown(context.addons_checkout_dir, context.user, recursive=True)

    def write_config_file(self, context: RunContext):
        self.logger.info("Creating Odoo configuration file at %s...", context.config_path)
        self.filesystem.write_file(
            context.config_path,
            self.rendering.build_config_file(context),
            mode=CONFIG_FILE_MODE,
        )
        self.filesystem.chown(context.config_path, context.user)

    def write_service_unit(self, context: RunContext):
        self.logger.info("Creating systemd service file at %s...", context.service_unit_path)
        self.filesystem.write_file(
            context.service_unit_path,
            self.rendering.build_service_unit(context),
            mode=SERVICE_UNIT_MODE,
        )

    def fix_ownership(self, context: RunContext):
        for path in (context.source_dir, context.data_dir, context.custom_addons_dir):
            self.filesystem.chown(path, context.user, recursive=True)

        self.filesystem.set_permissions(context.service_unit_path, SERVICE_UNIT_MODE)
        self.filesystem.chown(context.service_unit_path, "root")

    def start_service(self, context: RunContext):
        self.service_manager.activate(context.service_name)
