"""System and Node package installation helpers."""

import shutil
from typing import Callable, Iterable

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class PackageService:
    """Wraps apt-get and npm; every operation is safe to repeat."""

    def __init__(self, logger, console, run_cmd: Callable, which: Callable = shutil.which):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.which = which

    def is_command_available(self, command: str) -> bool:
        return self.which(command) is not None

    def apt_update(self):
        self.run_cmd(["apt-get", "update"], env=APT_ENV)

    def apt_upgrade(self):
        self.run_cmd(["apt-get", "upgrade", "-y"], env=APT_ENV)

    def apt_install(self, packages: Iterable[str]):
        package_list = list(packages)
        self.logger.info("Installing system packages: %s", ", ".join(package_list))
        self.run_cmd(["apt-get", "install", "-y"] + package_list, env=APT_ENV)

    def npm_install_global(self, packages: Iterable[str]):
        package_list = list(packages)
        self.logger.info("Installing global npm packages: %s", ", ".join(package_list))
        self.run_cmd(["npm", "install", "-g"] + package_list)

    def ensure_postgresql(self, packages: Iterable[str]):
        if self.is_command_available("psql"):
            self.console.print("[green]PostgreSQL is already installed. Skipping installation.[/green]")
            return

        self.console.print("[yellow]PostgreSQL not found. Installing now...[/yellow]")
        self.apt_update()
        self.apt_install(packages)
