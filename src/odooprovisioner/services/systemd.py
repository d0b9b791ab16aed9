"""systemd service activation helpers."""

from typing import Callable


class ServiceManager:
    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def activate(self, service_name: str):
        self.logger.info("Reloading systemd daemon and starting %s...", service_name)
        self.run_cmd(["systemctl", "daemon-reload"])
        self.run_cmd(["systemctl", "enable", service_name])
        self.run_cmd(["systemctl", "start", service_name])
        self.console.print(f"[green]Service {service_name} enabled and started.[/green]")
