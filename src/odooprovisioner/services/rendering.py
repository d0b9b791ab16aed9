"""Odoo configuration and systemd unit rendering."""

import os

from odooprovisioner.models import RunContext


class RenderingService:
    """Builds the text of the files written for an instance."""

    def build_config_file(self, context: RunContext) -> str:
        addons_path = ",".join(
            [os.path.join(context.source_dir, "addons"), context.custom_addons_dir]
        )
        return f"""
[options]
; This is the password that allows database operations:
admin_passwd = {context.admin_password}
db_host = False
db_port = False
db_user = {context.user}
db_password = False
xmlrpc_port = {context.identity.port}
; Specify the addons path. Add your custom addons here.
addons_path = {addons_path}
logfile = {context.log_file}
data_dir = {context.data_dir}
""".lstrip()

    def build_service_unit(self, context: RunContext) -> str:
        python_bin = os.path.join(context.venv_dir, "bin", "python3")
        odoo_bin = os.path.join(context.source_dir, "odoo-bin")
        return f"""
[Unit]
Description=Odoo Server ({context.user})
Requires=postgresql.service
After=network.target postgresql.service

[Service]
Type=simple
SyslogIdentifier={context.user}-odoo
PermissionsStartOnly=true
User={context.user}
Group={context.user}
ExecStart="{python_bin}" "{odoo_bin}" -c "{context.config_path}"
WorkingDirectory={context.source_dir}
StandardOutput=journal+console

[Install]
WantedBy=multi-user.target
""".lstrip()
