import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_HOME_ROOT,
    DEFAULT_ODOO_REPO_URL,
    DEFAULT_SYSTEMD_DIR,
    DEFAULT_TIMEZONE,
)
from .core import OdooProvisioner, ProvisionerError, reset_checkpoint
from .services.config_loader import ConfigLoader

PROMPTS = {
    "username": "Enter the new username for the Odoo instance",
    "version": "Enter the Odoo version (e.g., 18.0, 17.0)",
    "port": "Enter the port for this Odoo instance (e.g., 8069)",
    "addons_url": (
        "Enter the Git URL for your custom addons "
        "(e.g., https://github.com/myuser/my-custom-addons)"
    ),
}


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _prompt_if_missing(value, key):
    if value is not None and str(value).strip():
        return value
    return click.prompt(PROMPTS[key], default="", show_default=False)


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option("--username", required=False, help="System user, PostgreSQL role and service prefix")
@click.option("--version", required=False, help="Odoo branch or tag to clone (e.g. 18.0)")
@click.option("--port", required=False, help="HTTP port for the Odoo instance")
@click.option("--addons-url", required=False, help="Git URL of the custom addons repository")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--timezone", required=False, help=f"System and PostgreSQL timezone (default: {DEFAULT_TIMEZONE})")
@click.option("--odoo-repo-url", required=False, help="Git URL of the Odoo source repository")
@click.option(
    "--admin-password",
    required=False,
    help="Odoo master password. A random one is generated when omitted.",
)
@click.option(
    "--checkpoint-dir",
    required=False,
    type=click.Path(),
    help="Directory holding checkpoint files (default: system temp directory).",
)
@click.option("--home-root", required=False, type=click.Path(), help="Parent of the instance home directory")
@click.option("--systemd-dir", required=False, type=click.Path(), help="Directory for the systemd unit")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Show which steps would run or be skipped without changing the system.",
)
@click.option(
    "--reset",
    is_flag=True,
    default=False,
    help="Delete the checkpoint for the username so the next run starts from step 1.",
)
@click.option(
    "--skip-root-check",
    is_flag=True,
    default=None,
    help="Do not require root privileges before running steps.",
)
def main(
    username,
    version,
    port,
    addons_url,
    config,
    timezone,
    odoo_repo_url,
    admin_password,
    checkpoint_dir,
    home_root,
    systemd_dir,
    verbose,
    log_file,
    dry_run,
    reset,
    skip_root_check,
):
    """Provision an Odoo instance, resuming from the last completed step."""
    logger = logging.getLogger("odooprovisioner")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except ProvisionerError as exc:
        raise click.ClickException(str(exc)) from exc

    username = _resolve_option(username, config_values, "username")
    version = _resolve_option(version, config_values, "version")
    port = _resolve_option(port, config_values, "port")
    addons_url = _resolve_option(addons_url, config_values, "addons_url")
    timezone = _resolve_option(timezone, config_values, "timezone", default=DEFAULT_TIMEZONE)
    odoo_repo_url = _resolve_option(odoo_repo_url, config_values, "odoo_repo_url", default=DEFAULT_ODOO_REPO_URL)
    admin_password = _resolve_option(admin_password, config_values, "admin_password")
    checkpoint_dir = _resolve_option(checkpoint_dir, config_values, "checkpoint_dir")
    home_root = _resolve_option(home_root, config_values, "home_root", default=DEFAULT_HOME_ROOT)
    systemd_dir = _resolve_option(systemd_dir, config_values, "systemd_dir", default=DEFAULT_SYSTEMD_DIR)
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    skip_root_check = bool(
        _resolve_option(skip_root_check, config_values, "skip_root_check", default=False)
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    username = _prompt_if_missing(username, "username")
    if reset:
        raise SystemExit(reset_checkpoint(username, checkpoint_dir=checkpoint_dir))

    version = _prompt_if_missing(version, "version")
    port = _prompt_if_missing(port, "port")
    addons_url = _prompt_if_missing(addons_url, "addons_url")

    try:
        provisioner = OdooProvisioner(
            username=username,
            version=str(version),
            port=port,
            addons_url=addons_url,
            timezone=timezone,
            odoo_repo_url=odoo_repo_url,
            admin_password=admin_password,
            checkpoint_dir=checkpoint_dir,
            home_root=home_root,
            systemd_dir=systemd_dir,
            verbose=verbose,
            dry_run=dry_run,
            require_root=not skip_root_check,
        )
    except ProvisionerError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(provisioner.run())


if __name__ == "__main__":
    main()
