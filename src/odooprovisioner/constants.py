"""Shared defaults for OdooProvisioner."""

DIR_MODE = 0o755
CONFIG_FILE_MODE = 0o640
SERVICE_UNIT_MODE = 0o755
SSH_DIR_MODE = 0o700

DEFAULT_HOME_ROOT = "/home"
DEFAULT_SYSTEMD_DIR = "/etc/systemd/system"
DEFAULT_TIMEZONE = "Asia/Riyadh"
DEFAULT_ODOO_REPO_URL = "https://www.github.com/odoo/odoo"
DEFAULT_CONFIG_FILE = ".odooprovisioner.yml"

CHECKPOINT_FILE_PREFIX = "odoo_setup_checkpoint_"

POSTGRES_PACKAGES = ("postgresql", "postgresql-contrib")

SYSTEM_PACKAGES = (
    "git",
    "python3-cffi",
    "build-essential",
    "wget",
    "python3-dev",
    "python3-venv",
    "python3-wheel",
    "libxslt-dev",
    "libzip-dev",
    "libldap2-dev",
    "libsasl2-dev",
    "python3-setuptools",
    "node-less",
    "libpng-dev",
    "libjpeg-dev",
    "gdebi",
    "libpq-dev",
)
NODE_PACKAGES = ("nodejs", "npm")
PDF_PACKAGES = ("wkhtmltopdf",)

NPM_RTL_PACKAGES = ("rtlcss",)
NPM_LESS_PACKAGES = ("less", "less-plugin-clean-css")

EXTRA_PYTHON_PACKAGES = (
    "num2words",
    "ofxparse",
    "dbfread",
    "ebaysdk",
    "firebase_admin",
    "pyOpenSSL",
)
