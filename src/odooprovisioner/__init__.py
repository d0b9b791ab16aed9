"""
OdooProvisioner - Resumable Odoo instance provisioning
"""

__version__ = "0.3.0"

from .core import OdooProvisioner, ProvisionerError

__all__ = ["OdooProvisioner", "ProvisionerError"]
