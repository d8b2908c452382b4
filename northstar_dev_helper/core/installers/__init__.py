"""
Installer modules

This package contains the base installer class, download/extraction
utilities and the installation manager that writes into the game directory.
"""

from northstar_dev_helper.core.installers.base.base_installer import BaseInstaller
from northstar_dev_helper.core.installers.installation_manager import InstallationManager

__all__ = ['BaseInstaller', 'InstallationManager']
