"""
Base installer classes

This module contains the base installer class the apply pipeline inherits from.
"""

from northstar_dev_helper.core.installers.base.base_installer import BaseInstaller

__all__ = ['BaseInstaller']
