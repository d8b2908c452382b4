from .locator import LauncherLocator

__all__ = ['LauncherLocator']
