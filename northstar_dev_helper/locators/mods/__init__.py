from .locator import ModsLocator

__all__ = ['ModsLocator']
