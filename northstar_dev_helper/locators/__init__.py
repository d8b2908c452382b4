"""
Artifact Locators

Turn a pull request number plus already-fetched pull request data into a
download URL.

Supported targets:
- NorthstarMods - source archive of the PR's head branch
- NorthstarLauncher - CI artifact built from the PR's head commit
"""

from .shared import ArtifactLocator
from .mods import ModsLocator
from .launcher import LauncherLocator

__all__ = ['ArtifactLocator', 'ModsLocator', 'LauncherLocator']
