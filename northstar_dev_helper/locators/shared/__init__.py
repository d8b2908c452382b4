"""
Shared Locator Code

Base class and mixins shared by the mods and launcher locators.
"""

from .pull_request_lookup_mixin import PullRequestLookupMixin
from .base_locator import ArtifactLocator

__all__ = ['PullRequestLookupMixin', 'ArtifactLocator']
