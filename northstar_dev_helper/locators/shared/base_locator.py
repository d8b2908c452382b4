"""
Base Artifact Locator

Every locator turns a pull request number and an already-fetched pull
request list into a concrete download URL.
"""
from typing import Optional, Sequence

from northstar_dev_helper.core.models import PullRequest
from northstar_dev_helper.utils.logger import get_logger
from .pull_request_lookup_mixin import PullRequestLookupMixin


class ArtifactLocator(PullRequestLookupMixin):
    """Base class for artifact locators"""

    def __init__(self, locator_name: Optional[str] = None):
        self.logger = get_logger(locator_name or self.__class__.__name__)

    def resolve(self, pr_number: int, pulls: Sequence[PullRequest]) -> str:
        """
        Resolve the download URL for a pull request build

        Raises:
            NotFoundError: the pull request or its build could not be found
        """
        raise NotImplementedError
