"""
Shared Pull Request Lookup Mixin

Provides the pull request lookup used by every artifact locator.
"""
from typing import Iterable

from northstar_dev_helper.core.errors import NotFoundError
from northstar_dev_helper.core.models import PullRequest


class PullRequestLookupMixin:
    """Mixin providing pull request lookup by number"""

    def _find_pull_request(self, pr_number: int, pulls: Iterable[PullRequest]) -> PullRequest:
        """
        Find a pull request by number

        The first entry with a matching number wins. A list holding the same
        number twice is a caller data error and is not detected here.

        Raises:
            NotFoundError: no entry has that number
        """
        for pull in pulls:
            if pull.number == pr_number:
                self.logger.debug(f"Matched PR #{pr_number}: {pull.title!r} ({pull.head_sha})")
                return pull

        raise NotFoundError(f"Pull request #{pr_number} not found in fetched list")
