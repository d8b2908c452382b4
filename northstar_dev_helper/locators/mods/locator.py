"""
Mods Locator

NorthstarMods pull requests are applied straight from a source snapshot of
the PR's head branch, so no CI lookup is involved.
"""
from typing import Sequence

from northstar_dev_helper.constants import GITHUB_HOST
from northstar_dev_helper.core.errors import NotFoundError
from northstar_dev_helper.core.models import PullRequest
from northstar_dev_helper.locators.shared import ArtifactLocator


class ModsLocator(ArtifactLocator):
    """Resolves a NorthstarMods PR to the zip archive of its head branch"""

    def __init__(self, host: str = GITHUB_HOST):
        super().__init__(locator_name="ModsLocator")
        self.host = host

    def resolve(self, pr_number: int, pulls: Sequence[PullRequest]) -> str:
        # Assumes the head branch still exists and is publicly downloadable
        pull = self._find_pull_request(pr_number, pulls)

        if not pull.head_repo_full_name:
            raise NotFoundError(f"Head repository of PR #{pr_number} no longer exists")

        download_url = f"https://{self.host}/{pull.head_repo_full_name}/archive/refs/heads/{pull.head_ref}.zip"
        self.logger.info(f"Resolved PR #{pr_number} to {download_url}")
        return download_url
