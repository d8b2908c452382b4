"""
GitHub API Client

Unauthenticated JSON GETs against the GitHub REST API. No retries: the caller
decides whether a failed fetch is worth repeating.
"""

from typing import Any, Dict, List, Optional

import requests

from northstar_dev_helper.constants import USER_AGENT
from northstar_dev_helper.core.errors import HttpStatusError, NetworkError, ParseError
from northstar_dev_helper.core.models import PullRequest, parse_pull_requests
from northstar_dev_helper.utils.logger import get_logger


class ApiClient:
    """Fetches and decodes JSON documents"""

    def __init__(self, timeout: Optional[float] = 30, user_agent: str = USER_AGENT):
        """
        Initialize the API client

        Args:
            timeout: Seconds before a request is abandoned (None waits forever)
            user_agent: Value of the User-Agent header sent with every request
        """
        self.timeout = timeout
        self.headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "application/vnd.github+json",
        }
        self.logger = get_logger(__name__)

    def fetch(self, url: str) -> Any:
        """
        GET a URL and return its decoded JSON body

        Raises:
            NetworkError: the request could not be completed
            HttpStatusError: the server answered with a non-success status
            ParseError: the body is not well-formed JSON
        """
        self.logger.debug(f"GET {url}")
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            self.logger.error(f"GitHub API returned {response.status_code} for {url}")
            raise HttpStatusError(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Response from {url} is not valid JSON: {e}") from e

    def fetch_pull_requests(self, url: str) -> List[PullRequest]:
        """Fetch and parse an open pull request list"""
        self.logger.info(f"Fetching pull requests from {url}")
        pulls = parse_pull_requests(self.fetch(url))
        self.logger.info(f"Fetched {len(pulls)} pull request(s)")
        return pulls
