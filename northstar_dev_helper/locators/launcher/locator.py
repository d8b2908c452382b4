"""
Launcher Locator

NorthstarLauncher builds only exist as CI artifacts, so a pull request is
resolved in stages: PR -> head commit -> workflow run -> artifact -> redirect
URL. The artifact URL goes through a public redirect service because GitHub
only serves artifact downloads to authenticated users.
"""
from typing import Optional, Sequence

from northstar_dev_helper.constants import (
    ARTIFACT_REDIRECT_HOST,
    LAUNCHER_REPO,
    LAUNCHER_RUN_ARTIFACTS_URL,
    LAUNCHER_RUNS_URL,
)
from northstar_dev_helper.core.api_client import ApiClient
from northstar_dev_helper.core.errors import NotFoundError
from northstar_dev_helper.core.models import (
    Artifact,
    PullRequest,
    WorkflowRun,
    parse_artifacts,
    parse_workflow_runs,
)
from northstar_dev_helper.locators.shared import ArtifactLocator


class LauncherLocator(ArtifactLocator):
    """Resolves a NorthstarLauncher PR to the CI artifact built from its head commit

    Matching is first-match-wins at every stage. When several runs or
    artifacts share the PR's head SHA, the first one listed is used, not the
    most recent one.
    """

    def __init__(self,
                 api_client: ApiClient,
                 runs_url: str = LAUNCHER_RUNS_URL,
                 run_artifacts_url: str = LAUNCHER_RUN_ARTIFACTS_URL,
                 redirect_host: str = ARTIFACT_REDIRECT_HOST,
                 repo: str = LAUNCHER_REPO):
        """
        Initialize the launcher locator

        Args:
            api_client: Client used for the workflow run and artifact lookups
            runs_url: Workflow run list endpoint
            run_artifacts_url: Artifact list endpoint, formatted with ``run_id``
            redirect_host: Host of the artifact redirect service
            repo: "owner/name" of the repository the artifacts belong to
        """
        super().__init__(locator_name="LauncherLocator")
        self.api_client = api_client
        self.runs_url = runs_url
        self.run_artifacts_url = run_artifacts_url
        self.redirect_host = redirect_host
        self.repo = repo

    def resolve(self, pr_number: int, pulls: Sequence[PullRequest]) -> str:
        pull = self._find_pull_request(pr_number, pulls)
        commit_sha = pull.head_sha
        self.logger.info(f"PR #{pr_number} head commit: {commit_sha}")

        run = self._find_workflow_run(commit_sha)
        if run is None:
            raise NotFoundError(f"No workflow run found for head commit {commit_sha} of PR #{pr_number}")
        self.logger.info(f"Found workflow run {run.id} for {commit_sha}")

        artifact = self._find_artifact(run, commit_sha)
        if artifact is None:
            raise NotFoundError(f"No artifact found in workflow run {run.id} for commit {commit_sha}")
        self.logger.info(f"Found artifact {artifact.id} ({artifact.name or 'unnamed'})")

        download_url = self.build_download_url(artifact.id)
        self.logger.info(f"Resolved PR #{pr_number} to {download_url}")
        return download_url

    def build_download_url(self, artifact_id: int) -> str:
        return f"https://{self.redirect_host}/{self.repo}/actions/artifacts/{artifact_id}.zip"

    def _find_workflow_run(self, commit_sha: str) -> Optional[WorkflowRun]:
        runs = parse_workflow_runs(self.api_client.fetch(self.runs_url))
        for run in runs:
            if run.head_sha == commit_sha:
                return run
        self.logger.warning(f"None of {len(runs)} workflow run(s) match {commit_sha}")
        return None

    def _find_artifact(self, run: WorkflowRun, commit_sha: str) -> Optional[Artifact]:
        url = self.run_artifacts_url.format(run_id=run.id)
        artifacts = parse_artifacts(self.api_client.fetch(url))
        for artifact in artifacts:
            if artifact.head_sha == commit_sha:
                return artifact
        self.logger.warning(f"None of {len(artifacts)} artifact(s) of run {run.id} match {commit_sha}")
        return None
