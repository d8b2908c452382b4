"""
Data records parsed from GitHub API responses

Responses are turned into fixed-shape records as soon as they arrive so the
rest of the code never walks raw JSON. Any shape mismatch raises ParseError.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from northstar_dev_helper.constants import NEEDS_TESTING_LABEL
from northstar_dev_helper.core.errors import ParseError


class TargetKind(Enum):
    """Which product an apply operation installs"""
    MODS = "mods"
    LAUNCHER = "launcher"


def _require(data: Dict[str, Any], key: str, expected: type, context: str) -> Any:
    if not isinstance(data, dict):
        raise ParseError(f"{context}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ParseError(f"{context}: missing field '{key}'")
    value = data[key]
    # bool is an int subclass, reject it where an integer id is expected
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ParseError(f"{context}: field '{key}' should be {expected.__name__}, got {type(value).__name__}")
    return value


def _optional_str(data: Dict[str, Any], key: str, context: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"{context}: field '{key}' should be str or null")
    return value


def _require_list(data: Any, key: str, context: str) -> List[Any]:
    return _require(data, key, list, context)


@dataclass(frozen=True)
class PullRequest:
    """Snapshot of one pull request from a single API fetch"""
    number: int
    title: str
    head_ref: str
    head_sha: str
    head_repo_full_name: Optional[str] = None
    merge_commit_sha: Optional[str] = None
    html_url: str = ""
    labels: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        number = _require(data, "number", int, "pull request")
        context = f"pull request #{number}"
        head = _require(data, "head", dict, context)

        # GitHub reports `repo: null` once the fork behind a PR is deleted
        repo = head.get("repo")
        repo_full_name = None
        if repo is not None:
            repo_full_name = _require(repo, "full_name", str, f"{context} head.repo")

        labels = []
        for label in data.get("labels") or []:
            labels.append(_require(label, "name", str, f"{context} label"))

        return cls(
            number=number,
            title=data.get("title") or "",
            head_ref=_require(head, "ref", str, f"{context} head"),
            head_sha=_require(head, "sha", str, f"{context} head"),
            head_repo_full_name=repo_full_name,
            merge_commit_sha=_optional_str(data, "merge_commit_sha", context),
            html_url=data.get("html_url") or "",
            labels=tuple(labels),
        )

    @property
    def display_name(self) -> str:
        return f"{self.number}: {self.title}"

    @property
    def needs_testing(self) -> bool:
        return NEEDS_TESTING_LABEL in self.labels

    def matches_filter(self, text: str) -> bool:
        """Case-insensitive substring match over "<number>: <title>"."""
        return text.lower() in self.display_name.lower()


@dataclass(frozen=True)
class WorkflowRun:
    """One CI execution"""
    id: int
    head_sha: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkflowRun":
        return cls(
            id=_require(data, "id", int, "workflow run"),
            head_sha=_require(data, "head_sha", str, "workflow run"),
        )


@dataclass(frozen=True)
class Artifact:
    """A downloadable build output of a workflow run"""
    id: int
    head_sha: str
    name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Artifact":
        artifact_id = _require(data, "id", int, "artifact")
        context = f"artifact {artifact_id}"
        run = _require(data, "workflow_run", dict, context)
        return cls(
            id=artifact_id,
            head_sha=_require(run, "head_sha", str, f"{context} workflow_run"),
            name=data.get("name") or "",
        )


def parse_pull_requests(data: Any) -> List[PullRequest]:
    """Parse the body of GET /repos/{owner}/{repo}/pulls"""
    if not isinstance(data, list):
        raise ParseError(f"pull request list: expected an array, got {type(data).__name__}")
    return [PullRequest.from_api(entry) for entry in data]


def parse_workflow_runs(data: Any) -> List[WorkflowRun]:
    """Parse the body of GET /repos/{owner}/{repo}/actions/runs"""
    return [WorkflowRun.from_api(entry) for entry in _require_list(data, "workflow_runs", "workflow run list")]


def parse_artifacts(data: Any) -> List[Artifact]:
    """Parse the body of GET /repos/{owner}/{repo}/actions/runs/{id}/artifacts"""
    return [Artifact.from_api(entry) for entry in _require_list(data, "artifacts", "artifact list")]
