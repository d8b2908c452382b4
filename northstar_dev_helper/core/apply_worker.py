"""
Apply Worker

Runs apply operations on a single background thread so a front end never
blocks on network or disk I/O, and so two applies never touch the same game
install at the same time.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Sequence, Union

from northstar_dev_helper.core.models import PullRequest, TargetKind
from northstar_dev_helper.core.pipeline import ApplyResult, PrApplyPipeline
from northstar_dev_helper.utils.logger import get_logger


class ApplyWorker:
    """Single-worker queue in front of a PrApplyPipeline"""

    def __init__(self, pipeline: PrApplyPipeline):
        self.pipeline = pipeline
        self.logger = get_logger(__name__)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pr-apply")
        self._lock = threading.Lock()
        self._pending = 0

    @property
    def busy(self) -> bool:
        """True while an apply is queued or running"""
        with self._lock:
            return self._pending > 0

    def submit(self,
               pr_number: int,
               target: TargetKind,
               pulls: Sequence[PullRequest],
               game_path: Union[str, Path]) -> "Future[ApplyResult]":
        """
        Queue an apply operation

        Returns:
            Future resolving to the ApplyResult

        Raises:
            RuntimeError: the worker was shut down
        """
        # Copy so later changes to the caller's list don't race the worker
        pulls = list(pulls)
        with self._lock:
            future = self._executor.submit(self._run, pr_number, target, pulls, game_path)
            self._pending += 1
        self.logger.debug(f"Queued {target.value} PR #{pr_number}")
        return future

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def _run(self, pr_number, target, pulls, game_path) -> ApplyResult:
        try:
            return self.pipeline.apply(pr_number, target, pulls, game_path)
        finally:
            with self._lock:
                self._pending -= 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
