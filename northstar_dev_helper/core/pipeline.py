"""
Pull Request Apply Pipeline

Main orchestration for applying one pull request build to a game install:

    IDLE -> PATH_VALIDATED -> URL_RESOLVED -> DOWNLOADED -> EXTRACTED
         -> INSTALLED -> CLEANED_UP

Any stage may end in FAILED instead. Validation, resolution and download
failures happen before the game directory is touched. Nothing is retried or
rolled back across stages.

The pipeline is synchronous and not safe to run twice at once against the
same game install; use ApplyWorker to serialize applies off the UI thread.
"""
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from northstar_dev_helper.constants import (
    LAUNCHER_DOWNLOAD_NAME,
    LAUNCHER_EXTRACT_DIR,
    LAUNCHER_FILES,
    MANAGED_MODS_SUBFOLDER,
    MODS_DOWNLOAD_NAME,
)
from northstar_dev_helper.core.api_client import ApiClient
from northstar_dev_helper.core.errors import ArchiveError, FilesystemError, NorthstarHelperError
from northstar_dev_helper.core.installers.base.base_installer import BaseInstaller
from northstar_dev_helper.core.installers.installation_manager import InstallationManager
from northstar_dev_helper.core.installers.utils.archive_extractor import full_extract, selective_extract
from northstar_dev_helper.core.installers.utils.downloader import Downloader
from northstar_dev_helper.core.models import PullRequest, TargetKind
from northstar_dev_helper.locators import ArtifactLocator, LauncherLocator, ModsLocator
from northstar_dev_helper.utils.paths import get_work_dir


DOWNLOAD_NAMES = {
    TargetKind.MODS: MODS_DOWNLOAD_NAME,
    TargetKind.LAUNCHER: LAUNCHER_DOWNLOAD_NAME,
}


class ApplyState(Enum):
    IDLE = "idle"
    PATH_VALIDATED = "path_validated"
    URL_RESOLVED = "url_resolved"
    DOWNLOADED = "downloaded"
    EXTRACTED = "extracted"
    INSTALLED = "installed"
    CLEANED_UP = "cleaned_up"
    FAILED = "failed"


@dataclass
class ApplyResult:
    """Outcome of one apply operation"""
    pr_number: int
    target: TargetKind
    state: ApplyState = ApplyState.IDLE
    last_state: ApplyState = ApplyState.IDLE  # last stage that completed
    download_url: Optional[str] = None
    installed_to: Optional[Path] = None
    error: Optional[Exception] = None
    warnings: List[str] = field(default_factory=list)
    partially_applied: bool = False

    @property
    def success(self) -> bool:
        return self.state is ApplyState.CLEANED_UP

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "pr_number": self.pr_number,
            "target": self.target.value,
            "state": self.state.value,
            "last_state": self.last_state.value,
            "download_url": self.download_url,
            "installed_to": str(self.installed_to) if self.installed_to else None,
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
            "warnings": list(self.warnings),
            "partially_applied": self.partially_applied,
        }


class PrApplyPipeline(BaseInstaller):
    """Resolves, downloads, extracts and installs a pull request build"""

    def __init__(self,
                 work_root: Optional[Union[str, Path]] = None,
                 timeout: Optional[float] = 30,
                 api_client: Optional[ApiClient] = None,
                 downloader: Optional[Downloader] = None,
                 installation_manager: Optional[InstallationManager] = None,
                 locators: Optional[Dict[TargetKind, ArtifactLocator]] = None):
        """
        Initialize the pipeline

        Args:
            work_root: Directory under which per-apply working directories are created
            timeout: HTTP timeout in seconds for API calls and downloads
            api_client: Client for the CI lookups of the launcher locator
            downloader: Downloader for build archives
            installation_manager: Writer for the game directory
            locators: Locator per target kind (defaults to ModsLocator / LauncherLocator)
        """
        super().__init__(installer_name="PrApplyPipeline")
        self.work_root = Path(work_root) if work_root else get_work_dir()
        self.api_client = api_client or ApiClient(timeout=timeout)
        self.downloader = downloader or Downloader(timeout=timeout)
        self.installation_manager = installation_manager or InstallationManager()
        self.locators = locators or {
            TargetKind.MODS: ModsLocator(),
            TargetKind.LAUNCHER: LauncherLocator(self.api_client),
        }

    @classmethod
    def from_settings(cls, settings) -> "PrApplyPipeline":
        """Build a pipeline configured from a SettingsManager"""
        return cls(work_root=settings.get_work_dir(), timeout=settings.get_request_timeout())

    def apply(self,
              pr_number: int,
              target: TargetKind,
              pulls: Sequence[PullRequest],
              game_path: Union[str, Path]) -> ApplyResult:
        """
        Apply one pull request build to a game install

        Never raises: failures are reported in the result.

        Args:
            pr_number: Pull request number to apply
            target: Which product the pull list belongs to
            pulls: Pull requests fetched earlier for that product
            game_path: Titanfall 2 install directory

        Returns:
            ApplyResult describing how far the apply got
        """
        result = ApplyResult(pr_number=pr_number, target=target)
        work_dir: Optional[Path] = None

        try:
            self._log_progress(f"Applying {target.value} PR #{pr_number} to {game_path}")
            game = self.installation_manager.validate_game_path(game_path)
            self._advance(result, ApplyState.PATH_VALIDATED, 5)

            locator = self.locators[target]
            result.download_url = locator.resolve(pr_number, pulls)
            self._advance(result, ApplyState.URL_RESOLVED, 15)

            work_dir = self._create_work_dir(target)
            self._log_progress(f"Downloading {result.download_url}")
            archive = self.downloader.fetch(
                result.download_url, work_dir, DOWNLOAD_NAMES[target],
                progress_callback=self.progress_callback,
            )
            self._advance(result, ApplyState.DOWNLOADED, 60)

            self._log_progress("Extracting archive...")
            extracted = self._extract(target, archive, work_dir)
            self._advance(result, ApplyState.EXTRACTED, 80)

            self._log_progress("Installing build...")
            if target is TargetKind.MODS:
                result.warnings.extend(self.installation_manager.install_mods_build(extracted, game))
                result.installed_to = self.installation_manager.managed_path(game) / MANAGED_MODS_SUBFOLDER
            else:
                self.installation_manager.install_launcher_build(extracted, game)
                result.installed_to = game
            self._advance(result, ApplyState.INSTALLED, 95)

        except NorthstarHelperError as e:
            result.error = e
            result.partially_applied = getattr(e, "partially_applied", False)
            result.state = ApplyState.FAILED
            self.logger.error(f"Applying PR #{pr_number} failed after {result.last_state.value}: {e}")
            if self.log_callback:
                self.log_callback(f"Error: {e}")

        except Exception as e:
            result.error = e
            # the game directory is only written during the install stage
            result.partially_applied = result.last_state is ApplyState.EXTRACTED
            result.state = ApplyState.FAILED
            self.logger.exception(f"Unexpected error applying PR #{pr_number} after {result.last_state.value}")
            if self.log_callback:
                self.log_callback(f"Unexpected error: {e}")

        finally:
            if work_dir is not None:
                self._cleanup_work_dir(work_dir, result)

        if result.state is not ApplyState.FAILED:
            self._advance(result, ApplyState.CLEANED_UP, 100)
            self._log_progress(f"PR #{pr_number} applied successfully")
        return result

    def _advance(self, result: ApplyResult, state: ApplyState, percent: float):
        result.state = state
        result.last_state = state
        self.logger.debug(f"State: {state.value}")
        self._send_progress_update(percent)

    def _create_work_dir(self, target: TargetKind) -> Path:
        try:
            self.work_root.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix=f"ns-dev-helper-{target.value}-", dir=self.work_root))
        except OSError as e:
            raise FilesystemError(f"create working directory in {self.work_root}", e) from e

    def _extract(self, target: TargetKind, archive: Path, work_dir: Path) -> Path:
        if target is TargetKind.MODS:
            extract_root = work_dir / "extracted"
            return extract_root / full_extract(archive, extract_root)

        out_dir = selective_extract(archive, LAUNCHER_FILES, work_dir / LAUNCHER_EXTRACT_DIR)
        if not any(out_dir.iterdir()):
            raise ArchiveError(f"Artifact contains none of {', '.join(LAUNCHER_FILES)}")
        return out_dir

    def _cleanup_work_dir(self, work_dir: Path, result: ApplyResult):
        try:
            shutil.rmtree(work_dir)
            self.logger.debug(f"Removed working directory {work_dir}")
        except FileNotFoundError:
            pass
        except OSError as e:
            message = f"Could not remove working directory {work_dir}: {e}"
            self._log_warning(message)
            result.warnings.append(message)
