"""
Installation Manager

Owns every write into the game install directory:

- validating that a directory is a Titanfall 2 install
- copying launcher binaries over the existing ones
- replacing the managed mods folder and writing the launch helper script

The managed folder is the only directory inside the install that this tool
creates or deletes. Mods builds are staged next to it and swapped in by
rename, so a failed copy never leaves the install without a managed folder.
"""

import os
import shutil
import uuid
from pathlib import Path
from typing import List, Union

from northstar_dev_helper.constants import (
    GAME_EXECUTABLE,
    LAUNCH_SCRIPT_NAME,
    LAUNCHER_EXECUTABLE,
    MANAGED_FOLDER,
    MANAGED_MODS_SUBFOLDER,
)
from northstar_dev_helper.core.errors import FilesystemError, InvalidGamePathError
from northstar_dev_helper.utils.logger import get_logger


class InstallationManager:
    """Validates a game install and writes pull request builds into it"""

    def __init__(self,
                 game_executable: str = GAME_EXECUTABLE,
                 managed_folder: str = MANAGED_FOLDER,
                 launcher_executable: str = LAUNCHER_EXECUTABLE,
                 launch_script_name: str = LAUNCH_SCRIPT_NAME):
        self.game_executable = game_executable
        self.managed_folder = managed_folder
        self.launcher_executable = launcher_executable
        self.launch_script_name = launch_script_name
        self.logger = get_logger(__name__)

    def validate_game_path(self, path: Union[str, Path]) -> Path:
        """
        Check that the game executable exists directly under path

        Returns:
            The validated path

        Raises:
            InvalidGamePathError: the marker executable is missing
        """
        game_path = Path(path)
        is_correct_game_path = (game_path / self.game_executable).is_file()
        self.logger.info(f"{self.game_executable} exists in {game_path}? {is_correct_game_path}")

        if not is_correct_game_path:
            raise InvalidGamePathError(str(path), self.game_executable)
        return game_path

    def managed_path(self, game_path: Union[str, Path]) -> Path:
        return Path(game_path) / self.managed_folder

    def launch_script_content(self) -> str:
        return f"{self.launcher_executable} -profile={self.managed_folder}\r\n"

    def install_launcher_build(self, extracted_dir: Union[str, Path], game_path: Union[str, Path]) -> List[Path]:
        """
        Copy every file under extracted_dir into game_path, overwriting

        Replaced files are not backed up. Each file is copied next to its
        destination first and then renamed over it, so a single file is never
        left half-written.

        Returns:
            Destination paths that were written

        Raises:
            FilesystemError: a copy failed (partially_applied if an earlier file was already replaced)
        """
        extracted_dir = Path(extracted_dir)
        game_path = Path(game_path)
        installed: List[Path] = []

        for source in sorted(extracted_dir.rglob("*")):
            if not source.is_file():
                continue
            destination = game_path / source.relative_to(extracted_dir)
            temp_destination = destination.with_name(f".{destination.name}.{uuid.uuid4().hex[:8]}.tmp")
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, temp_destination)
                os.replace(temp_destination, destination)
            except OSError as e:
                self._remove_quietly(temp_destination)
                raise FilesystemError(f"install {destination}", e, partially_applied=bool(installed)) from e

            self.logger.info(f"Installed {destination}")
            installed.append(destination)

        if not installed:
            self.logger.warning(f"No files found to install in {extracted_dir}")
        return installed

    def install_mods_build(self, extracted_dir: Union[str, Path], game_path: Union[str, Path]) -> List[str]:
        """
        Replace the managed folder with a new mods build

        Steps:
        1. Copy extracted_dir to <staging>/mods next to the managed folder
        2. Move the old managed folder aside, rename staging into place
        3. Delete the old managed folder (failure is only a warning)
        4. Delete extracted_dir (failure is only a warning)
        5. Write the launch helper script

        If the old managed folder cannot be moved aside (for example a file
        in it is locked), the install aborts before the game directory
        changes: the staged copy is removed and the old build stays active.

        Returns:
            Warnings for soft failures the caller should display

        Raises:
            FilesystemError: staging, swapping or writing the script failed
        """
        extracted_dir = Path(extracted_dir)
        game_path = Path(game_path)
        managed = self.managed_path(game_path)
        token = uuid.uuid4().hex[:8]
        staging = game_path / f".{self.managed_folder}.staging-{token}"
        previous = game_path / f".{self.managed_folder}.old-{token}"
        warnings: List[str] = []

        self.logger.info(f"Staging mods build in {staging}")
        try:
            shutil.copytree(extracted_dir, staging / MANAGED_MODS_SUBFOLDER)
        except (OSError, shutil.Error) as e:
            self._remove_tree_quietly(staging)
            raise FilesystemError(f"stage mods build in {staging}", e) from e

        self._swap_into_place(staging, managed, previous)

        if previous.exists():
            try:
                shutil.rmtree(previous)
                self.logger.info("Deleted previous managed folder")
            except OSError as e:
                message = f"Could not delete previous managed folder {previous}: {e}"
                self.logger.warning(message)
                warnings.append(message)

        try:
            shutil.rmtree(extracted_dir)
        except OSError as e:
            message = f"Could not delete extracted files {extracted_dir}: {e}"
            self.logger.warning(message)
            warnings.append(message)

        try:
            self.write_launch_script(game_path)
        except FilesystemError as e:
            e.partially_applied = True
            raise

        return warnings

    def write_launch_script(self, game_path: Union[str, Path]) -> Path:
        """Write the one-line script that starts the game with the managed profile"""
        script_path = Path(game_path) / self.launch_script_name
        try:
            # newline='' keeps the \r\n exactly as written on every platform
            with open(script_path, 'w', encoding='utf-8', newline='') as f:
                f.write(self.launch_script_content())
        except OSError as e:
            raise FilesystemError(f"write {script_path}", e) from e

        self.logger.info(f"Wrote launch script {script_path}")
        return script_path

    def _swap_into_place(self, staging: Path, managed: Path, previous: Path):
        had_previous = managed.exists() or managed.is_symlink()
        if had_previous:
            try:
                os.rename(managed, previous)
            except OSError as e:
                self._remove_tree_quietly(staging)
                raise FilesystemError(f"move previous managed folder {managed} aside", e) from e
        else:
            self.logger.info(f"No previous managed folder at {managed} (first run)")

        try:
            os.rename(staging, managed)
        except OSError as e:
            restored = False
            if had_previous:
                try:
                    os.rename(previous, managed)
                    restored = True
                except OSError as restore_error:
                    self.logger.error(f"Could not restore previous managed folder: {restore_error}")
            self._remove_tree_quietly(staging)
            raise FilesystemError(
                f"move new build into {managed}", e,
                partially_applied=had_previous and not restored,
            ) from e

        self.logger.info(f"Installed mods build to {managed / MANAGED_MODS_SUBFOLDER}")

    def _remove_tree_quietly(self, path: Path):
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            self.logger.warning(f"Could not clean up {path}: {e}")

    def _remove_quietly(self, path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not clean up {path}: {e}")
