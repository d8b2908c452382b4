"""
Archive Extractor

Zip extraction policies for downloaded builds:

- full_extract: unpack everything, used for mod source archives which wrap
  their content in a single top-level directory
- selective_extract: unpack only allow-listed files by base name, used for
  launcher artifacts
"""

import os
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Tuple, Union

from northstar_dev_helper.core.errors import ArchiveError, FilesystemError
from northstar_dev_helper.utils.logger import get_logger


logger = get_logger(__name__)


def _safe_relative_path(name: str) -> Optional[PurePosixPath]:
    """Return the entry name as a relative path, or None if it escapes the target"""
    normalized = name.replace("\\", "/")
    path = PurePosixPath(normalized)
    if path.is_absolute() or ".." in path.parts or not path.parts:
        return None
    # Drive letters ("C:") are as unsafe as absolute paths
    if ":" in path.parts[0]:
        return None
    return path


def _unix_mode(info: zipfile.ZipInfo) -> int:
    """Permission bits stored by a Unix zip tool, 0 if none"""
    return (info.external_attr >> 16) & 0o7777


def _apply_mode(path: Path, mode: int):
    if os.name != "posix" or not mode:
        return
    try:
        os.chmod(path, mode)
    except OSError as e:
        logger.warning(f"Could not set permissions {oct(mode)} on {path}: {e}")


def _open_archive(zip_path: Union[str, Path]) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(zip_path, 'r')
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise ArchiveError(f"{zip_path} is not a readable zip archive: {e}") from e
    except OSError as e:
        raise FilesystemError(f"open archive {zip_path}", e) from e


def _write_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo, target: Path):
    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as source, open(target, 'wb') as out:
        shutil.copyfileobj(source, out)


def find_root_dir(names: Iterable[str]) -> str:
    """
    Find the single top-level directory shared by all archive entries

    Archive order is not trusted: entry 0 is not necessarily the directory
    entry, so the common first path component of every entry is used.

    Raises:
        ArchiveError: entries do not share one top-level directory
    """
    roots = set()
    nested = False
    for name in names:
        path = _safe_relative_path(name)
        if path is None:
            continue
        roots.add(path.parts[0])
        if len(path.parts) > 1 or name.endswith("/"):
            nested = True

    if len(roots) != 1 or not nested:
        raise ArchiveError(f"Archive must contain exactly one top-level directory, found {sorted(roots)}")

    return roots.pop()


def full_extract(zip_path: Union[str, Path], out_dir: Union[str, Path]) -> str:
    """
    Extract every entry of a zip archive into out_dir

    Entries are processed in archive order. On POSIX the stored permission
    bits are reapplied; directory modes are applied last so a read-only
    directory does not block writing its own contents.

    Args:
        zip_path: Archive to extract
        out_dir: Directory to extract into (created if missing)

    Returns:
        Name of the archive's top-level directory inside out_dir

    Raises:
        ArchiveError: corrupt archive or no single top-level directory
        FilesystemError: extraction could not write to disk
    """
    out_dir = Path(out_dir)
    logger.info(f"Extracting {zip_path} to {out_dir}")

    with _open_archive(zip_path) as archive:
        infos = archive.infolist()
        root_dir_name = find_root_dir(info.filename for info in infos)

        directory_modes: List[Tuple[Path, int]] = []
        extracted = 0
        try:
            for info in infos:
                relative = _safe_relative_path(info.filename)
                if relative is None:
                    logger.warning(f"Skipping unsafe archive entry: {info.filename}")
                    continue

                target = out_dir.joinpath(*relative.parts)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    directory_modes.append((target, _unix_mode(info)))
                    continue

                _write_entry(archive, info, target)
                _apply_mode(target, _unix_mode(info))
                extracted += 1
        except OSError as e:
            raise FilesystemError(f"extract {zip_path}", e) from e
        except (zipfile.BadZipFile, EOFError) as e:
            raise ArchiveError(f"{zip_path} is corrupt: {e}") from e

        for directory, mode in reversed(directory_modes):
            # Keep owner write access so the staged tree can still be moved and cleaned up
            _apply_mode(directory, mode | stat.S_IWUSR if mode else 0)

    logger.info(f"Extracted {extracted} file(s) into {out_dir / root_dir_name}")
    return root_dir_name


def selective_extract(zip_path: Union[str, Path],
                      allow_list: Iterable[str],
                      out_dir: Union[str, Path]) -> Path:
    """
    Extract only the file entries whose base name is in allow_list

    Matched files are written directly under out_dir regardless of where they
    sit inside the archive. Everything else is skipped.

    Returns:
        out_dir

    Raises:
        ArchiveError: corrupt archive
        FilesystemError: out_dir or a file could not be written
    """
    out_dir = Path(out_dir)
    wanted = set(allow_list)
    logger.info(f"Extracting {sorted(wanted)} from {zip_path} to {out_dir}")

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"create {out_dir}", e) from e

    with _open_archive(zip_path) as archive:
        try:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                base_name = PurePosixPath(info.filename.replace("\\", "/")).name
                if base_name not in wanted:
                    continue

                target = out_dir / base_name
                _write_entry(archive, info, target)
                _apply_mode(target, _unix_mode(info))
                logger.info(f"Extracted {info.filename}")
        except OSError as e:
            raise FilesystemError(f"extract {zip_path}", e) from e
        except (zipfile.BadZipFile, EOFError) as e:
            raise ArchiveError(f"{zip_path} is corrupt: {e}") from e

    return out_dir
