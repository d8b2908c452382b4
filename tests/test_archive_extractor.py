"""
Unit tests for zip extraction policies.
"""

import os
import stat

import pytest

from northstar_dev_helper.constants import LAUNCHER_FILES
from northstar_dev_helper.core.errors import ArchiveError
from northstar_dev_helper.core.installers.utils.archive_extractor import (
    find_root_dir,
    full_extract,
    selective_extract,
)


posix_only = pytest.mark.skipif(os.name != "posix", reason="Unix permission bits only apply on POSIX")


class TestFullExtract:
    """Test suite for full_extract."""

    def test_extracts_tree_and_returns_root(self, mods_archive, tmp_path):
        out_dir = tmp_path / "out"

        root = full_extract(mods_archive, out_dir)

        assert root == "NorthstarMods-fix"
        assert (out_dir / root / "Northstar.Client" / "mod.json").read_bytes() == b'{"Name": "Northstar.Client"}'
        assert (out_dir / root / "Northstar.Custom" / "mod.json").is_file()
        assert (out_dir / root / "README.md").read_bytes() == b"# NorthstarMods"

    def test_root_found_when_first_entry_is_a_file(self, make_zip, tmp_path):
        archive = make_zip([
            ("repo-branch/file.txt", b"x"),
            ("repo-branch/", None),
            ("repo-branch/sub/other.txt", b"y"),
        ])

        assert full_extract(archive, tmp_path / "out") == "repo-branch"
        assert (tmp_path / "out" / "repo-branch" / "sub" / "other.txt").read_bytes() == b"y"

    def test_multiple_top_level_entries_raise(self, make_zip, tmp_path):
        archive = make_zip([("one/a.txt", b"a"), ("two/b.txt", b"b")])

        with pytest.raises(ArchiveError, match="one top-level directory"):
            full_extract(archive, tmp_path / "out")

    def test_path_escaping_entries_are_skipped(self, make_zip, tmp_path):
        archive = make_zip([
            ("root/", None),
            ("root/ok.txt", b"ok"),
            ("root/../../evil.txt", b"evil"),
        ])
        out_dir = tmp_path / "deep" / "out"

        assert full_extract(archive, out_dir) == "root"
        assert (out_dir / "root" / "ok.txt").is_file()
        assert not (tmp_path / "deep" / "evil.txt").exists()
        assert not (tmp_path / "evil.txt").exists()

    def test_corrupt_archive_raises(self, tmp_path):
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"this is not a zip file")

        with pytest.raises(ArchiveError):
            full_extract(bogus, tmp_path / "out")

    @posix_only
    def test_reapplies_permission_bits(self, make_zip, tmp_path):
        archive = make_zip([
            ("root/", None),
            ("root/run.sh", b"#!/bin/sh\n", 0o100755),
            ("root/data.txt", b"data", 0o100640),
        ])

        full_extract(archive, tmp_path / "out")

        assert stat.S_IMODE((tmp_path / "out" / "root" / "run.sh").stat().st_mode) == 0o755
        assert stat.S_IMODE((tmp_path / "out" / "root" / "data.txt").stat().st_mode) == 0o640


class TestFindRootDir:
    """Test suite for find_root_dir."""

    def test_single_directory_entry(self):
        assert find_root_dir(["root/"]) == "root"

    def test_lone_file_is_not_a_root_directory(self):
        with pytest.raises(ArchiveError):
            find_root_dir(["file.txt"])

    def test_empty_archive(self):
        with pytest.raises(ArchiveError):
            find_root_dir([])


class TestSelectiveExtract:
    """Test suite for selective_extract."""

    def test_extracts_only_allow_listed_files(self, launcher_archive, tmp_path):
        out_dir = tmp_path / "launcher"

        result = selective_extract(launcher_archive, LAUNCHER_FILES, out_dir)

        assert result == out_dir
        assert sorted(path.name for path in out_dir.iterdir()) == ["Northstar.dll", "NorthstarLauncher.exe"]
        assert (out_dir / "NorthstarLauncher.exe").read_bytes() == b"launcher-binary"
        assert (out_dir / "Northstar.dll").read_bytes() == b"loader-library"

    def test_position_in_archive_does_not_matter(self, make_zip, tmp_path):
        archive = make_zip([
            ("Northstar.dll", b"dll"),
            *[(f"noise/file{i}.txt", b"n") for i in range(5)],
            ("deep/nested/dir/NorthstarLauncher.exe", b"exe"),
        ])

        selective_extract(archive, LAUNCHER_FILES, tmp_path / "out")

        assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["Northstar.dll", "NorthstarLauncher.exe"]

    def test_base_name_must_match_exactly(self, make_zip, tmp_path):
        archive = make_zip([
            ("NorthstarLauncher.exe.bak", b"x"),
            ("old-Northstar.dll", b"x"),
            ("northstar.dll", b"x"),
        ])

        selective_extract(archive, LAUNCHER_FILES, tmp_path / "out")

        assert list((tmp_path / "out").iterdir()) == []

    def test_creates_out_dir_even_when_nothing_matches(self, make_zip, tmp_path):
        archive = make_zip([("readme.txt", b"x")])

        out_dir = selective_extract(archive, LAUNCHER_FILES, tmp_path / "a" / "b")

        assert out_dir.is_dir()

    @posix_only
    def test_reapplies_permission_bits(self, make_zip, tmp_path):
        archive = make_zip([("bin/NorthstarLauncher.exe", b"exe", 0o100750)])

        selective_extract(archive, LAUNCHER_FILES, tmp_path / "out")

        assert stat.S_IMODE((tmp_path / "out" / "NorthstarLauncher.exe").stat().st_mode) == 0o750
