"""
Pytest configuration and shared fixtures.
"""

import zipfile

import pytest

from northstar_dev_helper.core.models import PullRequest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at a temp dir so no test touches real settings or logs."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def pull_data():
    """Factory for raw pull request JSON as returned by the GitHub API."""
    def _make(number=42, ref="fix", repo="foo/bar", sha="abc123", title="Fix things", labels=()):
        return {
            "number": number,
            "title": title,
            "html_url": f"https://github.com/R2Northstar/NorthstarMods/pull/{number}",
            "labels": [{"name": name} for name in labels],
            "head": {
                "ref": ref,
                "sha": sha,
                "repo": {"full_name": repo} if repo is not None else None,
            },
            "merge_commit_sha": "def456",
        }
    return _make


@pytest.fixture
def make_pull(pull_data):
    """Factory for parsed PullRequest records."""
    def _make(**kwargs):
        return PullRequest.from_api(pull_data(**kwargs))
    return _make


@pytest.fixture
def game_dir(tmp_path):
    """A directory that looks like a Titanfall 2 install."""
    path = tmp_path / "Titanfall2"
    path.mkdir()
    (path / "Titanfall2.exe").write_bytes(b"MZ")
    return path


@pytest.fixture
def make_zip(tmp_path):
    """
    Factory for zip archives.

    Entries are (name, content) pairs in archive order. A name ending in '/'
    is a directory entry. An optional third item sets the Unix mode.
    """
    def _make(entries, name="archive.zip"):
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for entry in entries:
                entry_name, content = entry[0], entry[1]
                info = zipfile.ZipInfo(entry_name)
                if len(entry) > 2:
                    info.external_attr = entry[2] << 16
                elif entry_name.endswith("/"):
                    info.external_attr = (0o40755 << 16) | 0x10
                archive.writestr(info, content if content is not None else b"")
        return path
    return _make


@pytest.fixture
def mods_archive(make_zip):
    """Source archive of a NorthstarMods branch, the way GitHub builds it."""
    return make_zip([
        ("NorthstarMods-fix/", None),
        ("NorthstarMods-fix/Northstar.Client/", None),
        ("NorthstarMods-fix/Northstar.Client/mod.json", b'{"Name": "Northstar.Client"}'),
        ("NorthstarMods-fix/Northstar.Custom/mod.json", b'{"Name": "Northstar.Custom"}'),
        ("NorthstarMods-fix/README.md", b"# NorthstarMods"),
    ], name="mods.zip")


@pytest.fixture
def launcher_archive(make_zip):
    """CI artifact of a NorthstarLauncher build."""
    return make_zip([
        ("build/Northstar.pdb", b"symbols"),
        ("build/NorthstarLauncher.exe", b"launcher-binary"),
        ("build/extra/readme.txt", b"ignore me"),
        ("Northstar.dll", b"loader-library"),
    ], name="launcher.zip")
