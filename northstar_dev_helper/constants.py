"""
Constants for Northstar Dev Testing Helper
Fixed names, URLs and file layout used across the application
"""

# HTTP
USER_AGENT = "GeckoEidechse/northstar-dev-testing-helper-tool"
GITHUB_HOST = "github.com"
ARTIFACT_REDIRECT_HOST = "nightly.link"

# Repositories
MODS_REPO = "R2Northstar/NorthstarMods"
LAUNCHER_REPO = "R2Northstar/NorthstarLauncher"

# GitHub API endpoints
MODS_PULLS_URL = f"https://api.github.com/repos/{MODS_REPO}/pulls"
LAUNCHER_PULLS_URL = f"https://api.github.com/repos/{LAUNCHER_REPO}/pulls"
LAUNCHER_RUNS_URL = f"https://api.github.com/repos/{LAUNCHER_REPO}/actions/runs"
LAUNCHER_RUN_ARTIFACTS_URL = f"https://api.github.com/repos/{LAUNCHER_REPO}/actions/runs/{{run_id}}/artifacts"

# Game installation layout
GAME_EXECUTABLE = "Titanfall2.exe"
LAUNCHER_EXECUTABLE = "NorthstarLauncher.exe"
LAUNCHER_LIBRARY = "Northstar.dll"
LAUNCHER_FILES = (LAUNCHER_EXECUTABLE, LAUNCHER_LIBRARY)
MANAGED_FOLDER = "R2Northstar-PR-test-managed-folder"
MANAGED_MODS_SUBFOLDER = "mods"
LAUNCH_SCRIPT_NAME = "r2ns-launch-mod-pr-version.bat"

# Temporary download names (one per target kind, inside a per-run work dir)
MODS_DOWNLOAD_NAME = "ns-dev-test-helper-temp-pr-files.zip"
LAUNCHER_DOWNLOAD_NAME = "ns-dev-test-helper-temp-launcher-files.zip"
LAUNCHER_EXTRACT_DIR = "launcher-files"

# Labels
NEEDS_TESTING_LABEL = "needs testing"
