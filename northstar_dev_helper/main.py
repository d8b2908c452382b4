#!/usr/bin/env python3
"""
Main application module for Northstar Dev Testing Helper
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from northstar_dev_helper import __version__
from northstar_dev_helper.constants import LAUNCHER_PULLS_URL, MODS_PULLS_URL
from northstar_dev_helper.core.api_client import ApiClient
from northstar_dev_helper.core.apply_worker import ApplyWorker
from northstar_dev_helper.core.errors import InvalidGamePathError, NorthstarHelperError
from northstar_dev_helper.core.installers.installation_manager import InstallationManager
from northstar_dev_helper.core.models import PullRequest, TargetKind
from northstar_dev_helper.core.pipeline import PrApplyPipeline
from northstar_dev_helper.utils.logger import get_logger, setup_comprehensive_logging
from northstar_dev_helper.utils.settings_manager import SettingsManager


PULLS_URLS = {
    TargetKind.MODS: MODS_PULLS_URL,
    TargetKind.LAUNCHER: LAUNCHER_PULLS_URL,
}


class NorthstarDevHelperApp:
    """Main application class"""

    def __init__(self,
                 settings: Optional[SettingsManager] = None,
                 api_client: Optional[ApiClient] = None,
                 pipeline: Optional[PrApplyPipeline] = None):
        self.logger = get_logger(__name__)
        self.settings = settings or SettingsManager()
        self.api_client = api_client or ApiClient(timeout=self.settings.get_request_timeout())
        self.pipeline = pipeline or PrApplyPipeline.from_settings(self.settings)

    def run(self, args: argparse.Namespace) -> int:
        """Run the application with given arguments"""
        try:
            if args.command == "list":
                return self._list_pulls(TargetKind(args.target), args.filter, args.json)
            elif args.command == "apply":
                return self._apply_pull(TargetKind(args.target), args.pr, args.game_path, args.json)
            elif args.command == "set-game-path":
                return self._set_game_path(args.path)
            elif args.command == "set-timeout":
                return self._set_timeout(args.seconds)
            elif args.command == "set-work-dir":
                return self._set_work_dir(args.path)
            elif args.command == "reset-settings":
                return self._reset_settings()
            elif args.command == "show-settings":
                return self._show_settings()
            elif args.command == "version":
                return self._show_version()
            else:
                self.logger.error(f"Unknown command: {args.command}")
                return 1

        except NorthstarHelperError as e:
            self.logger.error(f"{type(e).__name__}: {e}")
            print(f"❌ {e}")
            return 1

    def _fetch_pulls(self, target: TargetKind) -> List[PullRequest]:
        return self.api_client.fetch_pull_requests(PULLS_URLS[target])

    def _list_pulls(self, target: TargetKind, filter_text: str, as_json: bool) -> int:
        """List open pull requests, marking the ones that need testing"""
        pulls = [pull for pull in self._fetch_pulls(target) if pull.matches_filter(filter_text)]

        if as_json:
            print(json.dumps([{
                "number": pull.number,
                "title": pull.title,
                "url": pull.html_url,
                "needs_testing": pull.needs_testing,
            } for pull in pulls], indent=2))
            return 0

        if not pulls:
            print("No matching pull requests found.")
            return 0

        print(f"📋 Open {target.value} pull requests:")
        print("----------------------------------------")
        for pull in pulls:
            marker = "*" if pull.needs_testing else " "
            print(f" {marker} {pull.display_name}")
        print("\n(* = needs testing)")
        return 0

    def _apply_pull(self, target: TargetKind, pr_number: int, game_path: Optional[str], as_json: bool) -> int:
        """Fetch the pull request list and apply one of its builds"""
        game_path = game_path or self.settings.get_game_install_path()
        if not game_path:
            print("❌ No game install path given. Pass --game-path or run set-game-path first.")
            return 1

        pulls = self._fetch_pulls(target)

        with ApplyWorker(self.pipeline) as worker:
            result = worker.submit(pr_number, target, pulls, game_path).result()

        if as_json:
            print(json.dumps(result.to_dict(), indent=2))
            return 0 if result.success else 1

        for warning in result.warnings:
            print(f"⚠️  {warning}")

        if result.success:
            print(f"✅ Applied {target.value} PR #{pr_number}")
            print(f"   Installed to: {result.installed_to}")
            if target is TargetKind.MODS:
                print(f"   Launch with: {self.pipeline.installation_manager.launch_script_name}")
            return 0

        print(f"❌ Failed to apply PR #{pr_number}: {result.error}")
        if result.partially_applied:
            print("   The game install was partially modified, verify your installation.")
        return 1

    def _set_game_path(self, path: str) -> int:
        """Validate and remember the game install path"""
        try:
            InstallationManager().validate_game_path(path)
        except InvalidGamePathError as e:
            print(f"❌ {e}")
            return 1

        self.settings.set_game_install_path(path)
        print(f"✅ Game install path set to {path}")
        return 0

    def _set_timeout(self, seconds: float) -> int:
        if seconds <= 0:
            print("❌ Timeout must be a positive number of seconds")
            return 1

        self.settings.set_request_timeout(seconds)
        print(f"✅ Request timeout set to {seconds}s")
        return 0

    def _set_work_dir(self, path: str) -> int:
        self.settings.set_work_dir(path)
        print(f"✅ Working directory root set to {path}")
        return 0

    def _reset_settings(self) -> int:
        self.settings.reset_to_defaults()
        print("✅ Settings reset to defaults")
        return 0

    def _show_settings(self) -> int:
        print(json.dumps(self.settings.get_all_settings(), indent=2))
        return 0

    def _show_version(self) -> int:
        print(f"Northstar Dev Testing Helper v{__version__}")
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        prog="northstar-dev-helper",
        description="Northstar Dev Testing Helper - apply pull request builds for testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s set-game-path "/path/to/Titanfall2"   # Remember the game install path
  %(prog)s list --target mods                    # List open NorthstarMods PRs
  %(prog)s list --target launcher --filter crash # Filter NorthstarLauncher PRs
  %(prog)s apply --target mods --pr 42           # Apply NorthstarMods PR #42
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-log-file", action="store_true", help="Do not write a log file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    target_choices = [kind.value for kind in TargetKind]

    list_parser = subparsers.add_parser("list", help="List open pull requests")
    list_parser.add_argument("--target", choices=target_choices, default=TargetKind.MODS.value)
    list_parser.add_argument("--filter", default="", help="Only show PRs whose '<number>: <title>' contains this text")
    list_parser.add_argument("--json", action="store_true", help="Print machine readable output")

    apply_parser = subparsers.add_parser("apply", help="Apply a pull request build to the game install")
    apply_parser.add_argument("--target", choices=target_choices, default=TargetKind.MODS.value)
    apply_parser.add_argument("--pr", type=int, required=True, help="Pull request number")
    apply_parser.add_argument("--game-path", help="Titanfall 2 install directory (defaults to the saved path)")
    apply_parser.add_argument("--json", action="store_true", help="Print machine readable output")

    set_path_parser = subparsers.add_parser("set-game-path", help="Validate and remember the game install path")
    set_path_parser.add_argument("path", help="Titanfall 2 install directory")

    timeout_parser = subparsers.add_parser("set-timeout", help="Set the HTTP timeout used for GitHub requests")
    timeout_parser.add_argument("seconds", type=float, help="Timeout in seconds")

    work_dir_parser = subparsers.add_parser("set-work-dir", help="Set where temporary download directories are created")
    work_dir_parser.add_argument("path", help="Directory for per-apply working directories")

    subparsers.add_parser("reset-settings", help="Reset all settings to defaults")
    subparsers.add_parser("show-settings", help="Show current settings")
    subparsers.add_parser("version", help="Show version information")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_comprehensive_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    if not args.command:
        parser.print_help()
        return 1

    app = NorthstarDevHelperApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
