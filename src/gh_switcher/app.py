# =============================================================================
# gh-switcher Main Application
# =============================================================================
# The Textual application class and the command-line entry point.
#
# The app wires the pieces together:
#   - Configuration loading (config.toml)
#   - PreferenceStore on the TOML file backend
#   - GHAuthService with a timeout-aware CommandRunner
#   - AppState, handed to the main screen
#
# Logging goes to a file in the XDG state directory because the terminal
# belongs to the TUI.
# =============================================================================

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from gh_switcher import __version__, __app_name__
from gh_switcher.config import Config, ConfigError, ensure_directories, print_paths
from gh_switcher.gh import CommandRunner, GHAuthService
from gh_switcher.git import GitProfileDiscovery
from gh_switcher.state import AppState
from gh_switcher.storage import PreferenceStore, TomlFileBackend
from gh_switcher.ui.screens.main import MainScreen


logger = logging.getLogger(__name__)


def build_state(config: Config) -> AppState:
    """
    Create the AppState and its collaborators from configuration.

    Args:
        config: Loaded configuration.

    Returns:
        AppState using the real gh/git tools and the on-disk preferences.
    """
    runner = CommandRunner(timeout=config.commands.timeout)
    service = GHAuthService(runner, config.commands)
    store = PreferenceStore(TomlFileBackend(Config.preferences_path()))
    return AppState(
        service,
        store,
        GitProfileDiscovery(),
        discover_profiles=config.ui.discover_profiles,
    )


class GHSwitcherApp(App):
    """
    The main gh-switcher application.

    Attributes:
        config: The loaded application configuration.
        state: Shared application state.
    """

    TITLE = "gh-switcher"
    SUB_TITLE = "GitHub CLI accounts"

    # Global keybindings - these work from any screen
    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("?", "show_help", "Help"),
    ]

    def __init__(self, config: Config | None = None, state: AppState | None = None) -> None:
        """
        Initialize the application.

        Args:
            config: Optional pre-loaded configuration. If not provided,
                    configuration will be loaded from the default location.
            state: Optional pre-built state (used by tests).
        """
        super().__init__()

        self._config_error: str | None = None

        if config is None:
            try:
                self.config = Config.load()
            except ConfigError as e:
                self.config = Config()
                self._config_error = str(e)
        else:
            self.config = config

        self.state = state or build_state(self.config)

    async def on_mount(self) -> None:
        """Called when the application is mounted and ready."""
        if self._config_error:
            self.notify(
                f"Config error: {self._config_error}",
                severity="error",
                timeout=10,
            )

        await self.push_screen(
            MainScreen(self.state, refresh_on_start=self.config.ui.refresh_on_start)
        )

    def action_quit(self) -> None:
        """Quit the application."""
        self.exit()

    def action_show_help(self) -> None:
        """Show the keybindings."""
        self.notify(
            "Enter=switch, r=refresh, t=retry, c=color, l=label, p=git profile, q=quit",
            timeout=10,
        )


# =============================================================================
# Logging
# =============================================================================

def setup_logging(debug: bool = False, log_path: Path | None = None) -> Path:
    """
    Send log records to the application log file.

    Args:
        debug: Log DEBUG records too (default is INFO).
        log_path: File to write. Defaults to the XDG state location.

    Returns:
        The log file path.
    """
    path = log_path or Config.log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    package_logger = logging.getLogger("gh_switcher")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    return path


# =============================================================================
# CLI Entry Point
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="gh-switcher: switch GitHub CLI accounts and git identities",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="Print gh accounts and exit without starting the UI",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    return parser.parse_args(argv)


async def print_accounts(state: AppState) -> int:
    """
    Fetch accounts once and print them.

    Returns:
        Exit code (1 if gh reported an error).
    """
    await state.refresh()

    if state.error_banner is not None:
        print(f"Error: {state.error_banner.title}", file=sys.stderr)
        if state.error_banner.details:
            print(state.error_banner.details, file=sys.stderr)
        return 1

    for account in state.accounts:
        marker = "*" if account.is_active else " "
        color = state.color_for(account).name
        line = f"{marker} {state.display_name(account)}  [{color}]"
        profile = state.profile_for(account)
        if not profile.is_empty:
            line += f"  git: {profile.display_string}"
        print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for gh-switcher.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version, --list)
        3. Loads configuration
        4. Starts the Textual application

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    if args.paths:
        print_paths()
        return 0

    ensure_directories()
    log_path = setup_logging(debug=args.debug)
    logger.info(f"Starting {__app_name__} {__version__} (log: {log_path})")

    config = None
    if args.config:
        try:
            config = Config.load(args.config)
        except ConfigError as e:
            print(f"Config error: {e}", file=sys.stderr)
            return 1

    if args.list:
        state = build_state(config or _load_config_or_default())
        return asyncio.run(print_accounts(state))

    app = GHSwitcherApp(config=config)
    app.run()

    return 0


def _load_config_or_default() -> Config:
    try:
        return Config.load()
    except ConfigError as e:
        print(f"Config error: {e} (using defaults)", file=sys.stderr)
        return Config()


if __name__ == "__main__":
    sys.exit(main())
