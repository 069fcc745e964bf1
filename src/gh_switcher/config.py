# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and locating gh-switcher configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/gh-switcher/  (default: ~/.config/gh-switcher/)
#   - Data:    $XDG_DATA_HOME/gh-switcher/    (default: ~/.local/share/gh-switcher/)
#   - State:   $XDG_STATE_HOME/gh-switcher/   (default: ~/.local/state/gh-switcher/)
#
# Files:
#   - config.toml: User configuration (tool paths, timeouts, UI options)
#   - preferences.toml: Account colors, labels and git profiles (data directory)
#   - gh-switcher.log: Application log (state directory)
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "gh-switcher"


# Directory kind -> (environment variable, fallback relative to home)
XDG_DIRECTORIES = {
    "config": ("XDG_CONFIG_HOME", (".config",)),
    "data": ("XDG_DATA_HOME", (".local", "share")),
    "state": ("XDG_STATE_HOME", (".local", "state")),
}


def _xdg_app_dir(kind: str) -> Path:
    """
    gh-switcher's directory of the given XDG kind.

    An empty environment variable counts as unset (XDG basedir rules).
    """
    variable, fallback = XDG_DIRECTORIES[kind]
    override = os.environ.get(variable)
    base = Path(override) if override else Path.home().joinpath(*fallback)
    return base / APP_NAME


def get_xdg_config_home() -> Path:
    """config.toml lives here (~/.config/gh-switcher by default)."""
    return _xdg_app_dir("config")


def get_xdg_data_home() -> Path:
    """The preference store lives here (~/.local/share/gh-switcher by default)."""
    return _xdg_app_dir("data")


def get_xdg_state_home() -> Path:
    """The log file lives here (~/.local/state/gh-switcher by default)."""
    return _xdg_app_dir("state")


def ensure_directories() -> dict[str, Path]:
    """
    Create every gh-switcher XDG directory that is missing.

    Returns:
        Directory kind ("config", "data", "state") mapped to its path.
    """
    dirs = {kind: _xdg_app_dir(kind) for kind in XDG_DIRECTORIES}
    for path in dirs.values():
        path.mkdir(parents=True, exist_ok=True)
    return dirs


# =============================================================================
# Configuration Data Structures
# =============================================================================

# Appended to PATH for every gh invocation. Apps launched from a desktop
# session often get a minimal PATH that misses Homebrew.
DEFAULT_EXTRA_PATH = "/opt/homebrew/bin:/usr/local/bin:/usr/bin:/bin:/usr/sbin:/sbin"


@dataclass
class CommandsConfig:
    """
    Configuration for the external tools.

    Attributes:
        gh_executable: gh command name or absolute path. Names are resolved
                       through PATH (plus extra_path).
        git_executable: Absolute path to git, used to apply identities.
        extra_path: Directories appended to PATH when running gh.
        timeout_seconds: Kill a tool that hasn't finished after this many
                         seconds (0 = wait forever).
    """
    gh_executable: str = "gh"
    git_executable: str = "/usr/bin/git"
    extra_path: str = DEFAULT_EXTRA_PATH
    timeout_seconds: float = 30.0

    @property
    def timeout(self) -> float | None:
        """Timeout suitable for the command runner (None = no limit)."""
        return self.timeout_seconds if self.timeout_seconds > 0 else None


@dataclass
class UIConfig:
    """
    Configuration for the user interface.

    Attributes:
        refresh_on_start: Load accounts from gh as soon as the app starts.
        discover_profiles: Scan git config files for identity profiles.
    """
    refresh_on_start: bool = True
    discover_profiles: bool = True


@dataclass
class Config:
    """
    Main configuration container for gh-switcher.

    Usage:
        >>> config = Config.load()
        >>> config.commands.gh_executable
        'gh'
    """
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def preferences_path() -> Path:
        """Returns the path to the preference store."""
        return get_xdg_data_home() / "preferences.toml"

    @staticmethod
    def log_path() -> Path:
        """Returns the path to the log file."""
        return get_xdg_state_home() / "gh-switcher.log"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Could not read config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create a Config object from a parsed TOML dictionary."""
        config = cls()

        commands = _table(data, "commands")
        config.commands = CommandsConfig(
            gh_executable=_typed(commands, "commands", "gh_executable", str, "gh"),
            git_executable=_typed(commands, "commands", "git_executable", str, "/usr/bin/git"),
            extra_path=_typed(commands, "commands", "extra_path", str, DEFAULT_EXTRA_PATH),
            timeout_seconds=_timeout(commands),
        )

        ui = _table(data, "ui")
        config.ui = UIConfig(
            refresh_on_start=_typed(ui, "ui", "refresh_on_start", bool, True),
            discover_profiles=_typed(ui, "ui", "discover_profiles", bool, True),
        )

        return config

    def _to_dict(self) -> dict[str, Any]:
        """Convert Config to a dictionary for TOML serialization."""
        return {
            "commands": {
                "gh_executable": self.commands.gh_executable,
                "git_executable": self.commands.git_executable,
                "extra_path": self.commands.extra_path,
                "timeout_seconds": self.commands.timeout_seconds,
            },
            "ui": {
                "refresh_on_start": self.ui.refresh_on_start,
                "discover_profiles": self.ui.discover_profiles,
            },
        }


# =============================================================================
# Value Checking
# =============================================================================

def _table(data: dict[str, Any], name: str) -> dict[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table")
    return table


def _typed(table: dict[str, Any], section: str, key: str, kind: type, default: Any) -> Any:
    """Return table[key] (or the default), rejecting values of the wrong type."""
    value = table.get(key, default)
    # bool is a subclass of int; never accept it where a number is expected
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise ConfigError(
            f"{section}.{key} must be a {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _timeout(commands: dict[str, Any]) -> float:
    value = commands.get("timeout_seconds", 30.0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"commands.timeout_seconds must be a number, got {type(value).__name__}"
        )
    if value < 0:
        raise ConfigError("commands.timeout_seconds must not be negative")
    return float(value)


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print all XDG paths for debugging.
    Useful for users wondering where their config/data is stored.
    """
    print(f"Config:  {get_xdg_config_home()}")
    print(f"Data:    {get_xdg_data_home()}")
    print(f"State:   {get_xdg_state_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Preferences:  {Config.preferences_path()}")
    print(f"Log file:     {Config.log_path()}")
