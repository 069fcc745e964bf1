# =============================================================================
# Git Profile Discovery
# =============================================================================
# Finds git identities (user.name / user.email pairs) already configured on
# this machine so they can be offered when assigning a profile to an account.
#
# Files scanned:
#   - ~/.gitconfig
#   - ~/.config/git/config
#   - Files referenced by [include] / [includeIf "..."] sections in the two
#     files above (one level only: includes inside included files are not
#     followed)
#
# Only a small subset of git's config syntax is understood: section headers,
# and "key = value" lines inside [user] and include sections. Discovery is
# best-effort; unreadable files are skipped and reported as warnings.
# =============================================================================

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from gh_switcher.core import IdentityProfile, sort_profiles


logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """
    Result of scanning git config files.

    Attributes:
        profiles: Unique profiles, sorted by display label.
        files: Files that were read, in scan order.
        warnings: Problems encountered (unreadable files and the like).
    """
    profiles: list[IdentityProfile] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Line Parsing
# =============================================================================

def _value_for(line: str, key: str) -> str | None:
    """
    Return the value of a `key = value` line, or None if it isn't one.

    The key matches case-insensitively as a prefix and the line must contain
    '='. The value is everything after the first '=', trimmed.
    """
    if not line.lower().startswith(key) or "=" not in line:
        return None
    return line.split("=", 1)[1].strip()


def parse_include_paths(content: str, home: Path, base_dir: Path | None = None) -> list[Path]:
    """
    Collect `path` values from include sections.

    Any section whose header contains "include" (case-insensitive) counts,
    so both [include] and [includeIf "gitdir:..."] are recognized.

    Args:
        content: Config file text.
        home: Directory that a leading "~" expands to.
        base_dir: Directory relative paths are resolved against.

    Returns:
        Paths in the order they appear.
    """
    paths: list[Path] = []
    in_include = False

    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if line.startswith("["):
            in_include = "include" in line.lower()
            continue
        if not in_include:
            continue

        value = _value_for(line, "path")
        if not value:
            continue

        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        if value.startswith("~"):
            value = str(home) + value[1:]

        path = Path(value)
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        paths.append(path)

    return paths


def parse_user_sections(content: str) -> list[IdentityProfile]:
    """
    Extract a profile from every [user] section.

    Within a section the last name/email wins. A profile is emitted when
    the section ends (next header or end of file) if either field is set.
    """
    profiles: list[IdentityProfile] = []
    in_user = False
    name = ""
    email = ""

    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if line.startswith("["):
            if in_user and (name or email):
                profiles.append(IdentityProfile(name, email))
            in_user = line.lower().startswith("[user]")
            name = ""
            email = ""
            continue

        if not in_user:
            continue

        value = _value_for(line, "name")
        if value is not None:
            name = value
            continue
        value = _value_for(line, "email")
        if value is not None:
            email = value

    if in_user and (name or email):
        profiles.append(IdentityProfile(name, email))

    return profiles


# =============================================================================
# Discovery
# =============================================================================

class GitProfileDiscovery:
    """
    Scans git config files for identity profiles.

    Usage:
        >>> discovery = GitProfileDiscovery()
        >>> for profile in discovery.discover():
        ...     print(profile.display_string)

    Attributes:
        home: Home directory used for the root config files and "~".
    """

    def __init__(self, home: Path | None = None) -> None:
        """
        Initialize discovery.

        Args:
            home: Home directory. Defaults to the current user's.
        """
        self.home = home or Path.home()

    @property
    def root_paths(self) -> list[Path]:
        """Global config files scanned first."""
        return [
            self.home / ".gitconfig",
            self.home / ".config" / "git" / "config",
        ]

    def discover(self) -> list[IdentityProfile]:
        """Return unique profiles sorted by display label."""
        return self.scan().profiles

    async def discover_async(self) -> list[IdentityProfile]:
        """Run discover() in a worker thread so file I/O doesn't block the loop."""
        return await asyncio.to_thread(self.discover)

    def scan(self) -> ScanReport:
        """
        Scan the root files and their includes.

        Never raises; problems are recorded in the report's warnings.
        """
        report = ScanReport()
        queue: list[Path] = []

        for root in self.root_paths:
            if not root.is_file():
                continue
            self._enqueue(queue, root)

            content = self._read(root, report)
            if content is None:
                continue
            for included in parse_include_paths(content, self.home, root.parent):
                if included.is_file():
                    self._enqueue(queue, included)
                else:
                    logger.debug(f"Include {included} from {root} does not exist")

        seen: set[IdentityProfile] = set()
        unique: list[IdentityProfile] = []

        for path in queue:
            content = self._read(path, report)
            if content is None:
                continue
            report.files.append(path)
            for profile in parse_user_sections(content):
                if profile in seen:
                    continue
                seen.add(profile)
                unique.append(profile)

        report.profiles = sort_profiles(unique)
        logger.debug(
            f"Discovered {len(report.profiles)} git profiles in {len(report.files)} files"
        )
        return report

    @staticmethod
    def _enqueue(queue: list[Path], path: Path) -> None:
        if path not in queue:
            queue.append(path)

    @staticmethod
    def _read(path: Path, report: ScanReport) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            message = f"Could not read {path}: {e}"
            logger.warning(message)
            if message not in report.warnings:
                report.warnings.append(message)
            return None
