# =============================================================================
# Preference Backends
# =============================================================================
# Key-value persistence used by the PreferenceStore.
#
# Each key holds one string (the store JSON-encodes its namespaces), so a
# damaged value only affects its own key. Two backends are provided:
#   - MemoryBackend: Plain dict, for tests and throwaway sessions
#   - TomlFileBackend: A TOML file of string values in the XDG data directory
# =============================================================================

import logging
import os
import tempfile
import tomllib  # Built into Python 3.11+
from pathlib import Path
from typing import Protocol

import tomli_w  # For writing TOML (tomllib is read-only)


logger = logging.getLogger(__name__)


class PreferenceBackend(Protocol):
    """Minimal key-value interface the PreferenceStore needs."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryBackend:
    """
    In-memory backend.

    Usage:
        >>> backend = MemoryBackend()
        >>> backend.set("colors", "{}")
        >>> backend.get("colors")
        '{}'
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


class TomlFileBackend:
    """
    Backend persisted as a flat TOML table of string values.

    The file is re-read on every access so several processes sharing it see
    each other's writes. Writes go to a temp file that is renamed over the
    original, so the file is never left half-written.

    Attributes:
        path: Location of the TOML file.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the backend.

        Args:
            path: TOML file to use. Created on first write.
        """
        self.path = path

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._write(data)

    def _load(self) -> dict[str, object]:
        """Read the file; a missing or unreadable file reads as empty."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "rb") as f:
                return tomllib.load(f)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}

    def _write(self, data: dict[str, object]) -> None:
        """Write atomically: temp file in the same directory, then rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                tomli_w.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError:
            Path(temp_path).unlink(missing_ok=True)
            raise
