# =============================================================================
# Preference Store
# =============================================================================
# Per-account display metadata, keyed by Account.id ("host|login"):
#   - Color: index into the palette
#   - Label: custom display name
#   - Git profile: identity to apply when switching to the account
# Plus one global list of git profiles the user added by hand.
#
# Each of the four namespaces is JSON-encoded under its own backend key and
# decoded independently. Anything that fails to decode reads as empty:
# preferences are a convenience cache, never authoritative data.
# =============================================================================

import json
import logging
from typing import Any

from gh_switcher.core import IdentityProfile, PALETTE_SIZE, default_color_index, sort_profiles
from gh_switcher.storage.backend import PreferenceBackend


logger = logging.getLogger(__name__)

COLOR_MAP_KEY = "ghSwitcher.accountColorMap"
LABELS_KEY = "ghSwitcher.accountLabels"
GIT_PROFILE_MAP_KEY = "ghSwitcher.gitProfileMap"
MANUAL_PROFILES_KEY = "ghSwitcher.manualGitProfiles"


class PreferenceStore:
    """
    Persistent account preferences.

    Usage:
        >>> store = PreferenceStore(MemoryBackend())
        >>> store.set_color_index("github.com|octocat", 3)
        >>> store.get_color_index("github.com|octocat")
        3

    Attributes:
        backend: Key-value storage.
        palette_size: Number of selectable colors; stored indices outside
                      [0, palette_size) are ignored.
    """

    def __init__(self, backend: PreferenceBackend, palette_size: int = PALETTE_SIZE) -> None:
        self.backend = backend
        self.palette_size = palette_size

    # =========================================================================
    # Colors
    # =========================================================================

    def get_color_index(self, account_id: str) -> int:
        """
        Color index for an account.

        Returns the stored index if it's within the palette, otherwise the
        index derived from the account id. Never writes.
        """
        index = self._load_color_map().get(account_id)
        if index is not None and 0 <= index < self.palette_size:
            return index
        return default_color_index(account_id, self.palette_size)

    def set_color_index(self, account_id: str, index: int) -> None:
        """Store a color index. Out-of-range indices are ignored."""
        if not 0 <= index < self.palette_size:
            logger.debug(f"Ignoring out-of-range color index {index} for {account_id}")
            return

        color_map = self._load_color_map()
        color_map[account_id] = index
        self._save(COLOR_MAP_KEY, color_map)

    def _load_color_map(self) -> dict[str, int]:
        data = self._load(COLOR_MAP_KEY)
        if not isinstance(data, dict):
            return {}
        return {
            key: value
            for key, value in data.items()
            if isinstance(value, int) and not isinstance(value, bool)
        }

    # =========================================================================
    # Labels
    # =========================================================================

    def get_label(self, account_id: str) -> str | None:
        """Custom display name for an account, or None."""
        return self._load_labels().get(account_id)

    def set_label(self, account_id: str, label: str | None) -> None:
        """
        Set or clear an account's label.

        Blank or None removes the label rather than storing an empty string.
        """
        labels = self._load_labels()
        cleaned = label.strip() if label else ""

        if cleaned:
            labels[account_id] = cleaned
        elif account_id in labels:
            del labels[account_id]
        else:
            return

        self._save(LABELS_KEY, labels)

    def _load_labels(self) -> dict[str, str]:
        data = self._load(LABELS_KEY)
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str) and value}

    # =========================================================================
    # Per-Account Git Profiles
    # =========================================================================

    def get_profile(self, account_id: str) -> IdentityProfile:
        """Git profile assigned to an account (empty if none)."""
        return self._load_profile_map().get(account_id, IdentityProfile.empty())

    def set_profile(self, account_id: str, profile: IdentityProfile) -> None:
        """Assign a git profile. An empty profile removes the assignment."""
        profiles = self._load_profile_map()

        if profile.is_empty:
            if account_id not in profiles:
                return
            del profiles[account_id]
        else:
            profiles[account_id] = profile

        self._save(
            GIT_PROFILE_MAP_KEY,
            {key: value.to_dict() for key, value in profiles.items()},
        )

    def _load_profile_map(self) -> dict[str, IdentityProfile]:
        data = self._load(GIT_PROFILE_MAP_KEY)
        if not isinstance(data, dict):
            return {}

        profiles: dict[str, IdentityProfile] = {}
        for key, value in data.items():
            profile = IdentityProfile.from_dict(value)
            if profile is not None and not profile.is_empty:
                profiles[key] = profile
        return profiles

    # =========================================================================
    # Manual Profiles
    # =========================================================================

    def list_manual_profiles(self) -> list[IdentityProfile]:
        """Profiles the user added by hand, sorted by display label."""
        data = self._load(MANUAL_PROFILES_KEY)
        if not isinstance(data, list):
            return []

        profiles: list[IdentityProfile] = []
        for item in data:
            profile = IdentityProfile.from_dict(item)
            if profile is not None and profile not in profiles:
                profiles.append(profile)
        return profiles

    def add_manual_profile(self, profile: IdentityProfile) -> None:
        """
        Add a profile to the manual list.

        Empty profiles and duplicates are ignored. The list is re-sorted by
        display label after every insertion.
        """
        if profile.is_empty:
            return

        profile = profile.normalized()
        profiles = self.list_manual_profiles()
        if profile in profiles:
            return

        profiles.append(profile)
        self._save_manual_profiles(sort_profiles(profiles))

    def remove_manual_profile(self, profile: IdentityProfile) -> None:
        """Remove every entry equal to `profile` from the manual list."""
        profiles = self.list_manual_profiles()
        remaining = [p for p in profiles if p != profile]
        if len(remaining) != len(profiles):
            self._save_manual_profiles(remaining)

    def _save_manual_profiles(self, profiles: list[IdentityProfile]) -> None:
        self._save(MANUAL_PROFILES_KEY, [p.to_dict() for p in profiles])

    # =========================================================================
    # Serialization
    # =========================================================================

    def _load(self, key: str) -> Any:
        """Decode one namespace; returns None if it's missing or damaged."""
        try:
            raw = self.backend.get(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read preference {key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring damaged preference {key}: {e}")
            return None

    def _save(self, key: str, value: Any) -> None:
        try:
            self.backend.set(key, json.dumps(value, sort_keys=True))
        except OSError as e:
            logger.error(f"Failed to save preference {key} - changes may not persist: {e}")
