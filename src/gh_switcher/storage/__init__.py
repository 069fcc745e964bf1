# =============================================================================
# Storage Module
# =============================================================================
# Persists per-account display preferences (colors, labels, git profiles)
# and the list of manually added git profiles.
#
# The PreferenceStore is always handed its backend explicitly; there is no
# global preferences object. The default on-disk backend is a TOML file in
# the XDG data directory (~/.local/share/gh-switcher/preferences.toml).
# =============================================================================

from gh_switcher.storage.backend import MemoryBackend, PreferenceBackend, TomlFileBackend
from gh_switcher.storage.preferences import PreferenceStore

__all__ = ["PreferenceStore", "PreferenceBackend", "MemoryBackend", "TomlFileBackend"]
