# =============================================================================
# Git Module
# =============================================================================
# Reads the user's git configuration to discover identity profiles.
# Writing identities happens through `git config` in gh_switcher.gh.service.
# =============================================================================

from gh_switcher.git.discovery import (
    GitProfileDiscovery,
    ScanReport,
    parse_include_paths,
    parse_user_sections,
)

__all__ = [
    "GitProfileDiscovery",
    "ScanReport",
    "parse_include_paths",
    "parse_user_sections",
]
