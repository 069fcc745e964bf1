# =============================================================================
# gh-switcher Core Module
# =============================================================================
# Core domain models. These are plain dataclasses with no external
# dependencies, so they can be imported anywhere without circular imports.
#
#   - Account: A gh CLI account (host + login)
#   - IdentityProfile: A git user.name / user.email pair
#   - PaletteColor: A selectable account color
# =============================================================================

from gh_switcher.core.account import Account
from gh_switcher.core.palette import (
    PALETTE,
    PALETTE_SIZE,
    PaletteColor,
    default_color_index,
)
from gh_switcher.core.profile import IdentityProfile, sort_profiles

__all__ = [
    "Account",
    "IdentityProfile",
    "sort_profiles",
    "PALETTE",
    "PALETTE_SIZE",
    "PaletteColor",
    "default_color_index",
]
