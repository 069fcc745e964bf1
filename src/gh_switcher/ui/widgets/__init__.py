# =============================================================================
# UI Widgets
# =============================================================================
# Reusable UI components for gh-switcher.
#
#   - AccountList: Table of gh accounts with colors, labels and profiles
# =============================================================================

from gh_switcher.ui.widgets.account_list import AccountList

__all__ = ["AccountList"]
