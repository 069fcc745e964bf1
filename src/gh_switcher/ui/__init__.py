# =============================================================================
# UI Module
# =============================================================================
# Textual-based user interface for gh-switcher.
#
# Structure:
#   - screens/: Full-screen and modal views (main, label, profile picker)
#   - widgets/: Reusable UI components (account list)
#
# The UI only renders AppState and forwards commands to it. Everything that
# talks to gh, git or the preference store lives outside this package.
# =============================================================================

# Screen exports
from gh_switcher.ui.screens.main import MainScreen

# Widget exports
from gh_switcher.ui.widgets.account_list import AccountList

__all__ = [
    "MainScreen",
    "AccountList",
]
