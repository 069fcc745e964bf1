# =============================================================================
# UI Screens
# =============================================================================
# Full-screen and modal views for the application.
#
#   - MainScreen: Account table, active account, error banner
#   - LabelScreen: Edit an account's display name
#   - ProfilePickerScreen: Choose the git profile applied on switch
#   - NewProfileScreen: Add a git profile by hand
# =============================================================================

from gh_switcher.ui.screens.main import MainScreen
from gh_switcher.ui.screens.label import LabelScreen
from gh_switcher.ui.screens.new_profile import NewProfileScreen
from gh_switcher.ui.screens.profile_picker import ProfilePickerScreen

__all__ = ["MainScreen", "LabelScreen", "NewProfileScreen", "ProfilePickerScreen"]
