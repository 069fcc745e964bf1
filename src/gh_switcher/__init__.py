# =============================================================================
# gh-switcher: Switch GitHub CLI Accounts from the Terminal
# =============================================================================
#
# gh-switcher lists the accounts the GitHub CLI (`gh`) is logged in to and
# switches between them. Each account can have:
#   - A color, so the active account is recognizable at a glance
#   - A custom label
#   - A git identity (user.name / user.email) applied on switch
#
# Git identities are discovered from ~/.gitconfig, ~/.config/git/config and
# the files they include, or added by hand.
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "gh-switcher"

# Main entry point - this is what gets called by the 'gh-switcher' command
from gh_switcher.app import main

__all__ = ["main", "__version__", "__app_name__"]
