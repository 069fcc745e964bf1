# =============================================================================
# gh-switcher Entry Point for `python -m gh_switcher`
# =============================================================================
# This module allows gh-switcher to be run as a Python module:
#
#   python -m gh_switcher
#
# This is equivalent to running the 'gh-switcher' command after installation.
# =============================================================================

import sys

from gh_switcher.app import main

if __name__ == "__main__":
    sys.exit(main())
