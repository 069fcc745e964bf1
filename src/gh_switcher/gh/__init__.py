# =============================================================================
# GitHub CLI Module
# =============================================================================
# Handles everything that shells out to external tools:
#   - Running commands as asyncio subprocesses (with timeouts)
#   - Listing gh accounts and parsing `gh auth status --json hosts`
#   - Switching the active gh account
#   - Applying a git identity after a switch
# =============================================================================

from gh_switcher.gh.runner import (
    CommandError,
    CommandOutput,
    CommandRunner,
    CommandTimeoutError,
    LaunchFailedError,
    command_environment,
    resolve_executable,
)
from gh_switcher.gh.service import (
    AuthServiceError,
    CommandFailedError,
    CommandTimedOutError,
    GHAuthService,
    IdentityReport,
    InvalidPayloadError,
    NoAccountsError,
    ToolNotInstalledError,
    parse_status_payload,
)

__all__ = [
    # Runner
    "CommandRunner",
    "CommandOutput",
    "CommandError",
    "LaunchFailedError",
    "CommandTimeoutError",
    "command_environment",
    "resolve_executable",
    # Service
    "GHAuthService",
    "IdentityReport",
    "parse_status_payload",
    "AuthServiceError",
    "ToolNotInstalledError",
    "InvalidPayloadError",
    "NoAccountsError",
    "CommandFailedError",
    "CommandTimedOutError",
]
