# =============================================================================
# GitHub CLI Auth Service
# =============================================================================
# Talks to the `gh` CLI to list and switch authenticated accounts, and to
# `git` to apply an identity after a switch.
#
# Commands used:
#   gh auth status --json hosts                       List accounts
#   gh auth switch --hostname <host> --user <login>   Make an account active
#   gh auth setup-git --hostname <host>               Point git's credential
#                                                     helper at gh
#   git config --global user.name|user.email <value>  Apply an identity
#
# The `gh auth status` payload looks like:
#   {"hosts": {"github.com": [{"host": "github.com", "login": "octocat",
#                              "active": true, ...}, ...]}}
# =============================================================================

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from gh_switcher.config import CommandsConfig
from gh_switcher.core import Account
from gh_switcher.gh.runner import (
    CommandOutput,
    CommandRunner,
    CommandTimeoutError,
    LaunchFailedError,
    command_environment,
    resolve_executable,
)


logger = logging.getLogger(__name__)

STATUS_ARGS = ["auth", "status", "--json", "hosts"]

# Output fragments meaning the shell couldn't find gh
NOT_FOUND_MARKERS = ("no such file", "command not found", ": not found")

UNKNOWN_ERROR_DETAILS = "Unknown gh CLI error."


# =============================================================================
# Payload Decoding
# =============================================================================

def parse_status_payload(text: str) -> list[Account]:
    """
    Decode `gh auth status --json hosts` output into sorted accounts.

    The payload must be an object whose "hosts" field maps each host to a
    list of entry objects. Anything else is rejected as a whole. Entries
    without a string "login" are skipped.

    Args:
        text: Raw stdout from gh.

    Returns:
        Accounts sorted active-first, then by host and login
        (case-insensitive). May be empty.

    Raises:
        InvalidPayloadError: If the text isn't JSON of the expected shape.
    """
    try:
        root = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidPayloadError(f"not JSON: {e}") from e

    if not isinstance(root, dict):
        raise InvalidPayloadError("top-level value is not an object")

    hosts = root.get("hosts")
    if not isinstance(hosts, dict):
        raise InvalidPayloadError("missing or invalid 'hosts' object")

    accounts: list[Account] = []
    for host_key, entries in hosts.items():
        if not isinstance(entries, list):
            raise InvalidPayloadError(f"entries for {host_key!r} are not a list")

        for entry in entries:
            if not isinstance(entry, dict):
                raise InvalidPayloadError(f"entry for {host_key!r} is not an object")
            account = _account_from_entry(host_key, entry)
            if account is not None:
                accounts.append(account)

    return sorted(accounts, key=Account.sort_key)


def _account_from_entry(host_key: str, entry: dict[str, Any]) -> Account | None:
    login = entry.get("login")
    if not isinstance(login, str):
        logger.debug(f"Skipping {host_key} entry without a login")
        return None

    host = entry.get("host")
    if not isinstance(host, str):
        host = host_key

    active = entry.get("active")
    return Account(
        host=host,
        login=login,
        is_active=active if isinstance(active, bool) else False,
    )


# =============================================================================
# Identity Application Result
# =============================================================================

@dataclass
class IdentityReport:
    """
    Outcome of a best-effort identity application.

    Attributes:
        applied: git config keys that were set (e.g., "user.name").
        warnings: Human-readable descriptions of anything that failed.
    """
    applied: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if nothing failed (including when nothing was attempted)."""
        return not self.warnings


# =============================================================================
# Service
# =============================================================================

class GHAuthService:
    """
    Account source backed by the GitHub CLI.

    Usage:
        >>> service = GHAuthService(CommandRunner(timeout=30))
        >>> accounts = await service.fetch_accounts()
        >>> await service.switch_account(accounts[1].host, accounts[1].login)

    Attributes:
        runner: Executes external commands.
        commands: Tool locations, extra PATH entries.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        commands: CommandsConfig | None = None,
        base_env: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            runner: Command runner. Defaults to one using the configured timeout.
            commands: Tool configuration. Defaults to CommandsConfig().
            base_env: Environment to augment for gh. Defaults to os.environ.
        """
        self.commands = commands or CommandsConfig()
        self.runner = runner or CommandRunner(timeout=self.commands.timeout)
        self._base_env = base_env

    # =========================================================================
    # Accounts
    # =========================================================================

    async def fetch_accounts(self) -> list[Account]:
        """
        List all accounts gh is authenticated with.

        Returns:
            Non-empty list of accounts, active accounts first.

        Raises:
            ToolNotInstalledError: gh is missing.
            CommandFailedError: gh exited non-zero.
            CommandTimedOutError: gh didn't finish in time.
            InvalidPayloadError: gh's JSON didn't have the expected shape.
            NoAccountsError: gh reported no usable accounts.
        """
        output = await self._run_gh(STATUS_ARGS)

        try:
            accounts = parse_status_payload(output.stdout)
        except InvalidPayloadError as e:
            logger.error(f"Unexpected gh auth status payload: {e.reason}")
            raise

        if not accounts:
            raise NoAccountsError()

        logger.info(f"Loaded {len(accounts)} gh accounts")
        return accounts

    async def switch_account(self, host: str, login: str) -> None:
        """
        Make `login` the active account for `host`.

        Runs `gh auth switch` and then `gh auth setup-git`. The second
        command only runs if the first succeeded.

        Raises:
            ToolNotInstalledError, CommandFailedError, CommandTimedOutError
        """
        logger.info(f"Switching gh account to {login}@{host}")
        await self._run_gh(["auth", "switch", "--hostname", host, "--user", login])
        await self._run_gh(["auth", "setup-git", "--hostname", host])

    # =========================================================================
    # Git Identity
    # =========================================================================

    async def apply_git_profile(self, name: str, email: str) -> IdentityReport:
        """
        Set the global git user.name / user.email.

        Best-effort: failures are logged and returned in the report, never
        raised. Blank fields are left untouched; if both are blank nothing
        runs.

        Args:
            name: Value for user.name.
            email: Value for user.email.

        Returns:
            IdentityReport describing what was applied and what failed.
        """
        report = IdentityReport()
        settings = [
            ("user.name", name.strip()),
            ("user.email", email.strip()),
        ]

        for key, value in settings:
            if not value:
                continue
            await self._set_git_config(key, value, report)

        return report

    async def _set_git_config(self, key: str, value: str, report: IdentityReport) -> None:
        git = self.commands.git_executable
        args = ["config", "--global", key, value]

        try:
            output = await self.runner.run(git, args)
        except (LaunchFailedError, CommandTimeoutError) as e:
            logger.warning(f"Could not set git {key}: {e}")
            report.warnings.append(f"{key}: {e}")
            return

        if not output.ok:
            details = _failure_details(output)
            logger.warning(f"git config {key} exited with {output.exit_code}: {details}")
            report.warnings.append(f"{key}: {details}")
            return

        logger.debug(f"Set git {key}")
        report.applied.append(key)

    # =========================================================================
    # gh Invocation
    # =========================================================================

    async def _run_gh(self, args: list[str]) -> CommandOutput:
        """
        Run gh and classify failures.

        Returns:
            Output of a successful (exit 0) run, with stdout/stderr trimmed.
        """
        command = f"gh {' '.join(args)}"
        env = command_environment(self._base_env, self.commands.extra_path)

        executable = resolve_executable(self.commands.gh_executable, env)
        if executable is None:
            logger.error(f"{self.commands.gh_executable} not found in PATH")
            raise ToolNotInstalledError()

        try:
            output = await self.runner.run(executable, args, env=env)
        except LaunchFailedError as e:
            raise ToolNotInstalledError() from e
        except CommandTimeoutError as e:
            raise CommandTimedOutError(command, e.seconds) from e

        stdout = output.stdout.strip()
        stderr = output.stderr.strip()

        if output.exit_code != 0:
            details = _failure_details(output)
            combined = f"{stderr}\n{stdout}".lower()
            if any(marker in combined for marker in NOT_FOUND_MARKERS):
                raise ToolNotInstalledError()
            logger.error(f"{command} failed ({output.exit_code}): {details}")
            raise CommandFailedError(command, details)

        return CommandOutput(stdout=stdout, stderr=stderr, exit_code=output.exit_code)


def _failure_details(output: CommandOutput) -> str:
    """stderr if present, else stdout, else a placeholder."""
    stderr = output.stderr.strip()
    stdout = output.stdout.strip()
    return stderr or stdout or UNKNOWN_ERROR_DETAILS


# =============================================================================
# Exceptions
# =============================================================================

class AuthServiceError(Exception):
    """
    Base exception for gh account operations.

    Every subclass provides a short `title` and longer `details` text
    suitable for showing to the user.
    """

    title = "GitHub CLI error"

    @property
    def details(self) -> str:
        return str(self)


class ToolNotInstalledError(AuthServiceError):
    """Raised when gh can't be found or launched."""

    title = "GitHub CLI was not found"

    def __init__(self) -> None:
        super().__init__("Install GitHub CLI and make sure `gh` is available in PATH.")


class InvalidPayloadError(AuthServiceError):
    """Raised when `gh auth status` output doesn't have the expected shape."""

    title = "Could not read gh auth status"

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(
            "The output from `gh auth status --json hosts` was not valid JSON."
        )


class NoAccountsError(AuthServiceError):
    """Raised when gh reports no authenticated accounts."""

    title = "No authenticated accounts found"

    def __init__(self) -> None:
        super().__init__("Run `gh auth login` in Terminal, then click Refresh.")


class CommandFailedError(AuthServiceError):
    """Raised when a gh command exits non-zero."""

    def __init__(self, command: str, details: str) -> None:
        self.command = command
        super().__init__(details)

    @property
    def title(self) -> str:
        return f"Command failed: {self.command}"


class CommandTimedOutError(AuthServiceError):
    """Raised when a gh command is killed after the configured timeout."""

    def __init__(self, command: str, seconds: float) -> None:
        self.command = command
        self.seconds = seconds
        super().__init__(f"No response after {seconds:g} seconds.")

    @property
    def title(self) -> str:
        return f"Command timed out: {self.command}"
