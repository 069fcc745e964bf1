# =============================================================================
# Application State
# =============================================================================
# The non-UI core of gh-switcher. AppState owns the current account list,
# the in-flight flags and the error banner, and exposes the operations the
# presentation layer calls (refresh, switch, retry, colors, labels, profiles).
#
# Concurrency model:
#   - All state lives on one asyncio event loop; flags are checked and set
#     before the first await, so overlapping requests see them immediately
#   - A refresh while one is running is dropped (not queued); the same goes
#     for switches
#   - External commands and file scanning run off the loop (subprocesses,
#     worker threads)
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Callable

from gh_switcher.core import Account, IdentityProfile, PALETTE, PaletteColor, sort_profiles
from gh_switcher.core.palette import ERROR_COLOR, NEUTRAL_COLOR
from gh_switcher.gh.service import AuthServiceError, GHAuthService
from gh_switcher.git.discovery import GitProfileDiscovery
from gh_switcher.storage import PreferenceStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorBanner:
    """
    Error shown to the user.

    Attributes:
        title: One short phrase per error kind.
        details: Optional longer explanation or captured command output.
    """
    title: str
    details: str | None = None


@dataclass(frozen=True)
class RetryAction:
    """
    The last operation the user started, so "Retry" can re-issue it.

    Attributes:
        kind: "refresh" or "switch".
        host: Target host for a switch.
        login: Target login for a switch.
    """
    kind: str
    host: str = ""
    login: str = ""

    @classmethod
    def refresh(cls) -> "RetryAction":
        return cls("refresh")

    @classmethod
    def switch(cls, host: str, login: str) -> "RetryAction":
        return cls("switch", host, login)


# Called after any state change so the UI can redraw
ChangeCallback = Callable[[], None]


class AppState:
    """
    Orchestrates accounts, preferences and git profiles.

    Usage:
        >>> state = AppState(GHAuthService(), PreferenceStore(backend))
        >>> await state.refresh()
        >>> await state.switch_to(state.accounts[1])

    Attributes:
        accounts: Accounts from the last successful fetch.
        git_profiles: Discovered plus manual git profiles (deduplicated).
        is_refreshing: True while a refresh is running.
        switching_account_id: Id of the account being switched to, if any.
        error_banner: Current error, if any.
        on_change: Optional callback fired after state changes.
    """

    def __init__(
        self,
        service: GHAuthService,
        store: PreferenceStore,
        discovery: GitProfileDiscovery | None = None,
        discover_profiles: bool = True,
    ) -> None:
        """
        Initialize the state holder.

        Args:
            service: gh account source.
            store: Preference store (injected; no shared global store).
            discovery: Git profile scanner. Defaults to scanning the home dir.
            discover_profiles: If False, only manual profiles are offered.
        """
        self.service = service
        self.store = store
        self.discovery = discovery or GitProfileDiscovery()
        self.discover_profiles = discover_profiles

        self.accounts: list[Account] = []
        self.git_profiles: list[IdentityProfile] = []
        self.is_refreshing = False
        self.switching_account_id: str | None = None
        self.has_loaded = False
        self.error_banner: ErrorBanner | None = None
        self.last_action = RetryAction.refresh()
        self.on_change: ChangeCallback | None = None

    # =========================================================================
    # Derived State
    # =========================================================================

    @property
    def is_working(self) -> bool:
        """True while a refresh or switch is in flight."""
        return self.is_refreshing or self.switching_account_id is not None

    @property
    def has_error(self) -> bool:
        return self.error_banner is not None

    @property
    def active_account(self) -> Account | None:
        return next((a for a in self.accounts if a.is_active), None)

    @property
    def palette(self) -> tuple[PaletteColor, ...]:
        return PALETTE

    @property
    def status_color(self) -> PaletteColor:
        """Color for the status indicator: error, active account, or neutral."""
        if self.has_error:
            return ERROR_COLOR
        active = self.active_account
        if active is None:
            return NEUTRAL_COLOR
        return self.color_for(active)

    # =========================================================================
    # Loading and Switching
    # =========================================================================

    async def load_if_needed(self) -> None:
        """Refresh once on first use."""
        if self.has_loaded:
            return
        self.has_loaded = True
        await self.refresh()

    async def refresh(self) -> None:
        """
        Reload accounts from gh.

        Dropped if a refresh is already running. On failure the account
        list is cleared and the error banner set.
        """
        if self.is_refreshing:
            logger.debug("Refresh already in progress, ignoring request")
            return

        self.is_refreshing = True
        self.last_action = RetryAction.refresh()
        self.error_banner = None
        self._changed()

        try:
            self.accounts = await self.service.fetch_accounts()
        except Exception as e:
            self.accounts = []
            self.error_banner = self._map_error(e)
        finally:
            self.is_refreshing = False
            self._changed()

    async def switch_to(self, account: Account) -> None:
        """
        Make `account` the active gh account.

        Runs the switch, applies the account's git profile (best-effort)
        and reloads the account list. Dropped if a switch is already running
        or the account is already active.
        """
        if self.switching_account_id is not None:
            logger.debug("Switch already in progress, ignoring request")
            return
        if account.is_active:
            return

        self.switching_account_id = account.id
        self.last_action = RetryAction.switch(account.host, account.login)
        self.error_banner = None
        self._changed()

        try:
            await self.service.switch_account(account.host, account.login)

            profile = self.store.get_profile(account.id)
            if not profile.is_empty:
                report = await self.service.apply_git_profile(profile.name, profile.email)
                for warning in report.warnings:
                    logger.warning(f"Git profile for {account.id} not fully applied: {warning}")

            self.accounts = await self.service.fetch_accounts()
        except Exception as e:
            self.error_banner = self._map_error(e)
        finally:
            self.switching_account_id = None
            self._changed()

    async def retry_last(self) -> None:
        """Re-issue the last refresh or switch."""
        action = self.last_action
        if action.kind == "switch":
            await self.switch_to(Account(action.host, action.login, is_active=False))
        else:
            await self.refresh()

    # =========================================================================
    # Colors and Labels
    # =========================================================================

    def color_index_for(self, account: Account) -> int:
        return self.store.get_color_index(account.id)

    def color_for(self, account: Account) -> PaletteColor:
        return PALETTE[self.color_index_for(account) % len(PALETTE)]

    def assign_color(self, account: Account, index: int) -> None:
        self.store.set_color_index(account.id, index)
        self._changed()

    def label_for(self, account: Account) -> str | None:
        return self.store.get_label(account.id)

    def set_label(self, account: Account, label: str | None) -> None:
        self.store.set_label(account.id, label)
        self._changed()

    def display_name(self, account: Account) -> str:
        """Custom label if set, otherwise "login@host"."""
        return self.store.get_label(account.id) or account.default_display_name

    # =========================================================================
    # Git Profiles
    # =========================================================================

    def profile_for(self, account: Account) -> IdentityProfile:
        return self.store.get_profile(account.id)

    def set_profile(self, account: Account, profile: IdentityProfile) -> None:
        self.store.set_profile(account.id, profile)
        self._changed()

    @property
    def manual_profiles(self) -> list[IdentityProfile]:
        return self.store.list_manual_profiles()

    def is_manual(self, profile: IdentityProfile) -> bool:
        return profile in self.store.list_manual_profiles()

    async def refresh_git_profiles(self) -> None:
        """
        Rebuild `git_profiles` from config discovery plus manual profiles.

        A manual profile that also appears in a config file is listed once.
        """
        combined: list[IdentityProfile] = []
        if self.discover_profiles:
            combined.extend(await self.discovery.discover_async())
        for profile in self.store.list_manual_profiles():
            if profile not in combined:
                combined.append(profile)

        self.git_profiles = sort_profiles(combined)
        self._changed()

    async def add_manual_profile(self, profile: IdentityProfile) -> None:
        self.store.add_manual_profile(profile)
        await self.refresh_git_profiles()

    async def remove_manual_profile(self, profile: IdentityProfile) -> None:
        self.store.remove_manual_profile(profile)
        await self.refresh_git_profiles()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    @staticmethod
    def _map_error(error: Exception) -> ErrorBanner:
        if isinstance(error, AuthServiceError):
            logger.warning(f"{error.title}: {error.details}")
            return ErrorBanner(title=error.title, details=error.details)

        logger.exception("Unexpected error during gh operation")
        return ErrorBanner(title="Unexpected error", details=str(error) or None)
