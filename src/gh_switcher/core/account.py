# =============================================================================
# Account Model
# =============================================================================
# Represents one account authenticated with the GitHub CLI.
#
# Accounts are rebuilt from `gh auth status` output on every refresh and are
# never mutated afterwards. The `id` property is the stable join key into
# every preference map (colors, labels, git profiles).
# =============================================================================

from dataclasses import dataclass


@dataclass(frozen=True)
class Account:
    """
    A GitHub CLI account on a specific host.

    Attributes:
        host: Authentication domain (e.g., "github.com" or a GHES hostname).
        login: Account login name on that host.
        is_active: Whether gh currently uses this account for the host.

    Example:
        >>> account = Account(host="github.com", login="octocat", is_active=True)
        >>> account.id
        'github.com|octocat'
    """

    host: str
    login: str
    is_active: bool = False

    @property
    def id(self) -> str:
        """Stable identity key used for all persisted preferences."""
        return f"{self.host}|{self.login}"

    @property
    def default_display_name(self) -> str:
        """Name shown when the user hasn't set a custom label."""
        return f"{self.login}@{self.host}"

    def sort_key(self) -> tuple[bool, str, str, str, str]:
        """
        Ordering used for account lists.

        Active accounts come first, then host and login compared
        case-insensitively. The raw host/login pair breaks remaining ties
        so two distinct accounts never compare equal.
        """
        return (
            not self.is_active,
            self.host.casefold(),
            self.login.casefold(),
            self.host,
            self.login,
        )

    def __str__(self) -> str:
        marker = " (active)" if self.is_active else ""
        return f"{self.default_display_name}{marker}"
