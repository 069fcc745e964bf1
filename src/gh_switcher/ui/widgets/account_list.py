# =============================================================================
# Account List Widget
# =============================================================================
# A table of gh accounts.
#
# Columns: color swatch, active marker, display name, host, git profile
# Rows are rebuilt from AppState whenever it changes.
# =============================================================================

from typing import TYPE_CHECKING

from rich.markup import escape
from textual.widgets import DataTable
from textual.widgets.data_table import RowKey

if TYPE_CHECKING:
    from gh_switcher.core import Account
    from gh_switcher.state import AppState


class AccountList(DataTable):
    """
    A table widget displaying gh accounts.

    Usage:
        >>> table = AccountList()
        >>> table.load_accounts(state)
        >>> table.get_selected_account()
    """

    # Column configuration (0 = flexible width)
    COLUMNS = [
        ("", 2),          # Color swatch
        ("", 2),          # Active marker
        ("Account", 0),
        ("Host", 20),
        ("Git profile", 0),
    ]

    def __init__(self, **kwargs) -> None:
        """
        Initialize the account list.

        Args:
            **kwargs: Additional arguments passed to DataTable.
        """
        super().__init__(**kwargs)
        self._accounts: dict[RowKey, "Account"] = {}

        self.cursor_type = "row"
        self.zebra_stripes = True

    def on_mount(self) -> None:
        """Set up columns when widget is mounted."""
        for label, width in self.COLUMNS:
            if width > 0:
                self.add_column(label, width=width)
            else:
                self.add_column(label)

    def load_accounts(self, state: "AppState") -> None:
        """
        Rebuild rows from the current state, keeping the cursor position.

        Args:
            state: Application state to render.
        """
        cursor = self.cursor_row
        self.clear()
        self._accounts.clear()

        for account in state.accounts:
            row_key = self._add_account_row(account, state)
            self._accounts[row_key] = account

        if self._accounts:
            self.move_cursor(row=min(cursor, len(self._accounts) - 1))

    def _add_account_row(self, account: "Account", state: "AppState") -> RowKey:
        color = state.color_for(account)
        swatch = f"[{color.hex}]●[/]"

        if state.switching_account_id == account.id:
            marker = "…"
        elif account.is_active:
            marker = "✓"
        else:
            marker = " "

        name = escape(state.display_name(account))
        if account.is_active:
            name = f"[bold]{name}[/]"

        profile = state.profile_for(account)
        profile_text = "" if profile.is_empty else escape(profile.display_string)

        return self.add_row(
            swatch,
            marker,
            name,
            escape(account.host),
            profile_text,
            key=account.id,
        )

    def get_selected_account(self) -> "Account | None":
        """
        Get the account under the cursor.

        Returns:
            Selected Account or None if the table is empty.
        """
        row = self.cursor_row
        try:
            row_key = list(self._accounts.keys())[row]
        except IndexError:
            return None
        return self._accounts.get(row_key)
