# =============================================================================
# Main Screen
# =============================================================================
# The primary view of gh-switcher, showing:
#   - Header with the active account and its color
#   - Error banner (title + details) when the last operation failed
#   - Account table
#   - Status line
#
# All gh work runs in Textual workers so the UI stays responsive. The
# screen renders AppState and forwards user commands to it; it holds no
# account logic of its own.
# =============================================================================

from rich.markup import escape
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, Static
from textual.containers import Vertical

from gh_switcher.core import Account, IdentityProfile
from gh_switcher.state import AppState
from gh_switcher.ui.screens.label import LabelScreen
from gh_switcher.ui.screens.profile_picker import ProfilePickerScreen
from gh_switcher.ui.widgets.account_list import AccountList


class MainScreen(Screen):
    """
    The account switching screen.

    Keybindings:
        - j/k or arrows: Navigate accounts
        - Enter: Switch to the highlighted account
        - r: Refresh accounts from gh
        - t: Retry the last failed operation
        - c / C: Next / previous color
        - l: Edit label
        - p: Choose git profile
    """

    BINDINGS = [
        Binding("j", "cursor_down", "Next", show=False),
        Binding("k", "cursor_up", "Previous", show=False),
        Binding("enter", "switch", "Switch"),
        Binding("r", "refresh", "Refresh"),
        Binding("t", "retry", "Retry"),
        Binding("c", "next_color", "Color"),
        Binding("C", "previous_color", "Prev Color", show=False),
        Binding("l", "edit_label", "Label"),
        Binding("p", "pick_profile", "Git Profile"),
    ]

    CSS = """
    #active-line {
        height: 3;
        padding: 1;
        background: $surface-darken-1;
    }

    #error-banner {
        height: auto;
        padding: 0 1;
        background: $error 20%;
        display: none;
    }

    #error-banner.visible {
        display: block;
    }

    #account-list {
        height: 1fr;
    }

    #status-line {
        height: 1;
        background: $surface-darken-2;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, state: AppState, refresh_on_start: bool = True) -> None:
        """
        Initialize the main screen.

        Args:
            state: Application state to render and drive.
            refresh_on_start: Load accounts as soon as the screen mounts.
        """
        super().__init__()
        self.state = state
        self._refresh_on_start = refresh_on_start

    def compose(self) -> ComposeResult:
        """
        Compose the main screen layout.

        +--------------------------------------------------+
        |                    Header                         |
        +--------------------------------------------------+
        | ● Active account                                  |
        | Error banner (hidden unless there is an error)    |
        +--------------------------------------------------+
        |                 Account table                     |
        +--------------------------------------------------+
        | Status                                            |
        +--------------------------------------------------+
        |                    Footer                         |
        +--------------------------------------------------+
        """
        yield Header()
        with Vertical():
            yield Static("", id="active-line")
            yield Static("", id="error-banner")
            yield AccountList(id="account-list")
        yield Static("Ready", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        """Hook state changes and load accounts."""
        self.state.on_change = self.render_state
        self.query_one("#account-list", AccountList).focus()
        self.render_state()

        if self._refresh_on_start:
            self._load()

    def on_unmount(self) -> None:
        """Stop receiving state changes."""
        if self.state.on_change == self.render_state:
            self.state.on_change = None

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_state(self) -> None:
        """Redraw everything from AppState."""
        state = self.state

        active = state.active_account
        indicator = f"[{state.status_color.hex}]●[/]"
        if active is not None:
            active_text = f"{indicator} {escape(state.display_name(active))}"
        else:
            active_text = f"{indicator} No active account"
        self.query_one("#active-line", Static).update(active_text)

        banner = self.query_one("#error-banner", Static)
        if state.error_banner is not None:
            text = f"[bold]{escape(state.error_banner.title)}[/]"
            if state.error_banner.details:
                text += f"\n{escape(state.error_banner.details)}"
            text += "\nPress t to retry."
            banner.update(text)
            banner.add_class("visible")
        else:
            banner.update("")
            banner.remove_class("visible")

        self.query_one("#account-list", AccountList).load_accounts(state)

        if state.is_refreshing:
            self.update_status("Refreshing...")
        elif state.switching_account_id is not None:
            self.update_status("Switching account...")
        elif not state.accounts and state.error_banner is None:
            self.update_status("No accounts loaded - press r to import from gh")
        else:
            self.update_status(f"{len(state.accounts)} accounts")

    def update_status(self, text: str) -> None:
        """Update the status line."""
        self.query_one("#status-line", Static).update(text)

    # -------------------------------------------------------------------------
    # Workers
    # -------------------------------------------------------------------------

    @work(exclusive=False, group="gh")
    async def _load(self) -> None:
        await self.state.load_if_needed()

    @work(exclusive=False, group="gh")
    async def _refresh(self) -> None:
        await self.state.refresh()

    @work(exclusive=False, group="gh")
    async def _switch(self, account: Account) -> None:
        await self.state.switch_to(account)
        if self.state.error_banner is None:
            self.notify(f"Switched to {self.state.display_name(account)}", timeout=3)

    @work(exclusive=False, group="gh")
    async def _retry(self) -> None:
        await self.state.retry_last()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _selected(self) -> Account | None:
        return self.query_one("#account-list", AccountList).get_selected_account()

    def action_cursor_down(self) -> None:
        self.query_one("#account-list", AccountList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#account-list", AccountList).action_cursor_up()

    def action_refresh(self) -> None:
        """Reload accounts from gh."""
        if self.state.is_working:
            self.notify("Already working...")
            return
        self._refresh()

    def action_switch(self) -> None:
        """Switch to the highlighted account."""
        account = self._selected()
        if account is None:
            return
        if account.is_active:
            self.notify("Account is already active")
            return
        if self.state.is_working:
            self.notify("Already working...")
            return
        self._switch(account)

    def on_data_table_row_selected(self, event: AccountList.RowSelected) -> None:
        """Enter/click on a row switches to it."""
        self.action_switch()

    def action_retry(self) -> None:
        """Re-run the last refresh or switch."""
        if self.state.is_working:
            return
        self._retry()

    def action_next_color(self) -> None:
        self._shift_color(1)

    def action_previous_color(self) -> None:
        self._shift_color(-1)

    def _shift_color(self, step: int) -> None:
        account = self._selected()
        if account is None:
            return
        size = len(self.state.palette)
        index = (self.state.color_index_for(account) + step) % size
        self.state.assign_color(account, index)
        self.notify(f"Color: {self.state.palette[index].name}", timeout=2)

    def action_edit_label(self) -> None:
        """Open the label editor for the highlighted account."""
        account = self._selected()
        if account is None:
            return

        def on_label_entered(label: str | None) -> None:
            if label is not None:
                self.state.set_label(account, label)

        self.app.push_screen(
            LabelScreen(account.default_display_name, self.state.label_for(account)),
            on_label_entered,
        )

    def action_pick_profile(self) -> None:
        """Open the git profile picker for the highlighted account."""
        account = self._selected()
        if account is None:
            return

        def on_profile_chosen(profile: IdentityProfile | None) -> None:
            if profile is None:
                return
            self.state.set_profile(account, profile)
            if profile.is_empty:
                self.notify("Git profile cleared", timeout=2)
            else:
                self.notify(f"Git profile: {profile.display_string}", timeout=2)

        self.app.push_screen(
            ProfilePickerScreen(
                self.state,
                self.state.display_name(account),
                self.state.profile_for(account),
            ),
            on_profile_chosen,
        )
