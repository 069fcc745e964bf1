# =============================================================================
# Profile Picker Screen
# =============================================================================
# A modal screen for choosing the git profile applied when switching to an
# account. Lists "(no profile)" followed by every known profile: discovered
# from git config files plus manually added ones (marked with ✎).
#
# Keys:
#   - Enter: Assign the highlighted profile
#   - n: Add a manual profile
#   - d: Remove the highlighted manual profile
#   - Escape: Cancel
# =============================================================================

from typing import TYPE_CHECKING

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option
from textual.containers import Vertical

from gh_switcher.core import IdentityProfile
from gh_switcher.ui.screens.new_profile import NewProfileScreen

if TYPE_CHECKING:
    from gh_switcher.state import AppState


class ProfilePickerScreen(ModalScreen[IdentityProfile | None]):
    """
    Modal screen for picking an account's git profile.

    Returns:
        The chosen profile (empty profile = none), or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("n", "new_profile", "New"),
        Binding("d", "remove_profile", "Remove"),
    ]

    CSS = """
    ProfilePickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 70;
        height: auto;
        max-height: 80%;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #picker-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #picker-help {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def __init__(self, state: "AppState", account_name: str, current: IdentityProfile) -> None:
        """
        Initialize the picker.

        Args:
            state: Application state (source of profiles).
            account_name: Display name of the account being edited.
            current: Profile currently assigned to the account.
        """
        super().__init__()
        self._state = state
        self._account_name = account_name
        self._current = current
        self._choices: list[IdentityProfile] = []

    def compose(self) -> ComposeResult:
        """Compose the picker dialog."""
        with Vertical(id="picker-dialog"):
            yield Static(f"Git profile for {escape(self._account_name)}", id="picker-title")
            yield OptionList(id="profile-options")
            yield Static("Enter: assign  n: new  d: remove manual  Esc: cancel", id="picker-help")

    async def on_mount(self) -> None:
        """Load profiles and focus the list."""
        await self._state.refresh_git_profiles()
        self._reload_options()
        self.query_one("#profile-options", OptionList).focus()

    def _reload_options(self) -> None:
        options = self.query_one("#profile-options", OptionList)
        options.clear_options()

        self._choices = [IdentityProfile.empty()] + list(self._state.git_profiles)
        if not self._current.is_empty and self._current not in self._choices:
            self._choices.append(self._current)

        manual = set(self._state.manual_profiles)
        for index, profile in enumerate(self._choices):
            if profile.is_empty:
                prompt = "(no profile)"
            else:
                prompt = escape(profile.display_string)
                if profile in manual:
                    prompt += "  ✎"
            if profile == self._current or (profile.is_empty and self._current.is_empty):
                prompt = f"[bold]{prompt}[/]  ✓"
            options.add_option(Option(prompt, id=str(index)))

        if self._current in self._choices:
            options.highlighted = self._choices.index(self._current)

    def _highlighted_profile(self) -> IdentityProfile | None:
        index = self.query_one("#profile-options", OptionList).highlighted
        if index is None or index >= len(self._choices):
            return None
        return self._choices[index]

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Assign the selected profile."""
        self.dismiss(self._choices[event.option_index])

    def action_new_profile(self) -> None:
        """Prompt for a manual profile and add it."""
        async def on_profile_entered(profile: IdentityProfile | None) -> None:
            if profile is None:
                return
            await self._state.add_manual_profile(profile)
            self._reload_options()
            self.notify(f"Added {profile.display_string}")

        self.app.push_screen(NewProfileScreen(), on_profile_entered)

    async def action_remove_profile(self) -> None:
        """Remove the highlighted profile if it was added manually."""
        profile = self._highlighted_profile()
        if profile is None or profile.is_empty:
            return
        if not self._state.is_manual(profile):
            self.notify("Only manually added profiles can be removed", severity="warning")
            return

        await self._state.remove_manual_profile(profile)
        self._reload_options()
        self.notify(f"Removed {profile.display_string}")

    def action_cancel(self) -> None:
        """Cancel and return None."""
        self.dismiss(None)
