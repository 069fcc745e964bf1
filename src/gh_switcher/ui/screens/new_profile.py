# =============================================================================
# New Profile Screen
# =============================================================================
# A modal screen for adding a git profile by hand (name + email). Manual
# profiles are saved in the preference store and offered alongside the
# profiles discovered in git config files.
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static, Input, Button
from textual.containers import Vertical, Horizontal

from gh_switcher.core import IdentityProfile


class NewProfileScreen(ModalScreen[IdentityProfile | None]):
    """
    Modal screen for entering a new git profile.

    Returns:
        The new IdentityProfile, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    NewProfileScreen {
        align: center middle;
    }

    #profile-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #profile-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #profile-dialog Input {
        margin-bottom: 1;
    }

    #profile-buttons {
        align: center middle;
        height: auto;
    }

    #profile-buttons Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the new-profile dialog."""
        with Vertical(id="profile-dialog"):
            yield Static("Add Git Profile", id="profile-title")
            yield Input(placeholder="Name (user.name)", id="name-input")
            yield Input(placeholder="Email (user.email)", id="email-input")
            with Horizontal(id="profile-buttons"):
                yield Button("Add", id="add-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the name input when mounted."""
        self.query_one("#name-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "add-btn":
            self.action_submit()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the name field moves to email; in email it submits."""
        if event.input.id == "name-input":
            self.query_one("#email-input", Input).focus()
        else:
            self.action_submit()

    def action_submit(self) -> None:
        """Return the entered profile."""
        profile = IdentityProfile(
            self.query_one("#name-input", Input).value,
            self.query_one("#email-input", Input).value,
        ).normalized()

        if profile.is_empty:
            self.notify("Enter a name or an email", severity="warning")
            return
        self.dismiss(profile)

    def action_cancel(self) -> None:
        """Cancel and return None."""
        self.dismiss(None)
