# =============================================================================
# Label Input Screen
# =============================================================================
# A modal screen for setting an account's custom display name.
# Submitting an empty value clears the label.
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static, Input, Button
from textual.containers import Vertical, Horizontal


class LabelScreen(ModalScreen[str | None]):
    """
    Modal screen for editing an account label.

    Returns:
        The entered label ("" to clear), or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    LabelScreen {
        align: center middle;
    }

    #label-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #label-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #label-info {
        margin-bottom: 1;
        color: $text-muted;
    }

    #label-input {
        margin-bottom: 1;
    }

    #label-buttons {
        align: center middle;
        height: auto;
    }

    #label-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, account_name: str, current_label: str | None = None) -> None:
        """
        Initialize the label screen.

        Args:
            account_name: Default "login@host" name of the account.
            current_label: Existing label to pre-fill, if any.
        """
        super().__init__()
        self._account_name = account_name
        self._current_label = current_label or ""

    def compose(self) -> ComposeResult:
        """Compose the label dialog."""
        with Vertical(id="label-dialog"):
            yield Static("Account Label", id="label-title")
            yield Static(
                f"Account: {self._account_name}\nLeave empty to use the default name.",
                id="label-info",
                markup=False,
            )
            yield Input(
                value=self._current_label,
                placeholder=self._account_name,
                id="label-input",
            )
            with Horizontal(id="label-buttons"):
                yield Button("Save", id="save-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the input when mounted."""
        self.query_one("#label-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-btn":
            self.action_submit()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the input field."""
        self.action_submit()

    def action_submit(self) -> None:
        """Return the entered label."""
        self.dismiss(self.query_one("#label-input", Input).value.strip())

    def action_cancel(self) -> None:
        """Cancel and return None."""
        self.dismiss(None)
