"""Staff login modal screen."""

from __future__ import annotations

from typing import Sequence

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from posdash.auth import authenticate
from posdash.errors import InvalidCredentialsError
from posdash.models import StaffUser


class LoginModal(ModalScreen[StaffUser | None]):
    """Prompt for staff credentials before the terminal opens."""

    CSS = """
    LoginModal {
        align: center middle;
        background: $background 80%;
    }

    #login-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #login-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    .login-field {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
    }

    #login-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #login-help {
        color: #dddddd;
    }
    """

    def __init__(self, staff: Sequence[StaffUser]) -> None:
        super().__init__()
        self.staff = staff
        self.username = ""
        self.password = ""
        self.field = "username"
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="login-dialog"):
            yield Static("Terminal Access", id="login-title")
            yield Static(id="login-username", classes="login-field")
            yield Static(id="login-password", classes="login-field")
            yield Static(id="login-error")
            yield Static("Tab switch field. Enter log in. Ctrl+Q quit.", id="login-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "ctrl+q":
            self.dismiss(None)
            event.stop()
            return

        if event.key in {"tab", "shift+tab", "up", "down"}:
            self.field = "password" if self.field == "username" else "username"
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            self._set_value(self._value()[:-1])
            event.stop()
            return

        if event.is_printable and event.character:
            self._set_value(self._value() + event.character)
            event.stop()

    def _value(self) -> str:
        return self.username if self.field == "username" else self.password

    def _set_value(self, value: str) -> None:
        if self.field == "username":
            self.username = value
        else:
            self.password = value
        self.error = ""
        self._refresh_content()

    def _confirm(self) -> None:
        if self.field == "username" and not self.password:
            self.field = "password"
            self._refresh_content()
            return

        try:
            user = authenticate(self.staff, self.username, self.password)
        except InvalidCredentialsError as exc:
            self.error = str(exc)
            self.password = ""
            self.field = "password"
            self._refresh_content()
            return

        self.dismiss(user)

    def _refresh_content(self) -> None:
        cursor_user = "|" if self.field == "username" else ""
        cursor_pass = "|" if self.field == "password" else ""
        self.query_one("#login-username", Static).update(f"Username: {self.username}{cursor_user}")
        self.query_one("#login-password", Static).update(f"Password: {'•' * len(self.password)}{cursor_pass}")
        self.query_one("#login-error", Static).update(self.error or "")
