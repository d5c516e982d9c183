"""Add-on picker modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from posdash.models import AddOn, MenuItem, Settings
from posdash.printer import format_money


class AddOnsModal(ModalScreen[list[AddOn] | None]):
    """Centered modal to choose add-ons before a menu item enters the cart."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("space", "toggle_current", "Toggle"),
        ("enter", "confirm", "Add to cart"),
    ]

    CSS = """
    AddOnsModal {
        align: center middle;
        background: $background 60%;
    }

    #addons-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #addons-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #addons-body {
        margin-bottom: 1;
        color: white;
    }

    #addons-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, item: MenuItem, add_ons: list[AddOn], settings: Settings) -> None:
        super().__init__()
        self.item = item
        self.add_ons = add_ons
        self.settings = settings
        self.selected_ids: set[str] = set()

    def compose(self) -> ComposeResult:
        with Container(id="addons-dialog"):
            yield Static(f"Add-ons: {self.item.name}", id="addons-title")
            yield Static(id="addons-body")
            yield Static("J/K/↑/↓ move, Space toggle, Enter add to cart, Esc/q cancel", id="addons-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_confirm(self) -> None:
        self.dismiss([add_on for add_on in self.add_ons if add_on.addon_id in self.selected_ids])

    def action_move_cursor(self, delta: int) -> None:
        if not self.add_ons:
            return
        self.cursor_index = (self.cursor_index + delta) % len(self.add_ons)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        if not self.add_ons:
            return
        addon_id = self.add_ons[self.cursor_index].addon_id
        if addon_id in self.selected_ids:
            self.selected_ids.remove(addon_id)
        else:
            self.selected_ids.add(addon_id)
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = self.query_one("#addons-body", Static)
        content = Text(style="white")
        for idx, add_on in enumerate(self.add_ons):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            is_checked = add_on.addon_id in self.selected_ids
            checked = "[x]" if is_checked else "[ ]"
            price = format_money(add_on.price, self.settings.currency_symbol)
            content.append(f"{pointer}{checked} {add_on.name}  +{price}", style="bold white" if is_checked else "white")
        body.update(content)
