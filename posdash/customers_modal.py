"""Customer directory modal: register new customers and edit profiles."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from posdash.errors import CustomerNotFoundError, PosError
from posdash.ledger import CustomerLedger
from posdash.models import Settings
from posdash.printer import format_money

_LIST_HELP = "J/K/↑/↓ move, N new customer, E/Enter edit, Esc/q close"
_FORM_HELP = "Tab switch field, Enter save, Esc back to list"


class CustomersModal(ModalScreen[None]):
    """List loyalty customers and edit them in place."""

    CSS = """
    CustomersModal {
        align: center middle;
        background: $background 60%;
    }

    #customers-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #customers-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #customers-body {
        margin-bottom: 1;
        color: white;
    }

    #customers-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #customers-help {
        color: #dddddd;
    }
    """

    def __init__(self, ledger: CustomerLedger, settings: Settings) -> None:
        super().__init__()
        self.ledger = ledger
        self.settings = settings
        self.cursor_index = 0
        self.mode = "list"
        self.editing_id: str | None = None
        self.form = {"name": "", "phone": ""}
        self.field = "name"
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="customers-dialog"):
            yield Static("Customers", id="customers-title")
            yield Static(id="customers-body")
            yield Static(id="customers-error")
            yield Static(id="customers-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if self.mode == "list":
            handled = self._list_key(event)
        else:
            handled = self._form_key(event)
        if handled:
            event.stop()
            self._refresh_content()

    def _list_key(self, event: Key) -> bool:
        count = len(self.ledger.customers)
        if event.key in {"escape", "q"}:
            self.dismiss(None)
        elif event.key in {"j", "down"}:
            if count:
                self.cursor_index = (self.cursor_index + 1) % count
        elif event.key in {"k", "up"}:
            if count:
                self.cursor_index = (self.cursor_index - 1) % count
        elif event.key == "n":
            self._open_form(None)
        elif event.key in {"e", "enter"}:
            if count:
                self._open_form(self.ledger.customers[self.cursor_index].customer_id)
        else:
            return False
        return True

    def _form_key(self, event: Key) -> bool:
        if event.key == "escape":
            self.mode = "list"
            self.error = ""
        elif event.key in {"tab", "shift+tab", "up", "down"}:
            self.field = "phone" if self.field == "name" else "name"
        elif event.key == "enter":
            self._save()
        elif event.key == "backspace":
            self.form[self.field] = self.form[self.field][:-1]
        elif event.is_printable and event.character:
            self.form[self.field] += event.character
        else:
            return False
        return True

    def _open_form(self, customer_id: str | None) -> None:
        self.mode = "form"
        self.editing_id = customer_id
        self.field = "name"
        self.error = ""
        self.form = {"name": "", "phone": ""}
        if customer_id is None:
            return
        for customer in self.ledger.customers:
            if customer.customer_id == customer_id:
                self.form = {"name": customer.name, "phone": customer.phone}

    def _save(self) -> None:
        try:
            if self.editing_id is None:
                customer = self.ledger.register(self.form["name"], self.form["phone"])
            else:
                customer = self.ledger.update_profile(self.editing_id, self.form["name"], self.form["phone"])
        except CustomerNotFoundError:
            self.error = "Customer no longer exists"
            return
        except (PosError, ValueError) as exc:
            self.error = str(exc)
            return

        ids = [c.customer_id for c in self.ledger.customers]
        self.cursor_index = ids.index(customer.customer_id)
        self.mode = "list"
        self.error = ""

    def _refresh_content(self) -> None:
        body = Text(style="white")
        if self.mode == "list":
            customers = self.ledger.customers
            if not customers:
                body.append("(no customers yet)", style="dim")
            for idx, customer in enumerate(customers):
                if idx > 0:
                    body.append("\n")
                pointer = "➤ " if idx == self.cursor_index else "  "
                spend = format_money(customer.total_spend, self.settings.currency_symbol)
                body.append(
                    f"{pointer}{customer.name:<16} {customer.phone:<14} {customer.points:>5.0f} pts"
                    f"  {spend}  {customer.total_orders} orders",
                    style="bold white" if idx == self.cursor_index else "white",
                )
            title = "Customers"
            help_text = _LIST_HELP
        else:
            for idx, field in enumerate(("name", "phone")):
                if idx > 0:
                    body.append("\n")
                active = field == self.field
                pointer = "➤ " if active else "  "
                cursor = "|" if active else ""
                body.append(
                    f"{pointer}{field.title():<6} {self.form[field]}{cursor}",
                    style="bold white" if active else "white",
                )
            title = "New customer" if self.editing_id is None else "Edit customer"
            help_text = _FORM_HELP

        self.query_one("#customers-title", Static).update(title)
        self.query_one("#customers-body", Static).update(body)
        self.query_one("#customers-error", Static).update(self.error)
        self.query_one("#customers-help", Static).update(help_text)
