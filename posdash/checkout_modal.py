"""Checkout review modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from posdash.ledger import CustomerLedger
from posdash.models import CartLine, PaymentMethod, Settings
from posdash.pricing import PricingResult, compute, verify_promo
from posdash.rendering import badge_style, format_loyalty, format_totals
from posdash.settlement import CheckoutState

_PAYMENT_METHODS = list(PaymentMethod)


class CheckoutModal(ModalScreen[bool]):
    """Collect customer, loyalty, promo and payment details; dismiss True to settle."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("tab", "move_cursor(1)", "Next"),
        ("ctrl+s", "confirm", "Settle"),
    ]

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #checkout-fields {
        margin-bottom: 1;
        color: white;
    }

    #checkout-loyalty {
        margin-bottom: 1;
    }

    #checkout-notice {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #checkout-help {
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _FIELDS = ("phone", "name", "promo", "redeem", "payment")
    _TEXT_FIELDS = {"phone", "name", "promo"}

    def __init__(
        self,
        lines: list[CartLine],
        state: CheckoutState,
        ledger: CustomerLedger,
        settings: Settings,
        vat_percent: float,
    ) -> None:
        super().__init__()
        self.lines = lines
        self.state = state
        self.ledger = ledger
        self.settings = settings
        self.vat_percent = vat_percent
        self.promo_input = state.promo_code
        self.notice = ""
        matched = ledger.find_by_phone(state.phone)
        self.matched_customer_id = matched.customer_id if matched is not None else None

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static("Review Settlement", id="checkout-title")
            yield Static(id="checkout-fields")
            yield Static(id="checkout-loyalty")
            yield Static(id="checkout-totals")
            yield Static(id="checkout-notice")
            yield Static(
                "↑/↓/Tab move. Enter verify promo / toggle redeem / change payment.\nCtrl+S settle. Esc cancel.",
                id="checkout-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def pricing(self) -> PricingResult:
        customer = self.ledger.find_by_phone(self.state.phone)
        return compute(
            self.lines,
            self.vat_percent,
            customer,
            self.state.use_points,
            self.state.promo_code,
            self.settings,
        )

    def on_key(self, event: Key) -> None:
        field = self._FIELDS[self.cursor_index]

        if event.key == "enter":
            self._activate(field)
            event.stop()
            return

        if field not in self._TEXT_FIELDS:
            return

        if event.key == "backspace":
            self._set_text(field, self._text(field)[:-1])
            event.stop()
            return

        if event.is_printable and event.character:
            self._set_text(field, self._text(field) + event.character)
            event.stop()

    def action_close(self) -> None:
        self.dismiss(False)

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(self._FIELDS)
        self._refresh_content()

    def _text(self, field: str) -> str:
        if field == "phone":
            return self.state.phone
        if field == "name":
            return self.state.name
        return self.promo_input

    def _set_text(self, field: str, value: str) -> None:
        if field == "phone":
            self.state.phone = value
            customer = self.ledger.find_by_phone(value)
            matched_id = customer.customer_id if customer is not None else None
            if matched_id != self.matched_customer_id:
                # Redemption is opted into per customer.
                self.state.use_points = False
                self.matched_customer_id = matched_id
            if customer is not None:
                self.state.name = customer.name
        elif field == "name":
            self.state.name = value
        else:
            self.promo_input = value
        self._refresh_content()

    def _activate(self, field: str) -> None:
        if field == "promo":
            self._verify_promo()
        elif field == "redeem":
            if self.pricing().can_redeem:
                self.state.use_points = not self.state.use_points
        elif field == "payment":
            idx = _PAYMENT_METHODS.index(self.state.payment_method)
            self.state.payment_method = _PAYMENT_METHODS[(idx + 1) % len(_PAYMENT_METHODS)]
        else:
            self.action_move_cursor(1)
            return
        self._refresh_content()

    def _verify_promo(self) -> None:
        subtotal = self.pricing().subtotal
        _, valid = verify_promo(self.promo_input, subtotal)
        if valid:
            self.state.promo_code = self.promo_input.strip().upper()
            self.notice = f"Promo {self.state.promo_code} applied" if self.state.promo_code else ""
        else:
            self.state.promo_code = ""
            self.notice = "Invalid Promo Code"

    def _refresh_content(self) -> None:
        pricing = self.pricing()
        values = {
            "phone": self.state.phone,
            "name": self.state.name,
            "promo": self.promo_input,
            "redeem": ("[x] Applied" if self.state.use_points else "[ ] Redeem")
            + ("" if pricing.can_redeem else " (unavailable)"),
            "payment": self.state.payment_method.value,
        }
        labels = {"phone": "Phone", "name": "Guest name", "promo": "Promo code", "redeem": "Points", "payment": "Payment"}

        fields = Text(style="white")
        for idx, field in enumerate(self._FIELDS):
            if idx > 0:
                fields.append("\n")
            active = idx == self.cursor_index
            pointer = "➤ " if active else "  "
            cursor = "|" if active and field in self._TEXT_FIELDS else ""
            style = "bold white" if active else "white"
            if field == "redeem" and not pricing.can_redeem:
                style = "dim"
            fields.append(f"{pointer}{labels[field]:<11} {values[field]}{cursor}", style=style)

        notice = Text()
        if self.notice:
            kind = "ERROR" if self.notice.startswith("Invalid") else "OK"
            notice.append(self.notice, style=badge_style(kind))

        customer = self.ledger.find_by_phone(self.state.phone) if self.state.phone.strip() else None
        loyalty = format_loyalty(customer, pricing) if self.state.phone.strip() else Text("Walk-in order", style="dim")

        self.query_one("#checkout-fields", Static).update(fields)
        self.query_one("#checkout-loyalty", Static).update(loyalty)
        self.query_one("#checkout-totals", Static).update(format_totals(pricing, self.settings))
        self.query_one("#checkout-notice", Static).update(notice)
