"""Sales dashboard modal with frequency and branch filters."""

from __future__ import annotations

from datetime import date, datetime

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from posdash.models import Branch, Order, OrderStatus, Settings
from posdash.printer import format_money
from posdash.reports import FREQUENCIES, DashboardStats, summarize

_RECENT_ORDERS = 8


class DashboardModal(ModalScreen[None]):
    """Revenue and order counts for a reporting window and branch scope."""

    CSS = """
    DashboardModal {
        align: center middle;
        background: $background 60%;
    }

    #dashboard-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #dashboard-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #dashboard-filters {
        margin-bottom: 1;
        color: white;
    }

    #dashboard-stats {
        margin-bottom: 1;
    }

    #dashboard-error {
        color: #ffb3b3;
    }

    #dashboard-help {
        color: #dddddd;
    }
    """

    def __init__(self, orders: list[Order], branches: list[Branch], settings: Settings, branch_id: str) -> None:
        super().__init__()
        self.orders = orders
        self.branches = branches
        self.settings = settings
        self.frequency = "DAILY"
        self.scopes = ["ALL"] + [branch.branch_id for branch in branches]
        self.scope_index = self.scopes.index(branch_id) if branch_id in self.scopes else 0
        self.dates = {"start": "", "end": ""}
        self.date_field = "start"
        self.error = ""

    @property
    def branch_scope(self) -> str:
        return self.scopes[self.scope_index]

    def compose(self) -> ComposeResult:
        with Container(id="dashboard-dialog"):
            yield Static("Dashboard", id="dashboard-title")
            yield Static(id="dashboard-filters")
            yield Static(id="dashboard-stats")
            yield Static(id="dashboard-error")
            yield Static(
                "F frequency, B branch, Tab switch date (custom, YYYY-MM-DD), Esc/q close",
                id="dashboard-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        key = event.key
        if key in {"escape", "q"}:
            self.dismiss(None)
        elif key == "f":
            idx = FREQUENCIES.index(self.frequency)
            self.frequency = FREQUENCIES[(idx + 1) % len(FREQUENCIES)]
        elif key == "b":
            self.scope_index = (self.scope_index + 1) % len(self.scopes)
        elif self.frequency != "CUSTOM":
            return
        elif key == "tab":
            self.date_field = "end" if self.date_field == "start" else "start"
        elif key == "backspace":
            self.dates[self.date_field] = self.dates[self.date_field][:-1]
        elif event.character and (event.character.isdigit() or event.character == "-"):
            self.dates[self.date_field] += event.character
        else:
            return
        event.stop()
        self._refresh_content()

    def _parse_date(self, field: str) -> date | None:
        raw = self.dates[field].strip()
        if not raw:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            self.error = f"{field.title()} date must be YYYY-MM-DD"
            return None

    def stats(self) -> DashboardStats:
        self.error = ""
        criteria = {"branch_id": self.branch_scope, "frequency": self.frequency}
        if self.frequency == "CUSTOM":
            criteria["start"] = self._parse_date("start")
            criteria["end"] = self._parse_date("end")
        return summarize(self.orders, **criteria)

    def _branch_name(self) -> str:
        for branch in self.branches:
            if branch.branch_id == self.branch_scope:
                return branch.name
        return "All branches"

    def _refresh_content(self) -> None:
        stats = self.stats()
        cur = self.settings.currency_symbol

        filters = Text(style="white")
        for idx, frequency in enumerate(FREQUENCIES):
            if idx > 0:
                filters.append(" ")
            style = "bold black on #7fd7ff" if frequency == self.frequency else "dim"
            filters.append(f" {frequency.replace('_', ' ')} ", style=style)
        filters.append(f"\nBranch: {self._branch_name()}")
        if self.frequency == "CUSTOM":
            for field in ("start", "end"):
                active = field == self.date_field
                pointer = "➤ " if active else "  "
                cursor = "|" if active else ""
                filters.append(f"\n{pointer}{'From' if field == 'start' else 'To':<5} {self.dates[field]}{cursor}")

        body = Text()
        body.append(f"Total sales   {format_money(stats.total_sales, cur)}\n", style="bold")
        body.append(f"Total orders  {stats.total_orders}")
        for order in stats.orders[:_RECENT_ORDERS]:
            placed = datetime.fromtimestamp(order.created_at / 1000).strftime("%Y-%m-%d %H:%M")
            style = "dim" if order.status == OrderStatus.CANCELLED else "white"
            body.append(f"\n{order.order_id:<24} {placed}  {format_money(order.total, cur):>12}", style=style)

        self.query_one("#dashboard-filters", Static).update(filters)
        self.query_one("#dashboard-stats", Static).update(body)
        self.query_one("#dashboard-error", Static).update(self.error)
