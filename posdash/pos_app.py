"""Main Textual app class."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from posdash.addons_modal import AddOnsModal
from posdash.cart import Cart
from posdash.catalog import (
    items_for_branch,
    load_add_ons,
    load_branches,
    load_categories,
    load_menu,
    resolve_add_ons,
    resolve_price,
)
from posdash.checkout_modal import CheckoutModal
from posdash.config import DEBUG_LOG_PATH
from posdash.constant import (
    DEFAULT_ADDONS,
    DEFAULT_BRANCHES,
    DEFAULT_CATEGORIES,
    DEFAULT_MENU_ITEMS,
    DEFAULT_SETTINGS,
    DEFAULT_STAFF,
)
from posdash.customers_modal import CustomersModal
from posdash.dashboard_modal import DashboardModal
from posdash.ledger import CustomerLedger
from posdash.login_modal import LoginModal
from posdash.models import AddOn, Branch, Category, MenuItem, Order, Settings, StaffUser
from posdash.persistence import (
    ACCOUNTING_KEY,
    ADDONS_KEY,
    BRANCHES_KEY,
    CATEGORIES_KEY,
    CUSTOMERS_KEY,
    MENU_KEY,
    ORDERS_KEY,
    SESSION_KEY,
    SETTINGS_KEY,
    STAFF_KEY,
    PersistedStore,
)
from posdash.pricing import compute
from posdash.printer import check_printer_dependencies, format_money, print_receipt
from posdash.rendering import badge_style, format_cart_line, format_menu_item
from posdash.reports import load_orders, summarize
from posdash.settlement import CheckoutState, settle


class PosApp(App):
    """A Textual point-of-sale terminal: menu search, cart and checkout."""

    TITLE = "posdash"
    SUB_TITLE = "Point of Sale"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #menu-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: auto;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-summary {
        height: auto;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        ("ctrl+s", "checkout", "Checkout"),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: PersistedStore | None = None) -> None:
        super().__init__()
        self.store = store or PersistedStore()
        self.settings_state = self.store.open(SETTINGS_KEY, DEFAULT_SETTINGS)
        self.branches_state = self.store.open(BRANCHES_KEY, DEFAULT_BRANCHES)
        self.menu_state = self.store.open(MENU_KEY, DEFAULT_MENU_ITEMS)
        self.categories_state = self.store.open(CATEGORIES_KEY, DEFAULT_CATEGORIES)
        self.addons_state = self.store.open(ADDONS_KEY, DEFAULT_ADDONS)
        self.staff_state = self.store.open(STAFF_KEY, DEFAULT_STAFF)
        self.session_state = self.store.open(SESSION_KEY, None)
        self.orders_state = self.store.open(ORDERS_KEY, [])
        self.accounting_state = self.store.open(ACCOUNTING_KEY, [])
        self.ledger = CustomerLedger(self.store.open(CUSTOMERS_KEY, []))

        self.cart = Cart()
        self.checkout_state = CheckoutState()
        self.branch_index = 0
        self.category_index: int | None = None
        self.system_status = ""
        self._debug_log_path = Path(DEBUG_LOG_PATH)
        self._log_debug("app_init")

    def _log_debug(self, message: str) -> None:
        try:
            ts = datetime.now(timezone.utc).isoformat()
            self._debug_log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._debug_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{ts} {message}\n")
        except Exception:
            # Logging must never interfere with app flow.
            return

    @property
    def settings(self) -> Settings:
        return Settings.from_dict(self.settings_state.value or {})

    @property
    def branches(self) -> list[Branch]:
        return load_branches(self.branches_state.value or DEFAULT_BRANCHES)

    @property
    def active_branch(self) -> Branch:
        branches = self.branches
        return branches[self.branch_index % len(branches)]

    @property
    def menu(self) -> list[MenuItem]:
        return load_menu(self.menu_state.value or [])

    @property
    def categories(self) -> list[Category]:
        return load_categories(self.categories_state.value or [])

    @property
    def active_category(self) -> Category | None:
        categories = self.categories
        if self.category_index is None or not categories:
            return None
        return categories[self.category_index % len(categories)]

    @property
    def add_ons(self) -> list[AddOn]:
        return load_add_ons(self.addons_state.value or [])

    @property
    def current_user(self) -> StaffUser | None:
        raw = self.session_state.value
        return StaffUser.from_dict(raw) if raw else None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Cart", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-summary")
            with Vertical(id="menu-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        self._log_debug(f"on_mount printer_status={msg!r}")
        self._refresh_all()
        if self.current_user is None:
            self._open_login()

    def _open_login(self) -> None:
        staff = [StaffUser.from_dict(raw) for raw in self.staff_state.value or DEFAULT_STAFF]
        self.push_screen(LoginModal(staff), callback=self._on_login)

    def _on_login(self, user: StaffUser | None) -> None:
        if user is None:
            self.exit()
            return
        self.session_state.set(user.to_dict())
        self._log_debug(f"login user={user.user_id}")
        self._refresh_all()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, (AddOnsModal, CheckoutModal, CustomersModal, DashboardModal, LoginModal))

    def on_key(self, event: Key) -> None:
        if self._modal_open():
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        key = event.character.lower()
        if self.input_state == "normal":
            handled = True
            if key in {"/", "s"}:
                self.input_state = "active"
                self.query = ""
                self.selected_index = 0
                self._refresh_search()
            elif key == "j":
                self._move_cart_selection(1)
            elif key == "k":
                self._move_cart_selection(-1)
            elif key in {"+", "="}:
                self._change_selected_quantity(1)
            elif key == "-":
                self._change_selected_quantity(-1)
            elif key == "d":
                self._remove_selected_line()
            elif key == "x":
                self.cart.clear()
                self.cart_selected_index = None
                self._refresh_cart()
            elif key == "b":
                self.branch_index = (self.branch_index + 1) % len(self.branches)
                self.system_status = f"Branch: {self.active_branch.name}"
                self._refresh_all()
            elif key == "g":
                self._cycle_category()
            elif key == "c":
                self.action_checkout()
            elif key == "u":
                self.push_screen(CustomersModal(self.ledger, self.settings), callback=self._on_modal_closed)
            elif key == "r":
                self.push_screen(
                    DashboardModal(self._stored_orders(), self.branches, self.settings, self.active_branch.branch_id),
                    callback=self._on_modal_closed,
                )
            elif key == "l":
                self.session_state.set(None)
                self.cart.clear()
                self.checkout_state.reset()
                self._refresh_all()
                self._open_login()
            else:
                handled = False
            if handled:
                event.stop()
            return

        self.query += event.character
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def _cycle_category(self) -> None:
        count = len(self.categories)
        if not count:
            return
        if self.category_index is None:
            self.category_index = 0
        elif self.category_index + 1 >= count:
            self.category_index = None
        else:
            self.category_index += 1
        category = self.active_category
        self.system_status = f"Category: {category.name if category else 'All'}"
        self.selected_index = 0
        self._refresh_search()

    def _on_modal_closed(self, _result: None) -> None:
        self._refresh_all()

    def action_cancel_active_mode(self) -> None:
        if self._modal_open() or self.input_state == "normal":
            return
        self.input_state = "normal"
        self.query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_backspace_query(self) -> None:
        if self._modal_open() or self.input_state != "active" or not self.query:
            return
        self.query = self.query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_add_selected(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            return

        item = results[self.selected_index]
        eligible = resolve_add_ons(item, self.add_ons)
        if eligible:
            self.push_screen(
                AddOnsModal(item, eligible, self.settings),
                callback=lambda chosen: self._add_to_cart(item, chosen),
            )
            return
        self._add_to_cart(item, [])

    def _add_to_cart(self, item: MenuItem, chosen: list[AddOn] | None) -> None:
        if chosen is None:
            return
        line = self.cart.add_item(item, self.active_branch.branch_id, chosen)
        self.cart_selected_index = next(
            idx for idx, candidate in enumerate(self.cart.lines) if candidate.line_id == line.line_id
        )
        self._log_debug(f"cart_add item={item.item_id} qty={line.quantity}")
        self._refresh_cart()

    def action_checkout(self) -> None:
        if self._modal_open():
            return
        if self.input_state != "normal":
            self.system_status = "Checkout only in NORMAL mode (Ctrl+C to exit search)"
            self._refresh_search()
            return
        if self.cart.is_empty:
            self.system_status = "Nothing to settle"
            self._refresh_search()
            return

        self.push_screen(
            CheckoutModal(
                self.cart.lines,
                self.checkout_state,
                self.ledger,
                self.settings,
                self.settings.vat_percentage,
            ),
            callback=self._on_checkout_closed,
        )

    def _on_checkout_closed(self, confirmed: bool | None) -> None:
        if not confirmed:
            self.checkout_state.reset()
            self._log_debug("checkout_dismissed")
            return
        if self.cart.is_empty:
            return

        settings = self.settings
        customer = self.ledger.find_by_phone(self.checkout_state.phone)
        pricing = compute(
            self.cart.lines,
            settings.vat_percentage,
            customer,
            self.checkout_state.use_points,
            self.checkout_state.promo_code,
            settings,
        )
        user = self.current_user
        branch = self.active_branch
        order = settle(
            self.cart,
            pricing,
            self.checkout_state,
            branch.branch_id,
            self.ledger,
            self.orders_state,
            self.accounting_state,
            user_id=user.user_id if user else None,
        )
        self.cart_selected_index = None
        self._log_debug(f"settled order_id={order.order_id} total={order.total}")

        try:
            print_receipt(order, settings, branch.name)
        except Exception as exc:
            self.system_status = f"Settled {order.order_id} but print failed: {exc}"
            self._log_debug(f"print_failed order_id={order.order_id} error={exc!r}")
        else:
            self.system_status = f"Settled + printed: {order.order_id}"
        self._refresh_all()

    def _filtered_results(self) -> list[MenuItem]:
        category = self.active_category
        return items_for_branch(
            self.menu,
            self.active_branch.branch_id,
            category_id=category.category_id if category else None,
            query=self.query,
        )

    def _selected_line_id(self):
        lines = self.cart.lines
        if self.cart_selected_index is None or not (0 <= self.cart_selected_index < len(lines)):
            return None
        return lines[self.cart_selected_index].line_id

    def _move_cart_selection(self, delta: int) -> None:
        if self.cart.is_empty:
            return
        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(self.cart) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(self.cart)
        self._refresh_cart()

    def _change_selected_quantity(self, delta: int) -> None:
        line_id = self._selected_line_id()
        if line_id is None:
            return
        if delta > 0:
            self.cart.increment(line_id)
        else:
            self.cart.decrement(line_id)
        self._refresh_cart()

    def _remove_selected_line(self) -> None:
        line_id = self._selected_line_id()
        if line_id is None:
            return
        idx = self.cart_selected_index
        self.cart.remove_line(line_id)
        self.cart_selected_index = None if self.cart.is_empty else min(idx, len(self.cart) - 1)
        self._refresh_cart()

    def _refresh_all(self) -> None:
        self.sub_title = f"{self.active_branch.name}"
        self._refresh_cart()
        self._refresh_search()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)
        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            summary_widget = self.query_one("#cart-summary", Static)
        except NoMatches:
            return

        settings = self.settings
        lines = self.cart.lines
        preview = compute(lines, settings.vat_percentage, None, False, None, settings)
        summary = Text()
        summary.append(f"Subtotal {format_money(preview.subtotal, settings.currency_symbol)}  ")
        summary.append(f"VAT {settings.vat_percentage:g}%  ", style="dim")
        summary.append(f"Total {format_money(preview.total, settings.currency_symbol)}", style="bold")
        summary_widget.update(summary)

        if not lines:
            self.cart_selected_index = None
            cart_widget.update("(cart is empty)")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(lines):
            self.cart_selected_index = len(lines) - 1

        start, end = self._window_bounds(len(lines), self._visible_rows(cart_widget), self.cart_selected_index)
        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.cart_selected_index else "  "
            text.append(pointer)
            text.append_text(format_cart_line(lines[idx], settings))
        if end < len(lines):
            text.append("\n⋮", style="dim")
        cart_widget.update(text)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _stored_orders(self) -> list[Order]:
        return load_orders(self.orders_state.value or [])

    def _dashboard_line(self) -> str:
        settings = self.settings
        stats = summarize(self._stored_orders(), branch_id=self.active_branch.branch_id, frequency="DAILY")
        return f"Today: {format_money(stats.total_sales, settings.currency_symbol)} from {stats.total_orders} orders"

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                f"/ search, G category, C checkout, B branch, U customers, R dashboard. "
                f"{self._dashboard_line()}\n{status}"
            )
            return

        text = Text()
        text.append("MENU", style=badge_style("OK"))
        category = self.active_category
        if category is not None:
            text.append(f" [{category.name}]")
        text.append(f": {self.query}")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItem]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        settings = self.settings
        branch_id = self.active_branch.branch_id
        start, end = self._window_bounds(len(results), self._visible_rows(results_widget), self.selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            text.append(pointer)
            text.append_text(format_menu_item(results[idx], resolve_price(results[idx], branch_id), settings))
        if end < len(results):
            text.append("\n⋮", style="dim")
        results_widget.update(text)
