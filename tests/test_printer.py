"""
Tests for receipt layout and printer font resolution.
"""

import pytest

from posdash import printer
from posdash.cart import Cart
from posdash.models import Order, OrderStatus, PaymentMethod
from tests.conftest import plain_item


def make_order(cart, discount=0.0, phone=None):
    return Order(
        order_id="ORD-1700000000000-abcd",
        branch_id="b1",
        lines=tuple(cart.lines),
        subtotal=560.0,
        vat=28.0,
        discount=discount,
        total=588.0 - discount,
        status=OrderStatus.PENDING,
        payment_method=PaymentMethod.CASH,
        created_at=1_700_000_000_000,
        customer_name="Karim" if phone else None,
        customer_phone=phone,
    )


class TestReceiptRows:
    """Tests for the receipt text layout."""

    def test_rows_list_lines_add_ons_and_totals(self, settings, latte, add_ons):
        """Should print each line with its add-ons and the totals block."""
        cart = Cart()
        cart.add_item(latte, "b2", [add_ons[0]])
        cart.add_item(latte, "b2", [add_ons[0]])

        rows = printer.receipt_rows(make_order(cart), settings, "Gulshan Outlet")

        assert rows[0] == ("Test POS", "")
        assert rows[1] == ("Gulshan Outlet", "")
        assert ("2x Cafe Latte", "$640.00") in rows
        assert ("   + Extra Shot", "") in rows
        assert ("TOTAL", "$588.00") in rows
        assert ("Paid by", "CASH") in rows
        assert not any(left == "Discount" for left, _ in rows)

    def test_rows_show_discount_and_customer(self, settings):
        """Should add discount and customer rows when present."""
        cart = Cart()
        cart.add_item(plain_item("m-a", 10.0), "b1")

        rows = printer.receipt_rows(make_order(cart, discount=50.0, phone="0170"), settings)

        assert ("Discount", "-$50.00") in rows
        assert ("Karim", "0170") in rows

    def test_format_money(self):
        """Should format with thousands separators and two decimals."""
        assert printer.format_money(1234.5, "৳") == "৳1,234.50"


class TestFontResolution:
    """Tests for printer font lookup."""

    def test_env_override_wins(self, tmp_path, monkeypatch):
        """Should prefer the font named by the override variable."""
        font = tmp_path / "receipt.ttf"
        font.write_bytes(b"")
        monkeypatch.setenv("RECEIPT_PRINTER_FONT_PATH", str(font))

        assert printer.resolve_printer_font_path() == str(font)

    def test_missing_fonts_raise(self, monkeypatch):
        """Should explain how to configure a font when none exist."""
        monkeypatch.setenv("RECEIPT_PRINTER_FONT_PATH", "/nonexistent/font.ttf")
        monkeypatch.setattr(printer, "PRINTER_FONT_PATH", "/nonexistent/other.ttf")
        monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

        with pytest.raises(RuntimeError, match="RECEIPT_PRINTER_FONT_PATH"):
            printer.resolve_printer_font_path()

    def test_print_receipt_rejects_empty_order(self, settings):
        """Should refuse to print an order without lines."""
        with pytest.raises(ValueError):
            printer.print_receipt(make_order(Cart()), settings)
