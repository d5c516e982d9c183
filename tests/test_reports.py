"""
Tests for dashboard order filtering and summaries.
"""

from datetime import date, datetime

from posdash.models import Order, OrderStatus, PaymentMethod
from posdash.reports import filter_orders, load_orders, summarize

NOW = datetime(2026, 10, 18, 15, 0)


def make_order(order_id, placed, total=100.0, branch_id="b1", status=OrderStatus.PENDING):
    return Order(
        order_id=order_id,
        branch_id=branch_id,
        lines=(),
        subtotal=total,
        vat=0.0,
        discount=0.0,
        total=total,
        status=status,
        payment_method=PaymentMethod.CASH,
        created_at=int(placed.timestamp() * 1000),
    )


ORDERS = [
    make_order("today", datetime(2026, 10, 18, 9, 30)),
    make_order("today-b2", datetime(2026, 10, 18, 10, 0), branch_id="b2"),
    make_order("this-week", datetime(2026, 10, 14, 12, 0)),
    make_order("this-month", datetime(2026, 10, 2, 12, 0)),
    make_order("this-year", datetime(2026, 3, 1, 12, 0)),
    make_order("last-year", datetime(2025, 12, 31, 12, 0)),
]


def ids(orders):
    return [order.order_id for order in orders]


class TestFilterOrders:
    """Tests for reporting windows."""

    def test_daily(self):
        """Should keep only orders placed today."""
        assert ids(filter_orders(ORDERS, frequency="DAILY", now=NOW)) == ["today", "today-b2"]

    def test_weekly(self):
        """Should keep orders from the last seven days."""
        assert ids(filter_orders(ORDERS, frequency="WEEKLY", now=NOW)) == ["today", "today-b2", "this-week"]

    def test_monthly(self):
        """Should keep orders in the current calendar month."""
        assert ids(filter_orders(ORDERS, frequency="MONTHLY", now=NOW)) == [
            "today",
            "today-b2",
            "this-week",
            "this-month",
        ]

    def test_yearly(self):
        """Should keep orders in the current year."""
        assert "last-year" not in ids(filter_orders(ORDERS, frequency="YEARLY", now=NOW))
        assert "this-year" in ids(filter_orders(ORDERS, frequency="YEARLY", now=NOW))

    def test_all_time(self):
        """Should keep every order."""
        assert len(filter_orders(ORDERS, frequency="ALL_TIME", now=NOW)) == len(ORDERS)

    def test_custom_range_is_inclusive(self):
        """Should include orders on both boundary dates."""
        result = filter_orders(
            ORDERS,
            frequency="CUSTOM",
            start=date(2026, 10, 2),
            end=date(2026, 10, 14),
            now=NOW,
        )

        assert ids(result) == ["this-week", "this-month"]

    def test_branch_filter(self):
        """Should restrict results to one branch."""
        assert ids(filter_orders(ORDERS, branch_id="b2", frequency="ALL_TIME", now=NOW)) == ["today-b2"]


class TestSummarize:
    """Tests for dashboard totals."""

    def test_cancelled_orders_count_but_do_not_earn(self):
        """Should exclude cancelled orders from revenue but count them."""
        orders = [
            make_order("a", datetime(2026, 10, 18, 9, 0), total=120.0),
            make_order("b", datetime(2026, 10, 18, 9, 5), total=80.0, status=OrderStatus.CANCELLED),
        ]

        stats = summarize(orders, frequency="DAILY", now=NOW)

        assert stats.total_sales == 120.0
        assert stats.total_orders == 2


class TestLoadOrders:
    """Tests for parsing stored order rows."""

    def test_unreadable_rows_are_skipped(self):
        """Should keep parseable rows and drop ones missing fields or with bad values."""
        good = ORDERS[0].to_dict()
        bad_status = dict(ORDERS[1].to_dict(), status="LOST")

        loaded = load_orders([{"order_id": "ORD-old"}, good, bad_status, "junk"])

        assert ids(loaded) == ["today"]
