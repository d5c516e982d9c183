"""Dashboard summaries over settled orders."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable

from posdash.models import Order, OrderStatus

logger = logging.getLogger(__name__)

FREQUENCIES = ("DAILY", "WEEKLY", "MONTHLY", "YEARLY", "ALL_TIME", "CUSTOM")


@dataclass(frozen=True)
class DashboardStats:
    total_sales: float
    total_orders: int
    orders: list[Order]


def _order_time(order: Order) -> datetime:
    return datetime.fromtimestamp(order.created_at / 1000)


def filter_orders(
    orders: Iterable[Order],
    branch_id: str = "ALL",
    frequency: str = "DAILY",
    start: date | None = None,
    end: date | None = None,
    now: datetime | None = None,
) -> list[Order]:
    """Select orders for a branch (or ``"ALL"``) within a reporting window.

    ``CUSTOM`` uses the inclusive ``start``/``end`` dates; either bound may be
    omitted. Unknown frequencies behave like ``ALL_TIME``.
    """
    now = now or datetime.now()
    selected = []
    for order in orders:
        if branch_id != "ALL" and order.branch_id != branch_id:
            continue
        placed = _order_time(order)
        if frequency == "DAILY":
            if placed.date() != now.date():
                continue
        elif frequency == "WEEKLY":
            if placed < now - timedelta(days=7):
                continue
        elif frequency == "MONTHLY":
            if (placed.year, placed.month) != (now.year, now.month):
                continue
        elif frequency == "YEARLY":
            if placed.year != now.year:
                continue
        elif frequency == "CUSTOM":
            if start is not None and placed.date() < start:
                continue
            if end is not None and placed.date() > end:
                continue
        selected.append(order)
    return selected


def summarize(orders: Iterable[Order], **criteria) -> DashboardStats:
    """Revenue excludes cancelled orders; the order count does not."""
    filtered = filter_orders(orders, **criteria)
    total_sales = sum(order.total for order in filtered if order.status != OrderStatus.CANCELLED)
    return DashboardStats(total_sales=total_sales, total_orders=len(filtered), orders=filtered)


def load_orders(raw_orders: Iterable[dict[str, Any]]) -> list[Order]:
    """Parse stored order rows, skipping any that no longer parse."""
    orders = []
    for raw in raw_orders:
        try:
            orders.append(Order.from_dict(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping unreadable stored order: %r", exc)
    return orders
