"""Checkout settlement: turn a priced cart into an order, a sales entry and a ledger update."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from uuid import uuid4

from posdash.cart import Cart
from posdash.config import ACCOUNTING_SALES_CATEGORY
from posdash.errors import EmptyCartError
from posdash.ledger import CustomerLedger
from posdash.models import AccountingEntry, EntryType, Order, OrderStatus, PaymentMethod, now_ms
from posdash.persistence import PersistedValue
from posdash.pricing import PricingResult

logger = logging.getLogger(__name__)


@dataclass
class CheckoutState:
    """Transient inputs gathered by the checkout dialog."""

    phone: str = ""
    name: str = ""
    use_points: bool = False
    promo_code: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH

    def reset(self) -> None:
        self.phone = ""
        self.name = ""
        self.use_points = False
        self.promo_code = ""
        self.payment_method = PaymentMethod.CASH


def _sales_entry(order: Order) -> AccountingEntry:
    return AccountingEntry(
        entry_id=f"INC-{order.created_at}-{uuid4().hex[:4]}",
        date=order.created_at,
        description=f"Sales - Order #{order.order_id.removeprefix('ORD-')}",
        entry_type=EntryType.INCOME,
        amount=order.total,
        category=ACCOUNTING_SALES_CATEGORY,
        branch_id=order.branch_id,
    )


def settle(
    cart: Cart,
    pricing: PricingResult,
    contact: CheckoutState,
    branch_id: str,
    ledger: CustomerLedger,
    orders: PersistedValue[list],
    accounting: PersistedValue[list],
    user_id: str | None = None,
    now: int | None = None,
) -> Order:
    """Finalize ``cart`` and apply every side effect in order.

    1. record a PENDING order, 2. append an INCOME entry for its total,
    3. update or create the customer when a phone was given, 4. clear the
    cart and the checkout state. Persistence is best-effort; there is no
    rollback if a later step cannot be written.
    """
    if cart.is_empty:
        raise EmptyCartError("Cannot settle an empty cart")

    created_at = now if now is not None else now_ms()
    phone = contact.phone.strip()
    name = contact.name.strip()

    order = Order(
        order_id=f"ORD-{created_at}-{uuid4().hex[:4]}",
        branch_id=branch_id,
        lines=tuple(replace(line) for line in cart.lines),
        subtotal=pricing.subtotal,
        vat=pricing.vat_amount,
        discount=pricing.discount,
        total=pricing.total,
        status=OrderStatus.PENDING,
        payment_method=contact.payment_method,
        created_at=created_at,
        user_id=user_id,
        customer_name=name or None,
        customer_phone=phone or None,
    )
    orders.set([order.to_dict()] + list(orders.value or []))

    entry = _sales_entry(order)
    accounting.set([entry.to_dict()] + list(accounting.value or []))

    if phone:
        ledger.record_purchase(
            phone=phone,
            name=name,
            total=pricing.total,
            points_redeemed=pricing.points_to_redeem,
            points_earned=pricing.points_earned,
            now=created_at,
        )

    cart.clear()
    contact.reset()
    logger.info("Settled %s total=%.2f branch=%s", order.order_id, order.total, branch_id)
    return order
