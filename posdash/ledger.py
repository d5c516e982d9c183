"""Customer loyalty ledger keyed by phone number."""

from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from posdash.config import LOYALTY_REGISTRATION_BONUS, WALK_IN_CUSTOMER_NAME
from posdash.errors import CustomerNotFoundError, DuplicatePhoneError
from posdash.models import Customer, now_ms
from posdash.persistence import PersistedValue

logger = logging.getLogger(__name__)


def _new_customer_id() -> str:
    return f"cust-{uuid4().hex[:12]}"


class CustomerLedger:
    """Loyalty records held in one persisted collection.

    Points change only through ``record_purchase`` (settlement) and the
    registration bonus. Profile edits touch name and phone, never balances.
    """

    def __init__(self, state: PersistedValue[list]) -> None:
        self._state = state

    @property
    def customers(self) -> list[Customer]:
        return [Customer.from_dict(raw) for raw in self._state.value or []]

    def _save(self, customers: list[Customer]) -> None:
        self._state.set([customer.to_dict() for customer in customers])

    def find_by_phone(self, phone: str | None) -> Customer | None:
        phone = (phone or "").strip()
        if not phone:
            return None
        for customer in self.customers:
            if customer.phone == phone:
                return customer
        return None

    def register(self, name: str, phone: str, now: int | None = None) -> Customer:
        """Create a customer with the registration bonus and no purchase history."""
        phone = phone.strip()
        if not phone:
            raise ValueError("phone is required")
        if self.find_by_phone(phone) is not None:
            raise DuplicatePhoneError(f"A customer with phone {phone} already exists")

        customer = Customer(
            customer_id=_new_customer_id(),
            name=name.strip() or WALK_IN_CUSTOMER_NAME,
            phone=phone,
            points=float(LOYALTY_REGISTRATION_BONUS),
            total_spend=0.0,
            total_orders=0,
            created_at=now if now is not None else now_ms(),
        )
        self._save(self.customers + [customer])
        logger.info("Registered customer %s", customer.customer_id)
        return customer

    def update_profile(self, customer_id: str, name: str, phone: str) -> Customer:
        customers = self.customers
        for idx, customer in enumerate(customers):
            if customer.customer_id != customer_id:
                continue
            phone = phone.strip()
            clash = self.find_by_phone(phone)
            if clash is not None and clash.customer_id != customer_id:
                raise DuplicatePhoneError(f"A customer with phone {phone} already exists")
            customers[idx] = replace(customer, name=name.strip() or customer.name, phone=phone or customer.phone)
            self._save(customers)
            return customers[idx]
        raise CustomerNotFoundError(customer_id)

    def record_purchase(
        self,
        phone: str,
        name: str | None,
        total: float,
        points_redeemed: int,
        points_earned: int,
        now: int | None = None,
    ) -> Customer:
        """Apply one settled purchase to the customer with ``phone``, creating them if new.

        A first purchase creates the record with the registration bonus plus
        the points earned; nothing can be redeemed before a record exists.
        """
        phone = phone.strip()
        customers = self.customers
        for idx, customer in enumerate(customers):
            if customer.phone != phone:
                continue
            # Redemption is capped upstream; the floor keeps a stale balance from going negative.
            points = max(0.0, customer.points - points_redeemed) + points_earned
            customers[idx] = replace(
                customer,
                name=(name or "").strip() or customer.name,
                points=points,
                total_spend=customer.total_spend + total,
                total_orders=customer.total_orders + 1,
            )
            self._save(customers)
            return customers[idx]

        customer = Customer(
            customer_id=_new_customer_id(),
            name=(name or "").strip() or WALK_IN_CUSTOMER_NAME,
            phone=phone,
            points=float(LOYALTY_REGISTRATION_BONUS + points_earned),
            total_spend=total,
            total_orders=1,
            created_at=now if now is not None else now_ms(),
        )
        self._save(customers + [customer])
        logger.info("Created customer %s on first purchase", customer.customer_id)
        return customer
