"""Checkout pricing: subtotal, VAT, loyalty redemption, promo codes and accrual.

Discounts are applied in a fixed order. Loyalty redemption is computed
against the subtotal, the promo discount is resolved from the code, and both
are subtracted additively from ``subtotal + vat``. The payable total is
floored at zero, and points are earned on that final total, so redeeming
points on a purchase lowers what the same purchase earns.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Union

from posdash.config import LOYALTY_MAX_REDEEM_FRACTION, LOYALTY_MIN_REDEEM_BALANCE
from posdash.constant import PROMO_RULES
from posdash.models import CartLine, Customer, Settings


@dataclass(frozen=True)
class PercentOfSubtotal:
    percent: float

    def discount(self, subtotal: float) -> float:
        return subtotal * self.percent / 100


@dataclass(frozen=True)
class FlatAmount:
    amount: float

    def discount(self, subtotal: float) -> float:
        return self.amount


PromoRule = Union[PercentOfSubtotal, FlatAmount]


def _build_rule(raw: dict) -> PromoRule:
    if raw["kind"] == "percent":
        return PercentOfSubtotal(float(raw["value"]))
    if raw["kind"] == "flat":
        return FlatAmount(float(raw["value"]))
    raise ValueError(f"Unknown promo rule kind: {raw['kind']!r}")


PROMO_TABLE: dict[str, PromoRule] = {code: _build_rule(raw) for code, raw in PROMO_RULES.items()}


def normalize_promo_code(code: str | None) -> str:
    return (code or "").strip().upper()


def verify_promo(code: str | None, subtotal: float, table: dict[str, PromoRule] | None = None) -> tuple[float, bool]:
    """Return ``(discount, valid)`` for a submitted code.

    A blank code is valid with no discount. An unknown code yields a zero
    discount and ``valid=False``; it never blocks checkout.
    """
    normalized = normalize_promo_code(code)
    if not normalized:
        return (0.0, True)
    rule = (PROMO_TABLE if table is None else table).get(normalized)
    if rule is None:
        return (0.0, False)
    return (rule.discount(subtotal), True)


@dataclass(frozen=True)
class PricingResult:
    subtotal: float
    vat_amount: float
    can_redeem: bool
    max_redeemable_points: int
    points_to_redeem: int
    points_cash_value: float
    promo_code: str
    promo_discount: float
    promo_invalid: bool
    total: float
    points_earned: int

    @property
    def discount(self) -> float:
        """Loyalty and promo discount combined."""
        return self.points_cash_value + self.promo_discount


def line_total(line: CartLine) -> float:
    return (line.unit_price + line.add_on_total) * line.quantity


def can_redeem(customer: Customer | None) -> bool:
    return customer is not None and customer.points >= LOYALTY_MIN_REDEEM_BALANCE


def max_redeemable_points(customer: Customer | None) -> int:
    """Per-transaction cap on redemption; zero below the minimum balance."""
    if not can_redeem(customer):
        return 0
    return math.floor(customer.points * LOYALTY_MAX_REDEEM_FRACTION)


def compute(
    lines: Iterable[CartLine],
    vat_percent: float,
    customer: Customer | None,
    use_points: bool,
    promo_code: str | None,
    settings: Settings,
) -> PricingResult:
    """Price a cart. Pure: equal inputs always give equal results."""
    subtotal = sum(line_total(line) for line in lines)
    vat_amount = subtotal * vat_percent / 100

    redeemable = max_redeemable_points(customer)
    points_to_redeem = 0
    if use_points and redeemable > 0 and settings.points_redeem_rate > 0:
        # Redemption can never exceed what the subtotal can absorb.
        points_to_redeem = min(redeemable, math.floor(subtotal / settings.points_redeem_rate))
    points_cash_value = points_to_redeem * settings.points_redeem_rate

    promo_discount, promo_valid = verify_promo(promo_code, subtotal)

    total = max(0.0, subtotal + vat_amount - points_cash_value - promo_discount)

    points_earned = 0
    if settings.points_earn_rate > 0:
        points_earned = math.floor(total / settings.points_earn_rate)

    return PricingResult(
        subtotal=subtotal,
        vat_amount=vat_amount,
        can_redeem=can_redeem(customer),
        max_redeemable_points=redeemable,
        points_to_redeem=points_to_redeem,
        points_cash_value=points_cash_value,
        promo_code=normalize_promo_code(promo_code) if promo_valid else "",
        promo_discount=promo_discount,
        promo_invalid=not promo_valid,
        total=total,
        points_earned=points_earned,
    )
