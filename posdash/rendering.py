"""Rendering helpers for cart lines, prices and totals."""

from __future__ import annotations

from rich.text import Text

from posdash.config import LOYALTY_MIN_REDEEM_BALANCE, LOYALTY_REGISTRATION_BONUS
from posdash.models import CartLine, Customer, MenuItem, Settings
from posdash.pricing import PricingResult, line_total
from posdash.printer import format_money


def badge_style(kind: str) -> str:
    """Return a consistent badge style for status tags."""
    if kind == "ERROR":
        return "bold #ffffff on #b23a48"
    if kind == "LOYALTY":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_menu_item(item: MenuItem, price: float, settings: Settings) -> Text:
    text = Text()
    text.append(item.name)
    text.append(f"  {format_money(price, settings.currency_symbol)}", style="dim")
    if item.addon_ids:
        text.append(" +", style="bold")
    return text


def format_cart_line(line: CartLine, settings: Settings) -> Text:
    """Render a cart line with its quantity, add-ons and line total."""
    text = Text()
    text.append(f"{line.quantity}x ", style="bold")
    text.append(line.name)
    text.append(f"  {format_money(line_total(line), settings.currency_symbol)}", style="dim")
    if line.add_ons:
        text.append("\n      ")
        for idx, add_on in enumerate(line.add_ons):
            if idx > 0:
                text.append(" ")
            text.append(f"[{add_on.name}]", style="white")
    return text


def format_loyalty(customer: Customer | None, pricing: PricingResult) -> Text:
    text = Text()
    if customer is None:
        text.append(f"New customer: {LOYALTY_REGISTRATION_BONUS} pts bonus on first purchase", style="dim")
        return text
    text.append("LOYALTY", style=badge_style("LOYALTY"))
    text.append(f" {customer.name}  {customer.points:.0f} pts ")
    if pricing.can_redeem:
        text.append(f"(max {pricing.max_redeemable_points} usable)")
    else:
        text.append(f"(min {LOYALTY_MIN_REDEEM_BALANCE} pts needed)", style="dim")
    return text


def format_totals(pricing: PricingResult, settings: Settings) -> Text:
    """Render the checkout summary block."""
    cur = settings.currency_symbol
    text = Text()
    text.append(f"Subtotal         {format_money(pricing.subtotal, cur)}\n")
    text.append(f"VAT              {format_money(pricing.vat_amount, cur)}\n")
    if pricing.points_cash_value > 0:
        text.append(f"Loyalty discount -{format_money(pricing.points_cash_value, cur)}\n", style="#7fb2ff")
    if pricing.promo_discount > 0:
        text.append(f"Promo discount   -{format_money(pricing.promo_discount, cur)}\n", style="#c9a0ff")
    text.append(f"TOTAL            {format_money(pricing.total, cur)}", style="bold")
    text.append(f"\nEarns {pricing.points_earned} pts", style="dim")
    return text
