"""
Tests for checkout pricing, loyalty redemption and promo codes.
"""

import math

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from posdash.cart import Cart
from posdash.models import AddOn, Customer, Settings
from posdash.pricing import FlatAmount, PercentOfSubtotal, compute, line_total, verify_promo
from tests.conftest import plain_item


def cart_with(*priced):
    """Build cart lines from ``(price, quantity)`` pairs."""
    cart = Cart()
    for idx, (price, quantity) in enumerate(priced):
        line = cart.add_item(plain_item(f"item-{idx}", price), "b1")
        cart.set_quantity(line.line_id, quantity)
    return cart.lines


def customer_with(points):
    return Customer(customer_id="cust-x", name="Test", phone="0170", points=points)


class TestLineAndSubtotal:
    """Tests for line totals, subtotal and VAT."""

    def test_line_total_includes_add_ons_per_unit(self, latte, add_ons):
        """Should add add-on prices to the unit price before multiplying by quantity."""
        cart = Cart()
        line = cart.add_item(latte, "b2", [add_ons[0], add_ons[1]])
        cart.set_quantity(line.line_id, 2)

        assert line_total(cart.lines[0]) == (260.0 + 60.0 + 50.0) * 2

    def test_scenario_vat_without_discounts(self, settings):
        """Should charge 5% VAT on 500 and earn points on the 525 total."""
        result = compute(cart_with((250.0, 2)), 5, None, False, "", settings)

        assert result.subtotal == 500.0
        assert result.vat_amount == 25.0
        assert result.total == 525.0
        assert result.discount == 0
        assert result.points_earned == math.floor(525.0 / settings.points_earn_rate)

    def test_empty_cart_prices_to_zero(self, settings):
        """Should price an empty cart at zero."""
        result = compute([], 5, None, False, "", settings)

        assert result.subtotal == 0
        assert result.total == 0
        assert result.points_earned == 0


class TestLoyaltyRedemption:
    """Tests for redemption eligibility and caps."""

    def test_scenario_redemption_capped_at_thirty_percent(self, settings):
        """Should redeem 30 of 100 points against a subtotal of 40."""
        result = compute(cart_with((40.0, 1)), 0, customer_with(100), True, "", settings)

        assert result.max_redeemable_points == 30
        assert result.points_to_redeem == 30
        assert result.points_cash_value == 30

    def test_redemption_limited_by_subtotal(self, settings):
        """Should never redeem more value than the subtotal absorbs."""
        result = compute(cart_with((12.0, 1)), 0, customer_with(1000), True, "", settings)

        assert result.max_redeemable_points == 300
        assert result.points_to_redeem == 12
        assert result.total == 0

    def test_redemption_respects_redeem_rate(self):
        """Should convert points at the configured currency-per-point rate."""
        settings = Settings(points_redeem_rate=2.0, points_earn_rate=100.0)

        result = compute(cart_with((45.0, 1)), 0, customer_with(100), True, "", settings)

        assert result.points_to_redeem == 22
        assert result.points_cash_value == 44.0

    def test_below_minimum_balance_cannot_redeem(self, settings):
        """Should disable redemption under 30 points without raising."""
        result = compute(cart_with((100.0, 1)), 0, customer_with(29), True, "", settings)

        assert result.can_redeem is False
        assert result.points_to_redeem == 0
        assert result.points_cash_value == 0

    def test_flag_off_redeems_nothing(self, settings):
        """Should leave points untouched when redemption is not requested."""
        result = compute(cart_with((100.0, 1)), 0, customer_with(500), False, "", settings)

        assert result.can_redeem is True
        assert result.points_to_redeem == 0

    def test_walk_in_cannot_redeem(self, settings):
        """Should not redeem without a matched customer."""
        result = compute(cart_with((100.0, 1)), 0, None, True, "", settings)

        assert result.points_to_redeem == 0

    def test_points_earned_uses_post_discount_total(self, settings):
        """Should earn on the payable total, so redeeming lowers accrual."""
        lines = cart_with((200.0, 1))

        plain = compute(lines, 0, customer_with(1000), False, "", settings)
        redeemed = compute(lines, 0, customer_with(1000), True, "", settings)

        assert plain.points_earned == 2
        assert redeemed.total == 0
        assert redeemed.points_earned == 0


class TestPromoCodes:
    """Tests for promo code resolution."""

    def test_percent_code(self, settings):
        """Should take 10% of the subtotal for SAVE10."""
        result = compute(cart_with((200.0, 1)), 0, None, False, "SAVE10", settings)

        assert result.promo_discount == 20.0
        assert result.promo_invalid is False

    def test_flat_code_matches_case_insensitively(self, settings):
        """Should apply a flat 50 for welcome50 in any case."""
        result = compute(cart_with((200.0, 1)), 0, None, False, " welcome50 ", settings)

        assert result.promo_discount == 50.0
        assert result.promo_code == "WELCOME50"

    def test_unknown_code_zeroes_discount_and_signals(self, settings):
        """Should report an invalid code and keep checkout possible."""
        result = compute(cart_with((200.0, 1)), 0, None, False, "FREEFOOD", settings)

        assert result.promo_discount == 0
        assert result.promo_invalid is True
        assert result.total == 200.0

    def test_blank_code_is_not_invalid(self):
        """Should treat an empty code as no promo."""
        assert verify_promo("  ", 100.0) == (0.0, True)

    def test_verify_promo_with_custom_table(self):
        """Should resolve codes from an extended rule table."""
        table = {"HALF": PercentOfSubtotal(50.0), "TEN": FlatAmount(10.0)}

        assert verify_promo("half", 80.0, table) == (40.0, True)
        assert verify_promo("ten", 80.0, table) == (10.0, True)
        assert verify_promo("SAVE10", 80.0, table) == (0.0, False)

    def test_flat_promo_larger_than_bill_clamps_total(self, settings):
        """Should floor the total at zero when the promo exceeds the bill."""
        result = compute(cart_with((20.0, 1)), 0, None, False, "WELCOME50", settings)

        assert result.total == 0
        assert result.points_earned == 0

    def test_loyalty_and_promo_stack_additively(self, settings):
        """Should subtract both discounts from subtotal plus VAT."""
        result = compute(cart_with((200.0, 1)), 10, customer_with(100), True, "SAVE10", settings)

        assert result.points_cash_value == 30
        assert result.promo_discount == 20.0
        assert result.discount == 50.0
        assert result.total == pytest.approx(200.0 + 20.0 - 30 - 20.0)


priced_lines = st.lists(
    st.tuples(st.integers(min_value=0, max_value=2000), st.integers(min_value=1, max_value=10)),
    max_size=6,
)


class TestPricingProperties:
    """Property-based checks for the pricing laws."""

    @given(
        priced=priced_lines,
        points=st.integers(min_value=0, max_value=20000),
        use_points=st.booleans(),
        promo=st.sampled_from(["", "SAVE10", "WELCOME50", "BOGUS"]),
        vat=st.integers(min_value=0, max_value=25),
        redeem_rate=st.sampled_from([0.5, 1.0, 2.0, 5.0]),
    )
    @hypothesis_settings(max_examples=200, deadline=None)
    def test_pricing_laws(self, priced, points, use_points, promo, vat, redeem_rate):
        """Should never go negative, respect both redemption caps and be repeatable."""
        settings = Settings(points_redeem_rate=redeem_rate, points_earn_rate=100.0)
        lines = cart_with(*[(float(p), q) for p, q in priced])
        customer = customer_with(float(points))

        result = compute(lines, vat, customer, use_points, promo, settings)
        again = compute(lines, vat, customer, use_points, promo, settings)

        assert result.total >= 0
        assert result.points_to_redeem <= math.floor(points * 0.3)
        assert result.points_to_redeem * redeem_rate <= result.subtotal
        assert result.points_earned >= 0
        assert result == again

    @given(add_on_prices=st.lists(st.integers(min_value=0, max_value=100), max_size=4))
    @hypothesis_settings(deadline=None)
    def test_add_on_order_does_not_change_line_identity(self, add_on_prices):
        """Should key lines by the add-on set regardless of selection order."""
        add_ons = [AddOn(addon_id=f"ad-{i}", name=f"A{i}", price=float(p)) for i, p in enumerate(add_on_prices)]
        item = plain_item("m-x", 10.0)
        cart = Cart()

        cart.add_item(item, "b1", add_ons)
        cart.add_item(item, "b1", list(reversed(add_ons)))

        assert len(cart) == 1
        assert cart.lines[0].quantity == 2
