"""
Pytest configuration and fixtures for posdash tests.
"""

import pytest

from posdash.constant import DEFAULT_STAFF
from posdash.ledger import CustomerLedger
from posdash.models import AddOn, BranchPrice, Customer, MenuItem, Settings
from posdash.persistence import ACCOUNTING_KEY, CUSTOMERS_KEY, ORDERS_KEY, SESSION_KEY, PersistedStore


@pytest.fixture
def store(tmp_path):
    return PersistedStore(tmp_path / "posdash.db")


@pytest.fixture
def settings():
    return Settings(
        app_name="Test POS",
        currency_symbol="$",
        vat_percentage=5.0,
        points_earn_rate=100.0,
        points_redeem_rate=1.0,
    )


@pytest.fixture
def add_ons():
    return [
        AddOn(addon_id="ad-shot", name="Extra Shot", price=60.0),
        AddOn(addon_id="ad-oat", name="Oat Milk", price=50.0),
        AddOn(addon_id="ad-cream", name="Whipped Cream", price=30.0),
    ]


@pytest.fixture
def latte():
    return MenuItem(
        item_id="m-latte",
        name="Cafe Latte",
        price=260.0,
        category_id="cat-coffee",
        branch_ids=("b1", "b2"),
        branch_prices=(BranchPrice(branch_id="b1", price=280.0),),
        addon_ids=("ad-shot", "ad-oat"),
    )


@pytest.fixture
def croissant():
    return MenuItem(
        item_id="m-croissant",
        name="Butter Croissant",
        price=150.0,
        category_id="cat-bakery",
    )


@pytest.fixture
def ledger(store):
    return CustomerLedger(store.open(CUSTOMERS_KEY, []))


@pytest.fixture
def orders(store):
    return store.open(ORDERS_KEY, [])


@pytest.fixture
def accounting(store):
    return store.open(ACCOUNTING_KEY, [])


@pytest.fixture
def loyal_customer(ledger):
    """A customer with 100 points already on file."""
    ledger._save(
        [
            Customer(
                customer_id="cust-1",
                name="Rahim",
                phone="01711000000",
                points=100.0,
                total_spend=1000.0,
                total_orders=4,
                created_at=1,
            )
        ]
    )
    return ledger.find_by_phone("01711000000")


def plain_item(item_id: str, price: float) -> MenuItem:
    return MenuItem(item_id=item_id, name=item_id.title(), price=price, category_id="cat-test")


@pytest.fixture
def signed_in_store(store):
    """A store with the default admin already logged in."""
    store.open(SESSION_KEY, None).set(DEFAULT_STAFF[0])
    return store
