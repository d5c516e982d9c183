"""Seed data used when a terminal starts with an empty store."""

from __future__ import annotations

from typing import Any

DEFAULT_SETTINGS: dict[str, Any] = {
    "app_name": "Enterprise POS",
    "currency_symbol": "৳",
    "vat_percentage": 5.0,
    "points_earn_rate": 100.0,
    "points_redeem_rate": 1.0,
}

DEFAULT_BRANCHES: list[dict[str, Any]] = [
    {"branch_id": "b1", "name": "Gulshan Outlet", "branch_type": "OUTLET"},
    {"branch_id": "b2", "name": "Dhanmondi Outlet", "branch_type": "OUTLET"},
]

DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {"category_id": "cat-coffee", "name": "Coffee"},
    {"category_id": "cat-tea", "name": "Tea"},
    {"category_id": "cat-bakery", "name": "Bakery"},
]

DEFAULT_ADDONS: list[dict[str, Any]] = [
    {"addon_id": "ad-shot", "name": "Extra Shot", "price": 60.0},
    {"addon_id": "ad-oat", "name": "Oat Milk", "price": 50.0},
    {"addon_id": "ad-syrup", "name": "Vanilla Syrup", "price": 40.0},
    {"addon_id": "ad-cream", "name": "Whipped Cream", "price": 30.0},
]

DEFAULT_MENU_ITEMS: list[dict[str, Any]] = [
    {
        "item_id": "m-espresso",
        "name": "Espresso",
        "price": 180.0,
        "category_id": "cat-coffee",
        "branch_ids": ["b1", "b2"],
        "branch_prices": [{"branch_id": "b1", "price": 200.0}],
        "addon_ids": ["ad-shot", "ad-syrup"],
    },
    {
        "item_id": "m-latte",
        "name": "Cafe Latte",
        "price": 260.0,
        "category_id": "cat-coffee",
        "branch_ids": ["b1", "b2"],
        "branch_prices": [],
        "addon_ids": ["ad-shot", "ad-oat", "ad-syrup", "ad-cream"],
    },
    {
        "item_id": "m-mocha",
        "name": "Mocha",
        "price": 290.0,
        "category_id": "cat-coffee",
        "branch_ids": ["b1"],
        "branch_prices": [],
        "addon_ids": ["ad-cream", "ad-oat"],
    },
    {
        "item_id": "m-masala-chai",
        "name": "Masala Chai",
        "price": 120.0,
        "category_id": "cat-tea",
        "branch_ids": ["b1", "b2"],
        "branch_prices": [{"branch_id": "b2", "price": 110.0}],
        "addon_ids": ["ad-oat"],
    },
    {
        "item_id": "m-croissant",
        "name": "Butter Croissant",
        "price": 150.0,
        "category_id": "cat-bakery",
        "branch_ids": ["b1", "b2"],
        "branch_prices": [],
        "addon_ids": [],
    },
    {
        "item_id": "m-brownie",
        "name": "Fudge Brownie",
        "price": 140.0,
        "category_id": "cat-bakery",
        "branch_ids": ["b2"],
        "branch_prices": [],
        "addon_ids": ["ad-cream"],
    },
]

DEFAULT_STAFF: list[dict[str, Any]] = [
    {
        "user_id": "admin-1",
        "name": "Super Admin",
        "role": "SUPER_ADMIN",
        "username": "admin",
        "password": "password",
        "branch_ids": ["b1", "b2"],
    },
]

# Checked against the upper-cased code the cashier typed.
PROMO_RULES: dict[str, dict[str, Any]] = {
    "SAVE10": {"kind": "percent", "value": 10.0},
    "WELCOME50": {"kind": "flat", "value": 50.0},
}
