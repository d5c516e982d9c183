"""Menu lookups: branch pricing, eligible add-ons and search."""

from __future__ import annotations

from typing import Any, Iterable

from posdash.models import AddOn, Branch, Category, MenuItem


def resolve_price(item: MenuItem, branch_id: str) -> float:
    """Return the branch override price for ``item`` or its base price."""
    for override in item.branch_prices:
        if override.branch_id == branch_id:
            return override.price
    return item.price


def resolve_add_ons(item: MenuItem, all_add_ons: Iterable[AddOn]) -> list[AddOn]:
    """Filter the global add-on list down to those eligible for ``item``."""
    eligible = set(item.addon_ids)
    return [add_on for add_on in all_add_ons if add_on.addon_id in eligible]


def is_sold_at(item: MenuItem, branch_id: str) -> bool:
    # An item without a branch list is sold everywhere.
    return not item.branch_ids or branch_id in item.branch_ids


def items_for_branch(
    items: Iterable[MenuItem],
    branch_id: str,
    category_id: str | None = None,
    query: str = "",
) -> list[MenuItem]:
    """Return items sellable at ``branch_id``, optionally narrowed by category and name."""
    q = query.strip().lower()
    results = []
    for item in items:
        if not is_sold_at(item, branch_id):
            continue
        if category_id is not None and item.category_id != category_id:
            continue
        if q and q not in item.name.lower():
            continue
        results.append(item)
    return results


def load_menu(raw_items: Iterable[dict[str, Any]]) -> list[MenuItem]:
    return [MenuItem.from_dict(raw) for raw in raw_items]


def load_add_ons(raw_add_ons: Iterable[dict[str, Any]]) -> list[AddOn]:
    return [AddOn.from_dict(raw) for raw in raw_add_ons]


def load_categories(raw_categories: Iterable[dict[str, Any]]) -> list[Category]:
    return [Category(category_id=str(raw["category_id"]), name=str(raw["name"])) for raw in raw_categories]


def load_branches(raw_branches: Iterable[dict[str, Any]]) -> list[Branch]:
    return [
        Branch(branch_id=str(raw["branch_id"]), name=str(raw["name"]), branch_type=str(raw.get("branch_type", "OUTLET")))
        for raw in raw_branches
    ]
