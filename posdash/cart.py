"""In-progress cart for the active register."""

from __future__ import annotations

from typing import Iterable

from posdash.catalog import resolve_price
from posdash.models import AddOn, CartLine, MenuItem, line_key

LineId = tuple[str, tuple[str, ...]]


class Cart:
    """Ordered cart lines; the same item with the same add-on set shares one line."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def find(self, line_id: LineId) -> CartLine | None:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def add_item(self, item: MenuItem, branch_id: str, chosen_add_ons: Iterable[AddOn] = ()) -> CartLine:
        """Add one unit of ``item``, merging into an existing identical line."""
        add_ons = tuple(sorted(chosen_add_ons, key=lambda add_on: add_on.addon_id))
        key = line_key(item.item_id, add_ons)
        existing = self.find(key)
        if existing is not None:
            existing.quantity += 1
            return existing

        line = CartLine(
            line_id=key,
            item_id=item.item_id,
            name=item.name,
            unit_price=resolve_price(item, branch_id),
            quantity=1,
            add_ons=add_ons,
        )
        self._lines.append(line)
        return line

    def set_quantity(self, line_id: LineId, quantity: int) -> None:
        """Set a line's quantity, never going below 1."""
        line = self.find(line_id)
        if line is None:
            return
        line.quantity = max(1, int(quantity))

    def increment(self, line_id: LineId) -> None:
        line = self.find(line_id)
        if line is not None:
            self.set_quantity(line_id, line.quantity + 1)

    def decrement(self, line_id: LineId) -> None:
        line = self.find(line_id)
        if line is not None:
            self.set_quantity(line_id, line.quantity - 1)

    def remove_line(self, line_id: LineId) -> None:
        self._lines = [line for line in self._lines if line.line_id != line_id]

    def clear(self) -> None:
        self._lines.clear()
