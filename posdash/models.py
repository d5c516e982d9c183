"""Domain models for posdash."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    MOBILE = "MOBILE"


class EntryType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class AddOn:
    """A selectable extra with a flat price increment."""

    addon_id: str
    name: str
    price: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AddOn:
        return cls(addon_id=str(raw["addon_id"]), name=str(raw["name"]), price=float(raw["price"]))


@dataclass(frozen=True)
class BranchPrice:
    """A per-branch override of a menu item's base price."""

    branch_id: str
    price: float


@dataclass(frozen=True)
class MenuItem:
    """A sellable catalog item."""

    item_id: str
    name: str
    price: float
    category_id: str
    branch_ids: tuple[str, ...] = ()
    branch_prices: tuple[BranchPrice, ...] = ()
    addon_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "price": self.price,
            "category_id": self.category_id,
            "branch_ids": list(self.branch_ids),
            "branch_prices": [asdict(bp) for bp in self.branch_prices],
            "addon_ids": list(self.addon_ids),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> MenuItem:
        return cls(
            item_id=str(raw["item_id"]),
            name=str(raw["name"]),
            price=float(raw["price"]),
            category_id=str(raw.get("category_id", "")),
            branch_ids=tuple(raw.get("branch_ids") or ()),
            branch_prices=tuple(
                BranchPrice(branch_id=str(bp["branch_id"]), price=float(bp["price"]))
                for bp in raw.get("branch_prices") or ()
            ),
            addon_ids=tuple(raw.get("addon_ids") or ()),
        )


@dataclass(frozen=True)
class Category:
    category_id: str
    name: str


@dataclass(frozen=True)
class Branch:
    branch_id: str
    name: str
    branch_type: str = "OUTLET"


@dataclass
class CartLine:
    """A cart row; price and add-ons are snapshots taken when first added."""

    line_id: tuple[str, tuple[str, ...]]
    item_id: str
    name: str
    unit_price: float
    quantity: int = 1
    add_ons: tuple[AddOn, ...] = ()

    @property
    def add_on_total(self) -> float:
        return sum(add_on.price for add_on in self.add_ons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "add_ons": [add_on.to_dict() for add_on in self.add_ons],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CartLine:
        add_ons = tuple(AddOn.from_dict(a) for a in raw.get("add_ons") or ())
        item_id = str(raw["item_id"])
        return cls(
            line_id=line_key(item_id, add_ons),
            item_id=item_id,
            name=str(raw["name"]),
            unit_price=float(raw["unit_price"]),
            quantity=int(raw["quantity"]),
            add_ons=add_ons,
        )


def line_key(item_id: str, add_ons: tuple[AddOn, ...] | list[AddOn]) -> tuple[str, tuple[str, ...]]:
    """Build the structural identity of a cart line."""
    return (item_id, tuple(sorted({add_on.addon_id for add_on in add_ons})))


@dataclass
class Customer:
    """A loyalty record keyed by phone number."""

    customer_id: str
    name: str
    phone: str
    points: float = 0.0
    total_spend: float = 0.0
    total_orders: int = 0
    created_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Customer:
        return cls(
            customer_id=str(raw["customer_id"]),
            name=str(raw.get("name", "")),
            phone=str(raw["phone"]),
            points=float(raw.get("points", 0)),
            total_spend=float(raw.get("total_spend", 0)),
            total_orders=int(raw.get("total_orders", 0)),
            created_at=int(raw.get("created_at", 0)),
        )


@dataclass(frozen=True)
class Order:
    """A settled order snapshot."""

    order_id: str
    branch_id: str
    lines: tuple[CartLine, ...]
    subtotal: float
    vat: float
    discount: float
    total: float
    status: OrderStatus
    payment_method: PaymentMethod
    created_at: int
    user_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "branch_id": self.branch_id,
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": self.subtotal,
            "vat": self.vat,
            "discount": self.discount,
            "total": self.total,
            "status": self.status.value,
            "payment_method": self.payment_method.value,
            "created_at": self.created_at,
            "user_id": self.user_id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Order:
        return cls(
            order_id=str(raw["order_id"]),
            branch_id=str(raw["branch_id"]),
            lines=tuple(CartLine.from_dict(line) for line in raw.get("lines") or ()),
            subtotal=float(raw["subtotal"]),
            vat=float(raw["vat"]),
            discount=float(raw["discount"]),
            total=float(raw["total"]),
            status=OrderStatus(raw["status"]),
            payment_method=PaymentMethod(raw["payment_method"]),
            created_at=int(raw["created_at"]),
            user_id=raw.get("user_id"),
            customer_name=raw.get("customer_name"),
            customer_phone=raw.get("customer_phone"),
        )


@dataclass(frozen=True)
class AccountingEntry:
    """An append-only ledger row."""

    entry_id: str
    date: int
    description: str
    entry_type: EntryType
    amount: float
    category: str
    branch_id: str

    def to_dict(self) -> dict[str, Any]:
        raw = asdict(self)
        raw["entry_type"] = self.entry_type.value
        return raw

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AccountingEntry:
        return cls(
            entry_id=str(raw["entry_id"]),
            date=int(raw["date"]),
            description=str(raw["description"]),
            entry_type=EntryType(raw["entry_type"]),
            amount=float(raw["amount"]),
            category=str(raw["category"]),
            branch_id=str(raw["branch_id"]),
        )


@dataclass(frozen=True)
class Settings:
    """Terminal-wide configuration read by the checkout core."""

    app_name: str = "posdash"
    currency_symbol: str = "$"
    vat_percentage: float = 5.0
    points_earn_rate: float = 100.0
    points_redeem_rate: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        defaults = cls()
        return cls(
            app_name=str(raw.get("app_name", defaults.app_name)),
            currency_symbol=str(raw.get("currency_symbol", defaults.currency_symbol)),
            vat_percentage=float(raw.get("vat_percentage", defaults.vat_percentage)),
            points_earn_rate=float(raw.get("points_earn_rate", defaults.points_earn_rate)),
            points_redeem_rate=float(raw.get("points_redeem_rate", defaults.points_redeem_rate)),
        )


@dataclass(frozen=True)
class StaffUser:
    """A terminal operator account."""

    user_id: str
    name: str
    role: str
    username: str
    password: str
    branch_ids: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        raw = asdict(self)
        raw["branch_ids"] = list(self.branch_ids)
        return raw

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> StaffUser:
        return cls(
            user_id=str(raw["user_id"]),
            name=str(raw["name"]),
            role=str(raw.get("role", "STAFF")),
            username=str(raw["username"]),
            password=str(raw["password"]),
            branch_ids=tuple(raw.get("branch_ids") or ()),
        )


def now_ms() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(time.time() * 1000)
