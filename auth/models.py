"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Three principal kinds live in three separate tables, so email uniqueness is
scoped per kind: the same address may belong to a User and a DeliveryAgent.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass, field

USER_ROLES: tuple[str, ...] = ("user", "delivery", "owner")


@dataclass
class LineItem:
    name: str
    price: float
    quantity: int


@dataclass
class Order:
    """An order placed by a User.

    Carried as schema only: no operation creates or mutates orders yet.
    """

    products: list[LineItem] = field(default_factory=list)
    total_amount: float = 0.0
    status: str = "pending"
    otp: str | None = None
    transaction_id: str | None = None
    created_at: str = ""


@dataclass
class Transaction:
    """A payment or refund against a User's account. Schema only, like Order."""

    amount: float
    type: str  # "payment" | "refund"
    status: str  # "success" | "failed"
    created_at: str = ""


@dataclass
class User:
    """A customer account.

    role is selectable at registration (one of USER_ROLES) and defaults to
    "user". hashed_password is a bcrypt hash and never leaves the server.
    """

    username: str
    email: str
    hashed_password: str
    role: str = "user"
    id: str | None = None
    orders: list[Order] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    created_at: str | None = None


@dataclass
class DeliveryAgent:
    """A delivery rider. The role is fixed; it is not stored per record."""

    name: str
    email: str
    hashed_password: str
    phone: str
    id: str | None = None
    created_at: str | None = None

    @property
    def role(self) -> str:
        return "delivery"


@dataclass
class Owner:
    """The restaurant owner, created lazily by the bootstrap login."""

    username: str
    email: str
    hashed_password: str
    id: str | None = None
    created_at: str | None = None

    @property
    def role(self) -> str:
        return "owner"
