"""
auth/store.py -- SQLAlchemy Core persistence layer for principal records.

Pattern: Repository + Data Mapper (same as catalog/store.py).
CredentialStore is the repository; the _row_to_* functions are the mappers.
Route and flow code never touches SQL directly.

One table per principal kind (users, delivery_agents, owners). Each table
carries a UNIQUE constraint on email: that constraint, not the lookup done
by the register flow, is the source of truth for per-kind uniqueness. Two
concurrent registrations can both pass the lookup; only one insert wins and
the loser gets sqlalchemy.exc.IntegrityError.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import DeliveryAgent, LineItem, Order, Owner, Transaction, User

logger = logging.getLogger("foodorder.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("role", String(30), nullable=False, server_default="user"),
    Column("orders", Text, nullable=False, server_default="[]"),  # JSON array
    Column("transactions", Text, nullable=False, server_default="[]"),  # JSON array
    Column("created_at", String(32), nullable=False),
)

_delivery_agents = Table(
    "delivery_agents",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("phone", String(50), nullable=False),
    Column("created_at", String(32), nullable=False),
)

_owners = Table(
    "owners",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers are not blocked during writes."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CredentialStore:
    """Repository for User, DeliveryAgent and Owner records.

    Usage:
        store = CredentialStore("sqlite:///food_ordering.db")
        user_id = store.create_user(User(username="a", email="a@x.com", hashed_password=hash_password("p1")))
        user = store.get_user_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> str:
        """Insert a new user and return its assigned ID.

        Raises sqlalchemy.exc.IntegrityError if the email is already taken.
        """
        user_id = _new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _users.insert().values(
                    id=user_id,
                    username=user.username,
                    email=user.email,
                    hashed_password=user.hashed_password,
                    role=user.role,
                    orders=json.dumps([asdict(o) for o in user.orders]),
                    transactions=json.dumps([asdict(t) for t in user.transactions]),
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return user_id

    def get_user_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    # ------------------------------------------------------------------
    # Delivery agents
    # ------------------------------------------------------------------

    def create_delivery_agent(self, agent: DeliveryAgent) -> str:
        """Insert a new delivery agent. Raises IntegrityError on a duplicate email."""
        agent_id = _new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _delivery_agents.insert().values(
                    id=agent_id,
                    name=agent.name,
                    email=agent.email,
                    hashed_password=agent.hashed_password,
                    phone=agent.phone,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return agent_id

    def get_delivery_agent_by_email(self, email: str) -> DeliveryAgent | None:
        with self.engine.connect() as conn:
            row = conn.execute(_delivery_agents.select().where(_delivery_agents.c.email == email)).fetchone()
        return _row_to_delivery_agent(row) if row is not None else None

    # ------------------------------------------------------------------
    # Owners
    # ------------------------------------------------------------------

    def get_owner_by_email(self, email: str) -> Owner | None:
        with self.engine.connect() as conn:
            row = conn.execute(_owners.select().where(_owners.c.email == email)).fetchone()
        return _row_to_owner(row) if row is not None else None

    def ensure_owner(self, owner: Owner) -> Owner:
        """Return the Owner stored under owner.email, inserting it first if absent.

        Idempotent: repeated calls never create a second record. If a
        concurrent caller inserts between our lookup and our insert, the
        UNIQUE constraint rejects ours and we return the winner's record.
        """
        existing = self.get_owner_by_email(owner.email)
        if existing is not None:
            return existing
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    _owners.insert().values(
                        id=_new_id(),
                        username=owner.username,
                        email=owner.email,
                        hashed_password=owner.hashed_password,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
            logger.info("Owner record created for %s", owner.email)
        except IntegrityError:
            logger.info("Owner record for %s created concurrently, reusing it", owner.email)
        created = self.get_owner_by_email(owner.email)
        if created is None:
            raise RuntimeError(f"Owner record for {owner.email!r} missing after insert")
        return created

    def count_owners(self) -> int:
        """Return the number of owner records. The bootstrap flow keeps this at most 1."""
        with self.engine.connect() as conn:
            result = conn.execute(text("SELECT COUNT(*) FROM owners")).scalar()
        return result or 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    orders = [
        Order(**{**o, "products": [LineItem(**item) for item in o.get("products", [])]})
        for o in json.loads(row.orders or "[]")
    ]
    transactions = [Transaction(**t) for t in json.loads(row.transactions or "[]")]
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        hashed_password=row.hashed_password,
        role=row.role,
        orders=orders,
        transactions=transactions,
        created_at=row.created_at,
    )


def _row_to_delivery_agent(row) -> DeliveryAgent:
    return DeliveryAgent(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        phone=row.phone,
        created_at=row.created_at,
    )


def _row_to_owner(row) -> Owner:
    return Owner(
        id=row.id,
        username=row.username,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )
