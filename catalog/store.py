"""
catalog/store.py -- SQLAlchemy-backed persistence layer for the product catalog.

Uses SQLAlchemy Core (not ORM) so the dataclass in catalog/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. ProductStore is the repository;
_row_to_product is the mapper.

Product names are not unique: POST /products may add a second item with an
existing name. Only seed_samples() deduplicates, and only by name.

Usage:
    store = ProductStore("sqlite:///food_ordering.db")
    product_id = store.create_product(Product(...))
    products = store.list_products()
    inserted = store.seed_samples()
    store.close()
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import replace
from typing import Optional

from sqlalchemy import Column, Float, MetaData, String, Table, Text, create_engine, event

from catalog.models import SAMPLE_PRODUCTS, Product

logger = logging.getLogger("foodorder.catalog")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False, index=True),
    Column("description", Text, nullable=False, server_default=""),
    Column("price", Float, nullable=False),
    Column("category", String(100), nullable=False, server_default=""),
    Column("image", Text, nullable=False, server_default=""),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductStore:
    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def list_products(self) -> list[Product]:
        """Return every product in insertion order (rowid for SQLite)."""
        with self.engine.connect() as conn:
            rows = conn.execute(_products.select()).fetchall()
        return [_row_to_product(r) for r in rows]

    def create_product(self, product: Product) -> str:
        """Insert a product and return its assigned ID."""
        product_id = uuid.uuid4().hex
        with self.engine.connect() as conn:
            conn.execute(
                _products.insert().values(
                    id=product_id,
                    name=product.name,
                    description=product.description,
                    price=product.price,
                    category=product.category,
                    image=product.image,
                )
            )
            conn.commit()
        return product_id

    def get_by_name(self, name: str) -> Optional[Product]:
        """Return the first product with this exact name, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(_products.select().where(_products.c.name == name).limit(1)).fetchone()
        return _row_to_product(row) if row is not None else None

    def seed_samples(self, samples: Iterable[Product] = SAMPLE_PRODUCTS) -> list[Product]:
        """Insert each sample whose name is not already present.

        Idempotent: a second call inserts nothing. Returns the products that
        were inserted by this call, with their new ids.
        """
        inserted: list[Product] = []
        for sample in samples:
            if self.get_by_name(sample.name) is not None:
                continue
            product_id = self.create_product(sample)
            inserted.append(replace(sample, id=product_id))
        if inserted:
            logger.info("Seeded %d sample product(s)", len(inserted))
        return inserted

    def close(self) -> None:
        self.engine.dispose()


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        category=row.category,
        image=row.image,
    )
