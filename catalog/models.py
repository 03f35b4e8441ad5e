"""
catalog/models.py -- Domain dataclass for catalog entries.

Pure data container with zero logic. Persistence and seeding live in
catalog/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Product:
    """A menu item. id is None before the record is written to the database."""

    name: str
    description: str
    price: float
    category: str
    image: str
    id: Optional[str] = None


# Seeded by POST /add-sample-products and `python main.py --seed`.
SAMPLE_PRODUCTS: tuple[Product, ...] = (
    Product(
        name="North Indian Thali",
        description="Full meal",
        price=250,
        category="thali",
        image="https://via.placeholder.com/150",
    ),
    Product(
        name="South Indian Thali",
        description="Rice + Sambar",
        price=220,
        category="thali",
        image="https://via.placeholder.com/150",
    ),
    Product(
        name="Punjabi Thali",
        description="Makki di Roti + Saag",
        price=280,
        category="thali",
        image="https://via.placeholder.com/150",
    ),
)
