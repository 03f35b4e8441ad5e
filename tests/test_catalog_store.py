"""Unit tests for catalog/store.py.

Covers:
- create_product / list_products / get_by_name
- seed_samples() inserts the three sample thalis once and is a no-op after
- seeding skips only names already present
"""

from catalog.models import SAMPLE_PRODUCTS, Product
from catalog.store import ProductStore


def _thali(name: str = "Gujarati Thali") -> Product:
    return Product(name=name, description="Dal, kadhi, rotli", price=240, category="thali", image="img.png")


def test_create_and_list(product_store: ProductStore) -> None:
    product_id = product_store.create_product(_thali())
    products = product_store.list_products()
    assert [p.id for p in products] == [product_id]
    assert products[0].price == 240


def test_get_by_name(product_store: ProductStore) -> None:
    product_id = product_store.create_product(_thali())
    assert product_store.get_by_name("Gujarati Thali").id == product_id
    assert product_store.get_by_name("missing") is None


def test_duplicate_names_allowed_on_create(product_store: ProductStore) -> None:
    product_store.create_product(_thali())
    product_store.create_product(_thali())
    assert len(product_store.list_products()) == 2


def test_seed_inserts_all_samples(product_store: ProductStore) -> None:
    inserted = product_store.seed_samples()
    assert [p.name for p in inserted] == [s.name for s in SAMPLE_PRODUCTS]
    assert all(p.id for p in inserted)


def test_seed_twice_is_idempotent(product_store: ProductStore) -> None:
    product_store.seed_samples()
    assert product_store.seed_samples() == []
    names = [p.name for p in product_store.list_products()]
    for sample in SAMPLE_PRODUCTS:
        assert names.count(sample.name) == 1


def test_seed_skips_existing_name(product_store: ProductStore) -> None:
    product_store.create_product(_thali("Punjabi Thali"))
    inserted = product_store.seed_samples()
    assert {p.name for p in inserted} == {"North Indian Thali", "South Indian Thali"}
    assert len(product_store.list_products()) == 3
