"""
api/routes/products.py -- Product catalog endpoints.

Routes:
  GET  /products              -- list every product
  POST /products              -- add a product
  POST /add-sample-products   -- insert the sample thalis that are missing

Catalog writes are public by default. Setting PROTECT_CATALOG_WRITES=true
puts both POST routes behind the bearer-token gate with the owner role.
"""

from fastapi import APIRouter, Depends, Request

from api.models import ProductCreate, ProductCreatedResponse, ProductResponse, SeedResponse
from auth.dependencies import get_token_claims, require_role
from catalog.models import Product
from catalog.store import ProductStore
from core.config import get_settings

_owner_only = require_role("owner")


def _catalog_write_guard(request: Request) -> None:
    """Apply the owner gate when PROTECT_CATALOG_WRITES is on; no-op otherwise."""
    if get_settings().protect_catalog_writes:
        _owner_only(get_token_claims(request))


# Auth policy:
# - GET  /products:             public
# - POST /products:             public, owner-only when PROTECT_CATALOG_WRITES=true
# - POST /add-sample-products:  public, owner-only when PROTECT_CATALOG_WRITES=true
router = APIRouter()


@router.get("/products", response_model=list[ProductResponse])
def list_products(request: Request) -> list[ProductResponse]:
    store: ProductStore = request.app.state.product_store
    return [ProductResponse.from_product(p) for p in store.list_products()]


@router.post(
    "/products",
    response_model=ProductCreatedResponse,
    status_code=201,
    dependencies=[Depends(_catalog_write_guard)],
)
def create_product(request: Request, body: ProductCreate) -> ProductCreatedResponse:
    store: ProductStore = request.app.state.product_store
    product = Product(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        image=body.image,
    )
    product.id = store.create_product(product)
    return ProductCreatedResponse(message="Product added successfully", product=ProductResponse.from_product(product))


@router.post("/add-sample-products", response_model=SeedResponse, dependencies=[Depends(_catalog_write_guard)])
def add_sample_products(request: Request) -> SeedResponse:
    """Insert each sample product whose name is not already in the catalog.

    Safe to call repeatedly: a second call inserts nothing.
    """
    store: ProductStore = request.app.state.product_store
    inserted = store.seed_samples()
    if not inserted:
        return SeedResponse(message="All sample products already exist, nothing added.")
    return SeedResponse(
        message="Sample products added successfully",
        inserted=[ProductResponse.from_product(p) for p in inserted],
    )
