"""
API request and response models for the food ordering REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models perform presence and type checks only: any string is accepted
for any field, including the empty string.

Response models never carry a password or password hash.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import DeliveryAgent, Owner, User
from catalog.models import Product

RoleLiteral = Literal["user", "delivery", "owner"]


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    username: str
    email: str
    password: str
    role: Optional[RoleLiteral] = None


class LoginRequest(BaseModel):
    """Request body for POST /login. role, when given, must match the account."""

    email: str
    password: str
    role: Optional[RoleLiteral] = None


class DeliveryRegisterRequest(BaseModel):
    """Request body for POST /api/delivery/register."""

    name: str
    email: str
    password: str
    phone: str


class CredentialsRequest(BaseModel):
    """Request body for POST /api/delivery/login and POST /owner/login."""

    email: str
    password: str


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class PrincipalSummary(BaseModel):
    """Public view of a User or Owner returned on login."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    role: str

    @classmethod
    def from_principal(cls, principal: User | Owner) -> "PrincipalSummary":
        return cls(id=principal.id, username=principal.username, email=principal.email, role=principal.role)


class DeliveryAgentSummary(BaseModel):
    """Public view of a DeliveryAgent. The stored hash is deliberately absent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    email: str
    phone: str
    role: str = "delivery"
    created_at: Optional[str] = Field(default=None, serialization_alias="createdAt")

    @classmethod
    def from_agent(cls, agent: DeliveryAgent) -> "DeliveryAgentSummary":
        return cls(id=agent.id, name=agent.name, email=agent.email, phone=agent.phone, created_at=agent.created_at)


class LoginResponse(BaseModel):
    """Response for POST /login and POST /owner/login."""

    model_config = ConfigDict(frozen=True)

    token: str
    user: PrincipalSummary


class DeliveryLoginResponse(BaseModel):
    """Response for POST /api/delivery/login. Serialize with by_alias=True."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str
    delivery_boy: DeliveryAgentSummary = Field(serialization_alias="deliveryBoy")


class ClaimsResponse(BaseModel):
    """Response for GET /me -- the verified claim set of the presented token."""

    model_config = ConfigDict(frozen=True)

    sub: str
    role: str
    email: Optional[str] = None
    iat: Optional[int] = None
    exp: int


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    """Request body for POST /products."""

    name: str
    description: str
    price: float
    category: str
    image: str


class ProductResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    price: float
    category: str
    image: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            image=product.image,
        )


class ProductCreatedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    product: ProductResponse


class SeedResponse(BaseModel):
    """Response for POST /add-sample-products. inserted is empty on a no-op."""

    model_config = ConfigDict(frozen=True)

    message: str
    inserted: list[ProductResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
