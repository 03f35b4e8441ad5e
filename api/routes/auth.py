"""
api/routes/auth.py -- Registration and login endpoints for all principal kinds.

Routes:
  POST /register                -- create a customer account
  POST /login                   -- customer login; optional role check
  POST /api/delivery/register   -- create a delivery agent account
  POST /api/delivery/login      -- delivery agent login
  POST /owner/login             -- bootstrap-pair owner login
  GET  /me                      -- claims of the presented bearer token (gated)

Security:
  Every credential failure is HTTP 400 with a short message. Unknown email
  and wrong password share one message and one bcrypt cost.
  Cache-Control: no-store on every response that carries a token.
  No response ever includes a password or password hash.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from api.models import (
    ClaimsResponse,
    CredentialsRequest,
    DeliveryAgentSummary,
    DeliveryLoginResponse,
    DeliveryRegisterRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PrincipalSummary,
    RegisterRequest,
)
from auth.credentials import (
    AuthError,
    authenticate_delivery_agent,
    authenticate_user,
    login_owner,
    register_delivery_agent,
    register_user,
)
from auth.dependencies import get_token_claims
from auth.store import CredentialStore
from auth.tokens import TokenIssuer
from core.config import get_settings

logger = logging.getLogger("foodorder.api.auth")

# Auth policy:
# - POST /register, /login, /api/delivery/*, /owner/login: public -- they mint the tokens
# - GET  /me: requires a valid bearer token (get_token_claims)
router = APIRouter()


def _reject(exc: AuthError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": exc.code, "message": exc.message})


def _token_response(content: dict) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=content)
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> MessageResponse:
    """Create a customer account. role defaults to "user"."""
    store: CredentialStore = request.app.state.credential_store
    try:
        register_user(store, body.username, body.email, body.password, body.role)
    except AuthError as exc:
        raise _reject(exc) from exc
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate a customer; when body.role is set it must match the account's role."""
    store: CredentialStore = request.app.state.credential_store
    issuer: TokenIssuer = request.app.state.token_issuer
    try:
        user = authenticate_user(store, body.email, body.password, expected_role=body.role)
    except AuthError as exc:
        logger.warning("Customer login rejected (%s)", exc.code)
        raise _reject(exc) from exc

    token = issuer.issue(user.id, user.role, email=user.email)
    return _token_response(LoginResponse(token=token, user=PrincipalSummary.from_principal(user)).model_dump())


# ---------------------------------------------------------------------------
# Delivery agents
# ---------------------------------------------------------------------------


@router.post("/api/delivery/register", response_model=MessageResponse, status_code=201)
def register_delivery(request: Request, body: DeliveryRegisterRequest) -> MessageResponse:
    store: CredentialStore = request.app.state.credential_store
    try:
        register_delivery_agent(store, body.name, body.email, body.password, body.phone)
    except AuthError as exc:
        raise _reject(exc) from exc
    return MessageResponse(message="Delivery agent registered successfully")


@router.post("/api/delivery/login")
def login_delivery(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Authenticate a delivery agent. The echoed record omits the password hash."""
    store: CredentialStore = request.app.state.credential_store
    issuer: TokenIssuer = request.app.state.token_issuer
    try:
        agent = authenticate_delivery_agent(store, body.email, body.password)
    except AuthError as exc:
        logger.warning("Delivery login rejected (%s)", exc.code)
        raise _reject(exc) from exc

    token = issuer.issue(agent.id, agent.role)
    content = DeliveryLoginResponse(token=token, delivery_boy=DeliveryAgentSummary.from_agent(agent))
    return _token_response(content.model_dump(by_alias=True))


# ---------------------------------------------------------------------------
# Owner
# ---------------------------------------------------------------------------


@router.post("/owner/login", response_model=LoginResponse)
def owner_login(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Log in with the configured owner bootstrap pair.

    The first success creates the Owner record; later successes reuse it.
    """
    store: CredentialStore = request.app.state.credential_store
    issuer: TokenIssuer = request.app.state.token_issuer
    settings = get_settings()
    try:
        owner = login_owner(
            store,
            body.email,
            body.password,
            bootstrap_email=settings.owner_email,
            bootstrap_password=settings.owner_password,
            username=settings.owner_username,
        )
    except AuthError as exc:
        logger.warning("Owner login rejected")
        raise _reject(exc) from exc

    token = issuer.issue(owner.id, owner.role, email=owner.email)
    return _token_response(LoginResponse(token=token, user=PrincipalSummary.from_principal(owner)).model_dump())


# ---------------------------------------------------------------------------
# Authenticated
# ---------------------------------------------------------------------------


@router.get("/me", response_model=ClaimsResponse)
def me(claims: dict = Depends(get_token_claims)) -> ClaimsResponse:
    """Return the verified claim set of the presented bearer token."""
    return ClaimsResponse(**claims)
