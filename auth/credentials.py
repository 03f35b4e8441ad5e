"""
auth/credentials.py -- Register / authenticate flows for the three principal kinds.

Each flow is a plain function over a CredentialStore. Failures are raised as
AuthError subclasses carrying a short client-facing message; the route layer
maps every AuthError to HTTP 400.

  register_user / register_delivery_agent
      Conflict when the email exists in that kind's table. The lookup is a
      fast path only; the table's UNIQUE constraint settles races, and the
      IntegrityError it raises is mapped to the same Conflict.

  authenticate_user / authenticate_delivery_agent
      InvalidCredentials for an unknown email or wrong password (same
      message, same bcrypt cost). authenticate_user additionally raises
      RoleMismatch when the caller names a role the account does not hold.

  login_owner
      Accepts only the configured bootstrap pair, then ensures the single
      Owner record exists. There is no other way to create an owner.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import hmac
import logging

from sqlalchemy.exc import IntegrityError

from auth.models import USER_ROLES, DeliveryAgent, Owner, User
from auth.store import CredentialStore
from auth.tokens import burn_password_check, hash_password, verify_password

logger = logging.getLogger("foodorder.auth")


class AuthError(Exception):
    """Base class for client-side credential failures."""

    code = "auth_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Conflict(AuthError):
    code = "conflict"


class InvalidCredentials(AuthError):
    code = "invalid_credentials"


class RoleMismatch(AuthError):
    code = "role_mismatch"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def register_user(store: CredentialStore, username: str, email: str, password: str, role: str | None = None) -> User:
    """Create a customer account. role defaults to "user"."""
    if role is not None and role not in USER_ROLES:
        raise ValueError(f"Unknown role: {role!r}")
    if store.get_user_by_email(email) is not None:
        raise Conflict("User already exists")

    user = User(username=username, email=email, hashed_password=hash_password(password), role=role or "user")
    try:
        user.id = store.create_user(user)
    except IntegrityError as exc:
        raise Conflict("User already exists") from exc
    logger.info("Registered user %s (role=%s)", user.id, user.role)
    return user


def authenticate_user(store: CredentialStore, email: str, password: str, expected_role: str | None = None) -> User:
    """Return the User for a correct email/password pair.

    The role check runs only after the password matched, so a RoleMismatch
    never reveals anything about an account the caller cannot log into.
    """
    user = store.get_user_by_email(email)
    if user is None:
        burn_password_check(password)
        raise InvalidCredentials("Invalid credentials")
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials("Invalid credentials")
    if expected_role and user.role != expected_role:
        raise RoleMismatch("Access denied for this role")
    return user


# ---------------------------------------------------------------------------
# Delivery agents
# ---------------------------------------------------------------------------


def register_delivery_agent(store: CredentialStore, name: str, email: str, password: str, phone: str) -> DeliveryAgent:
    if store.get_delivery_agent_by_email(email) is not None:
        raise Conflict("Delivery agent already exists")

    agent = DeliveryAgent(name=name, email=email, hashed_password=hash_password(password), phone=phone)
    try:
        agent.id = store.create_delivery_agent(agent)
    except IntegrityError as exc:
        raise Conflict("Delivery agent already exists") from exc
    logger.info("Registered delivery agent %s", agent.id)
    return agent


def authenticate_delivery_agent(store: CredentialStore, email: str, password: str) -> DeliveryAgent:
    agent = store.get_delivery_agent_by_email(email)
    if agent is None:
        burn_password_check(password)
        raise InvalidCredentials("Invalid credentials")
    if not verify_password(password, agent.hashed_password):
        raise InvalidCredentials("Invalid credentials")
    return agent


# ---------------------------------------------------------------------------
# Owner bootstrap
# ---------------------------------------------------------------------------


def login_owner(
    store: CredentialStore,
    email: str,
    password: str,
    bootstrap_email: str,
    bootstrap_password: str,
    username: str = "Owner",
) -> Owner:
    """Accept the bootstrap pair only; create the Owner record on first success.

    A stored Owner row is never used to authenticate: even if its email and
    hash match the input, anything other than the bootstrap pair is rejected.
    Both comparisons always run so timing does not reveal which half failed.
    """
    email_ok = hmac.compare_digest(email.encode("utf-8"), bootstrap_email.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), bootstrap_password.encode("utf-8"))
    if not (email_ok and password_ok):
        raise InvalidCredentials("Invalid owner credentials")

    existing = store.get_owner_by_email(email)
    if existing is not None:
        return existing
    return store.ensure_owner(Owner(username=username, email=email, hashed_password=hash_password(password)))
