"""
auth/tokens.py -- JWT issuance/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the principal id (sub), role,
       email where the flow has one, iat and exp. Lifetime is fixed at 24
       hours unless the caller configures otherwise. There is no revocation
       list: a token stays valid until exp regardless of account changes.

  Signing secret: injected into TokenIssuer / TokenVerifier at construction.
       The app lifespan builds both from Settings and parks them on app.state;
       nothing in this module reads configuration at import time.

  Passwords: bcrypt with a fixed cost of 10 rounds. _DUMMY_HASH enables
       timing equalization in the login flows so response time does not
       reveal whether an email is registered.

Layer rule: no imports from api/, core/, or catalog/.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

logger = logging.getLogger("foodorder.auth")

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72
DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


class InvalidToken(Exception):
    """Raised by TokenVerifier.verify() for a bad signature, expiry, or missing claims."""


# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of input, so longer passwords
    are truncated here the same way verify_password() truncates them.
    """
    return bcrypt.hashpw(_password_bytes(plain), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


# Computed once at module load so the first failed login is not measurably
# faster than later ones.
_DUMMY_HASH: str = hash_password("foodorder_timing_dummy")


def burn_password_check(plain: str) -> None:
    """Run one bcrypt comparison against a throwaway hash.

    Login flows call this when the email is unknown so that path costs the
    same as a wrong password.
    """
    verify_password(plain, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Signs identity + role claims into a time-bounded JWT.

    Usage:
        issuer = TokenIssuer(settings.secret_key)
        token = issuer.issue(user.id, user.role, email=user.email)
    """

    def __init__(self, secret_key: str, lifetime: timedelta = DEFAULT_TOKEN_LIFETIME) -> None:
        self._secret_key = secret_key
        self.lifetime = lifetime

    def issue(self, subject: str, role: str, email: str | None = None, now: datetime | None = None) -> str:
        """Encode a signed JWT for the given principal.

        Args:
            subject: Principal id, stored as the "sub" claim.
            role:    "user", "delivery" or "owner".
            email:   Included only when the flow carries one.
            now:     Issue time. Defaults to the current UTC time; tests pass
                     an explicit value to place the expiry boundary.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload: dict = {
            "sub": subject,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        if email is not None:
            payload["email"] = email
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)


class TokenVerifier:
    """Stateless check of tokens produced by a TokenIssuer sharing the same secret."""

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key

    def verify(self, token: str) -> dict:
        """Decode and verify a JWT. Returns the claim set.

        Raises InvalidToken on any failure: bad signature, malformed token,
        expired, or missing sub/role/exp claims. A token is expired from its
        exp second onward.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError as exc:
            raise InvalidToken(str(exc)) from exc
        if not all(claim in payload for claim in ("sub", "role", "exp")):
            raise InvalidToken("Token is missing required claims")
        if payload["exp"] <= int(time.time()):
            raise InvalidToken("Signature has expired.")
        return payload
