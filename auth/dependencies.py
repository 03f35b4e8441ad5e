"""
auth/dependencies.py -- FastAPI Depends() helpers for the bearer-token gate.

The gate reads "Authorization: Bearer <token>" and verifies it with the
TokenVerifier stored on app.state by the lifespan:

  no token presented          -> HTTP 401
  bad signature / expired     -> HTTP 403
  otherwise                   -> decoded claim set

get_token_claims() is the gate itself. require_role() builds a dependency
that additionally restricts the claim's role.

The gate is opt-in per route. Registration, login and catalog reads are
public; see api/routes/ for which routes attach it.

Layer rule: no imports from api/, core/, or catalog/.
  auth/dependencies.py may import from fastapi because this module is part
  of the FastAPI dependency injection system.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, HTTPException, Request

from auth.tokens import InvalidToken, TokenVerifier


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_token_claims(request: Request) -> dict:
    """Require a valid bearer token. Returns the verified claim set.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: dict = Depends(get_token_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Access token required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    verifier: TokenVerifier = request.app.state.token_verifier
    try:
        return verifier.verify(token)
    except InvalidToken as exc:
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Invalid token"},
        ) from exc


def require_role(*roles: str) -> Callable[..., dict]:
    """Build a dependency that passes only tokens whose role is in roles.

    Use as a FastAPI dependency:
        @router.post("/owner-only", dependencies=[Depends(require_role("owner"))])
    """

    def _check(claims: dict = Depends(get_token_claims)) -> dict:
        if claims["role"] not in roles:
            raise HTTPException(
                status_code=403,
                detail={"code": "forbidden", "message": "Access denied for this role"},
            )
        return claims

    return _check
