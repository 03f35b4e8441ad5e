"""
tests/conftest.py -- Shared test fixtures for the food ordering integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for credentials + catalog
  - _patch_lifespan(): wires test stores and token components into app.state
  - api_client: TestClient against the real app with isolated stores
  - issuer / verifier: token components sharing the test signing secret

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread.

The DEBUG env var must be set before any api/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import re
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import CredentialStore
from auth.tokens import TokenIssuer, TokenVerifier
from catalog.store import ProductStore

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def _make_test_stores(db_suffix: str) -> tuple[CredentialStore, ProductStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_food_{db_suffix}?mode=memory&cache=shared&uri=true"
    return CredentialStore(url), ProductStore(url)


def _db_name(request) -> str:
    return re.sub(r"\W", "_", request.node.name)


def _patch_lifespan(credential_store: CredentialStore, product_store: ProductStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.credential_store = credential_store
        app.state.product_store = product_store
        app.state.token_issuer = TokenIssuer(TEST_SECRET)
        app.state.token_verifier = TokenVerifier(TEST_SECRET)
        yield

    return test_lifespan


@pytest.fixture
def signing_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def verifier() -> TokenVerifier:
    return TokenVerifier(TEST_SECRET)


@pytest.fixture
def credential_store(request) -> Generator[CredentialStore, None, None]:
    """Function-scoped store on its own shared-memory DB."""
    store = CredentialStore(f"sqlite:///file:unit_auth_{_db_name(request)}?mode=memory&cache=shared&uri=true")
    yield store
    store.close()


@pytest.fixture
def product_store(request) -> Generator[ProductStore, None, None]:
    store = ProductStore(f"sqlite:///file:unit_catalog_{_db_name(request)}?mode=memory&cache=shared&uri=true")
    yield store
    store.close()


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, CredentialStore, ProductStore], None, None]:
    """Yield (client, credential_store, product_store) for API integration tests.

    One client per test module. Tests within a module share the DB, so each
    test uses its own email addresses.
    """
    credential_store, product_store = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])

    app.router.lifespan_context = _patch_lifespan(credential_store, product_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, credential_store, product_store

    credential_store.close()
    product_store.close()
