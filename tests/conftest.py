"""Fixtures compartilhadas: ambiente mínimo antes de importar o app."""

import os

os.environ.setdefault("SHOPIFY_SHOP", "loja-teste.myshopify.com")
os.environ.setdefault("SHOPIFY_ADMIN_TOKEN", "shpat_teste0000000000")
os.environ.setdefault("LOG_JSON", "0")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402


@pytest.fixture
def client():
    """TestClient do app completo (middlewares e exception handlers inclusos)."""
    return TestClient(app)
