# common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent  # raiz do projeto (onde fica o .env)


class Settings(BaseSettings):
    # obrigatórios: sem loja/token não há o que proxyar
    SHOPIFY_SHOP: str = Field(..., description="Hostname da loja, ex.: minha-loja.myshopify.com")
    SHOPIFY_ADMIN_TOKEN: str = Field(..., description="Admin API access token (shpat_***)")
    SHOPIFY_API_VERSION: str = "2025-07"
    ALLOWED_ORIGIN: str = ""  # vazio = qualquer origem
    PORT: int = 4000

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @property
    def graphql_url(self) -> str:
        return f"https://{self.SHOPIFY_SHOP}/admin/api/{self.SHOPIFY_API_VERSION}/graphql.json"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGIN.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # lido uma única vez por processo; testes limpam via get_settings.cache_clear()
    return Settings()
