from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from app.common.errors import UpstreamGraphQLError, UpstreamTransportError
from app.common.http_client import DEFAULT_TIMEOUT, http_post
from app.common.logging_setup import get_logger
from app.common.settings import Settings, get_settings

logger = get_logger(__name__)


def _http_shopify_headers(config: Settings) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Shopify-Access-Token": config.SHOPIFY_ADMIN_TOKEN,
    }


def executar_graphql(
    query: str,
    variables: Mapping[str, Any] | None = None,
    *,
    config: Settings | None = None,
) -> dict[str, Any]:
    """
    Executa uma operação no Admin GraphQL da Shopify e devolve ``data`` sem alterações.

    Levanta ``UpstreamTransportError`` para falhas de rede/timeout/status/corpo
    inválido e ``UpstreamGraphQLError`` quando a resposta traz ``errors`` no topo.
    Não há retry.
    """
    cfg = config or get_settings()
    url = cfg.graphql_url

    resp = http_post(
        url,
        json={"query": query, "variables": dict(variables or {})},
        headers=_http_shopify_headers(cfg),
        timeout=DEFAULT_TIMEOUT,
    )

    try:
        payload = resp.json()
    except ValueError as e:
        logger.error("shopify_invalid_json", extra={"status": resp.status_code, "body": resp.text[:2000]})
        raise UpstreamTransportError(
            "Resposta não-JSON da Shopify",
            code="UPSTREAM_INVALID_JSON",
            cause=e,
            data={"url": url, "status": resp.status_code},
        ) from e

    if not isinstance(payload, dict):
        logger.error("shopify_unexpected_payload", extra={"status": resp.status_code, "body": resp.text[:2000]})
        raise UpstreamTransportError(
            "Payload inesperado da Shopify",
            code="UPSTREAM_INVALID_JSON",
            data={"url": url, "status": resp.status_code},
        )

    errors = payload.get("errors")
    if errors is not None:
        # detalhe completo só no log; o chamador recebe um 500 genérico
        logger.error(
            "Shopify top-level errors: %s",
            json.dumps(errors, ensure_ascii=False, indent=2),
            extra={"url": url},
        )
        raise UpstreamGraphQLError(errors if isinstance(errors, list) else [errors])

    return payload.get("data") or {}
