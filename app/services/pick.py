from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from app.common.errors import ClientInputError, ResourceNotFound, UserErrorsReported
from app.common.logging_setup import get_logger
from app.schemas.pick import (
    CompleteDraftResponse,
    DraftListResponse,
    DraftSummary,
    OrderRef,
    PickJob,
    PickLine,
    PickShippingAddress,
    ShippingAddress,
)
from app.services.shopify_client import executar_graphql
from app.utils.utils_helpers import id_numerico, to_gid

logger = get_logger(__name__)

FIRST_PADRAO = 25
FIRST_MAX = 250

# só notação decimal simples (sem "1_0", "nan", "inf")
_NUMERO_DECIMAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

# -----------------------------------------------------------------------------
# Documentos GraphQL
# -----------------------------------------------------------------------------
LIST_DRAFTS = """
query ListDrafts($first: Int!, $query: String) {
  draftOrders(first: $first, query: $query, sortKey: UPDATED_AT, reverse: true) {
    edges {
      node {
        id
        createdAt
        updatedAt
        email
        shippingAddress { city province country zip }
        lineItems(first: 1) { edges { node { quantity } } }
      }
    }
  }
}
""".strip()

DRAFT_FOR_PICK = """
query DraftForPick($id: ID!) {
  draftOrder(id: $id) {
    id
    lineItems(first: 250) {
      edges {
        node {
          id
          quantity
          variant {
            id
            sku
            barcode
            title
            image { originalSrc }
            product { title }
          }
        }
      }
    }
    shippingAddress { address1 city province country zip }
  }
}
""".strip()

COMPLETE_DRAFT = """
mutation CompleteDraft($id: ID!, $paymentPending: Boolean) {
  draftOrderComplete(id: $id, paymentPending: $paymentPending) {
    order { id name }
    userErrors { field message }
  }
}
""".strip()


# -----------------------------------------------------------------------------
# Helpers de parâmetros
# -----------------------------------------------------------------------------
def montar_filtro_drafts(since: str | None = None, until: str | None = None) -> str:
    """Search query da Shopify para drafts abertos, com janela opcional por created_at (YYYY-MM-DD)."""
    partes: list[str] = []
    if since:
        partes.append(f"created_at:>={since}")
    if until:
        partes.append(f"created_at:<={until}")
    # só drafts abertos são separáveis
    partes.append("status:open")
    return " ".join(partes)


def normalizar_first(valor: str | int | None) -> int:
    if valor is None:
        return FIRST_PADRAO
    s = str(valor).strip()
    if not _NUMERO_DECIMAL.fullmatch(s):
        return FIRST_PADRAO
    n = float(s)
    if not math.isfinite(n) or int(n) < 1:
        return FIRST_PADRAO
    return min(int(n), FIRST_MAX)


def _edges(conn: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    return [(e or {}).get("node") or {} for e in ((conn or {}).get("edges") or [])]


# -----------------------------------------------------------------------------
# Operações
# -----------------------------------------------------------------------------
def listar_drafts(since: str | None = None, until: str | None = None, first: str | int | None = None) -> DraftListResponse:
    query = montar_filtro_drafts(since, until)
    data = executar_graphql(LIST_DRAFTS, {"first": normalizar_first(first), "query": query})

    items: list[DraftSummary] = []
    for node in _edges(data.get("draftOrders")):
        ship = node.get("shippingAddress")
        hint = sum(int(li.get("quantity") or 0) for li in _edges(node.get("lineItems")))
        items.append(
            DraftSummary(
                id=str(node.get("id") or ""),
                created_at=node.get("createdAt"),
                email=node.get("email"),
                shipping=ShippingAddress(**ship) if ship else None,
                total_lines_hint=hint,
            )
        )

    logger.info("drafts_listados", extra={"filtro": query, "total": len(items)})
    return DraftListResponse(items=items)


def buscar_pick_job(draft_id: str | int) -> PickJob:
    gid = to_gid("DraftOrder", draft_id)
    data = executar_graphql(DRAFT_FOR_PICK, {"id": gid})

    draft = data.get("draftOrder")
    if not draft:
        raise ResourceNotFound("Draft not found", data={"draft_id": id_numerico(gid)})

    lines: list[PickLine] = []
    for node in _edges(draft.get("lineItems")):
        variant = node.get("variant") or {}
        lines.append(
            PickLine(
                line_item_id=str(node.get("id") or ""),
                variant_id=variant.get("id"),
                title=(variant.get("product") or {}).get("title") or "Unknown",
                sku=variant.get("sku"),
                barcode=variant.get("barcode"),
                qty=int(node.get("quantity") or 0),
                thumb=(variant.get("image") or {}).get("originalSrc"),
            )
        )

    ship = draft.get("shippingAddress")
    return PickJob(
        draft_id=str(draft.get("id") or gid),
        shipping_address=PickShippingAddress(**ship) if ship else None,
        lines=lines,
    )


def concluir_draft(draft_id: str | int | None, payment_pending: bool | None = True) -> CompleteDraftResponse:
    """
    Converte o draft em pedido (draftOrderComplete).

    ``draft_id`` vazio -> ``ClientInputError`` antes de qualquer chamada à Shopify;
    ``userErrors`` não vazio -> ``UserErrorsReported`` com a lista como veio.
    """
    if draft_id is None or draft_id == "" or draft_id == 0:
        raise ClientInputError("draftId required")

    gid = to_gid("DraftOrder", draft_id)
    data = executar_graphql(COMPLETE_DRAFT, {"id": gid, "paymentPending": payment_pending})
    out = data.get("draftOrderComplete") or {}

    user_errors = out.get("userErrors") or []
    if user_errors:
        logger.warning("draft_complete_user_errors", extra={"draft_id": id_numerico(gid), "user_errors": user_errors})
        raise UserErrorsReported(user_errors)

    order = out.get("order")
    logger.info("draft_concluido", extra={"draft_id": id_numerico(gid), "order": order})
    return CompleteDraftResponse(order=OrderRef(**order) if order else None)
