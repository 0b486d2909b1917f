from __future__ import annotations

from fastapi import APIRouter, Body, Path, Query

from app.common.errors import AppError, ClientInputError, ResourceNotFound, UpstreamError
from app.common.logging_setup import get_logger
from app.schemas.pick import (
    CompleteDraftRequest,
    CompleteDraftResponse,
    DraftListResponse,
    ErrorResponse,
    PickJob,
    UserErrorsResponse,
)
from app.services.pick import buscar_pick_job, concluir_draft, listar_drafts

router = APIRouter(prefix="/api/pick", tags=["Pick"])

logger = get_logger(__name__)


def _falha(mensagem: str, e: Exception) -> AppError:
    # Falhas da Shopify já foram logadas com detalhe no client; aqui só o resumo.
    if isinstance(e, AppError):
        logger.error(
            "%s (%s)",
            mensagem,
            e.code,
            extra={"error_code": e.code, "retryable": e.retryable, "cause": repr(e.cause) if e.cause else None},
        )
    else:
        logger.exception(mensagem)
    return UpstreamError(mensagem, code="PICK_UPSTREAM_FAILED", cause=e)


@router.get(
    "/drafts",
    response_model=DraftListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Listar drafts abertos",
    description=(
        "Drafts com `status:open`, mais recentes primeiro. `since`/`until` filtram por `created_at` "
        "(YYYY-MM-DD). `first` padrão 25, máximo 250."
    ),
)
def get_drafts(
    since: str | None = Query(None, description="YYYY-MM-DD"),
    until: str | None = Query(None, description="YYYY-MM-DD"),
    first: str | None = Query(None, description="Tamanho da página (padrão 25, máx. 250)"),
) -> DraftListResponse:
    try:
        return listar_drafts(since=since, until=until, first=first)
    except Exception as e:
        raise _falha("failed to list drafts", e) from e


@router.get(
    "/jobs/{draftId:path}",
    response_model=PickJob,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Draft como job de separação",
)
def get_pick_job(
    draft_id: str = Path(..., alias="draftId", description="ID numérico ou GID do draft order"),
) -> PickJob:
    try:
        return buscar_pick_job(draft_id)
    except ResourceNotFound:
        raise
    except Exception as e:
        raise _falha("Failed to fetch draft", e) from e


@router.post(
    "/complete",
    response_model=CompleteDraftResponse,
    responses={400: {"model": UserErrorsResponse}, 500: {"model": ErrorResponse}},
    summary="Concluir draft (cria o pedido)",
)
def post_complete(body: CompleteDraftRequest | None = Body(None)) -> CompleteDraftResponse:
    req = body or CompleteDraftRequest()
    try:
        return concluir_draft(req.draft_id, payment_pending=req.payment_pending)
    except ClientInputError:
        # inclui userErrors da Shopify (400 com a lista)
        raise
    except Exception as e:
        raise _falha("Failed to complete draft", e) from e
