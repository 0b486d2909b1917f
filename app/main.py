# app/main.py
from __future__ import annotations

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from app.common.errors import AppError
from app.common.logging_setup import get_logger, setup_logging
from app.common.middlewares import CorrelationIdMiddleware
from app.common.settings import get_settings
from app.routers.pick import router as pick_router

logger = get_logger(__name__)

INDEX_HTML = """
<h1>Scan &amp; Pick Backend</h1>
<ul>
  <li><a href="/health">/health</a></li>
  <li>GET /api/pick/drafts?since=YYYY-MM-DD&amp;until=YYYY-MM-DD&amp;first=50</li>
  <li>GET /api/pick/jobs/{draftId or gid}</li>
  <li>POST /api/pick/complete { draftId, paymentPending }</li>
</ul>
"""


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------
async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _validation_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.warning("request_validation_failed", extra={"errors": str(exc)})
    return JSONResponse(status_code=400, content={"error": "invalid request"})


# -----------------------------------------------------------------------------
# Criação do app
# -----------------------------------------------------------------------------
def create_app() -> FastAPI:
    setup_logging()
    settings = get_settings()  # falha cedo se SHOPIFY_SHOP/SHOPIFY_ADMIN_TOKEN faltarem

    app = FastAPI(title="Scan & Pick Backend")

    app.add_middleware(CorrelationIdMiddleware)

    # ALLOWED_ORIGIN vazio: reflete qualquer origem (com credentials)
    origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if origins else ".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(pick_router)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def index() -> str:
        return INDEX_HTML

    @app.get("/health", tags=["Health"])
    def health() -> dict[str, bool]:
        return {"ok": True}

    logger.info(
        "app_startup",
        extra={
            "app": os.getenv("APP_NAME", "scan-pick-backend"),
            "shop": settings.SHOPIFY_SHOP,
            "api_version": settings.SHOPIFY_API_VERSION,
        },
    )
    return app


# Instância utilizada pelo servidor (uvicorn/gunicorn)
app = create_app()


if __name__ == "__main__":
    port = get_settings().PORT
    logger.info("Pick backend listening on :%s", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_config=None)
