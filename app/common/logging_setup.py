# common/logging_setup.py
from __future__ import annotations

import logging
import os
import re
import sys
import uuid
from collections.abc import Iterable
from contextvars import ContextVar
from datetime import datetime
from typing import Any

from pythonjsonlogger import jsonlogger

# ---------------------------
# Contexto propagado por request
# ---------------------------
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="-")
app_env_ctx: ContextVar[str] = ContextVar("app_env", default="dev")

_TRUTHY_OFF = ("0", "false", "False")
# atributos nativos do LogRecord; o resto veio de extra=
_ATRIBUTOS_PADRAO = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_correlation_id() -> str:
    """Retorna o correlation_id atual do contexto."""
    return correlation_id_ctx.get("-")


def set_correlation_id(value: str | None = None) -> str:
    """Define (ou gera) o correlation_id para o contexto atual e o retorna."""
    cid = value or str(uuid.uuid4())
    correlation_id_ctx.set(cid)
    return cid


# ---------------------------
# Filtro de contexto + máscara de token da Shopify
# ---------------------------
class ContextFilter(logging.Filter):
    _PATTERNS: tuple[re.Pattern[str], ...] = (
        re.compile(r"(x-shopify-access-token['\"]?\s*[:=]\s*['\"]?)([A-Za-z0-9_\-]{6,})", re.IGNORECASE),
        re.compile(r"(shpat_)([A-Za-z0-9]{6,})"),
        re.compile(r"(token\s*=\s*)([A-Za-z0-9_\-]{6,})", re.IGNORECASE),
    )

    def __init__(self, *, service: str, version: str, mask_secrets: bool = True) -> None:
        super().__init__()
        self.service = service
        self.version = version
        self.mask_secrets = mask_secrets

    def _mask(self, msg: str) -> str:
        if not self.mask_secrets or not msg:
            return msg
        for p in self._PATTERNS:
            msg = p.sub(r"\1***", msg)
        return msg

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get("-")
        record.env = app_env_ctx.get()
        record.service = self.service
        record.version = self.version
        record.pid = os.getpid()

        if self.mask_secrets:
            # mensagem já renderizada (args inclusos) e extras string, ex.: body da Shopify
            record.msg = self._mask(record.getMessage())
            record.args = None
            for chave, valor in list(vars(record).items()):
                if chave not in _ATRIBUTOS_PADRAO and isinstance(valor, str):
                    setattr(record, chave, self._mask(valor))
        return True


# ---------------------------
# Formatter JSON (UTC, ISO-8601)
# ---------------------------
class UtcJsonFormatter(jsonlogger.JsonFormatter):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("timestamp", True)
        kwargs.setdefault("json_ensure_ascii", False)
        kwargs.setdefault("rename_fields", {"levelname": "level", "message": "msg"})
        super().__init__(*args, **kwargs)

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ts = log_record.get("timestamp")
        if isinstance(ts, datetime):
            log_record["timestamp"] = ts.isoformat().replace("+00:00", "Z")


def _build_json_formatter() -> logging.Formatter:
    return UtcJsonFormatter(
        "%(levelname)s %(name)s %(message)s %(correlation_id)s %(env)s %(service)s %(version)s %(pid)s"
    )


def _build_text_formatter() -> logging.Formatter:
    return logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s %(env)s %(service)s:%(version)s "
        "(cid=%(correlation_id)s pid=%(pid)s) %(message)s"
    )


# ---------------------------
# Setup principal
# ---------------------------
def setup_logging(
    *,
    level: int | str | None = None,
    json_console: bool | None = None,
    file_path: str | None = None,
    quiet_loggers: Iterable[str] = ("urllib3",),
) -> None:
    """
    Configura logging global:
      - Console JSON por padrão (LOG_JSON=0 para texto)
      - Nível por LOG_LEVEL, padrão INFO
      - Arquivo opcional (LOG_FILE ou parâmetro file_path), sempre JSON
      - Máscara de token ligada por padrão (LOG_MASK_SECRETS=0 desliga)
    """
    service = os.getenv("APP_NAME", "scan-pick-backend")
    version = os.getenv("APP_VERSION", "0.0.0")
    app_env_ctx.set(os.getenv("APP_ENV", "dev"))

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    if isinstance(level, str):
        level = getattr(logging, level, logging.INFO)

    if json_console is None:
        json_console = os.getenv("LOG_JSON", "1") not in _TRUTHY_OFF

    file_path = file_path or os.getenv("LOG_FILE")
    mask_secrets = os.getenv("LOG_MASK_SECRETS", "1") not in _TRUTHY_OFF

    root = logging.getLogger()
    root.setLevel(level)

    # evita handlers duplicados quando create_app roda mais de uma vez
    for h in list(root.handlers):
        root.removeHandler(h)

    ctx_filter = ContextFilter(service=service, version=version, mask_secrets=mask_secrets)

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(_build_json_formatter() if json_console else _build_text_formatter())
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    if file_path:
        fh = logging.FileHandler(file_path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(_build_json_formatter())
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    for name in quiet_loggers or ():
        logging.getLogger(name).setLevel(logging.WARNING)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "scanpick")
