# app/common/errors.py
from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Erro base da aplicação.

    Carrega um ``code`` estável para logs, a causa original, se vale retry
    (informativo: o proxy não faz retry) e o status HTTP usado pelo handler
    global em ``app.main``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: str = "APP_ERROR",
        cause: BaseException | None = None,
        retryable: bool = False,
        data: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause
        self.retryable = retryable
        self.data = data or {}
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class ClientInputError(AppError):
    status_code = 400

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("code", "CLIENT_INPUT")
        super().__init__(message, **kwargs)


class ResourceNotFound(AppError):
    status_code = 404

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("code", "NOT_FOUND")
        super().__init__(message, **kwargs)


class UserErrorsReported(ClientInputError):
    """Erros de validação por campo devolvidos pela Shopify (``userErrors``)."""

    def __init__(self, user_errors: list[dict[str, Any]], **kwargs: Any) -> None:
        kwargs.setdefault("code", "USER_ERRORS")
        super().__init__("upstream reported user errors", data={"userErrors": user_errors}, **kwargs)
        self.user_errors = user_errors

    def to_body(self) -> dict[str, Any]:
        # repassa a lista como veio
        return {"errors": self.user_errors}


class UpstreamError(AppError):
    status_code = 500


class UpstreamTransportError(UpstreamError):
    """Rede, timeout, status não-2xx ou corpo não-JSON ao chamar a Shopify."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("code", "UPSTREAM_TRANSPORT")
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class UpstreamGraphQLError(UpstreamError):
    """Resposta 2xx com lista ``errors`` no topo do payload GraphQL."""

    def __init__(self, errors: list[Any], **kwargs: Any) -> None:
        kwargs.setdefault("code", "UPSTREAM_GRAPHQL")
        super().__init__("GraphQL errors", data={"errors": errors}, **kwargs)
        self.errors = errors
