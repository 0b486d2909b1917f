from __future__ import annotations

from functools import lru_cache
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from .errors import UpstreamTransportError
from .logging_setup import get_correlation_id, get_logger

# prazo único para a chamada upstream (segundos)
DEFAULT_TIMEOUT: float = 15.0

logger = get_logger("http")


def _build_session() -> requests.Session:
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": "scan-pick-backend/HTTPClient",
            "Accept": "application/json",
        }
    )
    # sem retry: uma falha de transporte vira 500 para o chamador
    adapter = HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=10)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


@lru_cache(maxsize=1)
def _get_cached_session() -> requests.Session:
    return _build_session()


def get_session(session: requests.Session | None = None) -> requests.Session:
    return session or _get_cached_session()


def _request_with_handling(method: str, url: str, **kwargs: Any) -> requests.Response:
    timeout = kwargs.pop("timeout", DEFAULT_TIMEOUT)
    session: requests.Session = kwargs.pop("session", None) or get_session()

    headers = kwargs.pop("headers", {}) or {}
    headers = {**session.headers, **headers}
    headers.setdefault("X-Correlation-ID", get_correlation_id())
    kwargs["headers"] = headers

    try:
        res = session.request(method, url, timeout=timeout, **kwargs)
        res.raise_for_status()
        logger.info(
            "HTTP %s OK",
            method,
            extra={"url": url, "status": res.status_code, "cid": get_correlation_id()},
        )
        return res

    except requests.Timeout as e:
        logger.error("HTTP %s timeout", method, extra={"url": url, "timeout_s": timeout})
        raise UpstreamTransportError(
            f"Timeout ao chamar {url}",
            code="HTTP_TIMEOUT",
            cause=e,
            data={"url": url},
        ) from e

    except requests.HTTPError as e:
        status = getattr(e.response, "status_code", None)
        text = getattr(e.response, "text", None)
        logger.error(
            "HTTP %s error",
            method,
            extra={"url": url, "status": status, "body": text, "cid": get_correlation_id()},
        )
        raise UpstreamTransportError(
            f"Falha HTTP {status} ao chamar {url}",
            code="HTTP_ERROR",
            cause=e,
            data={"url": url, "status": status, "text": text},
        ) from e

    except requests.RequestException as e:
        logger.error(
            "HTTP %s request exception: %s",
            method,
            e,
            extra={"url": url, "cid": get_correlation_id()},
        )
        raise UpstreamTransportError(
            f"Erro de rede ao chamar {url}",
            code="HTTP_REQUEST_ERROR",
            cause=e,
            data={"url": url},
        ) from e


def http_post(url: str, **kwargs: Any) -> requests.Response:
    return _request_with_handling("POST", url, **kwargs)
