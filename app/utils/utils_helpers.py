from __future__ import annotations

GID_PREFIX = "gid://"


def to_gid(tipo: str, id_or_gid: str | int) -> str:
    """
    Normaliza um id para o formato global da Shopify.

    ``to_gid("DraftOrder", 123)`` -> ``"gid://shopify/DraftOrder/123"``; um valor
    que já começa com ``gid://`` volta inalterado.
    """
    s = str(id_or_gid)
    if s.startswith(GID_PREFIX):
        return s
    return f"{GID_PREFIX}shopify/{tipo}/{s}"


def id_numerico(valor: str | int) -> str:
    if isinstance(valor, int):
        return str(valor)
    s = str(valor).strip()
    return s.split("/")[-1] if s.startswith(GID_PREFIX) else s
