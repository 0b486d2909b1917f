import logging

from app.common.logging_setup import ContextFilter


def _record(msg, *args, **extra):
    rec = logging.makeLogRecord({"name": "teste", "levelno": logging.ERROR, "msg": msg, "args": args})
    for chave, valor in extra.items():
        setattr(rec, chave, valor)
    return rec


def test_masks_token_in_rendered_args():
    rec = _record("Shopify top-level errors: %s", '{"message": "bad token shpat_abcdef123456"}')

    ContextFilter(service="s", version="v").filter(rec)

    assert rec.getMessage() == 'Shopify top-level errors: {"message": "bad token shpat_***"}'
    assert "abcdef123456" not in rec.getMessage()


def test_masks_token_in_string_extras():
    rec = _record("HTTP %s error", "POST", body="X-Shopify-Access-Token: shpat_zzz999888777", status=401)

    ContextFilter(service="s", version="v").filter(rec)

    assert "zzz999888777" not in rec.body
    assert rec.status == 401
    assert rec.getMessage() == "HTTP POST error"


def test_mask_can_be_disabled():
    rec = _record("token=%s", "abcdef123456")

    ContextFilter(service="s", version="v", mask_secrets=False).filter(rec)

    assert rec.getMessage() == "token=abcdef123456"
