from unittest.mock import patch

import pytest

from app.common.errors import ClientInputError, ResourceNotFound, UserErrorsReported
from app.services import pick
from app.services.pick import (
    buscar_pick_job,
    concluir_draft,
    listar_drafts,
    montar_filtro_drafts,
    normalizar_first,
)


@pytest.mark.parametrize(
    ("since", "until", "esperado"),
    [
        (None, None, "status:open"),
        ("2025-08-01", None, "created_at:>=2025-08-01 status:open"),
        (None, "2025-08-31", "created_at:<=2025-08-31 status:open"),
        ("2025-08-01", "2025-08-31", "created_at:>=2025-08-01 created_at:<=2025-08-31 status:open"),
        ("", "", "status:open"),
    ],
)
def test_montar_filtro_drafts(since, until, esperado):
    assert montar_filtro_drafts(since, until) == esperado


@pytest.mark.parametrize(
    ("valor", "esperado"),
    [
        (None, 25),
        ("", 25),
        ("abc", 25),
        ("0", 25),
        ("-3", 25),
        ("50", 50),
        (" 10 ", 10),
        ("12.7", 12),
        ("250", 250),
        ("251", 250),
        ("100000", 250),
        (80, 80),
        ("nan", 25),
        ("1_0", 25),
        ("inf", 25),
        ("1e1", 10),
    ],
)
def test_normalizar_first(valor, esperado):
    assert normalizar_first(valor) == esperado


def _draft_edge(id_, qtys, ship=None, email="cliente@example.com"):
    return {
        "node": {
            "id": id_,
            "createdAt": "2025-08-10T12:00:00Z",
            "updatedAt": "2025-08-11T12:00:00Z",
            "email": email,
            "shippingAddress": ship,
            "lineItems": {"edges": [{"node": {"quantity": q}} for q in qtys]},
        }
    }


def test_listar_drafts_maps_edges_in_order():
    ship = {"city": "Curitiba", "province": "PR", "country": "Brazil", "zip": "80000-000"}
    data = {
        "draftOrders": {
            "edges": [
                _draft_edge("gid://shopify/DraftOrder/2", [3], ship=ship),
                _draft_edge("gid://shopify/DraftOrder/1", [], email=None),
            ]
        }
    }
    with patch.object(pick, "executar_graphql", return_value=data) as gql:
        out = listar_drafts(since="2025-08-01", first="999")

    query, variables = gql.call_args.args
    assert query == pick.LIST_DRAFTS
    assert variables == {"first": 250, "query": "created_at:>=2025-08-01 status:open"}

    assert [i.id for i in out.items] == ["gid://shopify/DraftOrder/2", "gid://shopify/DraftOrder/1"]
    assert out.items[0].total_lines_hint == 3
    assert out.items[0].shipping is not None and out.items[0].shipping.city == "Curitiba"
    assert out.items[1].total_lines_hint == 0
    assert out.items[1].shipping is None
    assert out.items[1].email is None


def test_listar_drafts_empty_payload():
    with patch.object(pick, "executar_graphql", return_value={}):
        assert listar_drafts().items == []


def test_buscar_pick_job_normalizes_id_and_maps_lines():
    data = {
        "draftOrder": {
            "id": "gid://shopify/DraftOrder/77",
            "shippingAddress": {
                "address1": "Rua A, 1",
                "city": "Curitiba",
                "province": "PR",
                "country": "Brazil",
                "zip": "80000-000",
            },
            "lineItems": {
                "edges": [
                    {
                        "node": {
                            "id": "gid://shopify/DraftOrderLineItem/1",
                            "quantity": 2,
                            "variant": {
                                "id": "gid://shopify/ProductVariant/10",
                                "sku": "CAM-AZ-002",
                                "barcode": "789",
                                "title": "GG",
                                "image": {"originalSrc": "https://cdn.example/img.png"},
                                "product": {"title": "Camisa Azul"},
                            },
                        }
                    },
                    {"node": {"id": "gid://shopify/DraftOrderLineItem/2", "quantity": 1, "variant": None}},
                ]
            },
        }
    }
    with patch.object(pick, "executar_graphql", return_value=data) as gql:
        job = buscar_pick_job("77")

    assert gql.call_args.args[1] == {"id": "gid://shopify/DraftOrder/77"}
    assert job.draft_id == "gid://shopify/DraftOrder/77"
    assert job.shipping_address is not None and job.shipping_address.address1 == "Rua A, 1"

    primeira, custom = job.lines
    assert primeira.title == "Camisa Azul"
    assert primeira.sku == "CAM-AZ-002"
    assert primeira.qty == 2
    assert primeira.thumb == "https://cdn.example/img.png"
    # line item sem variante (custom item)
    assert custom.title == "Unknown"
    assert custom.variant_id is None
    assert custom.sku is None
    assert custom.barcode is None
    assert custom.thumb is None


def test_buscar_pick_job_not_found():
    with patch.object(pick, "executar_graphql", return_value={"draftOrder": None}):
        with pytest.raises(ResourceNotFound):
            buscar_pick_job("gid://shopify/DraftOrder/404")


@pytest.mark.parametrize("draft_id", [None, ""])
def test_concluir_draft_requires_id_before_upstream(draft_id):
    with patch.object(pick, "executar_graphql") as gql:
        with pytest.raises(ClientInputError, match="draftId required"):
            concluir_draft(draft_id)
    gql.assert_not_called()


def test_concluir_draft_user_errors():
    user_errors = [{"field": ["id"], "message": "Draft order has already been completed"}]
    data = {"draftOrderComplete": {"order": None, "userErrors": user_errors}}
    with patch.object(pick, "executar_graphql", return_value=data):
        with pytest.raises(UserErrorsReported) as exc:
            concluir_draft("5")
    assert exc.value.to_body() == {"errors": user_errors}


def test_concluir_draft_ok():
    data = {"draftOrderComplete": {"order": {"id": "gid://shopify/Order/9", "name": "#1009"}, "userErrors": []}}
    with patch.object(pick, "executar_graphql", return_value=data) as gql:
        out = concluir_draft(5, payment_pending=False)

    assert gql.call_args.args[1] == {"id": "gid://shopify/DraftOrder/5", "paymentPending": False}
    assert out.order is not None
    assert out.order.name == "#1009"
