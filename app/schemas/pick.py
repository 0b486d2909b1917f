from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # JSON em camelCase (contrato do app de scanner); Python em snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShippingAddress(_CamelModel):
    city: str | None = None
    province: str | None = None
    country: str | None = None
    zip: str | None = None


class PickShippingAddress(ShippingAddress):
    address1: str | None = None


class DraftSummary(_CamelModel):
    id: str = Field(..., description="GID do draft order (gid://shopify/DraftOrder/...)")
    created_at: str | None = None
    email: str | None = None
    shipping: ShippingAddress | None = None
    total_lines_hint: int = Field(
        0, description="Soma das quantidades dos line items amostrados (apenas o primeiro item do draft)"
    )


class DraftListResponse(_CamelModel):
    items: list[DraftSummary]


class PickLine(_CamelModel):
    line_item_id: str
    variant_id: str | None = None
    title: str = "Unknown"
    sku: str | None = None
    barcode: str | None = None
    qty: int
    thumb: str | None = Field(None, description="URL da imagem da variante (originalSrc)")


class PickJob(_CamelModel):
    draft_id: str
    shipping_address: PickShippingAddress | None = None
    lines: list[PickLine] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "draftId": "gid://shopify/DraftOrder/1234567890",
                "shippingAddress": {
                    "address1": "Rua das Flores, 100",
                    "city": "Curitiba",
                    "province": "Paraná",
                    "country": "Brazil",
                    "zip": "80000-000",
                },
                "lines": [
                    {
                        "lineItemId": "gid://shopify/DraftOrderLineItem/1",
                        "variantId": "gid://shopify/ProductVariant/42",
                        "title": "Camisa Azul",
                        "sku": "CAM-AZ-002",
                        "barcode": "7890000000001",
                        "qty": 2,
                        "thumb": None,
                    }
                ],
            }
        }
    )


class CompleteDraftRequest(_CamelModel):
    draft_id: str | int | None = Field(None, description="ID numérico ou GID do draft order")
    payment_pending: bool | None = True


class OrderRef(BaseModel):
    id: str
    name: str | None = None


class CompleteDraftResponse(BaseModel):
    order: OrderRef | None = None


class UserErrorsResponse(BaseModel):
    errors: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    error: str
