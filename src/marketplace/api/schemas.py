"""Pydantic request/response schemas for the Marketplace API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# --- Shared ---


class StatusResponse(BaseModel):
    status: str = "ok"


class PaginationEnvelope(BaseModel):
    currentPage: int
    totalPages: int
    totalItems: int
    itemsPerPage: int


# --- Shops & Products ---


class RegisterShopRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Corner Grocers",
                    "address": "12 Market Street, Springfield",
                    "license_id": "LIC-2024-000417",
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    address: str = Field(..., max_length=255)
    license_id: str = Field(..., min_length=12, max_length=64)


class ShopIdResponse(BaseModel):
    shop_id: str


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Basmati Rice 5kg",
                    "description": "Aged long-grain basmati rice.",
                    "price": 12.5,
                    "stock": 40,
                    "image_url": "https://cdn.example.com/rice.jpg",
                    "sku": "RICE-BAS-5KG",
                    "category": "groceries",
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    price: float = Field(..., ge=0.01)
    stock: int = Field(0, ge=0)
    description: str | None = Field(None, max_length=500)
    image_url: str | None = Field(None, max_length=500)
    sku: str | None = Field(None, max_length=20)
    category: str | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0.01)
    stock: int | None = Field(None, ge=0)
    description: str | None = Field(None, max_length=500)
    image_url: str | None = Field(None, max_length=500)
    sku: str | None = Field(None, max_length=20)
    category: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    shop_id: str
    name: str
    description: str | None = None
    price: float
    stock: int
    image_url: str | None = None
    sku: str | None = None
    category: str
    active: bool


class ProductListResponse(BaseModel):
    data: list[ProductResponse]
    pagination: PaginationEnvelope


# --- Cart ---


class UpsertCartItemRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"productId": "2f0c6a5e-9d1b-4c8e-a3f7-61b2c9d0e4aa", "quantity": 3}]},
    )

    product_id: str = Field(..., alias="productId", min_length=1)
    quantity: StrictInt


class ProductSummary(BaseModel):
    id: str
    name: str
    price: float
    image_url: str | None = None
    shop_id: str


class CartLineResponse(BaseModel):
    product_id: str
    product: ProductSummary | None = None
    quantity: int
    available: bool


class CartResponse(BaseModel):
    customer_id: str
    items: list[CartLineResponse] = []
    item_count: int = 0
    subtotal: float = 0.0
    updated_at: datetime | None = None


# --- Orders ---


class OrderItemHint(BaseModel):
    product_id: str = Field(..., alias="productId")
    quantity: int | None = None
    price: float | None = None

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderRequest(BaseModel):
    """Checkout request. Items are advisory; the server prices the cart itself."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"productId": "2f0c6a5e-9d1b-4c8e-a3f7-61b2c9d0e4aa", "quantity": 2, "price": 10.0}],
                    "total": 20.0,
                }
            ]
        }
    }

    items: list[OrderItemHint] = []
    total: float | None = Field(None, ge=0)


class OrderLineResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    price: float
    subtotal: float


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    shop_id: str
    status: str
    total: float
    lines: list[OrderLineResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CheckoutResponse(BaseModel):
    orders: list[OrderResponse]
    total: float


class OrderListResponse(BaseModel):
    data: list[OrderResponse]
    pagination: PaginationEnvelope


class UpdateOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "processing"}]}}

    status: str = Field(..., max_length=20)


class AnalyticsResponse(BaseModel):
    totalSales: float
    completedOrderCount: int


class ShopOrdersResponse(BaseModel):
    data: list[OrderResponse]
    analytics: AnalyticsResponse
    pagination: PaginationEnvelope
