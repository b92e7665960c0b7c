"""FastAPI routes for the Marketplace domain — shops, products, cart and orders."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.analytics.aggregator import list_orders, summarize
from marketplace.api.dependencies import (
    authorize_shop,
    current_identity,
    default_page_size,
    require_customer,
    require_shop_owner,
)
from marketplace.api.schemas import (
    AddProductRequest,
    CartResponse,
    CheckoutResponse,
    OrderListResponse,
    OrderResponse,
    PaginationEnvelope,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    RegisterShopRequest,
    ShopIdResponse,
    ShopOrdersResponse,
    StatusResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpsertCartItemRequest,
)
from marketplace.cart.items import ClearCart, RemoveCartItem, UpsertCartItem
from marketplace.cart.queries import cart_details, get_cart
from marketplace.catalogue import store
from marketplace.catalogue.listing import AddProduct, DeactivateProduct, UpdateProductDetails
from marketplace.catalogue.registration import RegisterShop
from marketplace.identity.model import Identity
from marketplace.order.checkout import Checkout
from marketplace.order.order import Order
from marketplace.order.queries import customer_orders, order_details, visible_order
from marketplace.order.status import CancelOrder, UpdateOrderStatus


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        shop_id=str(product.shop_id),
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock,
        image_url=product.image_url,
        sku=product.sku,
        category=product.category,
        active=product.active,
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(**order_details(order))


def _cart_response(customer_id: str) -> CartResponse:
    return CartResponse(**cart_details(get_cart(customer_id)))


def _page_args(page, limit):
    return page, limit if limit is not None else default_page_size()


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["shops"])


@shop_router.post("", status_code=201, response_model=ShopIdResponse)
async def register_shop(body: RegisterShopRequest) -> ShopIdResponse:
    command = RegisterShop(
        name=body.name,
        address=body.address,
        license_id=body.license_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShopIdResponse(shop_id=result)


@shop_router.get("/{shop_id}/products", response_model=ProductListResponse)
async def list_shop_products(
    shop_id: str,
    page: int | None = Query(None),
    limit: int | None = Query(None),
) -> ProductListResponse:
    page, limit = _page_args(page, limit)
    result = store.list_by_shop(shop_id, page=page, page_size=limit)
    return ProductListResponse(
        data=[_product_response(p) for p in result.items],
        pagination=PaginationEnvelope(**result.envelope()),
    )


@shop_router.post("/{shop_id}/products", status_code=201, response_model=ProductIdResponse)
async def add_product(
    shop_id: str,
    body: AddProductRequest,
    owner: Identity = Depends(require_shop_owner),
) -> ProductIdResponse:
    command = AddProduct(
        actor_id=owner.id,
        actor_role=owner.role.value,
        shop_id=shop_id,
        name=body.name,
        price=body.price,
        stock=body.stock,
        description=body.description,
        image_url=body.image_url,
        sku=body.sku,
        category=body.category,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@shop_router.get("/{shop_id}/orders", response_model=ShopOrdersResponse)
async def list_shop_orders(
    shop_id: str,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    owner: Identity = Depends(require_shop_owner),
) -> ShopOrdersResponse:
    """Order history of a shop with its sales rollup."""
    authorize_shop(owner, shop_id)
    page, limit = _page_args(page, limit)

    result = list_orders(shop_id, page=page, page_size=limit)
    return ShopOrdersResponse(
        data=[_order_response(o) for o in result.items],
        analytics=summarize(shop_id).to_dict(),
        pagination=PaginationEnvelope(**result.envelope()),
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(store.get_product(product_id))


@product_router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    owner: Identity = Depends(require_shop_owner),
) -> ProductResponse:
    command = UpdateProductDetails(
        actor_id=owner.id,
        actor_role=owner.role.value,
        product_id=product_id,
        name=body.name,
        price=body.price,
        stock=body.stock,
        description=body.description,
        image_url=body.image_url,
        sku=body.sku,
        category=body.category,
    )
    current_domain.process(command, asynchronous=False)
    return _product_response(store.get_product(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def deactivate_product(
    product_id: str,
    owner: Identity = Depends(require_shop_owner),
) -> StatusResponse:
    command = DeactivateProduct(
        actor_id=owner.id,
        actor_role=owner.role.value,
        product_id=product_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(customer: Identity = Depends(require_customer)) -> CartResponse:
    return _cart_response(customer.id)


@cart_router.patch("", response_model=CartResponse)
async def upsert_cart_item(
    body: UpsertCartItemRequest,
    customer: Identity = Depends(require_customer),
) -> CartResponse:
    command = UpsertCartItem(
        customer_id=customer.id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(customer.id)


@cart_router.delete("/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    customer: Identity = Depends(require_customer),
) -> CartResponse:
    command = RemoveCartItem(customer_id=customer.id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return _cart_response(customer.id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(customer: Identity = Depends(require_customer)) -> CartResponse:
    command = ClearCart(customer_id=customer.id)
    current_domain.process(command, asynchronous=False)
    return _cart_response(customer.id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=CheckoutResponse)
async def place_order(
    body: PlaceOrderRequest,
    customer: Identity = Depends(require_customer),
) -> CheckoutResponse:
    command = Checkout(customer_id=customer.id, expected_total=body.total)
    order_ids = current_domain.process(command, asynchronous=False)

    repo = current_domain.repository_for(Order)
    orders = [repo.get(order_id) for order_id in order_ids]
    return CheckoutResponse(
        orders=[_order_response(o) for o in orders],
        total=round(sum(o.total for o in orders), 2),
    )


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    customer: Identity = Depends(require_customer),
) -> OrderListResponse:
    page, limit = _page_args(page, limit)
    result = customer_orders(customer.id, page=page, page_size=limit)
    return OrderListResponse(
        data=[_order_response(o) for o in result.items],
        pagination=PaginationEnvelope(**result.envelope()),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, identity: Identity = Depends(current_identity)) -> OrderResponse:
    return _order_response(visible_order(identity, order_id))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    owner: Identity = Depends(require_shop_owner),
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=owner.id,
        actor_role=owner.role.value,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(visible_order(owner, order_id))


@order_router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    customer: Identity = Depends(require_customer),
) -> OrderResponse:
    command = CancelOrder(
        order_id=order_id,
        actor_id=customer.id,
        actor_role=customer.role.value,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(visible_order(customer, order_id))
