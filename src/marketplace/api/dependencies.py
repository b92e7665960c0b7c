"""FastAPI dependencies that turn the Authorization header into an Identity."""

from fastapi import Depends, Header
from protean.utils.globals import current_domain

from marketplace.identity import get_resolver
from marketplace.identity.model import AuthenticationError, AuthorizationError, Identity, Role
from marketplace.pagination import DEFAULT_PAGE_SIZE
from marketplace.utils.logging import add_context


def current_identity(authorization: str | None = Header(default=None)) -> Identity:
    if not authorization:
        raise AuthenticationError("No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be 'Bearer <token>'")

    identity = get_resolver().resolve(token.strip())
    add_context(identity_id=identity.id, role=identity.role.value)
    return identity


def require_customer(identity: Identity = Depends(current_identity)) -> Identity:
    if identity.role != Role.CUSTOMER:
        raise AuthorizationError("Only customers can use the cart and place orders")
    return identity


def require_shop_owner(identity: Identity = Depends(current_identity)) -> Identity:
    if identity.role != Role.SHOP_OWNER:
        raise AuthorizationError("Shop owner access required")
    return identity


def authorize_shop(identity: Identity, shop_id: str) -> None:
    if not identity.owns_shop(shop_id):
        raise AuthorizationError("You can only access your own shop")


def default_page_size() -> int:
    return int(current_domain.config["custom"].get("default_page_size", DEFAULT_PAGE_SIZE))
