"""Product listing management — commands and handler.

Only the owner of a shop may add, edit or withdraw its products.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.store import get_shop
from marketplace.domain import logger, marketplace
from marketplace.errors import ConflictError
from marketplace.identity.model import AuthorizationError, identity_for


@marketplace.command(part_of="Product")
class AddProduct:
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    shop_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    price: Float(required=True)
    stock: Integer(default=0)
    description: String(max_length=500)
    image_url: String(max_length=500)
    sku: String(max_length=20)
    category: String(max_length=20)


@marketplace.command(part_of="Product")
class UpdateProductDetails:
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    product_id: Identifier(required=True)
    name: String(max_length=100)
    price: Float()
    stock: Integer()
    description: String(max_length=500)
    image_url: String(max_length=500)
    sku: String(max_length=20)
    category: String(max_length=20)


@marketplace.command(part_of="Product")
class DeactivateProduct:
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    product_id: Identifier(required=True)


def _assert_owner(command, shop_id):
    actor = identity_for(command.actor_id, command.actor_role)
    if not actor.owns_shop(shop_id):
        raise AuthorizationError("Only the shop owner can manage this shop's products")


def _assert_sku_available(repo, sku, product_id=None):
    existing = repo.find_by_sku(sku)
    if existing is not None and str(existing.id) != str(product_id):
        raise ConflictError(f"SKU {sku} is already in use")


def _load_owned_product(command):
    repo = current_domain.repository_for(Product)
    product = repo.get_or_none(command.product_id)
    if product is None:
        raise ObjectNotFoundError(f"Product {command.product_id} not found")
    _assert_owner(command, product.shop_id)
    return repo, product


@marketplace.command_handler(part_of=Product)
class ProductListingHandler:
    @handle(AddProduct)
    def add_product(self, command):
        get_shop(command.shop_id)
        _assert_owner(command, command.shop_id)

        repo = current_domain.repository_for(Product)
        product = Product.create(
            shop_id=command.shop_id,
            name=command.name,
            price=command.price,
            stock=command.stock,
            description=command.description,
            image_url=command.image_url,
            sku=command.sku,
            category=command.category,
        )
        if product.sku:
            _assert_sku_available(repo, product.sku)

        repo.add(product)
        logger.info("product_added", product_id=str(product.id), shop_id=str(product.shop_id))
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo, product = _load_owned_product(command)

        product.update_details(
            name=command.name,
            price=command.price,
            stock=command.stock,
            description=command.description,
            image_url=command.image_url,
            sku=command.sku,
            category=command.category,
        )
        if command.sku and product.sku:
            _assert_sku_available(repo, product.sku, product_id=product.id)

        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo, product = _load_owned_product(command)
        product.deactivate()
        repo.add(product)
        logger.info("product_deactivated", product_id=str(product.id))
