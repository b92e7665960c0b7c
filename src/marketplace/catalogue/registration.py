"""Shop registration — command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.catalogue.shop import Shop
from marketplace.domain import logger, marketplace
from marketplace.errors import ConflictError


@marketplace.command(part_of="Shop")
class RegisterShop:
    name: String(required=True, max_length=100)
    address: String(required=True, max_length=255)
    license_id: String(required=True, max_length=64)


@marketplace.command_handler(part_of=Shop)
class RegisterShopHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        repo = current_domain.repository_for(Shop)
        license_id = (command.license_id or "").strip()
        if repo.find_by_license_id(license_id) is not None:
            raise ConflictError(f"A shop with license id {license_id} is already registered")

        shop = Shop.register(
            name=command.name,
            address=command.address,
            license_id=license_id,
        )
        repo.add(shop)
        logger.info("shop_registered", shop_id=str(shop.id))
        return str(shop.id)
