"""Shop aggregate root.

A shop is the tenant that owns products and fulfils orders. The shop's
product list is never stored here; it is always derived from the products
that point at the shop (see ``ProductRepository.list_by_shop``).
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from marketplace.catalogue.events import ShopRegistered
from marketplace.domain import marketplace
from marketplace.identity.model import validate_license_id


@marketplace.aggregate
class Shop:
    name: String(required=True, max_length=100)
    address: String(required=True, max_length=255)
    license_id: String(required=True, max_length=64, unique=True)
    registered_at: DateTime()

    @invariant.post
    def name_and_address_must_not_be_blank(self):
        errors = {}
        if not (self.name or "").strip():
            errors["name"] = ["Shop name cannot be blank"]
        if not (self.address or "").strip():
            errors["address"] = ["Shop address cannot be blank"]
        if errors:
            raise ValidationError(errors)

    @classmethod
    def register(cls, name, address, license_id):
        license_id = validate_license_id(license_id)
        now = datetime.now(UTC)

        shop = cls(
            name=name.strip() if name else name,
            address=address.strip() if address else address,
            license_id=license_id,
            registered_at=now,
        )
        shop.raise_(
            ShopRegistered(
                shop_id=str(shop.id),
                name=shop.name,
                license_id=shop.license_id,
                registered_at=now,
            )
        )
        return shop
