"""Product aggregate root.

Every product belongs to exactly one shop through ``shop_id``. Carts store
only product references and read price and availability fresh from here;
orders copy the price at checkout and never look back.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from marketplace.catalogue.events import ProductAdded, ProductDeactivated, ProductDetailsUpdated
from marketplace.domain import marketplace

IMAGE_URL_PATTERN = re.compile(r"^(https?://).+\.(jpg|jpeg|png|webp)$", re.IGNORECASE)
SKU_PATTERN = re.compile(r"^[A-Z0-9-]{3,20}$")

_EDITABLE_FIELDS = ("name", "description", "price", "stock", "image_url", "sku", "category")


class Category(Enum):
    GROCERIES = "groceries"
    ESSENTIALS = "essentials"
    HYGIENE = "hygiene"
    MEDICAL = "medical"
    OTHER = "other"


def normalize_sku(sku):
    if sku is None:
        return None
    sku = sku.strip().upper()
    return sku or None


@marketplace.aggregate
class Product:
    shop_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    description: String(max_length=500)
    price: Float(required=True, min_value=0.01)
    stock: Integer(min_value=0, default=0)
    image_url: String(max_length=500)
    sku: String(max_length=20)
    category: String(choices=Category, default=Category.OTHER.value)
    active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def image_url_must_point_to_an_image(self):
        if self.image_url and not IMAGE_URL_PATTERN.match(self.image_url):
            raise ValidationError({"image_url": ["Image URL must be an http(s) link to a jpg, jpeg, png or webp file"]})

    @invariant.post
    def sku_must_be_well_formed(self):
        if self.sku and not SKU_PATTERN.match(self.sku):
            raise ValidationError({"sku": ["SKU must be 3-20 upper-case letters, digits or hyphens"]})

    @invariant.post
    def name_must_not_be_blank(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": ["Product name cannot be blank"]})

    @classmethod
    def create(
        cls,
        shop_id,
        name,
        price,
        stock=0,
        description=None,
        image_url=None,
        sku=None,
        category=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            shop_id=shop_id,
            name=name,
            price=price,
            stock=stock if stock is not None else 0,
            description=description,
            image_url=image_url,
            sku=normalize_sku(sku),
            category=category or Category.OTHER.value,
            active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                shop_id=str(product.shop_id),
                name=product.name,
                price=product.price,
                stock=product.stock,
                category=product.category,
                added_at=now,
            )
        )
        return product

    def update_details(self, **changes):
        """Apply the given field changes. ``None`` values are ignored."""
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        if "sku" in changes:
            changes["sku"] = normalize_sku(changes["sku"])

        changed = []
        with atomic_change(self):
            for field in _EDITABLE_FIELDS:
                value = changes.get(field)
                if value is not None and getattr(self, field) != value:
                    setattr(self, field, value)
                    changed.append(field)

        if not changed:
            return

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                shop_id=str(self.shop_id),
                changed_fields=",".join(changed),
                price=self.price,
                stock=self.stock,
                updated_at=now,
            )
        )

    def deactivate(self):
        """Withdraw the product. Deactivating twice is a no-op."""
        if not self.active:
            return

        now = datetime.now(UTC)
        self.active = False
        self.updated_at = now
        self.raise_(
            ProductDeactivated(
                product_id=str(self.id),
                shop_id=str(self.shop_id),
                deactivated_at=now,
            )
        )

    def summary(self) -> dict:
        """Compact view used when joining products into carts and orders."""
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
            "shop_id": str(self.shop_id),
        }
