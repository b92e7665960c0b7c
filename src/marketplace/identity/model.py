"""Caller identities as the marketplace core sees them.

An identity is resolved once at the HTTP boundary and handed to the domain as
an opaque value. The two concrete shapes share the ``Identity`` capability
(``id`` and ``role``); the core only ever asks for those, or asks whether an
identity owns a given shop.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ProteanException, ValidationError

RATION_CARD_PATTERN = re.compile(r"^[A-Z0-9]{12}$")
LICENSE_ID_MIN_LENGTH = 12


class Role(Enum):
    CUSTOMER = "customer"
    SHOP_OWNER = "shop_owner"


class AuthenticationError(ProteanException):
    """The caller presented no identity, or one that does not verify (401)."""


class AuthorizationError(ProteanException):
    """The caller is known but may not perform the operation (403)."""


def validate_ration_card_id(value: str) -> str:
    if not value or not RATION_CARD_PATTERN.match(value):
        raise ValidationError({"ration_card_id": ["Ration card id must be 12 upper-case letters or digits"]})
    return value


def validate_license_id(value: str) -> str:
    if not value or len(value.strip()) < LICENSE_ID_MIN_LENGTH:
        raise ValidationError({"license_id": [f"License id must be at least {LICENSE_ID_MIN_LENGTH} characters"]})
    return value.strip()


class Identity(ABC):
    """Common capability of every authenticated caller."""

    id: str

    @property
    @abstractmethod
    def role(self) -> Role: ...

    def owns_shop(self, shop_id: str) -> bool:
        return False


@dataclass(frozen=True)
class Customer(Identity):
    """A household account that keeps a cart and places orders."""

    id: str
    ration_card_id: str | None = None

    def __post_init__(self):
        if self.ration_card_id is not None:
            validate_ration_card_id(self.ration_card_id)

    @property
    def role(self) -> Role:
        return Role.CUSTOMER


@dataclass(frozen=True)
class ShopOwner(Identity):
    """The operator of a shop. The owner's identity id is the shop id."""

    id: str
    license_id: str | None = None

    def __post_init__(self):
        if self.license_id is not None:
            validate_license_id(self.license_id)

    @property
    def role(self) -> Role:
        return Role.SHOP_OWNER

    @property
    def shop_id(self) -> str:
        return self.id

    def owns_shop(self, shop_id: str) -> bool:
        return str(shop_id) == self.id


def identity_for(identity_id: str, role: str, external_id: str | None = None) -> Identity:
    """Build the concrete identity for a ``(id, role)`` pair."""
    try:
        resolved_role = Role(role)
    except ValueError as exc:
        raise AuthenticationError(f"Unknown role: {role}") from exc

    if not identity_id:
        raise AuthenticationError("Identity id is missing")

    if resolved_role == Role.SHOP_OWNER:
        return ShopOwner(id=str(identity_id), license_id=external_id)
    return Customer(id=str(identity_id), ration_card_id=external_id)
