"""Tests for the Shop aggregate."""

import pytest
from marketplace.catalogue.events import ShopRegistered
from marketplace.catalogue.shop import Shop
from protean.exceptions import ValidationError


class TestRegisterShop:
    def test_register(self):
        shop = Shop.register(name="Corner Store", address="12 Main Road", license_id="LIC-0000-0001")
        assert shop.name == "Corner Store"
        assert shop.license_id == "LIC-0000-0001"
        assert shop.registered_at is not None

    def test_values_are_trimmed(self):
        shop = Shop.register(name="  Corner Store ", address=" 12 Main Road ", license_id=" LIC-0000-0001 ")
        assert shop.name == "Corner Store"
        assert shop.address == "12 Main Road"
        assert shop.license_id == "LIC-0000-0001"

    def test_short_license_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Shop.register(name="Corner Store", address="12 Main Road", license_id="LIC-1")
        assert "license_id" in exc.value.messages

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            Shop.register(name="   ", address="12 Main Road", license_id="LIC-0000-0001")

    def test_missing_address_is_rejected(self):
        with pytest.raises(ValidationError):
            Shop.register(name="Corner Store", address=None, license_id="LIC-0000-0001")

    def test_raises_shop_registered(self):
        shop = Shop.register(name="Corner Store", address="12 Main Road", license_id="LIC-0000-0001")
        events = [e for e in shop._events if isinstance(e, ShopRegistered)]
        assert len(events) == 1
        assert events[0].shop_id == str(shop.id)
