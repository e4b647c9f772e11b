"""Unit tests for entity invariants enforced on validation."""

import re
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from mongoengine import ValidationError

from storehub.models.mongodb.store_owner import MAX_LOGIN_ATTEMPTS, StoreOwner
from storehub.models.mongodb.tenant import Customer, Offer, Order, Product
from storehub.models.mongodb.tenant.customer import Address
from storehub.models.mongodb.tenant.product import Variant

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_variant(sku, price=100, stock=2):
    return Variant(name=sku, price=price, sku=sku, stock=stock)


def make_address(is_default):
    return Address(
        name="Asha", phone="9876543210", street="1 Main St", city="Pune", state="MH", zip_code="411001",
        is_default=is_default,
    )


def make_offer(**kwargs):
    values = {
        "title": "Diwali Sale",
        "type": "percentage",
        "value": 20,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=1),
    }
    values.update(kwargs)
    return Offer(**values)


class TestProduct:
    def test_variants_carry_price_and_stock(self):
        """Test that a product with variants has its own price and stock zeroed."""
        product = Product(
            name="Kurta", sku="k-1", price=500, original_price=900, stock=9, has_variants=True,
            variants=[make_variant("k-1-s", stock=3), make_variant("k-1-m", stock=4)],
        )

        product.validate()

        assert product.price == 0
        assert product.original_price is None
        assert product.stock == 0
        assert product.total_stock == 7

    def test_variants_required(self):
        """Test that has_variants without variants is invalid."""
        with pytest.raises(ValidationError):
            Product(name="Kurta", sku="k-1", has_variants=True).validate()

    def test_duplicate_variant_skus(self):
        """Test that variant SKUs are unique after upper-casing."""
        product = Product(
            name="Kurta", sku="k-1", has_variants=True,
            variants=[make_variant("k-1-s"), make_variant("K-1-S")],
        )

        with pytest.raises(ValidationError):
            product.validate()

    def test_original_price_must_exceed_price(self):
        """Test that a compare-at price at or below the price is rejected."""
        with pytest.raises(ValidationError):
            Product(name="Mug", sku="m-1", price=200, original_price=200).validate()

        Product(name="Mug", sku="m-1", price=200, original_price=250).validate()

    def test_stock_checks(self):
        """Test in-stock checks with tracking, backorders and inactive variants."""
        assert not Product(name="Mug", sku="m-1", stock=0).is_in_stock()
        assert Product(name="Mug", sku="m-1", stock=0, allow_backorders=True).is_in_stock()
        assert Product(name="Mug", sku="m-1", stock=0, track_quantity=False).is_in_stock()

        inactive = make_variant("m-1-s", stock=5)
        inactive.is_active = False
        product = Product(name="Mug", sku="m-1", has_variants=True, variants=[inactive, make_variant("m-1-m", stock=1)])

        assert product.total_stock == 1
        assert not product.is_in_stock(quantity=2)


class TestOrder:
    def test_order_number_is_generated(self):
        """Test that validation assigns an order number of the expected shape."""
        order = Order(customer=ObjectId(), subtotal=100, total=100)

        order.validate()

        assert re.match(r"^ORD-\d+-[A-Z0-9]{4}$", order.order_number)

    def test_existing_order_number_is_kept(self):
        """Test that an order number is never regenerated."""
        order = Order(customer=ObjectId(), subtotal=100, total=100, order_number="ORD-1-ABCD")

        order.validate()

        assert order.order_number == "ORD-1-ABCD"

    def test_delivered_orders_are_stamped(self):
        """Test that moving to delivered records the delivery time once."""
        order = Order(customer=ObjectId(), subtotal=100, total=100, status="delivered")

        order.validate()
        delivered_at = order.delivered_at
        order.validate()

        assert delivered_at is not None
        assert order.delivered_at == delivered_at

    def test_unknown_status_is_rejected(self):
        """Test that statuses outside the order lifecycle are invalid."""
        with pytest.raises(ValidationError):
            Order(customer=ObjectId(), subtotal=100, total=100, status="lost").validate()


class TestOffer:
    def test_end_must_follow_start(self):
        """Test that an offer ending before it starts is invalid."""
        with pytest.raises(ValidationError):
            make_offer(start_date=NOW, end_date=NOW - timedelta(hours=1)).validate()

    def test_percentage_is_capped(self):
        """Test that a percentage offer above 100 is invalid but a fixed one is not."""
        with pytest.raises(ValidationError):
            make_offer(value=120).validate()

        make_offer(type="fixed", value=120).validate()

    def test_code_is_upper_cased(self):
        """Test that offer codes are normalised."""
        offer = make_offer(code=" diwali20 ")

        offer.validate()

        assert offer.code == "DIWALI20"

    def test_is_valid(self):
        """Test the validity window, active flag and usage limit."""
        assert make_offer().is_valid(NOW)
        assert not make_offer().is_valid(NOW + timedelta(days=2))
        assert not make_offer(is_active=False).is_valid(NOW)
        assert not make_offer(usage_limit=10, used_count=10).is_valid(NOW)
        assert make_offer(usage_limit=10, used_count=9).is_valid(NOW)

    def test_is_valid_with_naive_dates(self):
        """Test that dates read back without a timezone compare as UTC."""
        offer = make_offer(
            start_date=(NOW - timedelta(days=1)).replace(tzinfo=None),
            end_date=(NOW + timedelta(days=1)).replace(tzinfo=None),
        )

        assert offer.is_valid(NOW)


class TestCustomer:
    def test_single_default_address(self):
        """Test that at most one address can be the default."""
        customer = Customer(name="Ravi", email="Ravi@Example.com", addresses=[make_address(True), make_address(True)])

        with pytest.raises(ValidationError):
            customer.validate()

    def test_email_is_normalised(self):
        """Test that customer emails are stored lower-cased."""
        customer = Customer(name="Ravi", email=" Ravi@Example.com ", addresses=[make_address(True), make_address(False)])

        customer.validate()

        assert customer.email == "ravi@example.com"


class TestStoreOwner:
    def make_owner(self):
        return StoreOwner(name="Asha", email="a@x.com", password="hashed", tenant_id="tenant_a")

    def test_lockout_after_repeated_failures(self):
        """Test that the account locks on the fifth failure and unlocks after the lock period."""
        owner = self.make_owner()

        for _ in range(MAX_LOGIN_ATTEMPTS - 1):
            owner.register_failed_login(NOW)
        assert not owner.is_locked(NOW)

        owner.register_failed_login(NOW)

        assert owner.is_locked(NOW + timedelta(minutes=29))
        assert not owner.is_locked(NOW + timedelta(minutes=31))

    def test_successful_login_resets_attempts(self):
        """Test that a successful login clears the failure count and lock."""
        owner = self.make_owner()
        for _ in range(MAX_LOGIN_ATTEMPTS):
            owner.register_failed_login(NOW)

        owner.register_successful_login(NOW)

        assert owner.login_attempts == 0
        assert owner.lock_until is None
        assert owner.last_login_at == NOW

    def test_store_id_must_be_six_alphanumerics(self):
        """Test that store ids are upper-cased and must match the store code pattern."""
        owner = self.make_owner()
        owner.store_id = "ab12cd"
        owner.validate()
        assert owner.store_id == "AB12CD"

        owner.store_id = "AB-12C"
        with pytest.raises(ValidationError):
            owner.validate()
