"""Tests for the catalog store."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaError

from app.domain.enums import Category
from app.domain.errors import NotFoundError, ValidationError
from app.domain.schemas import ProductCreate, ProductUpdate
from app.services.cart_service import CartService
from app.services.catalog_service import CatalogService
from app.services.order_service import OrderService


def _payload(**overrides):
    data = {
        "name": "Oxford",
        "description": "Leather oxford",
        "price": "58.50",
        "image_url": "/uploads/oxford.jpg",
        "category": "formal",
        "stock": 4,
    }
    data.update(overrides)
    return ProductCreate(**data)


class TestProductSchema:
    def test_negative_price(self):
        with pytest.raises(SchemaError):
            _payload(price="-1.00")

    def test_three_decimals(self):
        with pytest.raises(SchemaError):
            _payload(price="1.005")

    def test_unknown_category(self):
        with pytest.raises(SchemaError):
            _payload(category="slippers")

    def test_negative_stock(self):
        with pytest.raises(SchemaError):
            _payload(stock=-1)


class TestCatalogService:
    def test_create_and_get(self, db):
        svc = CatalogService(db)
        created = svc.create_product(_payload())

        fetched = svc.get_product(created.id)
        assert fetched.name == "Oxford"
        assert fetched.price == Decimal("58.50")
        assert fetched.category == "formal"

    def test_get_missing(self, db):
        with pytest.raises(NotFoundError):
            CatalogService(db).get_product("missing")

    def test_list_newest_first_and_filter(self, db):
        svc = CatalogService(db)
        svc.create_product(_payload(name="First"))
        svc.create_product(_payload(name="Second", category="boots"))

        names = [p.name for p in svc.list_products()]
        assert names == ["Second", "First"]
        assert [p.name for p in svc.list_products(Category.BOOTS)] == ["Second"]

    def test_partial_update(self, db):
        svc = CatalogService(db)
        product = svc.create_product(_payload())
        stamp = product.updated_at

        updated = svc.update_product(product.id, ProductUpdate(price="60.00"))

        assert updated.price == Decimal("60.00")
        assert updated.name == "Oxford"
        assert updated.updated_at >= stamp

    def test_update_cannot_null_a_column(self, db):
        svc = CatalogService(db)
        product = svc.create_product(_payload())
        with pytest.raises(ValidationError):
            svc.update_product(product.id, ProductUpdate(name=None))

    def test_update_missing(self, db):
        with pytest.raises(NotFoundError):
            CatalogService(db).update_product("missing", ProductUpdate(stock=1))

    def test_delete_removes_cart_lines(self, db, make_user):
        user = make_user()
        svc = CatalogService(db)
        product = svc.create_product(_payload())
        carts = CartService(db)
        cart = carts.get_or_create_cart(user.id)
        carts.add_item(cart.id, product.id, 1)

        svc.delete_product(product.id)

        with pytest.raises(NotFoundError):
            svc.get_product(product.id)
        assert carts.get_or_create_cart(user.id).items == []

    def test_delete_refused_when_ordered(self, db, make_user):
        user = make_user()
        svc = CatalogService(db)
        product = svc.create_product(_payload())
        carts = CartService(db)
        carts.add_item(carts.get_or_create_cart(user.id).id, product.id, 1)
        OrderService(db).place_order(user.id)

        with pytest.raises(ValidationError):
            svc.delete_product(product.id)
        assert svc.get_product(product.id).id == product.id

    def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            CatalogService(db).delete_product("missing")
