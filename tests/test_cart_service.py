"""Tests for the cart engine: lazy creation, merge-by-variant, quantity rules."""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import NotFoundError, ValidationError
from app.repos.cart_repo import CartRepo
from app.repos.upsert import dialect_insert
from app.services.cart_service import CartService


def _item_count(db, cart_id):
    return db.execute(
        select(func.count()).select_from(CartItemModel).where(CartItemModel.cart_id == cart_id)
    ).scalar()


class TestGetOrCreateCart:
    def test_creates_empty_cart_for_new_user(self, db, make_user):
        user = make_user()
        cart = CartService(db).get_or_create_cart(user.id)

        assert cart.user_id == user.id
        assert cart.items == []
        assert str(cart.total) == "0.00"

    def test_is_idempotent(self, db, make_user):
        user = make_user()
        svc = CartService(db)
        first = svc.get_or_create_cart(user.id)
        second = svc.get_or_create_cart(user.id)

        assert first.id == second.id
        assert db.execute(select(func.count()).select_from(CartModel)).scalar() == 1

    def test_get_cart_does_not_create(self, db, make_user):
        user = make_user()
        assert CartService(db).get_cart(user.id) is None
        assert db.execute(select(func.count()).select_from(CartModel)).scalar() == 0

    def test_lost_insert_race_returns_winning_cart(self, db, make_user, monkeypatch):
        user = make_user()
        winner = CartModel(user_id=user.id)
        db.add(winner)
        db.commit()
        winner_id = winner.id

        original = CartRepo.get_cart_by_user
        calls = []

        def stale_first_read(self, user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return original(self, user_id)

        monkeypatch.setattr(CartRepo, "get_cart_by_user", stale_first_read)

        cart = CartService(db).get_or_create_cart(user.id)

        assert cart.id == winner_id
        assert len(calls) == 2
        assert db.execute(select(func.count()).select_from(CartModel)).scalar() == 1


class TestAddItem:
    def test_same_variant_merges_into_one_row(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)

        first = svc.add_item(cart.id, product.id, 2, "9", "Black")
        second = svc.add_item(cart.id, product.id, 1, "9", "Black")
        third = svc.add_item(cart.id, product.id, 4, "9", "Black")

        assert first.id == second.id == third.id
        assert third.quantity == 7
        assert _item_count(db, cart.id) == 1

    def test_different_size_is_a_new_row(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)

        a = svc.add_item(cart.id, product.id, 1, "9", "Black")
        b = svc.add_item(cart.id, product.id, 1, "10", "Black")

        assert a.id != b.id
        assert _item_count(db, cart.id) == 2

    def test_missing_size_and_color_match_each_other(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)

        svc.add_item(cart.id, product.id, 1)
        item = svc.add_item(cart.id, product.id, 2, size="", color=None)

        assert item.quantity == 3
        assert item.size == ""
        assert item.color == ""
        assert _item_count(db, cart.id) == 1

    def test_missing_size_does_not_match_a_sized_item(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)

        svc.add_item(cart.id, product.id, 1, "9", "Black")
        svc.add_item(cart.id, product.id, 1, None, "Black")

        assert _item_count(db, cart.id) == 2

    @pytest.mark.parametrize("quantity", [None, 0, -3])
    def test_non_positive_quantity_counts_as_one(self, db, make_user, make_product, quantity):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)

        svc.add_item(cart.id, product.id, 2)
        item = svc.add_item(cart.id, product.id, quantity)

        assert item.quantity == 3

    def test_unknown_cart(self, db, make_product):
        product = make_product()
        with pytest.raises(NotFoundError):
            CartService(db).add_item("missing-cart", product.id, 1)

    def test_unknown_product(self, db, make_user):
        user = make_user()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)
        with pytest.raises(NotFoundError):
            svc.add_item(cart.id, "missing-product", 1)
        assert _item_count(db, cart.id) == 0

    def test_cart_total_uses_live_prices(self, db, make_user, make_product):
        user = make_user()
        cheap = make_product("Cheap", price="10.00")
        dear = make_product("Dear", price="25.50")
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)
        svc.add_item(cart.id, cheap.id, 3)
        svc.add_item(cart.id, dear.id, 2)

        assert str(svc.get_or_create_cart(user.id).total) == "81.00"

        dear.price = Decimal("30.00")
        db.commit()
        assert str(svc.get_or_create_cart(user.id).total) == "90.00"


class TestUpdateAndRemove:
    def _cart_with_item(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        svc = CartService(db)
        cart = svc.get_or_create_cart(user.id)
        item = svc.add_item(cart.id, product.id, 2, "9", "Black")
        return svc, cart, item

    def test_update_quantity_overwrites(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        updated = svc.update_item_quantity(item.id, 5)
        assert updated.quantity == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_below_one_is_rejected(self, db, make_user, make_product, quantity):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        with pytest.raises(ValidationError):
            svc.update_item_quantity(item.id, quantity)

        db.expire_all()
        assert db.get(CartItemModel, item.id).quantity == 2

    def test_update_unknown_item(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).update_item_quantity("missing", 3)

    def test_update_does_not_touch_cart_timestamp(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        before = svc.get_or_create_cart(cart.user_id).updated_at
        svc.update_item_quantity(item.id, 4)
        assert svc.get_or_create_cart(cart.user_id).updated_at == before

    def test_remove_item(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        svc.remove_item(item.id)
        assert _item_count(db, cart.id) == 0

    def test_remove_is_idempotent(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        svc.remove_item(item.id)
        svc.remove_item(item.id)
        svc.remove_item("never-existed")

    def test_clear_keeps_cart_row(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        assert svc.clear_cart(cart.id) == 1

        again = svc.get_or_create_cart(cart.user_id)
        assert again.id == cart.id
        assert again.items == []

    def test_remove_items_leaves_other_lines(self, db, make_user, make_product):
        svc, cart, item = self._cart_with_item(db, make_user, make_product)
        other = svc.add_item(cart.id, item.product_id, 1, "44", None)

        assert svc.remove_items(cart.id, [item.id]) == 1
        assert [i.id for i in svc.get_cart(cart.user_id).items] == [other.id]


class TestDialectInsert:
    def test_unsupported_backend(self):
        session = SimpleNamespace(get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql")))
        with pytest.raises(RuntimeError, match="mysql"):
            dialect_insert(session)
