# app/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.data.database import utcnow
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.repos.upsert import dialect_insert


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_items(self, for_update: bool = False):
        stmt = select(CartModel).options(
            selectinload(CartModel.items).selectinload(CartItemModel.product)
        ).execution_options(populate_existing=True)
        #row lock on the cart, ignored by sqlite
        if for_update:
            stmt = stmt.with_for_update(of=CartModel)
        return stmt

    def get_cart(self, cart_id: str, for_update: bool = False) -> CartModel | None:
        return self.db.execute(
            self._with_items(for_update).where(CartModel.id == cart_id)
        ).scalar_one_or_none()

    def get_cart_by_user(self, user_id: str, for_update: bool = False) -> CartModel | None:
        return self.db.execute(
            self._with_items(for_update).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def insert_cart(self, user_id: str) -> CartModel:
        cart = CartModel(user_id=user_id)
        self.db.add(cart)
        try:
            self.db.flush()
        except IntegrityError:
            #a concurrent request created the cart first
            self.db.rollback()
            raise
        return cart

    def get_item(self, item_id: str) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_item_by_variant(self, cart_id: str, product_id: str, size: str, color: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.size == size,
                CartItemModel.color == color,
            )
            .execution_options(populate_existing=True)
        ).scalar_one()

    def upsert_item(self, cart_id: str, product_id: str, quantity: int, size: str, color: str) -> CartItemModel:
        """
        INSERT ... ON CONFLICT (cart_id, product_id, size, color)
        DO UPDATE SET quantity = quantity + excluded.quantity
        """
        now = utcnow()
        insert = dialect_insert(self.db)
        stmt = insert(CartItemModel).values(
            cart_id=cart_id,
            product_id=product_id,
            quantity=quantity,
            size=size,
            color=color,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["cart_id", "product_id", "size", "color"],
            set_={
                "quantity": CartItemModel.quantity + stmt.excluded.quantity,
                "updated_at": now,
            },
        )
        self.db.execute(stmt)
        return self.get_item_by_variant(cart_id, product_id, size, color)

    def update_item_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        item.updated_at = utcnow()
        self.db.flush()
        return item

    def delete_item(self, item_id: str) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.id == item_id))
        return res.rowcount

    def clear_cart(self, cart_id: str) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return res.rowcount

    def delete_items(self, cart_id: str, item_ids: list[str]) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.id.in_(item_ids),
            )
        )
        return res.rowcount

    def commit(self):
        self.db.commit()
