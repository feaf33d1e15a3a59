# app/services/cart_service.py
from sqlalchemy.orm import Session

from app.data.database import storage_guard
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import NotFoundError, ValidationError
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.retry import conflict_retry
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart engine, one cart per user.
    commands (add, update, remove, clear) modify state
    queries (get) only read, get_or_create may insert the cart row
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: str, for_update: bool = False) -> CartModel | None:
        with storage_guard(self.db, "get_cart", user_id=user_id):
            return self.repo.get_cart_by_user(user_id, for_update=for_update)

    def get_or_create_cart(self, user_id: str) -> CartModel:
        with storage_guard(self.db, "get_or_create_cart", user_id=user_id):
            return self._get_or_insert(user_id)

    @conflict_retry()
    def _get_or_insert(self, user_id: str) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        #unique(user_id) picks the winner, the loser retries and reads the winning cart
        logger.info(f"No cart for user {user_id}, creating one")
        created = self.repo.insert_cart(user_id)
        self.repo.commit()
        logger.info(f"Created cart {created.id} for user {user_id}")
        return self.repo.get_cart(created.id)

    #commands
    def add_item(
        self,
        cart_id: str,
        product_id: str,
        quantity: int | None = 1,
        size: str | None = None,
        color: str | None = None,
    ) -> CartItemModel:
        # absent size/color match as "", never as a wildcard
        size = size or ""
        color = color or ""
        if not quantity or quantity < 1:
            quantity = 1

        with storage_guard(self.db, "add_item", cart_id=cart_id, product_id=product_id):
            #serializes with a checkout of the same cart
            if not self.repo.get_cart(cart_id, for_update=True):
                raise NotFoundError("Cart", cart_id)
            if not self.products.get_product(product_id):
                raise NotFoundError("Product", product_id)

            item = self.repo.upsert_item(cart_id, product_id, quantity, size, color)
            self.repo.commit()

        logger.info(
            f"Cart {cart_id}: product {product_id} size={size!r} color={color!r} "
            f"+{quantity}, now {item.quantity}"
        )
        return item

    def update_item_quantity(self, item_id: str, quantity: int) -> CartItemModel:
        if quantity is None or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        with storage_guard(self.db, "update_item_quantity", item_id=item_id):
            item = self.repo.get_item(item_id)
            if not item:
                raise NotFoundError("Cart item", item_id)
            self.repo.update_item_quantity(item, quantity)
            self.repo.commit()

        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return item

    def remove_item(self, item_id: str) -> None:
        with storage_guard(self.db, "remove_item", item_id=item_id):
            removed = self.repo.delete_item(item_id)
            self.repo.commit()

        if removed:
            logger.info(f"Removed cart item {item_id}")

    def clear_cart(self, cart_id: str, commit: bool = True) -> int:
        """
        Deletes every item of the cart, the cart row stays.
        With commit=False the delete joins the caller's transaction (checkout).
        """
        with storage_guard(self.db, "clear_cart", cart_id=cart_id):
            removed = self.repo.clear_cart(cart_id)
            if commit:
                self.repo.commit()

        logger.info(f"Cleared {removed} items from cart {cart_id}")
        return removed

    def remove_items(self, cart_id: str, item_ids: list[str], commit: bool = True) -> int:
        """
        Deletes only the given items of the cart.
        Checkout uses it so lines added after its snapshot stay in the cart.
        """
        with storage_guard(self.db, "remove_items", cart_id=cart_id):
            removed = self.repo.delete_items(cart_id, item_ids)
            if commit:
                self.repo.commit()

        logger.info(f"Removed {removed} of {len(item_ids)} items from cart {cart_id}")
        return removed
