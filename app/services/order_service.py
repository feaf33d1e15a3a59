# app/services/order_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import storage_guard
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.enums import OrderStatus, Role, can_transition
from app.domain.errors import EmptyCartError, InsufficientStockError, NotFoundError, ValidationError
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.cart_service import CartService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order engine, separate from CartService.
    An order is a frozen snapshot of the cart, only its status moves afterwards.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.cart_service = CartService(db)

    def place_order(self, user_id: str, shipping_address: str | None = None) -> OrderModel:
        """
        Use case: checkout.

        1. reads the cart (no cart or no items -> EmptyCartError, nothing written)
        2. total from live product prices
        3. order + order items, stock decrement, removal of the ordered lines in one transaction
        """
        #the cart row stays locked until commit, concurrent adds wait for it
        cart = self.cart_service.get_cart(user_id, for_update=True)
        if not cart or not cart.items:
            self.db.rollback()
            raise EmptyCartError(user_id)

        lines = list(cart.items)
        total = sum((i.product.price * i.quantity for i in lines), Decimal("0.00"))

        with storage_guard(self.db, "place_order", user_id=user_id, cart_id=cart.id):
            for line in lines:
                if self.products.decrement_stock(line.product_id, line.quantity) == 0:
                    logger.warning(
                        f"Checkout for user {user_id} rejected: product {line.product_id} "
                        f"short of {line.quantity}"
                    )
                    raise InsufficientStockError(line.product_id, line.quantity)

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    total_amount=total.quantize(Decimal("0.01")),
                    status=OrderStatus.PENDING.value,
                    shipping_address=shipping_address,
                ),
                [
                    OrderItemModel(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        price=line.product.price,
                        size=line.size,
                        color=line.color,
                    )
                    for line in lines
                ],
            )
            #only the snapshotted lines, anything added meanwhile stays in the cart
            self.cart_service.remove_items(cart.id, [line.id for line in lines], commit=False)
            self.repo.commit()

        logger.info(f"Order {order.id} placed by user {user_id}: {len(lines)} items, total {total}")
        return self.get_order(order.id)

    def list_orders(self, user_id: str, role: Role) -> list[OrderModel]:
        with storage_guard(self.db, "list_orders", user_id=user_id):
            if role == Role.ADMIN:
                return self.repo.list_orders()
            return self.repo.list_orders(user_id=user_id)

    def get_order(self, order_id: str) -> OrderModel:
        with storage_guard(self.db, "get_order", order_id=order_id):
            order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def set_status(self, order_id: str, new_status: str) -> OrderModel:
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status {new_status!r}")

        with storage_guard(self.db, "set_status", order_id=order_id, status=target.value):
            order = self.repo.get_order(order_id)
            if not order:
                raise NotFoundError("Order", order_id)

            current = OrderStatus(order.status)
            if current.is_terminal:
                raise ValidationError(f"Order is already {current.value}")
            if not can_transition(current, target):
                raise ValidationError(f"Cannot move order from {current.value} to {target.value}")

            #cancelling puts the quantities back on stock
            if target == OrderStatus.CANCELLED:
                for item in order.items:
                    self.products.increment_stock(item.product_id, item.quantity)

            self.repo.update_order_status(order, target.value)
            self.repo.commit()

        logger.info(f"Order {order_id}: {current.value} -> {target.value}")
        return order
