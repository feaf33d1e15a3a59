# app/services/access_policy.py
from dataclasses import dataclass

from app.data.models.cart import CartModel
from app.data.models.order import OrderModel
from app.domain.enums import Role
from app.domain.errors import ForbiddenError, NotFoundError


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into every route handler."""

    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise ForbiddenError("Admin access required")


def ensure_can_view_order(identity: Identity, order: OrderModel) -> None:
    if identity.is_admin or order.user_id == identity.user_id:
        return
    raise ForbiddenError("Access denied")


def ensure_owns_cart_item(cart: CartModel, item_id: str) -> None:
    #someone else's item reads as missing
    if not any(i.id == item_id for i in cart.items):
        raise NotFoundError("Cart item", item_id)
