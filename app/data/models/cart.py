#app/data/models/cart.py
from decimal import Decimal

from sqlalchemy import Column, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from app.data.database import Base, new_id, utcnow


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True, default=new_id)
    #one cart per user
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("UserModel", back_populates="cart")
    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.created_at",
    )

    @property
    def total(self) -> Decimal:
        """Always priced from the live product rows."""
        total = sum((i.product.price * i.quantity for i in self.items), Decimal("0.00"))
        return total.quantize(Decimal("0.01"))
