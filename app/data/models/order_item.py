from sqlalchemy import Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base, new_id


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    #price at purchase time, never recomputed from the product
    price = Column(Numeric(10, 2), nullable=False)
    size = Column(String, nullable=False, default="")
    color = Column(String, nullable=False, default="")

    order = relationship("OrderModel", back_populates="items")
    product = relationship("ProductModel")
