# app/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.database import utcnow
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_items(self):
        return select(OrderModel).options(
            selectinload(OrderModel.items).selectinload(OrderItemModel.product),
            selectinload(OrderModel.user),
        ).execution_options(populate_existing=True)

    def create_order(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        order.items.extend(items)
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            self._with_items().where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: str | None = None) -> list[OrderModel]:
        stmt = self._with_items().order_by(OrderModel.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        order.updated_at = utcnow()
        self.db.flush()
        return order

    def commit(self):
        self.db.commit()
