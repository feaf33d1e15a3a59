# app/repos/product_repo.py
from sqlalchemy import select, update, delete, exists
from sqlalchemy.orm import Session

from app.data.database import utcnow
from app.data.models.product import ProductModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order_item import OrderItemModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self, category: str | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.created_at.desc())
        if category:
            stmt = stmt.where(ProductModel.category == category)
        return list(self.db.execute(stmt).scalars().all())

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def update_product(self, product: ProductModel, data: dict) -> ProductModel:
        for field, value in data.items():
            setattr(product, field, value)
        product.updated_at = utcnow()
        self.db.flush()
        return product

    def has_order_items(self, product_id: str) -> bool:
        return self.db.execute(
            select(exists().where(OrderItemModel.product_id == product_id))
        ).scalar()

    def delete_product(self, product_id: str) -> int:
        self.db.execute(delete(CartItemModel).where(CartItemModel.product_id == product_id))
        res = self.db.execute(delete(ProductModel).where(ProductModel.id == product_id))
        return res.rowcount

    def decrement_stock(self, product_id: str, quantity: int) -> int:
        """
        Conditional decrement: UPDATE ... SET stock = stock - q WHERE id = ? AND stock >= q.
        0 rows affected means not enough stock.
        """
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def increment_stock(self, product_id: str, quantity: int) -> int:
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def commit(self):
        self.db.commit()
