# app/services/catalog_service.py
from sqlalchemy.orm import Session

from app.data.database import storage_guard
from app.data.models.product import ProductModel
from app.domain.enums import Category
from app.domain.errors import NotFoundError, ValidationError
from app.domain.schemas import ProductCreate, ProductUpdate
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Catalog store: product reads for everybody, writes for admins.
    Authorization is checked by the route layer before calling in here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    #query
    def list_products(self, category: Category | None = None) -> list[ProductModel]:
        with storage_guard(self.db, "list_products", category=category):
            return self.repo.list_products(category.value if category else None)

    def get_product(self, product_id: str) -> ProductModel:
        with storage_guard(self.db, "get_product", product_id=product_id):
            product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    #commands
    def create_product(self, payload: ProductCreate) -> ProductModel:
        data = payload.model_dump()
        data["category"] = payload.category.value

        with storage_guard(self.db, "create_product", name=payload.name):
            product = self.repo.create_product(ProductModel(**data))
            self.repo.commit()

        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def update_product(self, product_id: str, payload: ProductUpdate) -> ProductModel:
        data = payload.model_dump(exclude_unset=True)
        if "category" in data and data["category"] is not None:
            data["category"] = payload.category.value
        #required columns cannot be cleared
        nulls = [k for k, v in data.items() if v is None]
        if nulls:
            raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")

        with storage_guard(self.db, "update_product", product_id=product_id):
            product = self.repo.get_product(product_id)
            if not product:
                raise NotFoundError("Product", product_id)
            self.repo.update_product(product, data)
            self.repo.commit()

        logger.info(f"Updated product {product_id}: {sorted(data)}")
        return product

    def delete_product(self, product_id: str) -> None:
        with storage_guard(self.db, "delete_product", product_id=product_id):
            if not self.repo.get_product(product_id):
                raise NotFoundError("Product", product_id)
            if self.repo.has_order_items(product_id):
                raise ValidationError(
                    f"Product {product_id} appears in past orders, set its stock to 0 instead"
                )
            self.repo.delete_product(product_id)
            self.repo.commit()

        logger.info(f"Deleted product {product_id}")
