# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal
from app.data.init_db import init_db
from app.data.models.product import ProductModel
from app.data.models.user import UserModel
from app.domain.enums import Category, Role
from app.utils.settings import SEED_ADMIN_EMAIL
from app.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Runner Pro",
        "description": "Lightweight running shoe with a breathable mesh upper.",
        "price": Decimal("45000.00"),
        "image_url": "/uploads/runner-pro.jpg",
        "category": Category.ATHLETIC.value,
        "stock": 25,
    },
    {
        "name": "Weekend Loafer",
        "description": "Suede loafer for everyday wear.",
        "price": Decimal("32000.00"),
        "image_url": "/uploads/weekend-loafer.jpg",
        "category": Category.CASUAL.value,
        "stock": 40,
    },
    {
        "name": "Oxford Classic",
        "description": "Leather oxford with a cushioned insole.",
        "price": Decimal("58500.00"),
        "image_url": "/uploads/oxford-classic.jpg",
        "category": Category.FORMAL.value,
        "stock": 15,
    },
    {
        "name": "Trail Boot",
        "description": "Waterproof ankle boot with a lugged sole.",
        "price": Decimal("67000.00"),
        "image_url": "/uploads/trail-boot.jpg",
        "category": Category.BOOTS.value,
        "stock": 10,
    },
]


def seed(db=None):
    """Adds an admin user and the sample catalog. Only seeds an empty database."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        if db.query(UserModel).first() or db.query(ProductModel).first():
            logger.info("Database already has data, skipping seed")
            return

        admin = UserModel(email=SEED_ADMIN_EMAIL, first_name="Store", last_name="Admin", role=Role.ADMIN.value)
        db.add(admin)
        db.add_all(ProductModel(**p) for p in SAMPLE_PRODUCTS)
        db.commit()
        logger.info(f"Seeded admin {admin.id} ({SEED_ADMIN_EMAIL}) and {len(SAMPLE_PRODUCTS)} products")
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
