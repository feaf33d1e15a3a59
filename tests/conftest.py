import os

# tests never touch the configured database
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api import create_app
from app.data import models  # noqa: F401
from app.data.database import Base, get_db, make_engine
from app.data.models.product import ProductModel
from app.data.models.user import UserModel
from app.domain.enums import Category, Role


@pytest.fixture()
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def file_session_factory(tmp_path):
    """Sessions on a file database, each with its own connection."""
    engine = make_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def make_user(db):
    def _make_user(role=Role.CUSTOMER, email=None):
        user = UserModel(email=email, first_name="Test", last_name="User", role=role.value)
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture()
def make_product(db):
    def _make_product(name="Runner", price="19.99", stock=100, category=Category.ATHLETIC):
        product = ProductModel(
            name=name,
            description=f"{name} shoe",
            price=Decimal(price),
            image_url=f"/uploads/{name.lower()}.jpg",
            category=category.value,
            stock=stock,
        )
        db.add(product)
        db.commit()
        return product

    return _make_product


@pytest.fixture()
def client(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
