# app/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routers import cart, health, orders, products, users
from app.data.init_db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Cart & Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)

    return app
