# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_identity
from app.data.database import get_db
from app.domain.errors import (
    EmptyCartError,
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.domain.schemas import OrderCreate, OrderDetailOut, OrderOut, OrderStatusIn
from app.services.access_policy import Identity, ensure_can_view_order, require_admin
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderDetailOut, status_code=201)
def place_order(
    payload: OrderCreate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Turns the caller's cart into an order and empties the cart.
    """
    svc = get_service(db)
    try:
        return svc.place_order(identity.user_id, payload.shipping_address)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create order")


@router.get("/", response_model=List[OrderDetailOut])
def list_orders(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    """
    Admins see every order, customers only their own. Newest first.
    """
    svc = get_service(db)
    try:
        return svc.list_orders(identity.user_id, identity.role)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        order = svc.get_order(order_id)
        ensure_can_view_order(identity, order)
        return order
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch order")


@router.put("/{order_id}/status", response_model=OrderOut)
def set_order_status(
    order_id: str,
    payload: OrderStatusIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        require_admin(identity)
        return svc.set_status(order_id, payload.status)
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update order status")
