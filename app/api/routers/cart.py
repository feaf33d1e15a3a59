#app/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_identity
from app.data.database import get_db
from app.domain.errors import NotFoundError, StorageError, ValidationError
from app.domain.schemas import CartItemIn, CartItemQuantityIn, CartItemOut, CartOut
from app.services.access_policy import Identity, ensure_owns_cart_item
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_or_create_cart(identity.user_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch cart")


@router.post("/items", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        cart = svc.get_or_create_cart(identity.user_id)
        return svc.add_item(
            cart_id=cart.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            color=payload.color,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to add to cart")


@router.put("/items/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: str,
    payload: CartItemQuantityIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        cart = svc.get_or_create_cart(identity.user_id)
        ensure_owns_cart_item(cart, item_id)
        return svc.update_item_quantity(item_id, payload.quantity)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update cart item")


@router.delete("/items/{item_id}", status_code=204)
def remove_item(
    item_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        cart = svc.get_or_create_cart(identity.user_id)
        ensure_owns_cart_item(cart, item_id)
        svc.remove_item(item_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to remove from cart")
    return Response(status_code=204)
