# app/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_identity
from app.data.database import get_db
from app.domain.enums import Category
from app.domain.errors import ForbiddenError, NotFoundError, StorageError, ValidationError
from app.domain.schemas import ProductCreate, ProductUpdate, ProductOut
from app.services.access_policy import Identity, require_admin
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("/", response_model=List[ProductOut])
def list_products(category: Optional[Category] = None, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_products(category)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch product")


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        require_admin(identity)
        return svc.create_product(payload)
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create product")


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        require_admin(identity)
        return svc.update_product(product_id, payload)
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update product")


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        require_admin(identity)
        svc.delete_product(product_id)
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except ValidationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to delete product")
    return Response(status_code=204)
