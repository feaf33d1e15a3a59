# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.domain.enums import Category, OrderStatus, Role


# =====================================================
# USERS
# =====================================================
class UserUpsert(BaseModel):
    """Schema for inserting or refreshing a user coming from the auth provider. Carries no role."""

    id: str = Field(..., min_length=1, max_length=36)
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = None


class UserRead(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# PRODUCTS
# =====================================================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: str = Field(..., min_length=1)
    category: Category
    stock: int = Field(0, ge=0)


class ProductUpdate(BaseModel):
    """Partial update, only the fields that were sent are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, min_length=1)
    category: Optional[Category] = None
    stock: Optional[int] = Field(None, ge=0)


class ProductOut(BaseModel):
    id: str
    name: str
    description: str
    price: Decimal
    image_url: str
    category: str
    stock: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Adding a product to the cart. A missing or non-positive quantity counts as 1."""

    product_id: str = Field(..., min_length=1)
    quantity: Optional[int] = None
    size: Optional[str] = None
    color: Optional[str] = None


class CartItemQuantityIn(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    id: str
    cart_id: str
    product_id: str
    quantity: int
    size: str
    color: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(CartItemOut):
    product: ProductOut


class CartOut(BaseModel):
    id: str
    user_id: str
    items: List[CartLineOut]
    total: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# ORDERS
# =====================================================
class OrderCreate(BaseModel):
    shipping_address: Optional[str] = None


class OrderStatusIn(BaseModel):
    # validated against OrderStatus in the service, bad values are a ValidationError there
    status: str


class OrderItemOut(BaseModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: Decimal
    size: str
    color: str
    product: ProductOut

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    user_id: str
    total_amount: Decimal
    status: OrderStatus
    shipping_address: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderOut):
    items: List[OrderItemOut]
    user: UserRead
