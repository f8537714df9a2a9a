# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(ApiModel):
    message: str


# =====================================================
# PRODUCTS
# =====================================================
class ProductIn(ApiModel):
    """Full product record, used for both create and update."""

    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = None
    subtitle: Optional[str] = None
    price: Decimal = Field(..., ge=0, description="Unit price (must be >= 0)")
    badge: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    quantity: int = Field(0, ge=0, description="Stock count (must be >= 0)")


class ProductOut(ProductIn):
    id: int


# =====================================================
# CART
# =====================================================
class ItemIn(ApiModel):
    """Adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product ID (must be > 0)")
    quantity: int = Field(..., gt=0, description="Quantity (must be > 0)")


class ItemUpdateIn(ApiModel):
    """Quantity <= 0 removes the line."""

    quantity: int


class CartItemOut(ApiModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price: Decimal


class CartOut(ApiModel):
    id: int
    user_id: int
    items: List[CartItemOut]
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime


class CartTotalOut(ApiModel):
    total: Decimal


# =====================================================
# ORDERS
# =====================================================
class CheckoutIn(ApiModel):
    """Shipping and payment details supplied at checkout, all optional."""

    full_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal: Optional[str] = None
    payment_method: Optional[str] = None
    card: Optional[str] = None


class StatusIn(ApiModel):
    status: str = Field(..., min_length=1)


class OrderItemOut(ApiModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: Decimal


class OrderOut(ApiModel):
    id: int
    user_id: int
    order_summary: str
    payment_method: str
    total: Decimal
    status: str
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime
    full_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal: Optional[str] = None
    card: Optional[str] = None


# =====================================================
# USERS
# =====================================================
class UserCredentials(ApiModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserRead(ApiModel):
    """Public projection of a user, the password hash never leaves the service."""

    id: int
    email: str
    created_at: datetime
