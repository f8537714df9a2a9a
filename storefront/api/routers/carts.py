#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    ItemIn,
    ItemUpdateIn,
    CartOut,
    CartTotalOut,
    MessageOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_or_create_cart(user_id)


@router.post("/{user_id}/items", response_model=CartOut)
def add_item(user_id: int, payload: ItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_item(user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{user_id}/items/{item_id}", response_model=CartOut)
def update_item(user_id: int, item_id: int, payload: ItemUpdateIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_item(user_id, item_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{user_id}/items/{item_id}", response_model=CartOut)
def remove_item(user_id: int, item_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_item(user_id, item_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{user_id}/products/{product_id}", response_model=CartOut)
def remove_item_by_product(user_id: int, product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_item_by_product(user_id, product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{user_id}/clear", response_model=MessageOut)
def clear_cart(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.clear_cart(user_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Cart cleared successfully"}


@router.get("/{user_id}/total", response_model=CartTotalOut)
def get_total(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return {"total": svc.get_total(user_id)}
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
