# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CheckoutIn, StatusIn, OrderOut, MessageOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    return get_service(db).list_orders()


@router.get("/user/{user_id}", response_model=List[OrderOut])
def get_orders_by_user(user_id: int, db: Session = Depends(get_db)):
    """
    Orders of one user, most recent first.
    """
    return get_service(db).get_orders_by_user(user_id)


@router.get("/status/{status}", response_model=List[OrderOut])
def get_orders_by_status(status: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_orders_by_status(status)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_order(order_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/checkout/{user_id}", response_model=OrderOut, status_code=201)
def checkout(user_id: int, payload: CheckoutIn | None = None, db: Session = Depends(get_db)):
    """
    Turns the user's cart into a pending order and empties the cart.
    Sends the "order placed" notification asynchronously.
    """
    svc = get_service(db)
    try:
        return svc.checkout(user_id, payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(order_id: int, payload: StatusIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_status(order_id, payload.status)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(order_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.cancel(order_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{order_id}", response_model=MessageOut)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_order(order_id)
    return {"message": "Order deleted successfully"}
