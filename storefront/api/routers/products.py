# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductIn, ProductOut, MessageOut
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = get_service(db).get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_product(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    try:
        product = get_service(db).update_product(product_id, payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}
