# storefront/services/product_service.py
from decimal import Decimal
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import ValidationError
from storefront.domain.schemas import ProductIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_FIELDS = ("name", "category", "subtitle", "price", "badge", "description", "image", "quantity")


def product_to_dict(product: ProductModel) -> Dict[str, Any]:
    data = {field: getattr(product, field) for field in _FIELDS}
    data["id"] = product.id
    return data


class ProductService:
    """
    Product catalog. Plain persistence pass-through plus input validation.
    get/update return None for a missing id instead of raising.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)

    def list_products(self) -> List[Dict[str, Any]]:
        return [product_to_dict(p) for p in self.repo.list_products()]

    def get_product(self, product_id: int) -> Dict[str, Any] | None:
        product = self.repo.get_product(product_id)
        return product_to_dict(product) if product else None

    def create_product(self, payload: ProductIn) -> Dict[str, Any]:
        self._validate(payload)

        product = ProductModel(**payload.model_dump(include=set(_FIELDS)))
        try:
            self.repo.add_product(product)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Created product {product.id} ({product.name})")
        return product_to_dict(product)

    def update_product(self, product_id: int, payload: ProductIn) -> Dict[str, Any] | None:
        self._validate(payload)

        product = self.repo.get_product(product_id)
        if not product:
            return None

        # full overwrite, fields missing from the payload fall back to their defaults
        for field, value in payload.model_dump(include=set(_FIELDS)).items():
            setattr(product, field, value)

        try:
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Updated product {product.id}")
        return product_to_dict(product)

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            logger.info(f"Product {product_id} already absent, nothing to delete")
            return

        try:
            carts = self.cart_repo.get_carts_holding_product(product_id)
            for cart in carts:
                # drop the lines through the ORM so the cached total is recomputed with them
                for item in [i for i in cart.items if i.product_id == product_id]:
                    cart.items.remove(item)
                self.cart_repo.flush()
                cart.recalculate_total()
                cart.touch()

            self.repo.delete_product(product)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted product {product_id}, removed from {len(carts)} cart(s)")

    @staticmethod
    def _validate(payload: ProductIn):
        if not payload.name or not payload.name.strip():
            raise ValidationError("Product name must not be empty")
        if payload.price < Decimal("0"):
            raise ValidationError("Price must not be negative")
        if payload.quantity < 0:
            raise ValidationError("Quantity must not be negative")
