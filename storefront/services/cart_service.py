from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError, ForbiddenError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "price": i.price,
            }
            for i in cart.items
        ],
        "total_amount": cart.total_amount,
        "created_at": cart.created_at,
        "updated_at": cart.updated_at,
    }


class CartService:
    """
    Use cases for the cart domain.

    Commands (add, update, remove, clear) lock the cart row, change the lines,
    recompute the cached total and commit once. Any failure rolls the whole
    unit back, so a changed line with a stale total is never visible.
    Queries (get, total) only read.
    """

    def __init__(self, db: Session, product_catalog: ProductService | None = None):
        self.repo = CartRepo(db)
        self.product_catalog = product_catalog or ProductService(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_or_create_cart(self, user_id: int) -> Dict[str, Any]:
        existing = self.repo.get_cart_by_user(user_id)
        if existing:
            return cart_to_dict(existing)

        try:
            cart = self._get_or_create(user_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return cart_to_dict(cart)

    def get_total(self, user_id: int) -> Decimal:
        cart = self.load_cart(user_id)
        total = sum((i.price * i.quantity for i in cart.items), Decimal("0.00"))
        return Decimal(total).quantize(Decimal("0.01"))

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        try:
            cart = self._get_or_create(user_id)

            pdata = self.product_catalog.get_product(product_id)
            if not pdata:
                raise NotFoundError(f"Product {product_id} not found")

            existing_item = self.repo.get_cart_item_by_product(cart.id, product_id)

            if existing_item:
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                # the price snapshot from the first add is kept
                existing_item.quantity += quantity
            else:
                logger.info(f"Adding product {product_id} to cart {cart.id}")
                cart.items.append(
                    CartItemModel(
                        product_id=product_id,
                        quantity=quantity,
                        price=Decimal(str(pdata["price"])),
                    )
                )

            self._recalculate(cart)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to add product {product_id} for user {user_id}: {e}")
            self.repo.rollback()
            raise

        return cart_to_dict(self.repo.refresh(cart))

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        try:
            cart = self.load_cart(user_id, for_update=True)
            item = self._owned_item(cart, item_id)

            if quantity <= 0:
                logger.info(f"Quantity {quantity} for item {item_id}, removing it from cart {cart.id}")
                cart.items.remove(item)
            else:
                item.quantity = quantity

            self._recalculate(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return cart_to_dict(self.repo.refresh(cart))

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        try:
            cart = self.load_cart(user_id, for_update=True)
            item = self._owned_item(cart, item_id)

            cart.items.remove(item)
            self._recalculate(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Item {item_id} removed from cart {cart.id}")
        return cart_to_dict(self.repo.refresh(cart))

    def remove_item_by_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        try:
            cart = self.load_cart(user_id, for_update=True)

            item = self.repo.get_cart_item_by_product(cart.id, product_id)
            if not item:
                raise NotFoundError(f"Product {product_id} not found in cart")

            cart.items.remove(item)
            self._recalculate(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} removed from cart {cart.id}")
        return cart_to_dict(self.repo.refresh(cart))

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        try:
            cart = self.load_cart(user_id, for_update=True)
            self.empty(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Cart {cart.id} cleared")
        return cart_to_dict(self.repo.refresh(cart))

    # =====================================================
    # HELPERS (also used by checkout inside its own transaction)
    # =====================================================
    def load_cart(self, user_id: int, for_update: bool = False) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id, for_update=for_update)
        if not cart:
            raise NotFoundError(f"Cart not found for user {user_id}")
        return cart

    def empty(self, cart: CartModel):
        """Drop every line and reset the total. Does not commit."""
        cart.items.clear()
        self._recalculate(cart)

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id, for_update=True)
        if cart:
            return cart

        try:
            cart = self.repo.create_cart(
                CartModel(user_id=user_id, total_amount=Decimal("0.00"))
            )
        except IntegrityError:
            # another request created it first
            self.repo.rollback()
            cart = self.repo.get_cart_by_user(user_id, for_update=True)
            if not cart:
                raise
            return cart

        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    def _owned_item(self, cart: CartModel, item_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id)
        if not item:
            raise NotFoundError(f"Cart item {item_id} not found")
        if item.cart_id != cart.id:
            raise ForbiddenError("Cart item does not belong to this user's cart")
        return item

    def _recalculate(self, cart: CartModel):
        self.repo.flush()
        cart.recalculate_total()
        cart.touch()
