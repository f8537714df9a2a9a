# storefront/services/order_service.py
from datetime import datetime, timezone
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import NotFoundError, InvalidStateError, ValidationError
from storefront.domain.order_status import OrderStatus, parse_status, can_transition
from storefront.domain.schemas import CheckoutIn
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import DEFAULT_PAYMENT_METHOD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_SHIPPING_FIELDS = ("full_name", "address", "city", "postal")


def mask_card(card: str | None) -> str | None:
    if not card:
        return card
    digits = "".join(ch for ch in card if ch.isdigit())
    if len(digits) < 4:
        return "****"
    return f"**** **** **** {digits[-4:]}"


def build_summary(lines) -> str:
    return ", ".join(f"{name} x{quantity}" for name, quantity in lines)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "order_summary": order.order_summary,
        "payment_method": order.payment_method,
        "total": order.total,
        "status": order.status,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "price": i.price,
            }
            for i in order.items
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "full_name": order.full_name,
        "address": order.address,
        "city": order.city,
        "postal": order.postal,
        "card": order.card,
    }


class OrderService:
    """
    Service for the order domain. Reads the cart through CartService and
    clears it as part of checkout.
    """

    def __init__(
        self,
        db: Session,
        cart_service: CartService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_service = cart_service or CartService(db)
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # QUERY
    # =====================================================
    def list_orders(self) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_orders()]

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return order_to_dict(self._load(order_id))

    def get_orders_by_user(self, user_id: int) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_by_user(user_id)]

    def get_orders_by_status(self, status: str) -> List[Dict[str, Any]]:
        parsed = parse_status(status)
        if parsed is None:
            raise ValidationError(f"Unknown order status: {status}")
        return [order_to_dict(o) for o in self.repo.list_by_status(parsed.value)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def checkout(self, user_id: int, details: CheckoutIn | None = None) -> Dict[str, Any]:
        """
        Use case: turn the user's cart into an order.

        1. Locks the cart and rejects an empty one
        2. Snapshots total, summary and every line (price copied from the cart line)
        3. Empties the cart
        4. Commits everything at once, then notifies
        """
        details = details or CheckoutIn()

        try:
            cart = self.cart_service.load_cart(user_id, for_update=True)

            if not cart.items:
                raise InvalidStateError("Cart is empty")

            total = cart.recalculate_total()

            order = OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total=total,
                payment_method=details.payment_method or DEFAULT_PAYMENT_METHOD,
                card=mask_card(details.card),
                order_summary=build_summary((i.product_name, i.quantity) for i in cart.items),
            )
            for field in _SHIPPING_FIELDS:
                value = getattr(details, field)
                if value is not None:
                    setattr(order, field, value)

            for cart_item in cart.items:
                order.items.append(
                    OrderItemModel(
                        product_id=cart_item.product_id,
                        product_name=cart_item.product_name,
                        quantity=cart_item.quantity,
                        price=cart_item.price,
                    )
                )

            self.repo.add_order(order)
            self.cart_service.empty(cart)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Checkout failed for user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created from cart {cart.id}, total {order.total}")

        self.notification_service.send_order_placed(user_id, order.id)

        return order_to_dict(order)

    def update_status(self, order_id: int, new_status: str) -> Dict[str, Any]:
        target = parse_status(new_status)
        if target is None:
            raise ValidationError(f"Unknown order status: {new_status}")

        try:
            order = self._load(order_id, for_update=True)
            current = OrderStatus(order.status)

            if not can_transition(current, target):
                raise InvalidStateError(
                    f"Order {order_id} cannot move from {current.value} to {target.value}"
                )

            order.status = target.value
            order.updated_at = datetime.now(timezone.utc)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id}: {current.value} -> {target.value}")

        self.notification_service.send_status_changed(order.user_id, order.id, order.status)

        return order_to_dict(order)

    def cancel(self, order_id: int) -> Dict[str, Any]:
        return self.update_status(order_id, OrderStatus.CANCELLED.value)

    def delete_order(self, order_id: int) -> None:
        order = self.repo.get_order(order_id)
        if not order:
            return

        try:
            self.repo.delete_order(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} deleted")

    def _load(self, order_id: int, for_update: bool = False) -> OrderModel:
        order = self.repo.get_order(order_id, for_update=for_update)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order
