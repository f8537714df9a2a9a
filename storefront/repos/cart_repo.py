# storefront/repos/cart_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Data access for carts and their lines.
    Never commits, the service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int, for_update: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.user_id == user_id)
        if for_update:
            # row lock on the cart serializes concurrent writers (no-op on sqlite)
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_cart_item_by_product(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_carts_holding_product(self, product_id: int) -> list[CartModel]:
        # subquery instead of join + DISTINCT, postgres refuses DISTINCT with FOR UPDATE
        holders = select(CartItemModel.cart_id).where(CartItemModel.product_id == product_id)
        stmt = (
            select(CartModel)
            .where(CartModel.id.in_(holders))
            .order_by(CartModel.id)
            .with_for_update()
        )
        return list(self.db.execute(stmt).scalars())

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart
