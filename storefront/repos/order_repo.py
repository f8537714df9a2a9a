# storefront/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int, for_update: bool = False) -> OrderModel | None:
        if not for_update:
            return self.db.get(OrderModel, order_id)

        # row lock serializes concurrent status changes, populate_existing drops a stale identity-map copy
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self) -> list[OrderModel]:
        return list(self.db.execute(select(OrderModel).order_by(OrderModel.id)).scalars())

    def list_by_user(self, user_id: int) -> list[OrderModel]:
        # most recent first
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def list_by_status(self, status: str) -> list[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.status == status).order_by(OrderModel.id)
        return list(self.db.execute(stmt).scalars())

    def delete_order(self, order: OrderModel):
        self.db.delete(order)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
