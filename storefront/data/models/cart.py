#storefront/data/models/cart.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base

_CENTS = Decimal("0.01")


def _utcnow():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, unique=True, index=True)

    # cached sum of the lines, written only by recalculate_total()
    total_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    def recalculate_total(self) -> Decimal:
        total = sum((i.price * i.quantity for i in self.items), Decimal("0.00"))
        self.total_amount = Decimal(total).quantize(_CENTS)
        return self.total_amount

    def touch(self):
        self.updated_at = _utcnow()
