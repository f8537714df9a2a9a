from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.order_status import OrderStatus


def _utcnow():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    order_summary = Column(Text, nullable=False)
    payment_method = Column(String(50), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    status = Column(String(50), nullable=False, default=OrderStatus.PENDING.value, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # shipping details
    full_name = Column(String(255))
    address = Column(String(500))
    city = Column(String(100))
    postal = Column(String(20))
    # masked, only the last four digits survive
    card = Column(String(25))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
