from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False)
    # price snapshot taken when the product was first added
    price = Column(Numeric(10, 2), nullable=False)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel", lazy="joined")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_cart_product"),)

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None
