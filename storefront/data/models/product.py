from sqlalchemy import Column, Integer, String, Text, Numeric

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100))
    subtitle = Column(String(255))
    price = Column(Numeric(10, 2), nullable=False)
    badge = Column(String(50))
    description = Column(Text)
    image = Column(String(500))

    # stock count, informational only
    quantity = Column(Integer, nullable=False, default=0)
