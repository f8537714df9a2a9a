# storefront/repos/product_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> list[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars())

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel):
        self.db.delete(product)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
