# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.database import SessionLocal, init_db
from storefront.data.models.product import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {
        "name": "Classic Hoodie",
        "category": "apparel",
        "subtitle": "Heavyweight cotton",
        "price": Decimal("49.99"),
        "badge": "bestseller",
        "description": "Brushed fleece hoodie with a kangaroo pocket.",
        "image": "/images/hoodie.jpg",
        "quantity": 40,
    },
    {
        "name": "Canvas Tote",
        "category": "accessories",
        "subtitle": "Everyday carry",
        "price": Decimal("19.50"),
        "badge": None,
        "description": "Sturdy tote bag with an inner zip pocket.",
        "image": "/images/tote.jpg",
        "quantity": 120,
    },
    {
        "name": "Logo Cap",
        "category": "accessories",
        "subtitle": "Adjustable strap",
        "price": Decimal("24.00"),
        "badge": "new",
        "description": "Six panel cap with embroidered logo.",
        "image": "/images/cap.jpg",
        "quantity": 75,
    },
]


def seed(db: Session) -> int:
    """Insert the demo catalog into an empty products table. Returns rows added."""
    # not forcing: only seed if empty
    if db.execute(select(ProductModel.id).limit(1)).first():
        logger.info("Catalog not empty, skipping seed")
        return 0

    db.add_all(ProductModel(**data) for data in DEMO_PRODUCTS)
    db.commit()
    logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")
    return len(DEMO_PRODUCTS)


def main():
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
