# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal
from app.data.models import ProductModel, CustomerModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "Keyboard", "description": "Mechanical keyboard", "price": Decimal("199.99"), "stock_quantity": 10},
    {"name": "Mouse", "description": "Wireless mouse", "price": Decimal("49.50"), "stock_quantity": 25},
    {"name": "Monitor", "description": "27 inch monitor", "price": Decimal("899.00"), "stock_quantity": 3},
]

CUSTOMERS = [
    {"name": "Jan Kowalski", "email": "jan@example.com", "phone_number": "123456789", "address": "Warszawa"},
]


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # tylko gdy baza jest pusta
        if db.query(ProductModel).first():
            return
        db.add_all(ProductModel(**p) for p in PRODUCTS)
        db.add_all(CustomerModel(**c) for c in CUSTOMERS)
        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products and {len(CUSTOMERS)} customers")
    finally:
        db.close()


if __name__ == "__main__":
    from app.main import init_db

    init_db()
    seed()
