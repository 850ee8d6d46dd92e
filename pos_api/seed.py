# pos_api/seed.py
# Demo catalog, customers and the administrator account, inserted at
# startup when SEED_DEMO_DATA is on and the tables are still empty.

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from pos_api.core.config import settings
from pos_api.core.hashing import hash_password
from pos_api.models.categories import Category
from pos_api.models.customers import Customer
from pos_api.models.products import Product
from pos_api.models.users import User, ROLE_ADMIN

logger = logging.getLogger("pos_api")

DEMO_CATEGORIES = [
    "Classic Pizzas",
    "Special Pizzas",
    "Toppings",
    "Drinks",
    "Empanadas",
    "Desserts",
]

# (name, description, sale price, cost, stock, category)
DEMO_PRODUCTS = [
    ("Large Mozzarella", "Large mozzarella pizza", "8500", "3000", 100, "Classic Pizzas"),
    ("Large Napolitana", "Large pizza with tomato and garlic", "9200", "3500", 90, "Classic Pizzas"),
    ("Ham and Peppers", "Large ham and red pepper pizza", "9000", "3400", 85, "Classic Pizzas"),
    ("Stuffed Fugazzeta", "Stuffed onion and cheese pizza", "9800", "4000", 70, "Special Pizzas"),
    ("Cola 1.5L", "Cola soft drink, 1.5 litres", "1800", "800", 200, "Drinks"),
    ("Extra Olives", "Extra portion of olives", "500", "150", 500, "Toppings"),
    ("Extra Fried Egg", "Extra fried egg", "400", "100", 300, "Toppings"),
]

# (name, surname, phone, address, email)
DEMO_CUSTOMERS = [
    ("Juan", "Perez", "3851112233", "123 Fake Street", "juan.perez@example.com"),
    ("Maria", "Gomez", "3854445566", "742 Evergreen Ave", None),
    ("Carlos", "Lopez", "3857778899", "456 Sun Boulevard", None),
]


def seed_demo_data(db: Session):
    if db.query(Category.id).first() is None:
        db.add_all([Category(name=name) for name in DEMO_CATEGORIES])
        db.flush()
        logger.info("Demo categories inserted")

    if db.query(Product.id).first() is None:
        categories = {c.name: c for c in db.query(Category).all()}

        # Categories table may already hold other rows
        for category in sorted({row[-1] for row in DEMO_PRODUCTS} - categories.keys()):
            categories[category] = Category(name=category)
            db.add(categories[category])
        db.flush()

        db.add_all([
            Product(
                name=name,
                description=description,
                sale_price=Decimal(price),
                cost=Decimal(cost),
                stock=stock,
                category_id=categories[category].id,
            )
            for name, description, price, cost, stock, category in DEMO_PRODUCTS
        ])
        logger.info("Demo products inserted")

    if db.query(User.id).first() is None:
        db.add(
            User(
                username=settings.ADMIN_USERNAME,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role=ROLE_ADMIN,
            )
        )
        logger.info("Administrator account inserted")

    if db.query(Customer.id).first() is None:
        db.add_all([
            Customer(name=name, surname=surname, phone=phone, address=address, email=email)
            for name, surname, phone, address, email in DEMO_CUSTOMERS
        ])
        logger.info("Demo customers inserted")

    db.commit()
