# =========================================================
# CUSTOMER STORE
#
# Customers and their purchase history timestamp. Works inside
# the caller's Session; nothing here commits.
# =========================================================

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from pos_api.core.errors import ConflictError
from pos_api.models.customers import (
    Customer,
    decode_favorite_products,
    encode_favorite_products,
)

__all__ = [
    "get_customer",
    "touch_last_purchase",
    "list_customers",
    "search_customers",
    "create_customer",
    "update_customer",
    "delete_customer",
    "encode_favorite_products",
    "decode_favorite_products",
]


def get_customer(db: Session, customer_id: int):
    return db.query(Customer).filter(Customer.id == customer_id).first()


def touch_last_purchase(db: Session, customer: Customer, when: datetime):
    customer.last_purchase_at = when
    db.flush()


def list_customers(db: Session):
    return db.query(Customer).order_by(Customer.id).all()


def search_customers(db: Session, query: str):
    pattern = f"%{query}%"

    return (
        db.query(Customer)
        .filter(
            or_(
                Customer.name.ilike(pattern),
                Customer.surname.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )
        .order_by(Customer.name, Customer.id)
        .all()
    )


def _ensure_contact_free(db: Session, phone: str | None, email: str | None, exclude_id: int | None = None):
    conditions = []
    if phone:
        conditions.append(Customer.phone == phone)
    if email:
        conditions.append(Customer.email == email)

    if not conditions:
        return

    query = db.query(Customer).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)

    if query.first():
        raise ConflictError("A customer with this phone or email already exists")


def create_customer(db: Session, customer_data) -> Customer:
    email = customer_data.email or None
    _ensure_contact_free(db, customer_data.phone, email)

    customer = Customer(
        name=customer_data.name,
        surname=customer_data.surname,
        phone=customer_data.phone,
        address=customer_data.address,
        email=email,
        favorite_products_json=encode_favorite_products(customer_data.favorite_products),
    )
    db.add(customer)
    db.flush()

    return customer


def update_customer(db: Session, customer: Customer, customer_data) -> Customer:
    changes = customer_data.model_dump(exclude_unset=True)

    _ensure_contact_free(
        db,
        changes.get("phone"),
        changes.get("email"),
        exclude_id=customer.id,
    )

    if "favorite_products" in changes:
        customer.favorite_products_json = encode_favorite_products(
            changes.pop("favorite_products")
        )

    for field, value in changes.items():
        if field in ("name", "phone") and value is None:
            continue
        setattr(customer, field, value)

    db.flush()
    return customer


def delete_customer(db: Session, customer: Customer):
    # Past sales keep their rows, their customer reference is nulled
    db.delete(customer)
    db.flush()
