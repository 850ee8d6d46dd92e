import os
from decimal import Decimal

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient

from pos_api.main import app
from pos_api.database import Base, build_engine, build_session_factory, get_db
from pos_api.core.hashing import hash_password
from pos_api.core.jwt import create_operator_token
from pos_api.models.categories import Category
from pos_api.models.customers import Customer
from pos_api.models.products import Product
from pos_api.models.users import User, ROLE_ADMIN, ROLE_SELLER


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'pos.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(db):
    # Requests share the test session, so no second connection competes
    # for SQLite's write lock
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, username, role):
    user = User(username=username, password_hash=hash_password("secret123"), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _make_user(db, "admin", ROLE_ADMIN)


@pytest.fixture
def seller(db):
    return _make_user(db, "cashier", ROLE_SELLER)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_operator_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def seller_headers(seller):
    return auth_headers(seller)


@pytest.fixture
def category(db):
    category = Category(name="Classic Pizzas")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    counter = {"n": 0}

    def factory(name=None, sale_price="500", stock=10, cost="150", description=None):
        counter["n"] += 1
        product = Product(
            name=name or f"Product {counter['n']}",
            description=description,
            sale_price=Decimal(sale_price),
            cost=Decimal(cost) if cost is not None else None,
            stock=stock,
            category_id=category.id,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return factory


@pytest.fixture
def make_customer(db):
    counter = {"n": 0}

    def factory(name="Juan", surname="Perez", phone=None, email=None):
        counter["n"] += 1
        customer = Customer(
            name=name,
            surname=surname,
            phone=phone or f"385111{counter['n']:04d}",
            email=email,
        )
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    return factory
