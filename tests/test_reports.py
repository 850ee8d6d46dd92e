from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest


@pytest.fixture
def recorded_sales(client, admin_headers, make_product, make_customer):
    pizza = make_product(name="Large Mozzarella", sale_price="8500", stock=50)
    drink = make_product(name="Cola 1.5L", sale_price="1800", stock=50)
    juan = make_customer(name="Juan", phone="3851112233")
    maria = make_customer(name="Maria", phone="3854445566")

    def sell(items, customer_id=None):
        response = client.post(
            "/sales",
            json={"payment_method": "cash", "customer_id": customer_id, "items": items},
            headers=admin_headers,
        )
        assert response.status_code == 201
        return response.json()

    sell([{"product_id": pizza.id, "quantity": 1}, {"product_id": drink.id, "quantity": 4}], juan.id)
    sell([{"product_id": pizza.id, "quantity": 2}], juan.id)
    sell([{"product_id": drink.id, "quantity": 1}], maria.id)
    sell([{"product_id": drink.id, "quantity": 1}])

    return {"pizza": pizza, "drink": drink, "juan": juan, "maria": maria}


def test_daily_sales(client, admin_headers, recorded_sales):
    response = client.get("/reports/daily-sales", headers=admin_headers)

    assert response.status_code == 200
    days = response.json()
    assert len(days) == 1
    assert days[0]["sales_count"] == 4
    # 15700 + 17000 + 1800 + 1800
    assert Decimal(days[0]["total_sales"]) == Decimal("36300")


def test_sales_by_date_covers_the_whole_end_day(client, admin_headers, recorded_sales):
    today = datetime.now(timezone.utc).date()

    response = client.get(
        "/reports/sales-by-date",
        params={"start_date": today.isoformat(), "end_date": today.isoformat()},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["sales_count"] == 4
    assert Decimal(response.json()["total_sales"]) == Decimal("36300")


def test_sales_by_date_outside_range_is_empty(client, admin_headers, recorded_sales):
    past = datetime.now(timezone.utc).date() - timedelta(days=30)

    response = client.get(
        "/reports/sales-by-date",
        params={"start_date": past.isoformat(), "end_date": (past + timedelta(days=1)).isoformat()},
        headers=admin_headers,
    )

    assert response.json()["sales_count"] == 0
    assert Decimal(response.json()["total_sales"]) == Decimal("0")


def test_sales_by_date_rejects_inverted_range(client, admin_headers):
    response = client.get(
        "/reports/sales-by-date",
        params={"start_date": "2026-02-10", "end_date": "2026-02-01"},
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_top_products(client, admin_headers, recorded_sales):
    response = client.get("/reports/top-products", headers=admin_headers)

    assert [(p["name"], p["total_quantity_sold"]) for p in response.json()] == [
        ("Cola 1.5L", 6),
        ("Large Mozzarella", 3),
    ]


def test_top_customers_skips_anonymous_sales(client, admin_headers, recorded_sales):
    response = client.get("/reports/top-customers", headers=admin_headers)

    assert [(c["name"], c["total_purchases"]) for c in response.json()] == [
        ("Juan", 2),
        ("Maria", 1),
    ]


def test_reports_require_operator(client):
    assert client.get("/reports/daily-sales").status_code == 401
