from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from pos_api.models.products import Product
from pos_api.models.sales import Sale
from pos_api.services import sales as sale_service


def test_create_sale_returns_composed_sale(client, db, seller, seller_headers, make_product, make_customer):
    product = make_product(name="Extra Olives", description="Extra portion of olives", sale_price="500", stock=10)
    customer = make_customer(name="Juan", surname="Perez", phone="3851112233")

    response = client.post(
        "/sales",
        json={
            "customer_id": customer.id,
            "payment_method": "cash",
            "items": [{"product_id": product.id, "quantity": 3}],
            "total": 99,
        },
        headers=seller_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert Decimal(body["total"]) == Decimal("1500")
    assert body["status"] == "completed"
    assert body["operator"] == {"username": "cashier"}
    assert body["customer"] == {"name": "Juan", "surname": "Perez", "phone": "3851112233"}
    assert body["items"][0]["product"]["name"] == "Extra Olives"
    assert Decimal(body["items"][0]["unit_price"]) == Decimal("500")
    assert Decimal(body["items"][0]["subtotal"]) == Decimal("1500")

    assert db.get(Product, product.id).stock == 7


def test_insufficient_stock_is_reported_with_availability(client, db, seller_headers, make_product):
    product = make_product(name="Large Napolitana", stock=2)

    response = client.post(
        "/sales",
        json={"payment_method": "card", "items": [{"product_id": product.id, "quantity": 5}]},
        headers=seller_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "insufficient_stock"
    assert body["product"] == "Large Napolitana"
    assert body["available"] == 2
    assert db.get(Product, product.id).stock == 2
    assert db.query(Sale).count() == 0


def test_unknown_product_is_reported_with_its_id(client, db, seller_headers, make_product):
    product = make_product(stock=10)

    response = client.post(
        "/sales",
        json={
            "payment_method": "cash",
            "items": [
                {"product_id": product.id, "quantity": 1},
                {"product_id": 9999, "quantity": 1},
            ],
        },
        headers=seller_headers,
    )

    assert response.status_code == 404
    assert response.json()["id"] == 9999
    assert db.get(Product, product.id).stock == 10
    assert db.query(Sale).count() == 0


def test_invalid_payment_method_is_a_validation_error(client, seller_headers, make_product):
    product = make_product(stock=10)

    response = client.post(
        "/sales",
        json={"payment_method": "crypto", "items": [{"product_id": product.id, "quantity": 1}]},
        headers=seller_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_sale_requires_authentication(client, make_product):
    product = make_product(stock=10)

    response = client.post(
        "/sales",
        json={"payment_method": "cash", "items": [{"product_id": product.id, "quantity": 1}]},
    )

    assert response.status_code == 401


def test_sale_rejects_invalid_token(client, make_product):
    product = make_product(stock=10)

    response = client.post(
        "/sales",
        json={"payment_method": "cash", "items": [{"product_id": product.id, "quantity": 1}]},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401


def test_get_and_list_sales(client, admin_headers, make_product):
    product = make_product(stock=10)

    created = client.post(
        "/sales",
        json={"payment_method": "transfer", "items": [{"product_id": product.id, "quantity": 2}]},
        headers=admin_headers,
    ).json()

    fetched = client.get(f"/sales/{created['id']}", headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json() == client.get(f"/sales/{created['id']}", headers=admin_headers).json()
    assert fetched.json()["items"] == created["items"]

    listing = client.get("/sales", headers=admin_headers)
    assert listing.status_code == 200
    assert [s["id"] for s in listing.json()] == [created["id"]]
    assert listing.json()[0]["operator"]["username"] == "admin"


def test_missing_sale_returns_404(client, admin_headers):
    response = client.get("/sales/12345", headers=admin_headers)

    assert response.status_code == 404


def test_storage_failure_returns_opaque_error(client, db, seller_headers, make_product, monkeypatch):
    product = make_product(stock=10)

    def broken_record_sale(session, operator_id, sale_data):
        raise IntegrityError("INSERT INTO sale_items ...", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(sale_service, "_record_sale", broken_record_sale)

    response = client.post(
        "/sales",
        json={"payment_method": "cash", "items": [{"product_id": product.id, "quantity": 1}]},
        headers=seller_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "error": "storage_error"}
    assert "FOREIGN KEY" not in response.text
    assert db.get(Product, product.id).stock == 10


def test_sub_cent_price_is_a_validation_error(client, seller_headers, make_product):
    product = make_product(stock=10)

    response = client.post(
        "/sales",
        json={"payment_method": "cash", "items": [{"product_id": product.id, "quantity": 1, "unit_price": "0.001"}]},
        headers=seller_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"
