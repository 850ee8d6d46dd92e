from datetime import timedelta

from pos_api.core.jwt import create_access_token, decode_access_token
from pos_api.core.hashing import hash_password, verify_password


def test_register_seller_anonymously(client):
    response = client.post("/auth/register", json={"username": "maria", "password": "secret123"})

    assert response.status_code == 201
    assert response.json()["role"] == "seller"


def test_anonymous_cannot_register_admin(client):
    response = client.post(
        "/auth/register",
        json={"username": "boss", "password": "secret123", "role": "admin"},
    )

    assert response.status_code == 403


def test_admin_can_register_admin(client, admin_headers):
    response = client.post(
        "/auth/register",
        json={"username": "boss", "password": "secret123", "role": "admin"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["role"] == "admin"


def test_duplicate_username_conflicts(client, seller):
    response = client.post("/auth/register", json={"username": "cashier", "password": "secret123"})

    assert response.status_code == 409


def test_login_issues_working_token(client, seller):
    response = client.post("/auth/login", data={"username": "cashier", "password": "secret123"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "seller"

    profile = client.get(
        "/users/profile",
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert profile.status_code == 200
    assert profile.json()["username"] == "cashier"


def test_login_rejects_wrong_password(client, seller):
    response = client.post("/auth/login", data={"username": "cashier", "password": "nope"})

    assert response.status_code == 401


def test_user_listing_is_admin_only(client, admin, seller_headers, admin_headers):
    assert client.get("/users", headers=seller_headers).status_code == 403

    response = client.get("/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"admin", "cashier"}


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(minutes=-1))

    assert decode_access_token(token) is None


def test_token_round_trip_keeps_identity():
    token = create_access_token({"sub": "7", "role": "seller"})
    payload = decode_access_token(token)

    assert payload["sub"] == "7"
    assert payload["role"] == "seller"
    assert payload["type"] == "access"


def test_password_hashing():
    password_hash = hash_password("secret123")

    assert verify_password("secret123", password_hash)
    assert not verify_password("secret124", password_hash)


def test_token_without_subject_is_rejected():
    token = create_access_token({"role": "admin"})

    assert decode_access_token(token) is None
