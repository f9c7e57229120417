"""Tests for User API endpoints."""
import uuid


def test_create_user(client):
    response = client.post(
        "/users",
        json={
            "email": "alice@storefront.io",
            "firstName": "Alice",
            "lastName": "Kim",
            "address": "22 Harbour Road",
            "userPreference": {"receiveEmail": True},
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "alice@storefront.io"
    assert data["firstName"] == "Alice"
    assert data["userPreference"] == {"receiveEmail": True}
    assert "id" in data


def test_create_user_invalid_email(client):
    response = client.post(
        "/users",
        json={
            "email": "not-an-email",
            "firstName": "Alice",
            "lastName": "Kim",
            "address": "22 Harbour Road",
            "userPreference": {"receiveEmail": False},
        }
    )

    assert response.status_code == 400


def test_create_user_name_too_long(client):
    response = client.post(
        "/users",
        json={
            "email": "long@storefront.io",
            "firstName": "A" * 31,
            "lastName": "Kim",
            "address": "22 Harbour Road",
            "userPreference": {"receiveEmail": False},
        }
    )

    assert response.status_code == 400


def test_duplicate_email_is_conflict(client, create_user):
    create_user(email="twice@storefront.io")

    response = client.post(
        "/users",
        json={
            "email": "twice@storefront.io",
            "firstName": "Bob",
            "lastName": "Lee",
            "address": "5 Side Street",
            "userPreference": {"receiveEmail": False},
        }
    )

    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"


def test_get_user(client, create_user):
    user = create_user()

    response = client.get(f"/users/{user['id']}")

    assert response.status_code == 200
    assert response.json()["email"] == user["email"]


def test_get_user_not_found(client):
    assert client.get(f"/users/{uuid.uuid4()}").status_code == 404


def test_list_users(client, create_user):
    for _ in range(3):
        create_user()

    response = client.get("/users?limit=2")

    assert response.status_code == 200
    assert len(response.json()) == 2


def test_update_user_and_preference(client, create_user):
    user = create_user(receive_email=False)

    response = client.patch(
        f"/users/{user['id']}",
        json={"address": "9 New Lane", "userPreference": {"receiveEmail": True}}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "9 New Lane"
    assert data["firstName"] == user["firstName"]
    assert data["userPreference"] == {"receiveEmail": True}


def test_delete_user(client, create_user):
    user = create_user()

    assert client.delete(f"/users/{user['id']}").status_code == 204
    assert client.get(f"/users/{user['id']}").status_code == 404


def test_saved_products_toggle(client, create_user, create_product):
    user = create_user()
    product = create_product()
    url = f"/users/{user['id']}/saved-products"

    saved = client.post(url, json={"productId": product["id"]})
    assert saved.status_code == 201
    assert [p["id"] for p in saved.json()] == [product["id"]]
    assert [p["id"] for p in client.get(url).json()] == [product["id"]]

    unsaved = client.post(url, json={"productId": product["id"]})
    assert unsaved.status_code == 201
    assert unsaved.json() == []


def test_save_unknown_product(client, create_user):
    user = create_user()

    response = client.post(
        f"/users/{user['id']}/saved-products",
        json={"productId": str(uuid.uuid4())}
    )

    assert response.status_code == 404


def test_user_orders(client, create_user, create_product):
    user = create_user()
    product = create_product(stock=5)
    client.post(
        "/orders",
        json={"userId": user["id"], "orderItems": [{"productId": product["id"], "unitPrice": 3.0, "quantity": 2}]}
    )

    response = client.get(f"/users/{user['id']}/orders")

    assert response.status_code == 200
    orders = response.json()
    assert len(orders) == 1
    assert orders[0]["total"] == 6.0


def test_user_orders_unknown_user(client):
    assert client.get(f"/users/{uuid.uuid4()}/orders").status_code == 404
