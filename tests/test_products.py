"""Tests for Product API endpoints."""
import uuid


def test_create_product(client):
    """Test creating a new product."""
    response = client.post(
        "/products",
        json={
            "name": "Test Product",
            "description": "A product",
            "category": "SPORTS",
            "price": 99.99,
            "stock": 10
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Test Product"
    assert data["category"] == "SPORTS"
    assert data["price"] == 99.99
    assert data["stock"] == 10
    assert "id" in data
    assert "createdAt" in data


def test_create_free_product(create_product):
    """A price of zero is allowed."""
    assert create_product(price=0)["price"] == 0


def test_create_product_invalid_price(client):
    """Test creating product with invalid price fails."""
    response = client.post(
        "/products",
        json={
            "name": "Test Product",
            "category": "SPORTS",
            "price": -10.00,  # Invalid: negative price
            "stock": 10
        }
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"


def test_create_product_infinite_price(client):
    body = '{"name": "Endless", "category": "SPORTS", "price": Infinity, "stock": 1}'

    response = client.post("/products", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"


def test_create_product_invalid_stock(client):
    """Test creating product with negative stock fails."""
    response = client.post(
        "/products",
        json={
            "name": "Test Product",
            "category": "SPORTS",
            "price": 99.99,
            "stock": -5  # Invalid: negative stock
        }
    )

    assert response.status_code == 400


def test_create_product_unknown_category(client):
    response = client.post(
        "/products",
        json={"name": "Test Product", "category": "TOYS", "price": 1, "stock": 1}
    )

    assert response.status_code == 400


def test_get_product(client, create_product):
    """Test getting a product by ID."""
    product_id = create_product(name="Test Product")["id"]

    response = client.get(f"/products/{product_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Test Product"


def test_get_product_not_found(client):
    """Test getting non-existent product returns 404."""
    response = client.get(f"/products/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_list_products_window(client, create_product):
    """Test listing products with offset and limit."""
    for i in range(15):
        create_product(name=f"Product {i}", price=10.0 + i)

    first = client.get("/products?offset=0&limit=10").json()
    rest = client.get("/products?offset=10&limit=10").json()

    assert len(first) == 10
    assert len(rest) == 5
    assert not {p["id"] for p in first} & {p["id"] for p in rest}


def test_list_products_price_ordering(client, create_product):
    for price in (30.0, 10.0, 20.0):
        create_product(name=f"Priced {price}", price=price)

    lowest = client.get("/products?order=priceLowest").json()
    highest = client.get("/products?order=priceHighest").json()

    assert [p["price"] for p in lowest] == [10.0, 20.0, 30.0]
    assert [p["price"] for p in highest] == [30.0, 20.0, 10.0]


def test_list_products_by_category(client, create_product):
    create_product(name="Lipstick", category="BEAUTY")
    create_product(name="Racket", category="SPORTS")
    create_product(name="Ball", category="SPORTS")

    response = client.get("/products?category=SPORTS")

    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()) == ["Ball", "Racket"]


def test_update_product(client, create_product):
    """Test updating a product."""
    product_id = create_product(name="Original Name", price=50.0, stock=10)["id"]

    response = client.patch(
        f"/products/{product_id}",
        json={"name": "Updated Name", "price": 75.00}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Updated Name"
    assert data["price"] == 75.00
    assert data["stock"] == 10  # Stock should remain unchanged


def test_update_product_not_found(client):
    response = client.patch(f"/products/{uuid.uuid4()}", json={"price": 1.0})

    assert response.status_code == 404


def test_delete_product(client, create_product):
    """Test deleting a product."""
    product_id = create_product(name="To Delete")["id"]

    response = client.delete(f"/products/{product_id}")
    assert response.status_code == 204

    # Verify it's deleted
    get_response = client.get(f"/products/{product_id}")
    assert get_response.status_code == 404
