from datetime import timedelta

from shopfront.core.security import TokenService
from shopfront.repositories.product_repository import ProductRepository
from shopfront.utils.date_utils import DateUtils

from conftest import TEST_SECRET


def test_product_routes_require_authorization(client):
    for method, path in [("post", "/product"), ("get", "/product/all"), ("post", "/product/p1/image")]:
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.get_json() == {"errorMessage": "Missing Authorization"}


def test_invalid_token_is_rejected(client):
    response = client.get("/product/all", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.get_json() == {"errorMessage": "Invalid Token"}


def test_expired_token_is_rejected(client):
    token = TokenService(TEST_SECRET).issue("user-1", "alice", now=DateUtils.now_utc() - timedelta(days=2))

    response = client.get("/product/all", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.get_json() == {"errorMessage": "Invalid Token"}


def test_create_product_assigns_server_side_id(client, auth_headers):
    response = client.post(
        "/product",
        json={"id": "client-chosen", "name": "Desk Lamp", "price": 19.99, "tags": ["home", "light"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] != "client-chosen"
    assert body["name"] == "Desk Lamp"
    assert body["price"] == 19.99
    assert body["tags"] == ["home", "light"]
    assert "imageUrl" not in body


def test_create_product_rejects_non_object_body(client, auth_headers):
    for payload in ([1, 2, 3], {}, "lamp"):
        response = client.post("/product", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json() == {"errorMessage": "Invalid body"}


def test_created_product_is_listed_exactly_once(client, auth_headers):
    client.post("/product", json={"name": "Chair"}, headers=auth_headers)
    created = client.post("/product", json={"name": "Desk Lamp", "stock": 3}, headers=auth_headers).get_json()

    response = client.get("/product/all", headers=auth_headers)

    assert response.status_code == 200
    products = response.get_json()
    assert len(products) == 2
    assert [p for p in products if p["id"] == created["id"]] == [created]


def test_list_products_when_catalog_is_empty(client, auth_headers):
    response = client.get("/product/all", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == []


def test_unknown_product_path_is_checked_after_authentication(client, auth_headers):
    unauthenticated = client.get("/product/p1/reviews")
    authenticated = client.get("/product/p1/reviews", headers=auth_headers)

    assert unauthenticated.status_code == 401
    assert authenticated.status_code == 404
    assert authenticated.get_json() == {"errorMessage": "Unknown path: GET '/product/p1/reviews'"}


def test_wrong_method_on_product_root(client, auth_headers):
    assert client.delete("/product").status_code == 401

    response = client.delete("/product", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json() == {"errorMessage": "Unknown path: DELETE '/product'"}


def test_token_claims_are_not_an_authorization_policy(client, container, auth_headers):
    # Any valid token, even for a user that does not exist, grants access
    token = container.get(TokenService).issue("someone-else", "bob")

    response = client.post("/product", json={"name": "Rug"}, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert len(container.get(ProductRepository).list_all()) == 1
