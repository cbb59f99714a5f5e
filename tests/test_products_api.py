"""Tests for the products service endpoints."""
import pytest
from fastapi.testclient import TestClient

from vulnshop.core.config import Settings
from vulnshop.main import create_app


@pytest.fixture
def client(tmp_path):
    """Products service seeded with Widget and Gadget; files under tmp_path."""
    images = tmp_path / "images"
    images.mkdir()
    (images / "logo.txt").write_text("logo-bytes")
    (tmp_path / "secret.txt").write_text("do not serve")

    settings = Settings(IMAGES_DIR=str(images), UPLOAD_DIR=str(tmp_path / "uploads"))
    app = create_app("products", settings)
    with TestClient(app) as test_client:
        yield test_client


def test_list_products(client):
    response = client.get("/products")
    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Widget", "Gadget"]


def test_list_products_filters(client):
    response = client.get("/products", params={"category": "Tools"})
    assert [p["name"] for p in response.json()] == ["Widget"]

    response = client.get("/products", params={"min_price": "20", "max_price": "30"})
    assert [p["name"] for p in response.json()] == ["Gadget"]


def test_list_products_category_injection(client):
    response = client.get("/products", params={"category": "x' OR '1'='1"})
    assert len(response.json()) == 2


def test_list_products_error_is_disclosed(client):
    response = client.get("/products", params={"min_price": "abc def"})
    assert response.status_code == 500
    assert "syntax error" in response.json()["detail"]


def test_get_product(client):
    response = client.get("/products/1")
    assert response.status_code == 200
    assert response.json() == {
        "id": 1,
        "name": "Widget",
        "description": "A useful widget",
        "price": 19.99,
        "category": "Tools",
    }


def test_get_product_not_found(client):
    assert client.get("/products/999").status_code == 404


def test_get_product_injection(client):
    response = client.get("/products/0 OR 1=1")
    assert response.status_code == 200
    assert response.json()["name"] == "Widget"


def test_create_product(client):
    response = client.post("/products", json={
        "name": "Gizmo",
        "description": "New",
        "price": 5.5,
        "category": "Toys",
    })

    assert response.status_code == 201
    assert response.json()["product"]["name"] == "Gizmo"
    created = client.get("/products/3").json()
    assert created["price"] == 5.5


def test_create_product_with_quote_fails(client):
    response = client.post("/products", json={"name": "O'Brien", "price": 1})
    assert response.status_code == 500


def test_update_product(client):
    response = client.put("/products/1", json={
        "name": "Widget v2",
        "description": "Better",
        "price": 21.0,
        "category": "Tools",
    })

    assert response.status_code == 200
    assert client.get("/products/1").json()["name"] == "Widget v2"


def test_update_product_injection_touches_every_row(client):
    client.put("/products/1 OR 1=1", json={"name": "Same", "price": 1})

    names = {p["name"] for p in client.get("/products").json()}
    assert names == {"Same"}


def test_delete_product(client):
    assert client.delete("/products/2").status_code == 200
    assert client.get("/products/2").status_code == 404


def test_get_image(client):
    response = client.get("/images/logo.txt")
    assert response.status_code == 200
    assert response.text == "logo-bytes"


def test_get_image_path_traversal(client):
    response = client.get("/images/..%2Fsecret.txt")
    assert response.status_code == 200
    assert response.text == "do not serve"


def test_get_image_missing(client):
    assert client.get("/images/missing.png").status_code == 404


def test_upload_image(client, tmp_path):
    response = client.post("/images", files={"file": ("shell.php", b"<?php echo 1; ?>")})

    assert response.status_code == 200
    assert response.json()["filename"] == "shell.php"
    assert (tmp_path / "uploads" / "shell.php").read_bytes() == b"<?php echo 1; ?>"


def test_upload_without_file(client):
    assert client.post("/images").status_code == 400


def test_execute_command(client):
    response = client.get("/execute", params={"cmd": "echo hello"})
    assert response.status_code == 200
    assert response.json() == {"output": "hello\n"}


def test_execute_command_failure(client):
    response = client.get("/execute", params={"cmd": "echo oops; exit 3"})
    assert response.status_code == 500
    assert response.json() == {"error": "exit status 3", "output": "oops\n"}


def test_execute_requires_command(client):
    assert client.get("/execute").status_code == 400
