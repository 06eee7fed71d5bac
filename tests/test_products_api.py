"""
Tests for the product endpoints (multipart and JSON writes, reads, delete).
"""

import json

import pytest
from sqlalchemy import func, select

from catalog_api.models import Product, new_object_id


def product_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Product))


def image_files(*names):
    """Multipart file parts, all under the same field name."""
    return [("files", (name, b"\x89PNG-data", "image/png")) for name in names]


@pytest.fixture
def created(client, seed_category, seed_brand):
    """A product with two colors and one image each, created over HTTP."""
    response = client.post(
        "/api/products",
        data={
            "name": "Runner",
            "price": "59.9",
            "category": "sneakers",
            "brands": "adidas",
            "colors": json.dumps([
                {"color": "red", "sizes": [{"size": "42", "stock": 3}]},
                {"color": "blue", "sizes": [{"size": "40", "stock": 1}]},
            ]),
        },
        files=image_files("red.png", "blue.png"),
    )
    assert response.status_code == 201, response.json()
    return response.json()


class TestCreateProduct:
    """POST /api/products"""

    def test_multipart_create(self, created, image_dir, upload_dir):
        assert created["name"] == "Runner"
        assert created["category"]["name"] == "Sneakers"
        assert created["brands"]["name"] == "Adidas"

        images = [c["image"] for c in created["colors"]]
        assert all(images)
        assert len(set(images)) == 2
        assert all(name.endswith(".png") for name in images)
        assert sorted(p.name for p in image_dir.iterdir()) == sorted(images)
        assert list(upload_dir.iterdir()) == []

    def test_json_create(self, client):
        response = client.post(
            "/api/products",
            json={"name": "Runner", "colors": [{"color": "red"}]},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["colors"][0]["color"] == "red"
        assert body["colors"][0]["image"] is None
        assert body["category"] is None

    def test_unpaired_uploads_are_discarded(self, client, image_dir, upload_dir):
        """A file with no color at its index is neither stored nor left in tmp."""
        response = client.post(
            "/api/products",
            data={"name": "Runner", "colors": json.dumps([{"color": "red"}])},
            files=image_files("a.png", "b.png"),
        )

        assert response.status_code == 201
        assert len(list(image_dir.iterdir())) == 1
        assert list(upload_dir.iterdir()) == []

    def test_invalid_colors_format(self, client, db_session, upload_dir):
        response = client.post(
            "/api/products",
            data={"name": "Runner", "colors": "[not json"},
            files=image_files("a.png"),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid colors format"
        assert product_count(db_session) == 0
        assert list(upload_dir.iterdir()) == []

    def test_validation_error_detail(self, client, db_session):
        response = client.post("/api/products", json={"colors": [{"sizes": []}]})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == 1
        assert set(detail["fields"]) == {"name", "colors.0.color"}
        assert product_count(db_session) == 0

    def test_json_body_must_be_object(self, client):
        response = client.post("/api/products", json=[{"name": "Runner"}])

        assert response.status_code == 400

    def test_unsupported_media_type(self, client):
        response = client.post(
            "/api/products", content=b"name=x", headers={"Content-Type": "text/plain"}
        )

        assert response.status_code == 415


class TestReadProducts:
    """GET /api/products and GET /api/products/{id}"""

    def test_list_with_count(self, client, created):
        client.post("/api/products", json={"name": "City Boot"})
        client.post("/api/products", json={"name": "Trail runner"})

        response = client.get("/api/products", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        assert [p["name"] for p in body["data"]] == ["Runner", "City Boot"]

    def test_list_search_and_filters(self, client, created):
        client.post("/api/products", json={"name": "Trail runner"})

        by_name = client.get("/api/products", params={"q": "runner"}).json()
        assert by_name["count"] == 2

        by_category = client.get("/api/products", params={"category": "sneak"}).json()
        assert [p["id"] for p in by_category["data"]] == [created["id"]]

        unknown = client.get("/api/products", params={"brands": "Nobody"}).json()
        assert unknown["count"] == 2

    def test_list_rejects_negative_skip(self, client):
        response = client.get("/api/products", params={"skip": -1})

        assert response.status_code == 422

    def test_get_by_id(self, client, created):
        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing(self, client):
        response = client.get(f"/api/products/{new_object_id()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_get_malformed_id_is_not_found(self, client, created):
        response = client.get("/api/products/not-an-id")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"


class TestUpdateProduct:
    """PUT /api/products/{id}[/colors/{colorId}[/sizes/{sizeId}]]"""

    def test_update_fields(self, client, created):
        response = client.put(
            f"/api/products/{created['id']}", data={"name": "Racer", "stock": "4"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Racer"
        assert body["stock"] == 4
        assert body["colors"] == created["colors"]

    def test_replace_image(self, client, created, image_dir, upload_dir):
        red, blue = created["colors"]
        colors = [{"id": red["id"], "color": "red"}, {"id": blue["id"], "color": "blue"}]

        response = client.put(
            f"/api/products/{created['id']}",
            data={"colors": json.dumps(colors)},
            files=image_files("fresh.png"),
        )

        assert response.status_code == 200
        new_red, new_blue = response.json()["colors"]
        assert new_red["image"] != red["image"]
        assert new_red["sizes"] == red["sizes"]
        assert new_blue == blue
        assert sorted(p.name for p in image_dir.iterdir()) == sorted(
            [new_red["image"], blue["image"]]
        )
        assert list(upload_dir.iterdir()) == []

    def test_update_color(self, client, created):
        red, blue = created["colors"]

        response = client.put(
            f"/api/products/{created['id']}/colors/{red['id']}", json={"color": "crimson"}
        )

        assert response.status_code == 200
        new_red, new_blue = response.json()["colors"]
        assert new_red["color"] == "crimson"
        assert new_red["image"] == red["image"]
        assert new_blue == blue

    def test_update_existing_size(self, client, created):
        red = created["colors"][0]
        size = red["sizes"][0]

        response = client.put(
            f"/api/products/{created['id']}/colors/{red['id']}/sizes/{size['id']}",
            data={"stock": "9"},
        )

        assert response.status_code == 200
        sizes = response.json()["colors"][0]["sizes"]
        assert sizes == [{**size, "stock": 9}]

    def test_update_missing_size_appends(self, client, created):
        red = created["colors"][0]

        response = client.put(
            f"/api/products/{created['id']}/colors/{red['id']}/sizes/{new_object_id()}",
            json={"size": "45", "stock": 2},
        )

        assert response.status_code == 200
        sizes = response.json()["colors"][0]["sizes"]
        assert len(sizes) == 2
        assert sizes[1]["size"] == "45"

    def test_unknown_color(self, client, created):
        response = client.put(
            f"/api/products/{created['id']}/colors/{new_object_id()}",
            json={"color": "green"},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Color not found"
        assert client.get(f"/api/products/{created['id']}").json() == created

    def test_unknown_product(self, client):
        response = client.put(f"/api/products/{new_object_id()}", json={"name": "Racer"})

        assert response.status_code == 404


class TestDeleteProduct:
    """DELETE /api/products/{id}"""

    def test_delete(self, client, created, db_session, image_dir):
        response = client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert product_count(db_session) == 0
        assert list(image_dir.iterdir()) == []

    def test_delete_malformed_id(self, client, created, db_session, image_dir):
        response = client.delete("/api/products/not-an-id")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid product ID"
        assert product_count(db_session) == 1
        assert len(list(image_dir.iterdir())) == 2

    def test_delete_missing(self, client):
        response = client.delete(f"/api/products/{new_object_id()}")

        assert response.status_code == 404


class TestHealthEndpoint:
    """GET /api/health"""

    def test_health_check(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "catalog-api"

    def test_response_headers(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
