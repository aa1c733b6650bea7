def create_product(client, **overrides):
    body = {"name": "Desk Lamp", "description": "Warm light", "price": 24.5, "categoryId": "cat1", "stock": 7}
    body.update(overrides)
    res = client.post("/api/products", json=body)
    assert res.status_code == 201, res.text
    return res.json()


def test_create_applies_defaults(client):
    res = client.post("/api/products", json={"name": "Mug", "price": 8})

    assert res.status_code == 201
    product = res.json()
    assert len(product["id"]) == 32
    assert product["stock"] == 0
    assert product["isFeatured"] is False
    assert product["status"] == "in_stock"


def test_create_then_get(client):
    created = create_product(client, isFeatured=True, status="low_stock", estimatedDelivery="2026-11-01")

    res = client.get(f"/api/products/{created['id']}")

    assert res.status_code == 200
    product = res.json()
    assert product["name"] == "Desk Lamp"
    assert product["categoryId"] == "cat1"
    assert product["isFeatured"] is True
    assert product["status"] == "low_stock"
    assert product["estimatedDelivery"] == "2026-11-01"
    assert product["createdAt"]


def test_get_unknown_product_is_404(client):
    res = client.get("/api/products/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {"error": "Product not found"}


def test_list_is_newest_first(client):
    for name in ("first", "second", "third"):
        create_product(client, name=name)

    names = [p["name"] for p in client.get("/api/products").json()]

    assert names == ["third", "second", "first"]


def test_update_without_stock_nulls_it(client):
    # PUT overwrites every column: leaving a field out clears it
    created = create_product(client, stock=5, isFeatured=True, status="in_stock")

    res = client.put(f"/api/products/{created['id']}", json={"name": "Desk Lamp v2", "price": 30})
    assert res.status_code == 200
    assert res.json()["stock"] is None

    product = client.get(f"/api/products/{created['id']}").json()
    assert product["name"] == "Desk Lamp v2"
    assert product["price"] == 30
    assert product["stock"] is None
    assert product["isFeatured"] is False
    assert product["status"] is None
    assert product["description"] is None


def test_update_refreshes_updated_at(client):
    created = create_product(client)

    client.put(f"/api/products/{created['id']}", json={"name": "Desk Lamp", "price": 24.5, "stock": 7})

    product = client.get(f"/api/products/{created['id']}").json()
    assert product["updatedAt"] > product["createdAt"]


def test_update_unknown_product_still_succeeds(client):
    res = client.put("/api/products/ghost", json={"name": "Nobody", "price": 1})

    assert res.status_code == 200
    assert res.json()["id"] == "ghost"
    assert client.get("/api/products/ghost").status_code == 404


def test_delete(client):
    created = create_product(client)

    res = client.delete(f"/api/products/{created['id']}")

    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert client.get(f"/api/products/{created['id']}").status_code == 404


def test_delete_unknown_product_reports_success(client):
    res = client.delete("/api/products/ghost")

    assert res.status_code == 200
    assert res.json() == {"success": True}


def test_unknown_status_is_rejected(client):
    res = client.post("/api/products", json={"name": "Mug", "price": 8, "status": "sold_to_aliens"})

    assert res.status_code == 422
    assert list(res.json()) == ["error"]
    assert "body.status" in res.json()["error"]


def test_missing_required_column_is_storage_failure(client):
    res = client.post("/api/products", json={"price": 8})

    assert res.status_code == 500
    assert "NOT NULL" in res.json()["error"]


def test_wrong_type_uses_error_body(client):
    res = client.post("/api/products", json={"name": "Mug", "price": "eight"})

    assert res.status_code == 422
    assert "body.price" in res.json()["error"]
