PACKAGE = {
    "trackingId": "TRK-1001",
    "orderId": "order-1",
    "origin": "Shenzhen",
    "destination": "Rotterdam",
    "weight": 3.2,
    "notes": "Fragile",
}


def test_create_applies_defaults(client):
    res = client.post("/api/packages", json=PACKAGE)

    assert res.status_code == 201
    package = res.json()
    assert package["status"] == "pending"
    assert package["shippingRoute"] == "sea"


def test_duplicate_tracking_id_is_conflict(client):
    client.post("/api/packages", json=PACKAGE)

    res = client.post("/api/packages", json={**PACKAGE, "origin": "Elsewhere"})

    assert res.status_code == 400
    assert res.json() == {"error": "Tracking ID already exists"}
    assert len(client.get("/api/packages").json()) == 1


def test_track_by_tracking_id(client):
    client.post("/api/packages", json={**PACKAGE, "shippingRoute": "air"})

    res = client.get("/api/packages/track/TRK-1001")

    assert res.status_code == 200
    assert res.json()["shippingRoute"] == "air"
    assert res.json()["destination"] == "Rotterdam"


def test_track_unknown_is_404(client):
    res = client.get("/api/packages/track/NOPE")

    assert res.status_code == 404
    assert res.json() == {"error": "Package not found"}


def test_update_touches_only_shipment_fields(client):
    created = client.post("/api/packages", json=PACKAGE).json()

    res = client.put(f"/api/packages/{created['id']}", json={"status": "in_transit", "currentLocation": "Suez"})
    assert res.status_code == 200

    package = client.get("/api/packages/track/TRK-1001").json()
    assert package["status"] == "in_transit"
    assert package["currentLocation"] == "Suez"
    # shipment fields left out are cleared
    assert package["notes"] is None
    assert package["shippingRoute"] is None
    # creation-time fields are untouched
    assert package["origin"] == "Shenzhen"
    assert package["weight"] == 3.2
    assert package["orderId"] == "order-1"


def test_unknown_route_is_rejected(client):
    res = client.post("/api/packages", json={**PACKAGE, "shippingRoute": "teleport"})

    assert res.status_code == 422
    assert list(res.json()) == ["error"]
    assert "body.shippingRoute" in res.json()["error"]


def test_order_reference_is_not_enforced(client):
    res = client.post("/api/packages", json={**PACKAGE, "orderId": "no-such-order"})

    assert res.status_code == 201


def test_list_is_newest_first(client):
    for n in range(3):
        client.post("/api/packages", json={**PACKAGE, "trackingId": f"TRK-{n}"})

    assert [p["trackingId"] for p in client.get("/api/packages").json()] == ["TRK-2", "TRK-1", "TRK-0"]


def test_delete(client):
    created = client.post("/api/packages", json=PACKAGE).json()

    assert client.delete(f"/api/packages/{created['id']}").json() == {"success": True}
    assert client.get("/api/packages/track/TRK-1001").status_code == 404
