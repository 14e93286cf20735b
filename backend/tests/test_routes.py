# Overview: HTTP-level tests for the JSON API; status codes and response shapes.

"""
API Route Tests

Verifies:
1. Each endpoint returns the documented status code and body shape
2. Typed service errors map to 400 / 404 / 409
3. Reports and the CSV export are reachable over HTTP
"""

import pytest
from ventaspro.models import Product


def _create(client, **overrides):
    body = {"name": "Empanada", "price": 2.5, "initial_stock": 10}
    body.update(overrides)
    return client.post("/api/products", json=body)


class TestProductRoutes:

    def test_create_and_list(self, client, db_session):
        resp = _create(client, name="Cafe", price="1.50", initial_stock=4)
        assert resp.status_code == 201
        product_id = resp.get_json()["id"]

        listed = client.get("/api/products").get_json()
        assert [(p["id"], p["name"], p["price"], p["stock"]) for p in listed] == [(product_id, "Cafe", 1.5, 4)]

    @pytest.mark.parametrize("body", [
        {"name": "X", "price": -1, "initial_stock": 1},
        {"name": "X", "price": 1},
        {"name": "X", "price": 1, "initial_stock": 1, "deleted": True},
        {"name": "", "price": 1, "initial_stock": 1},
    ])
    def test_create_rejects_bad_body(self, client, db_session, body):
        resp = client.post("/api/products", json=body)
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_create_rejects_non_json(self, client, db_session):
        resp = client.post("/api/products", data="not json", content_type="text/plain")
        assert resp.status_code == 400

    def test_update(self, client, db_session, product_a):
        resp = client.put(f"/api/products/{product_a}", json={"name": "A+", "price": 11, "stock": 9})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "changes": 1}

        p = db_session.get(Product, product_a)
        assert (p.name, p.price_cents, p.stock) == ("A+", 1100, 9)

    def test_update_unknown(self, client, db_session):
        resp = client.put("/api/products/555555", json={"name": "X", "price": 1, "stock": 1})
        assert resp.status_code == 404

    def test_delete(self, client, db_session, product_a):
        resp = client.delete(f"/api/products/{product_a}")
        assert resp.status_code == 200
        assert resp.get_json()["success"] is True

        assert client.get("/api/products").get_json() == []
        assert client.delete(f"/api/products/{product_a}").status_code == 404


class TestInventoryRoutes:

    def test_entry(self, client, db_session, product_a):
        resp = client.post("/api/inventory/move", json={"product_id": product_a, "type": "entry", "quantity": 3})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "newStock": 8}

    def test_waste_over_stock_is_conflict(self, client, db_session, product_a):
        resp = client.post(
            "/api/inventory/move",
            json={"product_id": product_a, "type": "waste", "quantity": 6, "reason": "Roto"},
        )
        assert resp.status_code == 409
        body = resp.get_json()
        assert body["product_id"] == product_a
        assert body["requested"] == 6
        assert body["available"] == 5

    @pytest.mark.parametrize("kind", ["sale", "adjust"])
    def test_bad_kind(self, client, db_session, product_a, kind):
        resp = client.post("/api/inventory/move", json={"product_id": product_a, "type": kind, "quantity": 1})
        assert resp.status_code == 400

    def test_unknown_product(self, client, db_session):
        resp = client.post("/api/inventory/move", json={"product_id": 404404, "type": "entry", "quantity": 1})
        assert resp.status_code == 404

    @pytest.mark.parametrize("bad_id", [True, [1], "abc"])
    def test_malformed_product_id(self, client, db_session, product_a, bad_id):
        resp = client.post("/api/inventory/move", json={"product_id": bad_id, "type": "entry", "quantity": 3})
        assert resp.status_code == 400
        assert "product_id" in resp.get_json()["error"]
        assert db_session.get(Product, product_a).stock == 5


class TestSaleRoutes:

    def test_checkout(self, client, db_session, product_a):
        resp = client.post("/api/sales", json={
            "items": [{"id": product_a, "name": "Product A", "quantity": 2, "price": 10}],
            "payment_method": "transfer",
            "total": 20,
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert isinstance(body["saleId"], int)
        assert db_session.get(Product, product_a).stock == 3

    def test_out_of_stock(self, client, db_session, product_b):
        resp = client.post("/api/sales", json={
            "items": [{"product_id": product_b, "quantity": 1, "unit_price": 4}],
            "payment_method": "cash",
            "total": 4,
        })
        assert resp.status_code == 409
        assert "Product B" in resp.get_json()["error"]

    def test_missing_fields(self, client, db_session):
        resp = client.post("/api/sales", json={"items": []})
        assert resp.status_code == 400

    def test_bad_payment_method(self, client, db_session, product_a):
        resp = client.post("/api/sales", json={
            "items": [{"product_id": product_a, "quantity": 1, "unit_price": 10}],
            "payment_method": "card",
            "total": 10,
        })
        assert resp.status_code == 400


class TestSessionRoutes:

    def test_current_then_close(self, client, db_session):
        current = client.get("/api/sessions/current").get_json()
        assert current["is_closed"] is False

        resp = client.post("/api/sessions/close")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["closed_id"] == current["id"]

        assert client.get("/api/sessions/current").get_json()["id"] == body["new_id"]

        history = client.get("/api/sessions/history").get_json()
        assert [s["id"] for s in history] == [current["id"]]
        assert history[0]["end_time"].endswith("Z")


class TestReportRoutes:

    def test_session_report_and_summary(self, client, db_session, product_a):
        client.post("/api/sales", json={
            "items": [{"product_id": product_a, "quantity": 1, "unit_price": 10}],
            "payment_method": "cash",
            "total": 10,
        })
        session_id = client.get("/api/sessions/current").get_json()["id"]

        report = client.get(f"/api/reports/session/{session_id}").get_json()
        assert len(report["sales"]) == 1
        assert report["movements"][0]["type"] == "sale"
        assert report["movements"][0]["product_name"] == "Product A"

        assert client.get("/api/reports/current").get_json()["session"]["id"] == session_id

        summary = client.get(f"/api/reports/session/{session_id}/summary").get_json()
        assert summary["totals"]["cash"] == 10.0

    def test_unknown_session(self, client, db_session):
        report = client.get("/api/reports/session/999999")
        assert report.status_code == 200
        assert report.get_json()["session"] is None

        assert client.get("/api/reports/session/999999/summary").status_code == 404
        assert client.get("/api/reports/session/999999/export").status_code == 404

    def test_csv_export(self, client, db_session):
        session_id = client.get("/api/sessions/current").get_json()["id"]

        resp = client.get(f"/api/reports/session/{session_id}/export")
        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        assert f"session_{session_id}.csv" in resp.headers["Content-Disposition"]
        assert resp.get_data(as_text=True).startswith("SESSION SUMMARY")


def test_health(client, db_session):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["checks"]["database"]["status"] == "healthy"


def test_cors_header_for_allowed_origin(client, db_session, app):
    origin = next(iter(app.config["CORS_ALLOWED_ORIGINS"]))
    resp = client.get("/api/products", headers={"Origin": origin})
    assert resp.headers["Access-Control-Allow-Origin"] == origin

    resp = client.get("/api/products", headers={"Origin": "http://evil.example"})
    assert "Access-Control-Allow-Origin" not in resp.headers
