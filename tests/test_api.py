"""Integration tests for the FastAPI endpoints (main.py)."""

import re

import pytest
from fastapi.testclient import TestClient

from rewards_service.ledger import OrderLedger
from rewards_service.main import create_app


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert "timestamp" in data


class TestCatalogEndpoints:
    def test_full_catalog(self, client):
        response = client.get("/api/catalog")
        assert response.status_code == 200
        data = response.json()
        assert data["catalogName"] == "Kyron HR Rewards Catalog"
        assert data["totalBrands"] == len(data["brands"])
        amazon = data["brands"][0]
        assert amazon["status"] == "active"
        assert amazon["items"][0]["utid"] == "U163059"

    def test_catalog_read_failure_returns_500(self, tmp_path):
        app = create_app(catalog_path=tmp_path / "missing.json")
        response = TestClient(app).get("/api/catalog")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load catalog"}

    def test_brand_search(self, client):
        response = client.get("/api/catalog/brands", params={"category": "Retail"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {b["brandName"] for b in data["brands"]} == {"Amazon", "Zalando"}


class TestOrderEndpoints:
    def test_create_order(self, client, make_submission):
        response = client.post("/api/orders", json=make_submission())
        assert response.status_code == 200
        data = response.json()
        assert re.match(r"^RA-\d{8}$", data["referenceOrderID"])
        assert data["status"] == "COMPLETE"
        assert data["rewardName"] == "Amazon eGift Card"
        assert data["recipient"] == {"email": "sarah.johnson@kyronhr.com"}
        assert data["deliveryMethod"] == "EMAIL"
        assert data["senderName"] == "Emily Davis"

    def test_missing_top_level_fields_return_400(self, client, ledger):
        response = client.post("/api/orders", json={"order_info": {"utid": "U163059"}})
        assert response.status_code == 400
        error = response.json()["error"]
        assert "customer_identifier" in error
        assert "account_identifier" in error
        assert len(ledger) == 0

    def test_missing_utid_returns_400(self, client, ledger, make_submission):
        payload = make_submission()
        del payload["order_info"]["utid"]
        response = client.post("/api/orders", json=payload)
        assert response.status_code == 400
        assert "utid" in response.json()["error"]
        assert client.get("/api/orders").json()["total"] == 0

    def test_malformed_body_returns_400(self, client, make_submission):
        response = client.post("/api/orders", json=make_submission(amount="lots"))
        assert response.status_code == 400
        assert "amount" in response.json()["error"]

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount_returns_400(self, client, ledger, literal):
        body = (
            '{"customer_identifier": "c", "account_identifier": "a", '
            '"order_info": {"utid": "U163059", "amount": %s, "recipient": {"email": "x@kyronhr.com"}}}' % literal
        )
        response = client.post("/api/orders", content=body, headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert "amount" in response.json()["error"]
        assert len(ledger) == 0

        listing = client.get("/api/orders")
        assert listing.status_code == 200
        assert listing.json() == {"orders": [], "total": 0}

    def test_unexpected_failure_returns_500(self, make_submission):
        class BrokenLedger(OrderLedger):
            def append(self, order):
                raise RuntimeError("disk on fire")

        app = create_app(ledger=BrokenLedger())
        response = TestClient(app).post("/api/orders", json=make_submission())
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create order"}

    def test_lookup_before_and_after_creation(self, make_submission):
        ledger = OrderLedger(start=42)
        client = TestClient(create_app(ledger=ledger))

        response = client.get("/api/orders/RA-00000042")
        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}

        created = client.post("/api/orders", json=make_submission()).json()
        assert created["referenceOrderID"] == "RA-00000042"

        response = client.get("/api/orders/RA-00000042")
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETE"
        assert response.json() == created

    def test_list_orders_newest_first(self, client, ledger, make_submission):
        refs = [client.post("/api/orders", json=make_submission()).json()["referenceOrderID"] for _ in range(3)]

        data = client.get("/api/orders").json()
        assert data["total"] == 3
        assert {o["referenceOrderID"] for o in data["orders"]} == set(refs)
        assert [o["referenceOrderID"] for o in data["orders"]] == [o.referenceOrderID for o in ledger.list()]


class TestEmployeeEndpoints:
    def test_list_employees(self, client):
        data = client.get("/api/employees", params={"department": "Engineering"}).json()
        assert data["total"] == 2

    def test_get_employee(self, client):
        assert client.get("/api/employees/3").json()["name"] == "Mike Chen"
        assert client.get("/api/employees/99").status_code == 404

    def test_birthdays(self, client):
        response = client.get("/api/employees/birthdays", params={"window": "all"})
        assert response.status_code == 200
        assert response.json()["total"] == 8

    @pytest.mark.parametrize("window", ["year", "decade"])
    def test_bad_birthday_window(self, client, window):
        response = client.get("/api/employees/birthdays", params={"window": window})
        assert response.status_code == 400
