"""
Authorization tests.

Verifies:
- Unauthenticated requests return 401 on every protected endpoint
- Roles outside an endpoint policy get 403
- Outlet staff only ever see and write their own outlet
- Owners may filter by any outlet, or none
"""

import pytest

from outletstock.extensions import db
from outletstock.models import DailyClosing, Waste
from outletstock.permissions import (
    ENDPOINT_POLICIES,
    Role,
    SCOPE_ANY,
    SCOPE_OWN,
    effective_outlet_id,
    is_role_allowed,
    outlet_scope,
)


DAY = "2026-03-10"


# =============================================================================
# UNAUTHENTICATED ACCESS - 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("GET", "/api/inventory"),
            ("POST", "/api/inventory"),
            ("GET", "/api/purchases"),
            ("POST", "/api/purchases"),
            ("GET", "/api/sales"),
            ("POST", "/api/sales"),
            ("GET", "/api/waste"),
            ("POST", "/api/waste"),
            ("GET", "/api/daily-closing"),
            ("POST", "/api/daily-closing"),
            ("GET", "/api/reports/inventory"),
            ("GET", "/api/reports/sales"),
            ("GET", "/api/reports/daily-summary"),
            ("GET", "/api/reports/dashboard-stats"),
            ("GET", "/api/products"),
            ("GET", "/api/outlets"),
        ],
    )
    def test_requires_auth(self, client, seed, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json["success"] is False

    def test_health_is_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["data"]["status"] == "ok"


# =============================================================================
# ROLE POLICIES - 403
# =============================================================================


class TestRolePolicies:

    def test_outlet_staff_cannot_record_inventory(self, client, seed, cafe_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": seed.coffee, "outletId": seed.cafe, "quantity": 5, "date": DAY},
            headers=cafe_headers,
        )
        assert resp.status_code == 403
        assert resp.json == {"success": False, "error": "Insufficient permissions"}

    def test_outlet_staff_cannot_record_purchases(self, client, seed, cafe_headers):
        resp = client.post(
            "/api/purchases",
            json={"productId": seed.coffee, "quantity": 5, "date": DAY},
            headers=cafe_headers,
        )
        assert resp.status_code == 403

    @pytest.mark.parametrize("path", ["/api/sales", "/api/waste", "/api/daily-closing"])
    def test_purchasing_cannot_record_outlet_transactions(self, client, seed, purchasing_headers, path):
        resp = client.post(path, json={}, headers=purchasing_headers)
        assert resp.status_code == 403

    @pytest.mark.parametrize("path", ["/api/reports/daily-summary", "/api/reports/dashboard-stats"])
    def test_owner_only_reports(self, client, seed, cafe_headers, purchasing_headers, path):
        query = f"?startDate={DAY}&endDate={DAY}"
        assert client.get(path + query, headers=cafe_headers).status_code == 403
        assert client.get(path + query, headers=purchasing_headers).status_code == 403

    def test_forbidden_is_checked_before_payload(self, client, seed, cafe_headers):
        resp = client.post("/api/purchases", json={"quantity": -1}, headers=cafe_headers)
        assert resp.status_code == 403

    def test_every_role_may_list(self, client, seed, owner_headers, purchasing_headers, cafe_headers):
        for headers in (owner_headers, purchasing_headers, cafe_headers):
            for path in ("/api/products", "/api/outlets", "/api/inventory", "/api/sales"):
                assert client.get(path, headers=headers).status_code == 200


# =============================================================================
# OUTLET SCOPING
# =============================================================================


def _record_sale(client, headers, product_id, outlet_id=None, quantity=1):
    payload = {"productId": product_id, "quantity": quantity, "date": DAY}
    if outlet_id is not None:
        payload["outletId"] = outlet_id
    resp = client.post("/api/sales", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json
    return resp.json["data"]


class TestOutletScoping:

    def test_outlet_staff_records_against_own_outlet(self, client, seed, cafe_headers):
        sale = _record_sale(client, cafe_headers, seed.coffee)
        assert sale["outletId"] == seed.cafe

    def test_outlet_staff_cannot_name_another_outlet(self, client, seed, cafe_headers):
        resp = client.post(
            "/api/sales",
            json={"productId": seed.coffee, "quantity": 1, "date": DAY, "outletId": seed.restaurant},
            headers=cafe_headers,
        )
        assert resp.status_code == 403
        assert resp.json["error"] == "Cannot record for another outlet"

    def test_outlet_staff_may_repeat_own_outlet(self, client, seed, cafe_headers):
        sale = _record_sale(client, cafe_headers, seed.coffee, outlet_id=seed.cafe)
        assert sale["outletId"] == seed.cafe

    def test_owner_must_name_outlet(self, client, seed, owner_headers):
        resp = client.post(
            "/api/sales",
            json={"productId": seed.coffee, "quantity": 1, "date": DAY},
            headers=owner_headers,
        )
        assert resp.status_code == 400
        assert resp.json["error"] == "Outlet ID is required"

    def test_owner_records_for_any_outlet(self, client, seed, owner_headers):
        sale = _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.mini_market)
        assert sale["outletId"] == seed.mini_market

    def test_outlet_filter_ignored_for_outlet_staff(
        self, client, seed, owner_headers, cafe_headers
    ):
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.cafe)
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.restaurant)

        resp = client.get(f"/api/sales?outletId={seed.restaurant}", headers=cafe_headers)
        assert resp.status_code == 200
        rows = resp.json["data"]
        assert len(rows) == 1
        assert all(row["outletId"] == seed.cafe for row in rows)

    def test_owner_filters_by_outlet_or_sees_all(self, client, seed, owner_headers):
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.cafe)
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.restaurant)

        everything = client.get("/api/sales", headers=owner_headers).json["data"]
        assert len(everything) == 2

        restaurant = client.get(f"/api/sales?outletId={seed.restaurant}", headers=owner_headers).json["data"]
        assert [row["outletId"] for row in restaurant] == [seed.restaurant]

    def test_purchasing_sees_every_outlet(self, client, seed, owner_headers, purchasing_headers):
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.cafe)
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.restaurant)

        rows = client.get("/api/sales", headers=purchasing_headers).json["data"]
        assert len(rows) == 2

    @pytest.mark.parametrize(
        "path,payload",
        [
            ("/api/waste", {"productId": None, "quantity": 1, "date": DAY}),
            ("/api/daily-closing", {"cardSales": 10, "cashSales": 5, "date": DAY}),
            ("/api/inventory", {"productId": None, "quantity": 4, "date": DAY}),
        ],
    )
    def test_outlet_staff_list_only_own_rows(
        self, client, seed, owner_headers, cafe_headers, path, payload
    ):
        for outlet_id in (seed.cafe, seed.restaurant):
            body = dict(payload, outletId=outlet_id)
            if "productId" in body:
                body["productId"] = seed.bread
            resp = client.post(path, json=body, headers=owner_headers)
            assert resp.status_code == 201, resp.json

        rows = client.get(path, query_string={"outletId": seed.restaurant}, headers=cafe_headers).json["data"]
        assert len(rows) == 1
        assert rows[0]["outletId"] == seed.cafe

    @pytest.mark.parametrize(
        "path,payload",
        [
            ("/api/waste", {"quantity": 1, "date": DAY}),
            ("/api/daily-closing", {"cardSales": 10, "cashSales": 5, "date": DAY}),
        ],
    )
    def test_outlet_staff_cannot_write_another_outlet(self, app, client, seed, cafe_headers, path, payload):
        body = dict(payload, outletId=seed.restaurant)
        if path == "/api/waste":
            body["productId"] = seed.bread
        resp = client.post(path, json=body, headers=cafe_headers)

        assert resp.status_code == 403
        assert resp.json["error"] == "Cannot record for another outlet"

        with app.app_context():
            assert db.session.query(Waste).count() == 0
            assert db.session.query(DailyClosing).count() == 0

    def test_inventory_report_is_scoped(self, client, seed, owner_headers, cafe_headers):
        _record_sale(client, owner_headers, seed.coffee, outlet_id=seed.restaurant, quantity=7)

        rows = client.get(
            f"/api/reports/inventory?outletId={seed.restaurant}", headers=cafe_headers
        ).json["data"]
        coffee = next(row for row in rows if row["product"]["id"] == seed.coffee)
        assert coffee["sold"] == 0

    @pytest.mark.parametrize("bad_id", ["abc", "²", "99999999999999999999", "-1"])
    @pytest.mark.parametrize("path", ["/api/sales", "/api/waste", "/api/inventory", "/api/reports/inventory"])
    def test_bad_outlet_filter(self, client, seed, owner_headers, path, bad_id):
        resp = client.get(path, query_string={"outletId": bad_id}, headers=owner_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "Outlet ID must be an integer"


# =============================================================================
# POLICY TABLE
# =============================================================================


class TestPolicyTable:

    def test_every_policy_has_roles(self):
        for name, policy in ENDPOINT_POLICIES.items():
            assert policy.allowed_roles, name

    def test_unknown_policy_is_an_error(self):
        with pytest.raises(KeyError):
            is_role_allowed("nope.nothing", Role.OWNER)

    def test_unknown_role_is_denied(self):
        assert is_role_allowed("sales.list", "JANITOR") is False
        assert outlet_scope("JANITOR") == SCOPE_OWN

    def test_scopes(self):
        assert outlet_scope(Role.OWNER) == SCOPE_ANY
        assert outlet_scope(Role.OUTLET_CAFE) == SCOPE_OWN

    def test_effective_outlet_id(self):
        assert effective_outlet_id(Role.OWNER, None, 3) == 3
        assert effective_outlet_id(Role.OWNER, None, None) is None
        assert effective_outlet_id(Role.OUTLET_CAFE, 1, 3) == 1
        assert effective_outlet_id(Role.PURCHASING, None, 3) is None
