"""
CLI command tests (flask system/users/outlets/products).
"""

from outletstock.extensions import db
from outletstock.models import Outlet, Product, User


def test_system_init_is_idempotent(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["system", "init"])
    assert first.exit_code == 0, first.output
    assert "Outlets created: 3" in first.output
    assert "Users created: 5" in first.output
    assert "Products created: 4" in first.output

    second = runner.invoke(args=["system", "init"])
    assert second.exit_code == 0, second.output
    assert "Users created: 0" in second.output

    with app.app_context():
        assert db.session.query(Outlet).count() == 3
        assert db.session.query(User).count() == 5
        assert db.session.query(Product).count() == 4

        cafe_user = db.session.query(User).filter_by(email="cafe@inventory.com").one()
        assert cafe_user.outlet.type == "CAFE"
        owner = db.session.query(User).filter_by(email="owner@inventory.com").one()
        assert owner.outlet_id is None


def test_seeded_user_can_log_in(app, client):
    app.test_cli_runner().invoke(args=["system", "init"])

    resp = client.post("/api/auth/login", json={"email": "owner@inventory.com", "password": "Password123!"})
    assert resp.status_code == 200


def test_users_list(app, seed):
    result = app.test_cli_runner().invoke(args=["users", "list", "--role", "OWNER"])
    assert result.exit_code == 0
    assert "owner@inventory.com" in result.output
    assert "cafe@inventory.com" not in result.output


def test_products_create_and_list(app, seed):
    runner = app.test_cli_runner()

    created = runner.invoke(args=["products", "create", "--name", "Milk", "--unit", "liters", "--category", "Dairy"])
    assert created.exit_code == 0
    assert "PASS Created product: Milk" in created.output

    listed = runner.invoke(args=["products", "list"])
    assert "Milk" in listed.output


def test_outlets_create_rejects_duplicate_name(app, seed):
    result = app.test_cli_runner().invoke(
        args=["outlets", "create", "--name", "University Cafe", "--type", "CAFE"]
    )
    assert result.exit_code == 0
    assert "FAIL Outlet name already exists" in result.output


def test_reset_db(app, seed):
    result = app.test_cli_runner().invoke(args=["system", "reset-db", "--yes"])
    assert result.exit_code == 0

    with app.app_context():
        assert db.session.query(User).count() == 0
