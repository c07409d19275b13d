import uuid

import pytest
from fastapi.testclient import TestClient

from storefront import create_app
from storefront.authservice import (
    AuthConfig, AuthService, CredentialHasher, InMemoryProductCatalog,
    InMemoryUserStore, TokenService,
)
from storefront.authservice.contracts import Order, OrderStatus, Product, RegisterRequest, Role

PREFIX = "/api/v1/auth"


def make_user(svc, email, *, admin=False):
    user = svc.register(RegisterRequest(
        name=email.split("@")[0].title(),
        email=email,
        password="password123",
        phone="1234567890",
        address="1 Road",
        answer="Blue",
    )).user
    if admin:
        svc.users.update(user.id, role=Role.ADMIN)
    return user.id, {"Authorization": svc.tokens.issue(user.id)}


def make_order(svc, buyer_id, products, created_at):
    order = Order(
        id=uuid.uuid4().hex,
        buyer_id=buyer_id,
        products=products,
        payment={"success": True},
        created_at=created_at,
        updated_at=created_at,
    )
    return svc.orders.create(order)


@pytest.fixture
def seeded(auth_service):
    auth_service.catalog.add(Product(id="p1", name="Laptop", price=999.0, photo=b"\x89PNG"))
    auth_service.catalog.add(Product(id="p2", name="Mouse", price=19.0, photo=b"\x89PNG"))
    alice_id, alice = make_user(auth_service, "alice@example.com")
    bob_id, bob = make_user(auth_service, "bob@example.com")
    _, admin = make_user(auth_service, "admin@example.com", admin=True)
    first = make_order(auth_service, alice_id, ["p1", "p2", "p1"], created_at=100.0)
    second = make_order(auth_service, bob_id, ["p2"], created_at=200.0)
    third = make_order(auth_service, alice_id, ["p2"], created_at=300.0)
    return {
        "alice": alice, "bob": bob, "admin": admin,
        "orders": [first, second, third],
    }


def test_own_orders_are_populated_without_photos(client, seeded):
    res = client.get(f"{PREFIX}/orders", headers=seeded["alice"])
    assert res.status_code == 200
    orders = res.json()
    assert [o["id"] for o in orders] == [seeded["orders"][0].id, seeded["orders"][2].id]

    first = orders[0]
    assert [p["id"] for p in first["products"]] == ["p1", "p2", "p1"]
    assert all("photo" not in p for p in first["products"])
    assert first["buyer"] == {"id": seeded["orders"][0].buyer_id, "name": "Alice"}
    assert first["status"] == "Not Processed"


def test_own_orders_require_token(client, seeded):
    assert client.get(f"{PREFIX}/orders").status_code == 401


def test_all_orders_newest_first_for_admin(client, seeded):
    res = client.get(f"{PREFIX}/all-orders", headers=seeded["admin"])
    assert res.status_code == 200
    ids = [o["id"] for o in res.json()]
    assert ids == [o.id for o in reversed(seeded["orders"])]


def test_all_orders_denied_for_regular_user(client, seeded):
    res = client.get(f"{PREFIX}/all-orders", headers=seeded["alice"])
    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Unauthorized Access"}


def test_admin_updates_status_and_readers_see_it(client, seeded):
    order_id = seeded["orders"][0].id
    res = client.put(f"{PREFIX}/order-status/{order_id}", json={"status": "Shipped"}, headers=seeded["admin"])
    assert res.status_code == 200
    assert res.json()["status"] == "Shipped"

    mine = client.get(f"{PREFIX}/orders", headers=seeded["alice"]).json()
    assert next(o for o in mine if o["id"] == order_id)["status"] == "Shipped"
    everything = client.get(f"{PREFIX}/all-orders", headers=seeded["admin"]).json()
    assert next(o for o in everything if o["id"] == order_id)["status"] == "Shipped"


@pytest.mark.parametrize("target", [s.value for s in OrderStatus])
def test_any_status_can_follow_any_other(client, seeded, target):
    order_id = seeded["orders"][1].id
    client.put(f"{PREFIX}/order-status/{order_id}", json={"status": "Cancelled"}, headers=seeded["admin"])
    res = client.put(f"{PREFIX}/order-status/{order_id}", json={"status": target}, headers=seeded["admin"])
    assert res.status_code == 200
    assert res.json()["status"] == target


def test_non_admin_cannot_update_status(client, seeded, auth_service):
    order_id = seeded["orders"][0].id
    res = client.put(f"{PREFIX}/order-status/{order_id}", json={"status": "Shipped"}, headers=seeded["alice"])
    assert res.status_code == 401
    assert auth_service.orders.get(order_id).status == OrderStatus.NOT_PROCESSED


def test_unknown_status_value_rejected(client, seeded, auth_service):
    order_id = seeded["orders"][0].id
    res = client.put(f"{PREFIX}/order-status/{order_id}", json={"status": "Lost"}, headers=seeded["admin"])
    assert res.status_code == 422
    assert auth_service.orders.get(order_id).status == OrderStatus.NOT_PROCESSED


def test_unknown_order_id_is_a_successful_noop(client, seeded):
    res = client.put(f"{PREFIX}/order-status/missing", json={"status": "Shipped"}, headers=seeded["admin"])
    assert res.status_code == 200
    assert res.json() is None


def test_orders_count_and_pages(client, seeded, auth_service):
    for i in range(5):
        make_order(auth_service, seeded["orders"][0].buyer_id, ["p1"], created_at=400.0 + i)

    res = client.get(f"{PREFIX}/orders-count", headers=seeded["admin"])
    assert res.json() == {"success": True, "total": 8}

    page1 = client.get(f"{PREFIX}/orders-list/1", headers=seeded["admin"]).json()["orders"]
    page2 = client.get(f"{PREFIX}/orders-list/2", headers=seeded["admin"]).json()["orders"]
    assert len(page1) == 6
    assert len(page2) == 2
    assert page1[0]["created_at"] == 404.0
    assert page2[-1]["id"] == seeded["orders"][0].id

    assert client.get(f"{PREFIX}/orders-list/0", headers=seeded["admin"]).status_code == 422
    assert client.get(f"{PREFIX}/orders-count", headers=seeded["alice"]).status_code == 401


class BrokenOrderStore:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise RuntimeError("db down")
        return fail


def test_datastore_failures_become_generic_500():
    cfg = AuthConfig()
    svc = AuthService(
        users=InMemoryUserStore(),
        orders=BrokenOrderStore(),
        hasher=CredentialHasher(rounds=cfg.bcrypt_rounds),
        tokens=TokenService("test-secret"),
        catalog=InMemoryProductCatalog(),
        cfg=cfg,
    )
    _, alice = make_user(svc, "alice@example.com")
    _, admin = make_user(svc, "admin@example.com", admin=True)
    client = TestClient(create_app(svc))

    res = client.get(f"{PREFIX}/orders", headers=alice)
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Error While Getting Orders"}

    res = client.put(f"{PREFIX}/order-status/o1", json={"status": "Shipped"}, headers=admin)
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Error While Updating Order"}
    assert "db down" not in res.text
