"""Order endpoints wired to the in-memory store, including storage failures."""

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from courier.repositories import InMemoryOrderRepository
from courier.routes.deps import get_order_repository
from courier.utils.security import hash_password


class BrokenStore(InMemoryOrderRepository):
    """Finds users but fails every order write and read."""

    def fail(self):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    async def create_order(self, order):
        self.fail()

    async def list_orders(self, transfer_status, archive, limit, page, owner_id):
        self.fail()

    async def cancel_order(self, consignment_id):
        self.fail()


def test_end_to_end_lifecycle(memory_client, memory_headers, memory_repo, make_order):
    created = memory_client.post(
        "/api/v1/orders",
        json=make_order(recipient_city=1, item_weight=1.5, amount_to_collect=500),
        headers=memory_headers,
    ).json()["data"]

    stored = memory_repo.orders[created["consignment_id"]]
    assert (stored.delivery_fee, stored.cod_fee, stored.total_fee) == (85.0, 5.0, 590.0)
    assert stored.user_id == memory_repo.users["merchant"].id
    assert stored.order_type_id == 1
    assert stored.archive is False

    cancelled = memory_client.put(f"/api/v1/orders/{created['consignment_id']}/cancel", headers=memory_headers)
    again = memory_client.put(f"/api/v1/orders/{created['consignment_id']}/cancel", headers=memory_headers)

    assert cancelled.status_code == 200
    assert again.status_code == 400
    assert stored.order_status == "Cancelled"
    # сборы при отмене не пересчитываются
    assert stored.total_fee == 590.0


def test_rows_are_owner_scoped_but_total_is_not(memory_client, memory_headers, memory_repo, make_order, login_as):
    memory_repo.add_user("other", hash_password("other-pass"))
    other_headers = {"Authorization": f"Bearer {login_as(memory_client, 'other', 'other-pass')}"}

    for _ in range(2):
        memory_client.post("/api/v1/orders", json=make_order(), headers=memory_headers)
    for _ in range(3):
        memory_client.post("/api/v1/orders", json=make_order(), headers=other_headers)

    page = memory_client.get("/api/v1/orders/all?transfer_status=1", headers=memory_headers).json()["data"]

    assert page["total_in_page"] == 2
    assert page["total"] == 5
    assert page["last_page"] == 1


def test_user_removed_after_login_is_rejected(memory_client, memory_headers, memory_repo, make_order):
    del memory_repo.users["merchant"]

    assert memory_client.post("/api/v1/orders", json=make_order(), headers=memory_headers).status_code == 401
    assert memory_client.get("/api/v1/orders/all", headers=memory_headers).status_code == 401


def test_storage_failures_are_opaque(app, memory_client, memory_headers, make_order):
    broken = BrokenStore()
    broken.add_user("merchant", hash_password("merchant-pass"))
    app.dependency_overrides[get_order_repository] = lambda: broken

    responses = [
        memory_client.post("/api/v1/orders", json=make_order(), headers=memory_headers),
        memory_client.get("/api/v1/orders/all", headers=memory_headers),
        memory_client.put("/api/v1/orders/1/cancel", headers=memory_headers),
    ]

    for response in responses:
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error", "type": "error", "code": 500}
        assert "connection lost" not in response.text


def test_validation_happens_before_any_write(memory_client, memory_headers, memory_repo, make_order):
    response = memory_client.post(
        "/api/v1/orders", json=make_order(recipient_name="", item_type=0), headers=memory_headers
    )

    assert response.status_code == 422
    assert response.json()["errors"] == {
        "recipient_name": ["The recipient name field is required"],
        "item_type": ["The item type field is required"],
    }
    assert memory_repo.orders == {}


def raw_order_body(make_order, field, token):
    """JSON body with a literal number token that json.dumps would never emit for a str."""
    return json.dumps(make_order(**{field: "__RAW__"})).replace('"__RAW__"', token)


@pytest.mark.parametrize("field", ["item_weight", "amount_to_collect"])
@pytest.mark.parametrize("token", ["1e400", "-1e400", "NaN", "Infinity", "-Infinity"])
def test_non_finite_numbers_are_rejected(memory_client, memory_headers, memory_repo, make_order, field, token):
    response = memory_client.post(
        "/api/v1/orders",
        content=raw_order_body(make_order, field, token),
        headers={**memory_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request body", "type": "error", "code": 400}
    assert memory_repo.orders == {}


def test_listing_still_renders_after_rejected_non_finite_order(memory_client, memory_headers, make_order):
    memory_client.post(
        "/api/v1/orders",
        content=raw_order_body(make_order, "amount_to_collect", "1e400"),
        headers={**memory_headers, "Content-Type": "application/json"},
    )
    memory_client.post("/api/v1/orders", json=make_order(), headers=memory_headers)

    response = memory_client.get("/api/v1/orders/all?transfer_status=1", headers=memory_headers)

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 1


@pytest.mark.parametrize("overrides", [
    {"store_id": "12"},
    {"item_type": True},
    {"recipient_city": 1.0},
    {"item_quantity": "1"},
    {"amount_to_collect": "500"},
    {"recipient_phone": 1712345678},
])
def test_wire_types_are_not_coerced(memory_client, memory_headers, memory_repo, make_order, overrides):
    response = memory_client.post("/api/v1/orders", json=make_order(**overrides), headers=memory_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request body"
    assert memory_repo.orders == {}


def test_integer_amounts_are_accepted_for_float_fields(memory_client, memory_headers, memory_repo, make_order):
    response = memory_client.post(
        "/api/v1/orders", json=make_order(item_weight=2, amount_to_collect=1000), headers=memory_headers
    )

    assert response.status_code == 200
    assert len(memory_repo.orders) == 1


class MisbehavingStore(InMemoryOrderRepository):
    """Finds users but raises a plain ValueError from the listing query."""

    async def list_orders(self, transfer_status, archive, limit, page, owner_id):
        raise ValueError("row could not be mapped")


def test_storage_value_error_is_not_reported_as_bad_filter(app, memory_headers):
    store = MisbehavingStore()
    store.add_user("merchant", hash_password("merchant-pass"))
    app.dependency_overrides[get_order_repository] = lambda: store

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/orders/all?archive=false", headers=memory_headers)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error", "type": "error", "code": 500}
    assert "could not be mapped" not in response.text


@pytest.mark.parametrize("consignment_id", ["1_000", "١٢", "1.0", " 1"])
def test_cancel_rejects_non_ascii_or_formatted_ids(memory_client, memory_headers, consignment_id):
    response = memory_client.put(f"/api/v1/orders/{consignment_id}/cancel", headers=memory_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid consignment ID", "type": "error", "code": 400}
