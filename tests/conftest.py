import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# Окружение должно быть готово до первого импорта courier.config
_TMP_DIR = tempfile.mkdtemp(prefix="courier-tests-")
os.environ["AUTH_SECRET_KEY"] = "test-secret"
os.environ["AUTH_LOGIN"] = "merchant"
os.environ["AUTH_PASSWORD"] = "merchant-pass"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/courier.db"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "log")
os.environ["LOG_PRINT"] = "0"

MERCHANT = "merchant"
MERCHANT_PASSWORD = "merchant-pass"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))
        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


def order_payload(**overrides):
    payload = {
        "store_id": 131172,
        "merchant_order_id": "MO-1001",
        "recipient_name": "Rahim Uddin",
        "recipient_phone": "01712345678",
        "recipient_address": "House 12, Road 5, Dhanmondi",
        "recipient_city": 1,
        "recipient_zone": 1,
        "recipient_area": 1,
        "delivery_type": 48,
        "item_type": 2,
        "special_instruction": "",
        "item_quantity": 1,
        "item_weight": 1.5,
        "amount_to_collect": 500,
        "item_description": "Cotton shirt",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def fresh_db():
    from courier.utils.database import drop_db, init_db

    asyncio.run(drop_db())
    asyncio.run(init_db())
    yield


@pytest.fixture()
def app():
    from courier.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    from courier.utils.database import drop_db

    asyncio.run(drop_db())
    with TestClient(app) as test_client:
        yield test_client


def login(client, username=MERCHANT, password=MERCHANT_PASSWORD):
    response = client.post("/api/v1/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture()
def auth_headers(client):
    return {"Authorization": f"Bearer {login(client)}"}


@pytest.fixture()
def memory_repo():
    from courier.repositories import InMemoryOrderRepository
    from courier.utils.security import hash_password

    repo = InMemoryOrderRepository()
    repo.add_user(MERCHANT, hash_password(MERCHANT_PASSWORD))
    return repo


@pytest.fixture()
def memory_client(app, memory_repo):
    from fastapi.testclient import TestClient
    from courier.routes.deps import get_order_repository

    app.dependency_overrides[get_order_repository] = lambda: memory_repo
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def memory_headers(memory_client):
    return {"Authorization": f"Bearer {login(memory_client)}"}


@pytest.fixture()
def make_order():
    return order_payload


@pytest.fixture()
def login_as():
    return login
