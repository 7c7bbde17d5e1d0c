from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is importable when tests are run from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import config
from db import ensure_db
from infrastructure import GameListCache
from stores.sqlite_auth_store import SqliteAuthStore
from stores.sqlite_game_store import SqliteGameStore


class FakeRedis:
    """The slice of the redis.asyncio API used by GameListCache."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.deleted: list[str] = []

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            self.deleted.append(key)
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(config, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(tmp_path, fake_redis):
    from main import create_app

    app = create_app(
        db_path=str(tmp_path / "api.sqlite3"),
        cache=GameListCache(fake_redis, ttl=300),
        maintenance_interval_minutes=0,
    )
    with TestClient(app) as c:
        yield c


def login(client, username, password="secret123"):
    """Register (if needed) and log in; returns (headers, user_id)."""
    client.post("/api/auth/register", json={"username": username, "password": password})
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user_id"]


@pytest.fixture
def alice(client):
    return login(client, "alice")


@pytest.fixture
def bob(client):
    return login(client, "bob")


@pytest.fixture
async def sqlite_stores(tmp_path):
    db_path = str(tmp_path / "stores.sqlite3")
    await ensure_db(db_path)
    game_store = SqliteGameStore(db_path)
    auth_store = SqliteAuthStore(db_path)
    await game_store.init()
    await auth_store.init()
    yield game_store, auth_store
    await game_store.close()
    await auth_store.close()


@pytest.fixture
def login_as(client):
    def _login(username, password="secret123"):
        return login(client, username, password)
    return _login
