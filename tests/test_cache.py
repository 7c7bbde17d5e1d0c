import json

import pytest

from infrastructure.cache import GameListCache, cache_key


def create(client, headers, title="Cached"):
    return client.post("/api/games", json={"title": title}, headers=headers).json()


class TestGameListCacheUnit:

    @pytest.mark.asyncio
    async def test_miss_loads_and_stores_with_ttl(self, fake_redis):
        cache = GameListCache(fake_redis, ttl=300)
        calls = []

        async def loader():
            calls.append(1)
            return [{"id": "g1"}]

        assert await cache.get_or_load("u1", loader) == [{"id": "g1"}]
        assert await cache.get_or_load("u1", loader) == [{"id": "g1"}]
        assert calls == [1]
        assert json.loads(fake_redis.data["games:u1"]) == [{"id": "g1"}]
        assert fake_redis.expiry["games:u1"] == 300

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_dropped(self, fake_redis):
        cache = GameListCache(fake_redis)
        fake_redis.data[cache_key("u1")] = "{oops"
        assert await cache.get("u1") is None
        assert "games:u1" not in fake_redis.data


class TestListEndpointCaching:

    def test_list_populates_owner_key(self, client, alice, fake_redis):
        headers, user_id = alice
        game = create(client, headers)
        listed = client.get("/api/games", headers=headers).json()
        key = f"games:{user_id}"
        assert json.loads(fake_redis.data[key]) == listed
        assert listed[0]["id"] == game["id"]
        assert fake_redis.expiry[key] == 300

    def test_hit_is_served_from_cache(self, client, alice, fake_redis):
        headers, user_id = alice
        create(client, headers)
        client.get("/api/games", headers=headers)
        fake_redis.data[f"games:{user_id}"] = json.dumps([])
        assert client.get("/api/games", headers=headers).json() == []

    @pytest.mark.parametrize("action", ["create", "update", "delete"])
    def test_writes_invalidate_owner_key(self, client, alice, fake_redis, action):
        headers, user_id = alice
        key = f"games:{user_id}"
        game = create(client, headers)
        client.get("/api/games", headers=headers)
        assert key in fake_redis.data

        if action == "create":
            create(client, headers, title="Another")
        elif action == "update":
            client.put(f"/api/games/{game['id']}", json={"title": "New"}, headers=headers)
        else:
            client.delete(f"/api/games/{game['id']}", headers=headers)

        assert key not in fake_redis.data
        fresh = client.get("/api/games", headers=headers).json()
        assert json.loads(fake_redis.data[key]) == fresh

    def test_failed_write_leaves_cache_alone(self, client, alice, bob, fake_redis):
        alice_headers, alice_id = alice
        bob_headers, _ = bob
        game = create(client, alice_headers)
        client.get("/api/games", headers=alice_headers)
        client.put(f"/api/games/{game['id']}", json={"title": "x"}, headers=bob_headers)
        assert f"games:{alice_id}" in fake_redis.data

    def test_single_game_reads_bypass_cache(self, client, alice, fake_redis):
        headers, _ = alice
        game = create(client, headers)
        client.get(f"/api/games/{game['id']}", headers=headers)
        assert fake_redis.data == {}
