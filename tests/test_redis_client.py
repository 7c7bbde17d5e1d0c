import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from infrastructure import redis as redis_module
from infrastructure.redis import RedisClient, close_default_redis, init_default_redis


class PingableRedis:

    def __init__(self, reachable=True):
        self.reachable = reachable
        self.closed = False

    async def ping(self):
        if not self.reachable:
            raise RedisConnectionError("refused")
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_from_url(monkeypatch):
    created = []

    def factory(url, **kwargs):
        client = PingableRedis(reachable="bad" not in url)
        created.append((url, kwargs, client))
        return client

    monkeypatch.setattr(redis_module.redis, "from_url", factory)
    return created


@pytest.mark.asyncio
async def test_init_pings_and_close_releases(fake_from_url):
    client = RedisClient("redis://cache:6379/0")
    with pytest.raises(RuntimeError):
        client.get()
    await client.init()
    assert client.connected
    _, kwargs, raw = fake_from_url[0]
    assert kwargs["decode_responses"] is True
    assert client.get() is raw
    await client.close()
    assert raw.closed
    assert not client.connected


@pytest.mark.asyncio
async def test_unreachable_server_fails_fast(fake_from_url):
    client = RedisClient("redis://bad:6379/0")
    with pytest.raises(RedisConnectionError):
        await client.init()
    assert fake_from_url[0][2].closed
    assert not client.connected


@pytest.mark.asyncio
async def test_default_client_is_shared(fake_from_url):
    first = await init_default_redis("redis://cache:6379/0")
    second = await init_default_redis("redis://cache:6379/0")
    assert first is second
    assert len(fake_from_url) == 1
    await close_default_redis()
    assert not first.connected
