import json
import logging

import httpx
import pytest

from editor.gateway import (
    GameGateway,
    GatewayError,
    NotFound,
    TokenStore,
    Unauthorized,
    ValidationFailed,
)


@pytest.fixture
def tokens(tmp_path):
    return TokenStore(tmp_path / "auth" / "token.json")


def make_gateway(tokens, handler):
    return GameGateway("http://testserver", tokens=tokens, transport=httpx.MockTransport(handler))


class TestTokenStore:

    def test_set_get_clear(self, tokens):
        assert tokens.get() is None
        tokens.set("abc")
        assert tokens.get() == "abc"
        tokens.clear()
        assert tokens.get() is None
        tokens.clear()

    def test_unreadable_file_counts_as_no_token(self, tokens):
        tokens.path.parent.mkdir(parents=True)
        tokens.path.write_text("{not json")
        assert tokens.get() is None


@pytest.mark.asyncio
async def test_requests_carry_bearer_token(tokens):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    tokens.set("tok-1")
    async with make_gateway(tokens, handler) as gateway:
        assert await gateway.list_games() == []

    assert seen[0].method == "GET"
    assert seen[0].url.path == "/api/games"
    assert seen[0].headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_login_stores_token_and_logout_clears_it(tokens):
    def handler(request):
        if request.url.path == "/api/auth/login":
            assert "Authorization" not in request.headers
            return httpx.Response(200, json={"token": "tok-2", "user_id": "u1", "expires_at": "x"})
        return httpx.Response(200, json={"message": "Session revoked"})

    async with make_gateway(tokens, handler) as gateway:
        await gateway.login("alice", "secret123")
        assert tokens.get() == "tok-2"
        await gateway.logout()
    assert tokens.get() is None


@pytest.mark.asyncio
async def test_logout_clears_token_even_when_server_rejects(tokens):
    tokens.set("stale")
    async with make_gateway(tokens, lambda r: httpx.Response(401, json={"detail": "Invalid token"})) as gateway:
        with pytest.raises(Unauthorized):
            await gateway.logout()
    assert tokens.get() is None


@pytest.mark.asyncio
async def test_update_sends_only_supplied_fields(tokens):
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "g1"})

    async with make_gateway(tokens, handler) as gateway:
        await gateway.update_game("g1", pieces=[])
        await gateway.update_game("g1", title="New", rules="")
    assert bodies == [{"pieces": []}, {"title": "New", "rules": ""}]


@pytest.mark.asyncio
async def test_create_omits_missing_fields(tokens):
    bodies = []

    def handler(request):
        bodies.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"id": "g1", "title": "Chess Variant"})

    async with make_gateway(tokens, handler) as gateway:
        game = await gateway.create_game("Chess Variant")
    assert game["id"] == "g1"
    assert bodies == [("POST", "/api/games", {"title": "Chess Variant"})]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, body, exc_type",
    [
        (401, {"detail": "Not authenticated"}, Unauthorized),
        (404, {"detail": "Game not found"}, NotFound),
        (500, {"detail": "Server Error"}, GatewayError),
    ],
)
async def test_error_statuses_map_to_exceptions(tokens, status, body, exc_type):
    async with make_gateway(tokens, lambda r: httpx.Response(status, json=body)) as gateway:
        with pytest.raises(exc_type) as info:
            await gateway.load_game("g1")
    assert info.value.status_code == status
    assert body["detail"] in str(info.value)


@pytest.mark.asyncio
async def test_validation_errors_are_exposed(tokens):
    errors = [{"field": "title", "msg": "Title is required"}]
    async with make_gateway(tokens, lambda r: httpx.Response(400, json={"errors": errors})) as gateway:
        with pytest.raises(ValidationFailed) as info:
            await gateway.create_game("")
    assert info.value.errors == errors
    assert info.value.status_code == 400


@pytest.mark.asyncio
async def test_transport_failure_becomes_gateway_error(tokens):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_gateway(tokens, handler) as gateway:
        with pytest.raises(GatewayError) as info:
            await gateway.list_games()
    assert info.value.status_code is None


@pytest.mark.asyncio
async def test_non_json_success_body_becomes_gateway_error(tokens):
    async with make_gateway(tokens, lambda r: httpx.Response(200, text="<html>proxy</html>")) as gateway:
        with pytest.raises(GatewayError) as info:
            await gateway.update_game("g1", title="x")
    assert info.value.status_code == 200
    assert "non-JSON" in str(info.value)


@pytest.mark.asyncio
async def test_list_failure_is_logged(tokens, caplog):
    async with make_gateway(tokens, lambda r: httpx.Response(500, json={"detail": "Server Error"})) as gateway:
        with caplog.at_level(logging.ERROR, logger="editor.gateway"):
            with pytest.raises(GatewayError):
                await gateway.list_games()
    assert "Error fetching games" in caplog.text
