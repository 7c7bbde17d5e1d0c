import asyncio
from datetime import timedelta

import pytest

from stores import GameNotFound, SessionNotFound, StoreError, UserAlreadyExists, UserNotFound, UnexpectedResult
from utils.time import now_utc, to_iso


async def make_user(auth_store, username="alice"):
    user = await auth_store.create_user(username, b"salt", b"hashed")
    return user["user_id"]


class TestSqliteGameStore:

    @pytest.mark.asyncio
    async def test_create_and_get(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        game = await games.create_game(owner, title="Chess Variant", pieces=[{"id": "p1"}], rules="r")
        assert await games.get_game(game["id"], owner) == game
        assert game["pieces"] == [{"id": "p1"}]

    @pytest.mark.asyncio
    async def test_create_for_unknown_owner_fails(self, sqlite_stores):
        games, _ = sqlite_stores
        with pytest.raises(UnexpectedResult):
            await games.create_game("ghost", title="x")

    @pytest.mark.asyncio
    async def test_every_query_is_scoped_to_owner(self, sqlite_stores):
        games, auth = sqlite_stores
        alice = await make_user(auth, "alice")
        bob = await make_user(auth, "bob")
        game = await games.create_game(alice, title="Mine")

        with pytest.raises(GameNotFound):
            await games.get_game(game["id"], bob)
        with pytest.raises(GameNotFound):
            await games.update_game(game["id"], bob, title="Stolen")
        with pytest.raises(GameNotFound):
            await games.delete_game(game["id"], bob)
        assert await games.list_games(bob) == []
        assert (await games.get_game(game["id"], alice))["title"] == "Mine"

    @pytest.mark.asyncio
    async def test_update_fallbacks(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        game = await games.create_game(owner, title="T", pieces=[{"id": "p1"}], rules="R")

        kept = await games.update_game(game["id"], owner, title="", rules="")
        assert (kept["title"], kept["pieces"], kept["rules"]) == ("T", [{"id": "p1"}], "R")

        cleared = await games.update_game(game["id"], owner, pieces=[])
        assert cleared["pieces"] == []
        assert cleared["title"] == "T"

    @pytest.mark.asyncio
    async def test_failed_update_releases_transaction(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        with pytest.raises(GameNotFound):
            await games.update_game("missing", owner, title="x")
        game = await games.create_game(owner, title="after")
        assert (await games.update_game(game["id"], owner, title="ok"))["title"] == "ok"

    @pytest.mark.asyncio
    async def test_list_orders_by_most_recent_update(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        a = await games.create_game(owner, title="a")
        b = await games.create_game(owner, title="b")
        assert [g["id"] for g in await games.list_games(owner)] == [b["id"], a["id"]]
        await games.update_game(a["id"], owner, rules="touched")
        assert [g["id"] for g in await games.list_games(owner)] == [a["id"], b["id"]]

    @pytest.mark.asyncio
    async def test_delete(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        game = await games.create_game(owner, title="gone")
        await games.delete_game(game["id"], owner)
        with pytest.raises(GameNotFound):
            await games.get_game(game["id"], owner)

    @pytest.mark.asyncio
    async def test_overlapping_updates_both_apply_and_last_wins(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        game = await games.create_game(owner, title="start")

        first, second = await asyncio.gather(
            games.update_game(game["id"], owner, title="A"),
            games.update_game(game["id"], owner, title="B"),
        )
        assert (first["title"], second["title"]) == ("A", "B")
        assert (await games.get_game(game["id"], owner))["title"] == "B"

    @pytest.mark.asyncio
    async def test_failed_update_does_not_undo_concurrent_create(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)

        missing, created = await asyncio.gather(
            games.update_game("missing", owner, title="x"),
            games.create_game(owner, title="Created concurrently"),
            return_exceptions=True,
        )
        assert isinstance(missing, GameNotFound)
        assert [g["id"] for g in await games.list_games(owner)] == [created["id"]]

    @pytest.mark.asyncio
    async def test_concurrent_writes_of_every_kind(self, sqlite_stores):
        games, auth = sqlite_stores
        owner = await make_user(auth)
        doomed = await games.create_game(owner, title="doomed")
        kept = await games.create_game(owner, title="kept")

        await asyncio.gather(
            games.delete_game(doomed["id"], owner),
            games.update_game(kept["id"], owner, rules="r1"),
            games.create_game(owner, title="new"),
            games.update_game(kept["id"], owner, pieces=[]),
        )
        titles = sorted(g["title"] for g in await games.list_games(owner))
        assert titles == ["kept", "new"]
        assert (await games.get_game(kept["id"], owner))["rules"] == "r1"


class TestSqliteAuthStore:

    @pytest.mark.asyncio
    async def test_users(self, sqlite_stores):
        _, auth = sqlite_stores
        user_id = await make_user(auth)
        assert (await auth.get_user(user_id))["username"] == "alice"
        assert await auth.get_user_password("alice") == (user_id, b"salt", b"hashed")
        assert await auth.get_user_password("nobody") is None
        with pytest.raises(UserAlreadyExists):
            await make_user(auth)
        with pytest.raises(UserNotFound):
            await auth.get_user("missing")

    @pytest.mark.asyncio
    async def test_session_lifecycle(self, sqlite_stores):
        _, auth = sqlite_stores
        user_id = await make_user(auth)
        await auth.create_session_token("tok", user_id=user_id, expires_at=now_utc() + timedelta(days=1))
        assert await auth.validate_session_token("tok") == {"user_id": user_id}
        await auth.invalidate_session("tok")
        assert await auth.validate_session_token("tok") is None
        with pytest.raises(SessionNotFound):
            await auth.invalidate_session("tok")

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, sqlite_stores):
        _, auth = sqlite_stores
        with pytest.raises(UserNotFound):
            await auth.create_session_token("tok", user_id="ghost", expires_at=now_utc())

    @pytest.mark.asyncio
    async def test_expired_tokens(self, sqlite_stores):
        _, auth = sqlite_stores
        user_id = await make_user(auth)
        past = to_iso(now_utc() - timedelta(minutes=1))
        future = to_iso(now_utc() + timedelta(days=1))
        await auth.create_session_token("old", user_id=user_id, expires_at=past)
        await auth.create_session_token("older", user_id=user_id, expires_at=past)
        await auth.create_session_token("fresh", user_id=user_id, expires_at=future)

        assert await auth.validate_session_token("old") is None
        assert await auth.delete_expired_sessions() == 1
        assert await auth.validate_session_token("fresh") == {"user_id": user_id}


def test_store_errors_share_one_base_without_retry_hints():
    for exc_type in (GameNotFound, UnexpectedResult, UserNotFound, UserAlreadyExists, SessionNotFound):
        assert issubclass(exc_type, StoreError)
        assert not hasattr(exc_type, "retryable")
