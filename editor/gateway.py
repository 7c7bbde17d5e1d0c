"""HTTP client for the games API.

Each operation is a single request carrying `Authorization: Bearer <token>`
from the `TokenStore`. Failures are raised as `GatewayError` subclasses and
never retried.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

import config

logger = logging.getLogger(__name__)


class GatewayError(Exception):
	"""A request to the games API failed."""

	def __init__(self, message: str, *, status_code: Optional[int] = None):
		super().__init__(message)
		self.status_code = status_code


class Unauthorized(GatewayError):
	pass


class NotFound(GatewayError):
	pass


class ValidationFailed(GatewayError):

	def __init__(self, message: str, errors: list[dict[str, Any]]):
		super().__init__(message, status_code=400)
		self.errors = errors


class TokenStore:
	"""Persists the bearer token in a small JSON file."""

	def __init__(self, path: Optional[str | Path] = None):
		self.path = Path(path or config.TOKEN_PATH)

	def get(self) -> Optional[str]:
		if not self.path.exists():
			return None
		try:
			return json.loads(self.path.read_text()).get("token")
		except (OSError, json.JSONDecodeError) as exc:
			logger.warning(f"Ignoring unreadable token file {self.path}: {exc}")
			return None

	def set(self, token: str) -> None:
		self.path.parent.mkdir(parents=True, exist_ok=True)
		self.path.write_text(json.dumps({"token": token}))

	def clear(self) -> None:
		self.path.unlink(missing_ok=True)


def _error_message(response: httpx.Response) -> str:
	try:
		body = response.json()
	except ValueError:
		return response.text or response.reason_phrase
	if isinstance(body, dict):
		return str(body.get("detail") or body.get("errors") or body)
	return str(body)


class GameGateway:

	def __init__(
		self,
		base_url: Optional[str] = None,
		*,
		tokens: Optional[TokenStore] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
		timeout: float = 10.0,
	):
		self.tokens = tokens or TokenStore()
		self._client = httpx.AsyncClient(
			base_url=base_url or config.API_URL,
			transport=transport,
			timeout=timeout,
		)

	async def __aenter__(self) -> "GameGateway":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self._client.aclose()

	async def _request(self, method: str, url: str, *, json_body: Any = None, auth: bool = True) -> Any:
		headers = {}
		if auth:
			token = self.tokens.get()
			if token:
				headers["Authorization"] = f"Bearer {token}"

		try:
			response = await self._client.request(method, url, json=json_body, headers=headers)
		except httpx.HTTPError as exc:
			raise GatewayError(f"{method} {url} failed: {exc}") from exc

		if response.status_code == 401:
			raise Unauthorized(_error_message(response), status_code=401)
		if response.status_code == 404:
			raise NotFound(_error_message(response), status_code=404)
		if response.status_code == 400:
			try:
				body = response.json()
			except ValueError:
				body = None
			errors = body.get("errors", []) if isinstance(body, dict) else []
			raise ValidationFailed(_error_message(response), errors)
		if response.is_error:
			raise GatewayError(_error_message(response), status_code=response.status_code)
		try:
			return response.json()
		except ValueError as exc:
			raise GatewayError(
				f"{method} {url} returned a non-JSON body",
				status_code=response.status_code,
			) from exc

	# -------------------------------------------------
	# Accounts
	# -------------------------------------------------

	async def register(self, username: str, password: str) -> dict[str, Any]:
		return await self._request(
			"POST", "/api/auth/register",
			json_body={"username": username, "password": password},
			auth=False,
		)

	async def login(self, username: str, password: str) -> dict[str, Any]:
		"""Log in and remember the issued token."""
		session = await self._request(
			"POST", "/api/auth/login",
			json_body={"username": username, "password": password},
			auth=False,
		)
		self.tokens.set(session["token"])
		return session

	async def logout(self) -> None:
		try:
			await self._request("POST", "/api/auth/logout")
		finally:
			self.tokens.clear()

	# -------------------------------------------------
	# Games
	# -------------------------------------------------

	async def list_games(self) -> list[dict[str, Any]]:
		try:
			return await self._request("GET", "/api/games")
		except GatewayError as exc:
			logger.error(f"Error fetching games: {exc}")
			raise

	async def load_game(self, game_id: str) -> dict[str, Any]:
		return await self._request("GET", f"/api/games/{game_id}")

	async def create_game(
		self,
		title: str,
		pieces: Optional[list[dict[str, Any]]] = None,
		rules: Optional[str] = None,
	) -> dict[str, Any]:
		body: dict[str, Any] = {"title": title}
		if pieces is not None:
			body["pieces"] = pieces
		if rules is not None:
			body["rules"] = rules
		return await self._request("POST", "/api/games", json_body=body)

	async def update_game(
		self,
		game_id: str,
		*,
		title: Optional[str] = None,
		pieces: Optional[list[dict[str, Any]]] = None,
		rules: Optional[str] = None,
	) -> dict[str, Any]:
		"""PUT only the supplied fields; the server keeps the rest."""
		body = {k: v for k, v in (("title", title), ("pieces", pieces), ("rules", rules)) if v is not None}
		return await self._request("PUT", f"/api/games/{game_id}", json_body=body)

	async def delete_game(self, game_id: str) -> dict[str, Any]:
		return await self._request("DELETE", f"/api/games/{game_id}")
