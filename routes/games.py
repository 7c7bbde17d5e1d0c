from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
import logging

from infrastructure import get_game_cache
from models import CreateGameRequest, UpdateGameRequest, GameResponse, MessageResponse
from stores import get_game_store, GameNotFound
from utils.auth import current_user_id
from utils.validation import title_errors, sanitize_json
from . import games_helpers

logger = logging.getLogger(__name__)

router = APIRouter()


def _validation_error(errors: list[dict[str, str]]) -> JSONResponse:
	return JSONResponse(status_code=400, content={"errors": errors})


def _clean_pieces(pieces):
	"""Strip unsafe keys from the opaque piece list. Raises ValueError."""
	if pieces is None:
		return None
	return sanitize_json(pieces)


@router.get("", response_model=list[GameResponse])
async def list_games(user_id: str = Depends(current_user_id), store = Depends(get_game_store), cache = Depends(get_game_cache)):
	try:
		return await games_helpers.list_games(store, cache, user_id)
	except Exception as exc:
		logger.error(f"Failed to list games for {user_id}: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, user_id: str = Depends(current_user_id), store = Depends(get_game_store)):
	try:
		return await games_helpers.get_game(store, game_id, user_id)
	except GameNotFound:
		raise HTTPException(status_code=404, detail="Game not found")
	except Exception as exc:
		logger.error(f"Failed to load game {game_id}: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")


@router.post("", response_model=GameResponse)
async def create_game(req: CreateGameRequest, user_id: str = Depends(current_user_id), store = Depends(get_game_store), cache = Depends(get_game_cache)):
	errors = title_errors(req.title)
	if errors:
		return _validation_error(errors)

	try:
		pieces = _clean_pieces(req.pieces)
	except ValueError as exc:
		return _validation_error([{"field": "pieces", "msg": str(exc)}])

	try:
		return await games_helpers.create_game(
			store,
			cache,
			user_id,
			title=req.title.strip(),
			pieces=pieces,
			rules=req.rules,
		)
	except Exception as exc:
		logger.error(f"Unexpected error creating game: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")


@router.put("/{game_id}", response_model=GameResponse)
async def update_game(game_id: str, req: UpdateGameRequest, user_id: str = Depends(current_user_id), store = Depends(get_game_store), cache = Depends(get_game_cache)):
	if req.title is not None and len(req.title) > 0:
		errors = title_errors(req.title)
		if errors:
			return _validation_error(errors)

	try:
		pieces = _clean_pieces(req.pieces)
	except ValueError as exc:
		return _validation_error([{"field": "pieces", "msg": str(exc)}])

	try:
		return await games_helpers.update_game(
			store,
			cache,
			game_id,
			user_id,
			title=req.title.strip() if req.title else None,
			pieces=pieces,
			rules=req.rules,
		)
	except GameNotFound:
		raise HTTPException(status_code=404, detail="Game not found")
	except Exception as exc:
		logger.error(f"Unexpected error updating game {game_id}: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")


@router.delete("/{game_id}", response_model=MessageResponse)
async def delete_game(game_id: str, user_id: str = Depends(current_user_id), store = Depends(get_game_store), cache = Depends(get_game_cache)):
	try:
		return await games_helpers.delete_game(store, cache, game_id, user_id)
	except GameNotFound:
		raise HTTPException(status_code=404, detail="Game not found")
	except Exception as exc:
		logger.error(f"Unexpected error deleting game {game_id}: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")
