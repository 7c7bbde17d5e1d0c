"""Data models used by the application.

Split into:
- `api_models`: Pydantic models used for request/response validation
- `domain_models`: TypedDicts mirroring rows handed out by the stores
- `pieces`: the tagged union of board pieces used by the editor
"""

from . import api_models, domain_models, pieces

from .api_models import (
	CreateGameRequest,
	UpdateGameRequest,
	GameResponse,
	CredentialsRequest,
	UserResponse,
	LoginResponse,
	MessageResponse,
)

from .domain_models import Game, User

from .pieces import (
	Piece,
	PIECE_TYPES,
	new_piece,
	parse_piece,
	parse_pieces,
	dump_pieces,
)

__all__ = [
	# submodules
	"api_models",
	"domain_models",
	"pieces",
	# api models
	"CreateGameRequest",
	"UpdateGameRequest",
	"GameResponse",
	"CredentialsRequest",
	"UserResponse",
	"LoginResponse",
	"MessageResponse",
	# domain models
	"Game",
	"User",
	# pieces
	"Piece",
	"PIECE_TYPES",
	"new_piece",
	"parse_piece",
	"parse_pieces",
	"dump_pieces",
]
