from abc import ABC, abstractmethod


# =========================
# GameStore Interface
# =========================

class GameStore(ABC):
    """
    The GameStore is the sole authority over persisted game definitions.

    Invariants:
    - Every read and write is scoped by (game_id, owner_id)
    - A game owned by someone else is indistinguishable from a missing one
    - Updates overwrite the whole piece list; no history is kept
    """

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    @abstractmethod
    async def create_game(
        self,
        owner_id: str,
        *,
        title: str,
        pieces: list[dict] | None = None,
        rules: str | None = None,
    ) -> dict:
        """Create a new game for `owner_id` and return it.

        Missing pieces default to an empty list and missing rules to "".
        """

    @abstractmethod
    async def update_game(
        self,
        game_id: str,
        owner_id: str,
        *,
        title: str | None = None,
        pieces: list[dict] | None = None,
        rules: str | None = None,
    ) -> dict:
        """Overwrite the supplied fields and return the updated game.

        `title` and `rules` keep their stored value when absent or empty;
        `pieces` keeps its stored value when absent (None).

        Raises:
            GameNotFound: If no game matches both id and owner.
        """

    @abstractmethod
    async def delete_game(
        self,
        game_id: str,
        owner_id: str,
    ) -> None:
        """Delete a game.

        Raises:
            GameNotFound: If no game matches both id and owner.
        """

    # -------------------------------------------------
    # Read-side queries (NO state changes)
    # -------------------------------------------------

    @abstractmethod
    async def get_game(self, game_id: str, owner_id: str) -> dict:
        """Return one game as a dictionary.

        Raises:
            GameNotFound: If no game matches both id and owner.
            InvalidState: If the stored piece list is not valid JSON.
        """

    @abstractmethod
    async def list_games(self, owner_id: str) -> list[dict]:
        """Return every game owned by `owner_id`, most recently updated first."""
