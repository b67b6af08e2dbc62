"""Protocol repository (the service only depends on this, SQLAlchemy is one implementation)"""

from typing import Protocol
from uuid import UUID

from chessroom.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def list_games(self, status: str | None = None) -> list[tuple[UUID, GameModel]]:
        """All stored games (oldest first), optionally only those with the given status."""
        ...
