"""Orchestration of communication from the front end to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from chessroom.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GameSummary,
    GetGameRequest,
    LastMoveView,
    LegalMovesRequest,
    LegalMovesResponse,
    ListGamesRequest,
    MoveRequest,
    PieceView,
    PromotionRequest,
    ResetGameRequest,
    UpdateSettingsRequest,
)
from chessroom.chess.game import Game
from chessroom.chess.pieces import PieceRecord
from chessroom.core.exceptions import RepositoryError
from chessroom.core.models import GameModel
from chessroom.db.repository import GameRepository

_LOGGER = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- Front end requests ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position."""
        new_game = Game(settings=request.settings)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Everything the front end needs to draw the board and the captured pieces.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """
        Legal destinations of the selected piece (squares to highlight),
        or every legal move of the player to move if no square is given.
        """
        game = self._load_game(request.game_id)
        legal_moves = (
            game.get_legal_moves(request.square)
            if request.square is not None
            else game.all_legal_moves()
        )
        return LegalMovesResponse(
            game_id=request.game_id,
            turn=game.turn,
            square=request.square,
            legal_moves=legal_moves,
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. An illegal move is answered with accepted=False and the unchanged game."""
        game = self._load_game(request.game_id)

        accepted = game.make_move(request.from_square, request.to_square)
        if accepted:
            self.repo.update_game(request.game_id, game.to_model())
        else:
            _LOGGER.info(
                "Game %s: move %s -> %s rejected",
                request.game_id,
                request.from_square,
                request.to_square,
            )
        return self._create_game_response(request.game_id, game, accepted=accepted)

    def promote_pawn(self, request: PromotionRequest) -> GameResponse:
        """The player picked the piece their pawn turns into."""
        game = self._load_game(request.game_id)

        accepted = game.promote_pawn(request.target, request.promote_to)
        if accepted:
            self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game, accepted=accepted)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over from the starting position (settings are kept)."""
        game = self._load_game(request.game_id)
        game.reset_game()
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def update_settings(self, request: UpdateSettingsRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.update_settings(**request.changes())
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def list_games(self, request: ListGamesRequest) -> list[GameSummary]:
        """Show all recorded games, using the stored status (no replay needed)."""
        status = request.status.value if request.status is not None else None
        return [
            GameSummary(game_id=game_id, status=model.status, moves_played=_moves_played(model))
            for game_id, model in self.repo.list_games(status)
        ]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _create_game_response(
        self, game_id: UUID, game: Game, accepted: bool = True
    ) -> GameResponse:
        """Convert the Game into the view the front end renders."""
        last_move = game.last_move
        pending = game.pending_promotion()
        return GameResponse(
            game_id=game_id,
            accepted=accepted,
            turn=game.turn,
            status=game.status(),
            winner=game.winner,
            in_check=game.is_check(),
            pieces=[_piece_view(record) for _, record in game.active_pieces()],
            captured=[_piece_view(record) for record in game.captured_pieces()],
            last_move=LastMoveView(
                from_square=last_move.from_square.to_algebraic(),
                to_square=last_move.to_square.to_algebraic(),
                piece_id=last_move.piece_id,
            )
            if last_move
            else None,
            pending_promotion=_piece_view(pending) if pending else None,
            settings=game.settings,
            material=game.board.count_material(),
            move_history=[move.to_uci() for move in game.moves],
        )

    def _load_game(self, game_id: UUID) -> Game:
        """Find the game in the repository (raise error if it fails) and replay it."""
        return Game.from_model(self._fetch_game(game_id))

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def _moves_played(model: GameModel) -> int:
    """In-place promotion records ("a8a8q") are not moves of their own"""
    return sum(1 for uci in model.moves_uci if uci[:2] != uci[2:4])


def _piece_view(record: PieceRecord) -> PieceView:
    return PieceView(
        id=record.id,
        type=record.type,
        color=record.color,
        square=record.square.to_algebraic(),
    )
