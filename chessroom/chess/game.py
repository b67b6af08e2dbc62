"""
The Game class is the entrypoint into the domain layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game:
the front end (through the service layer) selects a piece, asks for its legal moves, makes a move,
and then polls the Game for check / checkmate / draws.

Failed attempts (wrong turn, illegal destination, clicking an empty square) are ordinary input, not errors:
they return False / empty lists and leave the game exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from pydantic import ValidationError

from chessroom.chess.attacks import CheckInfo, analyze_check, is_in_check
from chessroom.chess.board import Board
from chessroom.chess.castling import (
    CASTLING_DIRECTIONS,
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    castling_direction_for,
)
from chessroom.chess.legality import (
    all_legal_moves,
    generate_legal_moves,
    is_castling_move,
    is_en_passant_capture,
)
from chessroom.chess.moves import Move, en_passant_victim_square, is_promotion_square
from chessroom.chess.pieces import PROMOTION_OPTIONS, Piece, PieceRecord
from chessroom.chess.position import position_fingerprint
from chessroom.chess.rules import (
    is_checkmate,
    is_fifty_move_rule,
    is_insufficient_material,
    is_stalemate,
    is_threefold_repetition,
)
from chessroom.chess.square import Square
from chessroom.core.config import GameSettings
from chessroom.core.exceptions import GameStateError
from chessroom.core.models import GameModel
from chessroom.core.shared_types import Color, PieceType, Status

_LOGGER = logging.getLogger(__name__)

SquareLike = str | Square


@dataclass(frozen=True)
class LastMove:
    from_square: Square
    to_square: Square
    piece_id: str


@dataclass
class GameState:
    """
    Everything needed to continue a game from the current position.
    ----

    * position_history holds a fingerprint of every position reached (the starting position included),
      used for the threefold repetition rule.
    * half_move_clock counts the moves since the last pawn move or capture (fifty-move rule).
    """

    board: Board
    turn: Color = Color.WHITE
    last_move: Optional[LastMove] = None
    captured_pieces: list[PieceRecord] = field(default_factory=list)
    en_passant_target: Optional[Square] = None
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    position_history: list[str] = field(default_factory=list)
    half_move_clock: int = 0

    def __post_init__(self) -> None:
        if not self.position_history:
            self.position_history.append(self.fingerprint())

    @classmethod
    def initial(cls) -> Self:
        return cls(board=Board.initial())

    def fingerprint(self) -> str:
        return position_fingerprint(
            self.board, self.turn, self.castling_rights, self.en_passant_target
        )


@dataclass(frozen=True)
class AcceptedMove:
    """Snapshot of a move that passed the legality check, taken before the board gets updated."""

    move: Move
    piece_id: str
    moving_piece: Piece
    captured_square: Optional[Square] = None
    captured_piece: Optional[Piece] = None
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False

    @classmethod
    def from_board(
        cls, move: Move, board: Board, en_passant_target: Optional[Square]
    ) -> Self:
        record = board.at(move.from_square)
        # for the typechecker: only legal moves get here, so there is a piece to move
        assert record is not None
        moving_piece = record.piece

        castling_direction = (
            castling_direction_for(move.from_square, move.to_square)
            if is_castling_move(moving_piece, move.from_square, move.to_square)
            else None
        )
        is_en_passant = is_en_passant_capture(
            moving_piece, move.to_square, en_passant_target
        )
        # NOTE the pawn taken en passant is not standing on the destination square
        captured_square = (
            en_passant_victim_square(move.to_square, moving_piece.color)
            if is_en_passant
            else move.to_square
        )
        captured_piece = board.piece(captured_square)
        return cls(
            move=move,
            piece_id=record.id,
            moving_piece=moving_piece,
            captured_square=captured_square if captured_piece else None,
            captured_piece=captured_piece,
            castling_direction=castling_direction,
            is_en_passant=is_en_passant,
        )

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_pawn_move(self) -> bool:
        return self.moving_piece.type == PieceType.PAWN


class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE / FRONT END ---

    def __init__(
        self,
        state: Optional[GameState] = None,
        settings: Optional[GameSettings] = None,
        moves: Optional[list[Move]] = None,
    ) -> None:
        self.state = state if state is not None else GameState.initial()
        self.settings = settings if settings is not None else GameSettings()
        self.moves: list[Move] = moves if moves is not None else []

    @classmethod
    def from_board(
        cls,
        board: Board,
        turn: Color = Color.WHITE,
        castling_rights: Optional[CastlingRights] = None,
        en_passant_target: Optional[Square] = None,
        half_move_clock: int = 0,
        settings: Optional[GameSettings] = None,
    ) -> Self:
        """Start from an arbitrary set-up. Without explicit castling rights, nobody can castle."""
        state = GameState(
            board=board,
            turn=turn,
            castling_rights=castling_rights
            if castling_rights is not None
            else CastlingRights.none(),
            en_passant_target=en_passant_target,
            half_move_clock=half_move_clock,
        )
        return cls(state=state, settings=settings)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild a Game from the information the Service layer has: replay every stored move.

        Raises GameStateError if the record cannot be replayed.
        """
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        try:
            settings = GameSettings.model_validate(model.settings)
        except ValidationError as exc:
            raise GameStateError(f"Invalid game settings: {model.settings!r}") from exc

        # replay without auto promotion: every promotion is part of the stored moves already
        game = cls(settings=settings.model_copy(update={"auto_queen_promotion": False}))
        for number, uci in enumerate(model.moves_uci, start=1):
            if not game._replay(uci):
                _LOGGER.warning("Stored game cannot be replayed at move %d (%r)", number, uci)
                raise GameStateError(f"Stored move {number} is not playable: {uci!r}")

        game.settings = settings
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            moves_uci=[move.to_uci() for move in self.moves],
            settings=self.settings.model_dump(),
            status=self.status().value,
        )

    # --- READ ACCESS ---
    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def turn(self) -> Color:
        return self.state.turn

    @property
    def last_move(self) -> Optional[LastMove]:
        return self.state.last_move

    def at(self, square: SquareLike) -> Optional[PieceRecord]:
        return self.state.board.at(self._to_square(square))

    def by_id(self, piece_id: str) -> Optional[PieceRecord]:
        """Active piece with this id. Captured pieces are found in `captured_pieces()`"""
        return self.state.board.by_id(piece_id)

    def active_pieces(self) -> list[tuple[str, PieceRecord]]:
        return self.state.board.active_pieces()

    def captured_pieces(self) -> list[PieceRecord]:
        return list(self.state.captured_pieces)

    def get_legal_moves(self, square: SquareLike) -> list[str]:
        """
        Legal destinations of the piece on `square` (used to highlight the squares when a piece gets selected)

        Empty for an empty / malformed square, or a piece of the player who is not to move.
        """
        origin = self._to_square(square)
        record = self.state.board.at(origin)
        if origin is None or record is None or record.color != self.state.turn:
            return []
        return [sq.to_algebraic() for sq in self._legal_destinations(origin, record)]

    def all_legal_moves(self) -> list[str]:
        """Every legal move of the player to move, in coordinate notation"""
        return [
            move.to_uci()
            for move in all_legal_moves(
                self.state.board,
                self.state.turn,
                self.state.en_passant_target,
                self.state.castling_rights,
            )
        ]

    def pending_promotion(self) -> Optional[PieceRecord]:
        """A pawn that reached the last rank and still waits for the player to pick a piece"""
        for _, record in self.state.board.active_pieces():
            if record.type == PieceType.PAWN and is_promotion_square(
                record.square, record.color
            ):
                return record
        return None

    # --- TERMINAL CONDITIONS (for the player to move) ---
    def is_check(self) -> bool:
        return is_in_check(self.state.board, self.state.turn)

    def check_info(self) -> CheckInfo:
        return analyze_check(self.state.board, self.state.turn)

    def is_checkmate(self) -> bool:
        return is_checkmate(
            self.state.board,
            self.state.turn,
            self.state.en_passant_target,
            self.state.castling_rights,
        )

    def is_stalemate(self) -> bool:
        return is_stalemate(
            self.state.board,
            self.state.turn,
            self.state.en_passant_target,
            self.state.castling_rights,
        )

    def is_threefold_repetition(self) -> bool:
        return is_threefold_repetition(self.state.position_history)

    def is_fifty_move_rule(self) -> bool:
        return is_fifty_move_rule(self.state.half_move_clock)

    def is_insufficient_material(self) -> bool:
        return is_insufficient_material(self.state.board)

    def status(self) -> Status:
        """Mate and stalemate first: they end the game with the move that caused them."""
        if self.is_checkmate():
            return Status.CHECKMATE
        if self.is_stalemate():
            return Status.STALEMATE
        if self.is_insufficient_material():
            return Status.DRAW_INSUFFICIENT_MATERIAL
        if self.is_threefold_repetition():
            return Status.DRAW_REPETITION
        if self.is_fifty_move_rule():
            return Status.DRAW_FIFTY_MOVE_RULE
        return Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """
        For now only works for checkmate.
        Given we know it is checkmate, the player who is to move just got mated and the opponent must be the winner
        """
        if not self.is_checkmate():
            return None
        return self.state.turn.opponent

    # --- COMMANDS ---
    def make_move(self, from_square: SquareLike, to_square: SquareLike) -> bool:
        """
        Attempt to make a move
        -----

        1. find the piece, check it is its turn and the destination is a legal move
        2. remove the captured piece (en passant: the pawn behind the destination square)
        3. update the board (NOTE: if castling, move the king and the rook)
        4. update en passant target, castling rights, half-move clock
        5. record the move, hand the turn to the opponent, store the new position's fingerprint

        Either all of it happens, or (illegal attempt) nothing does.
        """
        origin = self._to_square(from_square)
        target = self._to_square(to_square)
        if origin is None or target is None:
            _LOGGER.debug("Rejected move %r -> %r: not a square", from_square, to_square)
            return False

        record = self.state.board.at(origin)
        if record is None:
            _LOGGER.debug("Rejected move %s -> %s: no piece on %s", origin, target, origin)
            return False

        if record.color != self.state.turn:
            _LOGGER.debug(
                "Rejected move %s -> %s: it is %s's turn", origin, target, self.state.turn
            )
            return False

        if target not in self._legal_destinations(origin, record):
            _LOGGER.debug("Rejected move %s -> %s: not a legal move", origin, target)
            return False

        accepted_move = AcceptedMove.from_board(
            Move(origin, target), self.state.board, self.state.en_passant_target
        )
        self._apply(accepted_move)
        _LOGGER.debug("Played %s (%s)", accepted_move.move.to_uci(), accepted_move.piece_id)
        return True

    def promote_pawn(
        self, piece: SquareLike, target_type: PieceType | str
    ) -> bool:
        """
        Turn a pawn into a knight, bishop, rook or queen. The piece keeps its id.

        `piece` is either the id of the pawn or the square it stands on.
        NOTE: the caller decides when to promote (a pawn reaching the last rank, see `pending_promotion()`).
        """
        record = self._resolve_piece(piece)
        if record is None:
            _LOGGER.warning("Cannot promote: no piece found for %r", piece)
            return False
        if record.type != PieceType.PAWN:
            _LOGGER.warning("Cannot promote: %s is not a pawn", record.id)
            return False
        new_type = self._promotion_type(target_type)
        if new_type is None:
            _LOGGER.warning("Cannot promote %s to %r", record.id, target_type)
            return False

        self._promote(record, new_type)
        return True

    def reset_game(self) -> None:
        """Back to the starting position. Settings are kept."""
        self.state = GameState.initial()
        self.moves = []
        _LOGGER.debug("Game reset")

    def update_settings(self, **changes: bool) -> GameSettings:
        """Merge a partial update into the settings (validated)"""
        self.settings = GameSettings.model_validate(
            {**self.settings.model_dump(), **changes}
        )
        return self.settings

    # -- PRIVATE HELPERS ---
    def _to_square(self, square: Optional[SquareLike]) -> Optional[Square]:
        if isinstance(square, Square):
            return square if square.is_within_bounds() else None
        return Square.from_algebraic(square)

    def _resolve_piece(self, piece: SquareLike) -> Optional[PieceRecord]:
        """Piece ids first, then square names"""
        if isinstance(piece, str):
            record = self.state.board.by_id(piece)
            if record is not None:
                return record
        return self.state.board.at(self._to_square(piece))

    def _promotion_type(self, target_type: PieceType | str) -> Optional[PieceType]:
        try:
            new_type = PieceType(target_type)
        except ValueError:
            return None
        return new_type if new_type in PROMOTION_OPTIONS else None

    def _legal_destinations(self, origin: Square, record: PieceRecord) -> list[Square]:
        return generate_legal_moves(
            origin,
            record.piece,
            self.state.board,
            self.state.en_passant_target,
            self.state.castling_rights,
        )

    def _replay(self, uci: str) -> bool:
        """Play one stored move (used when rebuilding a game)"""
        move = Move.from_uci(uci)
        if move is None:
            return False
        if move.is_in_place_promotion:
            assert move.promote_to is not None
            return self.promote_pawn(move.to_square, move.promote_to)
        if not self.make_move(move.from_square, move.to_square):
            return False
        if move.promote_to is not None:
            return self.promote_pawn(move.to_square, move.promote_to)
        return True

    def _apply(self, accepted_move: AcceptedMove) -> None:
        state = self.state
        move = accepted_move.move

        # update the board
        self._update_board(accepted_move)

        # NOTE revoke castling rights / set en passant target BEFORE handing the turn to the opponent
        self._revoke_castling_rights_if_needed(accepted_move)
        state.en_passant_target = self._determine_en_passant_target(accepted_move)

        # move counters
        if accepted_move.is_pawn_move or accepted_move.is_capture:
            state.half_move_clock = 0
        else:
            state.half_move_clock += 1

        state.last_move = LastMove(move.from_square, move.to_square, accepted_move.piece_id)
        self.moves.append(Move(move.from_square, move.to_square))
        state.turn = state.turn.opponent

        moved = state.board.by_id(accepted_move.piece_id)
        if (
            self.settings.auto_queen_promotion
            and moved is not None
            and moved.type == PieceType.PAWN
            and is_promotion_square(moved.square, moved.color)
        ):
            # _promote() stores the fingerprint of the position with the queen on the board
            state.position_history.append(state.fingerprint())
            self._promote(moved, PieceType.QUEEN)
            return

        state.position_history.append(state.fingerprint())

    def _update_board(self, accepted_move: AcceptedMove) -> None:
        """
        Call for the proper updates of the Board's position
        ---

        1. Remove the captured piece (en passant: it stands behind the destination square)
        2. Move the piece
        3. Castling: move the rook as well
        """
        board = self.state.board
        move = accepted_move.move

        if accepted_move.captured_square is not None:
            captured = board.remove_piece(accepted_move.captured_square)
            if captured is not None:
                self.state.captured_pieces.append(captured)

        board.move_piece(move.from_square, move.to_square)

        if accepted_move.castling_direction is not None:
            rule = CASTLING_RULES[accepted_move.castling_direction]
            board.move_piece(rule.rook_from, rule.rook_to)

    def _determine_en_passant_target(self, accepted_move: AcceptedMove) -> Optional[Square]:
        """The square skipped by a pawn advancing two squares. Any other move clears the target."""
        move = accepted_move.move
        ranks_moved = abs(move.to_square.rank - move.from_square.rank)
        if not (accepted_move.is_pawn_move and ranks_moved == 2):
            return None
        return Square(
            file=move.from_square.file,
            rank=(move.from_square.rank + move.to_square.rank) // 2,
        )

    def _revoke_castling_rights_if_needed(self, accepted_move: AcceptedMove) -> None:
        """
        Checks which rights should get revoked
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If you are moving your rook away from its starting square --> revoke the right in that direction
        3. If you are taking your opponent's rook on its starting square --> revoke that right of your opponent
        """
        rights = self.state.castling_rights
        player_color = accepted_move.moving_piece.color
        opponent_color = player_color.opponent
        move = accepted_move.move

        # 1
        if accepted_move.moving_piece.type == PieceType.KING:
            rights.revoke_all(player_color)

        # 2
        if accepted_move.moving_piece.type == PieceType.ROOK:
            for direction in CASTLING_DIRECTIONS[player_color]:
                if move.from_square == CASTLING_RULES[direction].rook_from:
                    rights.revoke(direction)

        # 3
        if accepted_move.captured_piece == Piece(PieceType.ROOK, opponent_color):
            for direction in CASTLING_DIRECTIONS[opponent_color]:
                if accepted_move.captured_square == CASTLING_RULES[direction].rook_from:
                    rights.revoke(direction)

    def _promote(self, record: PieceRecord, new_type: PieceType) -> None:
        """Rewrite the pawn, record the promotion, and refresh the fingerprint of the current position"""
        record.promote_to(new_type)

        last_move = self.state.last_move
        promoted_on_last_move = (
            last_move is not None
            and self.moves
            and last_move.piece_id == record.id
            and self.moves[-1].to_square == record.square
            and self.moves[-1].promote_to is None
        )
        if promoted_on_last_move:
            self.moves[-1].promote_to = new_type
        else:
            self.moves.append(Move(record.square, record.square, promote_to=new_type))

        self.state.position_history[-1] = self.state.fingerprint()
        _LOGGER.debug("Promoted %s to %s", record.id, new_type)
