"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chessroom.chess.pieces import PROMOTION_OPTIONS
from chessroom.chess.square import Square
from chessroom.core.config import GameSettings
from chessroom.core.exceptions import InvalidRequestError
from chessroom.core.shared_types import Color, PieceType, Status


def _validate_square_name(value: str) -> str:
    if Square.from_algebraic(value) is None:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    settings: Optional[GameSettings] = None


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    """Without a square: every legal move of the player to move"""

    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class PromotionRequest(BaseModel):
    game_id: UUID
    # piece id ("pawn-white-5") or the square the pawn stands on ("e8")
    target: str
    promote_to: PieceType

    @field_validator("promote_to")
    @classmethod
    def validate_promotion_type(cls, value: PieceType) -> PieceType:
        if value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(
                f"Cannot promote to {value.value!r}. \nPick one from {','.join(option.value for option in PROMOTION_OPTIONS)}"
            )
        return value


class ResetGameRequest(BaseModel):
    game_id: UUID


class UpdateSettingsRequest(BaseModel):
    """Partial update: only the fields that are set get changed"""

    game_id: UUID
    sound_effects: Optional[bool] = None
    show_notations: Optional[bool] = None
    highlight_moves: Optional[bool] = None
    auto_queen_promotion: Optional[bool] = None

    def changes(self) -> dict[str, bool]:
        return self.model_dump(exclude={"game_id"}, exclude_none=True)


class DeleteGameRequest(BaseModel):
    game_id: UUID


class ListGamesRequest(BaseModel):
    status: Optional[Status] = None


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    id: str
    type: PieceType
    color: Color
    square: str


class LastMoveView(BaseModel):
    from_square: str
    to_square: str
    piece_id: str


class GameResponse(BaseModel):
    game_id: UUID
    # False when the request was an illegal move / promotion: the game is returned unchanged
    accepted: bool = True
    turn: Color
    status: Status
    winner: Optional[Color] = None
    in_check: bool
    pieces: list[PieceView]
    captured: list[PieceView]
    last_move: Optional[LastMoveView] = None
    pending_promotion: Optional[PieceView] = None
    settings: GameSettings
    # points of material on the board per colour (pawn 1 ... queen 9)
    material: dict[Color, int]
    move_history: list[str]


class GameSummary(BaseModel):
    game_id: UUID
    status: Status
    moves_played: int


class LegalMovesResponse(BaseModel):
    game_id: UUID
    turn: Color
    square: Optional[str] = None
    legal_moves: list[str]
