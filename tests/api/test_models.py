"""Unit tests for chessroom/api/models.py"""

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from chessroom.api.models import (
    CreateGameRequest,
    LegalMovesRequest,
    MoveRequest,
    PromotionRequest,
    UpdateSettingsRequest,
)
from chessroom.core.config import GameSettings
from chessroom.core.exceptions import InvalidRequestError
from chessroom.core.shared_types import PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_settings_are_optional() -> None:
    assert CreateGameRequest().settings is None


def test_create_game_with_settings() -> None:
    request = CreateGameRequest(settings={"auto_queen_promotion": True})
    assert request.settings == GameSettings(auto_queen_promotion=True)


def test_unknown_setting_is_rejected() -> None:
    with pytest.raises(ValidationError):
        CreateGameRequest(settings={"dark_mode": True})


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(game_id=mock_id, from_square="e2", to_square="e4")
    assert request.from_square == "e2"
    assert request.to_square == "e4"


INVALID_SQUARES = [
    "nonsense",  # anything more than two characters.
    "11",  # First character is not a letter
    "aa",  # second character is not a number
    "i1",  # off the board
    "a9",
    "",
]


@pytest.mark.parametrize("square", INVALID_SQUARES)
def test_invalid_from_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square=square, to_square="e2")


@pytest.mark.parametrize("square", INVALID_SQUARES)
def test_invalid_to_square(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square="e2", to_square=square)


# -- Validation - LegalMovesRequest --
def test_legal_moves_square_is_optional(mock_id: UUID) -> None:
    assert LegalMovesRequest(game_id=mock_id).square is None
    assert LegalMovesRequest(game_id=mock_id, square="g1").square == "g1"
    with pytest.raises(InvalidRequestError):
        LegalMovesRequest(game_id=mock_id, square="g0")


# -- Validation - PromotionRequest --
@pytest.mark.parametrize(
    "piece_type", [PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN]
)
def test_valid_promotion(mock_id: UUID, piece_type: PieceType) -> None:
    request = PromotionRequest(game_id=mock_id, target="a8", promote_to=piece_type.value)
    assert request.promote_to == piece_type


@pytest.mark.parametrize("piece_type", [PieceType.KING, PieceType.PAWN])
def test_invalid_promotion(mock_id: UUID, piece_type: PieceType) -> None:
    with pytest.raises(InvalidRequestError):
        PromotionRequest(game_id=mock_id, target="a8", promote_to=piece_type)


# -- UpdateSettingsRequest --
def test_partial_settings_update(mock_id: UUID) -> None:
    request = UpdateSettingsRequest(game_id=mock_id, sound_effects=False)
    assert request.changes() == {"sound_effects": False}
    assert UpdateSettingsRequest(game_id=mock_id).changes() == {}
