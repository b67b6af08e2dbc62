"""Unit tests for /chessroom/chess/attacks.py"""

from unittest.mock import patch

import pytest

import chessroom.chess.attacks as at
from chessroom.chess.attacks import (
    analyze_check,
    find_king,
    is_attacked_by_bishop,
    is_attacked_by_king,
    is_attacked_by_knight,
    is_attacked_by_pawn,
    is_attacked_by_queen,
    is_attacked_by_rook,
    is_in_check,
    is_square_attacked,
    raycasting_attack,
)
from chessroom.chess.board import Board
from chessroom.chess.moves import ORTHOGONAL
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color, PieceType


def sq(name: str) -> Square:
    square = Square.from_algebraic(name)
    assert square is not None
    return square


@pytest.mark.parametrize(
    "placement, square, by_color, is_attacked",
    [
        # pawns take diagonally forward, never straight ahead
        ({"e4": "P"}, "d5", Color.WHITE, True),
        ({"e4": "P"}, "f5", Color.WHITE, True),
        ({"e4": "P"}, "e5", Color.WHITE, False),
        ({"e4": "P"}, "d3", Color.WHITE, False),
        ({"e5": "p"}, "d4", Color.BLACK, True),
        ({"e5": "p"}, "d6", Color.BLACK, False),
    ],
)
def test_is_attacked_by_pawn(
    placement: dict[str, str], square: str, by_color: Color, is_attacked: bool
) -> None:
    board = Board.from_placement(placement)
    assert is_attacked_by_pawn(sq(square), by_color, board) == is_attacked


def test_is_attacked_by_knight() -> None:
    board = Board.from_placement({"g1": "N"})
    assert is_attacked_by_knight(sq("f3"), Color.WHITE, board)
    assert is_attacked_by_knight(sq("e2"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("g3"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("f3"), Color.BLACK, board)


def test_sliding_attacks_are_blocked() -> None:
    board = Board.from_placement({"a1": "R", "a4": "p", "c1": "B"})
    assert is_attacked_by_rook(sq("a4"), Color.WHITE, board)
    assert not is_attacked_by_rook(sq("a5"), Color.WHITE, board)
    assert is_attacked_by_bishop(sq("h6"), Color.WHITE, board)
    assert not is_attacked_by_bishop(sq("c3"), Color.WHITE, board)


def test_queen_and_king_attacks() -> None:
    board = Board.from_placement({"d1": "q", "h8": "k"})
    assert is_attacked_by_queen(sq("d8"), Color.BLACK, board)
    assert is_attacked_by_queen(sq("h5"), Color.BLACK, board)
    assert not is_attacked_by_queen(sq("e3"), Color.BLACK, board)
    assert is_attacked_by_king(sq("g7"), Color.BLACK, board)
    assert not is_attacked_by_king(sq("f6"), Color.BLACK, board)


def test_raycasting_attack_only_for_requested_types() -> None:
    """A bishop on the file does not attack along the file"""
    board = Board.from_placement({"a1": "B"})
    assert not raycasting_attack(sq("a5"), Color.WHITE, (PieceType.ROOK,), board, ORTHOGONAL)


def test_is_square_attacked_uses_attack_rules() -> None:
    """Every piece type contributes through the ATTACK_RULES table"""
    board = Board.from_placement({"a1": "R"})
    assert is_square_attacked(board, sq("a8"), Color.WHITE)
    with patch.dict(at.ATTACK_RULES, {PieceType.ROOK: lambda square, color, board: False}):
        assert not is_square_attacked(board, sq("a8"), Color.WHITE)


def test_find_king_and_check() -> None:
    board = Board.from_placement({"e1": "K", "e8": "r", "a8": "k"})
    assert find_king(board, Color.WHITE) == sq("e1")
    assert is_in_check(board, Color.WHITE)
    assert not is_in_check(board, Color.BLACK)


def test_missing_king_is_not_in_check() -> None:
    board = Board.from_placement({"e8": "r"})
    assert find_king(board, Color.WHITE) is None
    assert not is_in_check(board, Color.WHITE)


def test_initial_position_has_no_check() -> None:
    board = Board.initial()
    assert not is_in_check(board, Color.WHITE)
    assert not is_in_check(board, Color.BLACK)


# --- CHECK ANALYSIS ---
def test_analyze_check_sliding_attacker() -> None:
    """The path runs from the king (exclusive) up to and including the attacker"""
    board = Board.from_placement({"e1": "K", "e5": "r", "h8": "k"})
    info = analyze_check(board, Color.WHITE)
    assert info.in_check
    assert [square for square, _ in info.attackers] == [sq("e5")]
    assert info.check_paths == [[sq("e2"), sq("e3"), sq("e4"), sq("e5")]]


def test_analyze_double_check() -> None:
    board = Board.from_placement({"e1": "K", "e8": "r", "f3": "n", "h8": "k"})
    info = analyze_check(board, Color.WHITE)
    attackers = {square.to_algebraic(): piece.type for square, piece in info.attackers}
    assert attackers == {"e8": PieceType.ROOK, "f3": PieceType.KNIGHT}
    assert [sq("f3")] in info.check_paths


def test_analyze_check_pawn_attacker() -> None:
    board = Board.from_placement({"e1": "K", "d2": "p", "h8": "k"})
    info = analyze_check(board, Color.WHITE)
    assert info.in_check
    assert info.check_paths == [[sq("d2")]]


def test_analyze_check_blocked_ray() -> None:
    board = Board.from_placement({"e1": "K", "e2": "B", "e8": "q", "h8": "k"})
    info = analyze_check(board, Color.WHITE)
    assert not info.in_check
    assert info.attackers == []
