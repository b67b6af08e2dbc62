"""Unit tests for /chessroom/chess/moves.py"""

from unittest.mock import patch

import pytest

import chessroom.chess.moves as mv
from chessroom.chess.board import Board
from chessroom.chess.castling import CastlingRights
from chessroom.chess.moves import (
    Color,
    Move,
    Piece,
    PieceType,
    Square,
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    castling_moves,
    en_passant_capture,
    generate_candidate_moves,
    is_promotion_square,
    raycasting_move,
    single_step_move,
)
from chessroom.chess.square import BOARD_DIMENSIONS


def sq(name: str) -> Square:
    square = Square.from_algebraic(name)
    assert square is not None
    return square


def names(squares: list[Square]) -> set[str]:
    return {square.to_algebraic() for square in squares}


# -- MOVE CREATION, ENCODING/DECODING UCI NOTATION ---
@pytest.mark.parametrize(
    "uci_move, from_uci, to_uci",
    [
        ("e2e4", "e2", "e4"),
        ("a1a5", "a1", "a5"),
        ("d2e4", "d2", "e4"),
        ("g3a7", "g3", "a7"),
    ],
)
def test_creating_move_from_uci(uci_move: str, from_uci: str, to_uci: str) -> None:
    """Coordinate notation for the move is <from_square><to_square>"""
    move = Move.from_uci(uci_move)
    assert move is not None
    assert move.from_square == sq(from_uci)
    assert move.to_square == sq(to_uci)
    assert move.promote_to is None
    assert move.to_uci() == uci_move


def test_creating_move_incl_promotion() -> None:
    """Creation logic including promotion"""
    move = Move.from_uci("e7e8q")
    assert move is not None
    assert move.from_square == sq("e7")
    assert move.to_square == sq("e8")
    assert move.promote_to == PieceType.QUEEN
    assert move.to_uci() == "e7e8q"
    assert not move.is_in_place_promotion


def test_in_place_promotion() -> None:
    move = Move.from_uci("b1b1n")
    assert move is not None
    assert move.is_in_place_promotion
    assert move.promote_to == PieceType.KNIGHT


@pytest.mark.parametrize("uci_move", ["", "e2", "e2e9", "z2e4", "e7e8x", "e2e4qq"])
def test_unreadable_moves(uci_move: str) -> None:
    assert Move.from_uci(uci_move) is None


# --- MOVEMENT RULES ---
def test_raycasting_move_empty_board() -> None:
    """On an empty board, movements are only restricted by board dimensions"""
    board = Board.from_placement({"a5": "R"})
    starting_square = sq("a5")
    horizontal_moves = [(1, 0), (-1, 0)]
    moves = raycasting_move(starting_square, board, horizontal_moves)
    assert len(moves) == BOARD_DIMENSIONS[0] - 1
    assert all(move.rank == starting_square.rank for move in moves)

    vertical_moves = [(0, 1), (0, -1)]
    moves = raycasting_move(starting_square, board, vertical_moves)
    assert len(moves) == BOARD_DIMENSIONS[1] - 1
    assert all(move.file == starting_square.file for move in moves)


def test_raycasting_move_w_enemy_blocker() -> None:
    """
    When running into enemy piece, still include it in the list of moves

    NOTE: The piece type does not matter here, only the color.
    """
    board = Board.from_placement({"d2": "R", "d5": "p"})
    moves = raycasting_move(sq("d2"), board, [(0, 1), (0, -1)])
    assert names(moves) == {"d1", "d3", "d4", "d5"}


def test_raycasting_move_w_own_blocker() -> None:
    """Running into your own piece: stop before it"""
    board = Board.from_placement({"d2": "R", "d5": "P"})
    moves = raycasting_move(sq("d2"), board, [(0, 1), (0, -1)])
    assert names(moves) == {"d1", "d3", "d4"}


def test_raycasting_from_empty_square() -> None:
    assert raycasting_move(sq("d2"), Board.empty(), [(0, 1)]) == []


def test_single_step_move() -> None:
    board = Board.from_placement({"a1": "K", "a2": "P", "b2": "n"})
    moves = single_step_move(sq("a1"), board, [(0, 1), (1, 1), (1, 0), (-1, 0)])
    assert names(moves) == {"b2", "b1"}


def test_knight_moves() -> None:
    board = Board.from_placement({"b1": "N", "d2": "P", "c3": "p"})
    assert names(candidate_knight_moves(sq("b1"), board)) == {"a3", "c3"}


def test_knight_in_the_center() -> None:
    board = Board.from_placement({"d4": "n"})
    assert len(candidate_knight_moves(sq("d4"), board)) == 8


def test_bishop_moves() -> None:
    board = Board.from_placement({"c1": "B", "b2": "P", "f4": "p"})
    assert names(candidate_bishop_moves(sq("c1"), board)) == {"d2", "e3", "f4"}


def test_rook_moves() -> None:
    board = Board.from_placement({"a1": "R", "a3": "P", "c1": "n"})
    assert names(candidate_rook_moves(sq("a1"), board)) == {"a2", "b1", "c1"}


def test_queen_moves_combine_rook_and_bishop() -> None:
    board = Board.from_placement({"d4": "Q"})
    assert len(candidate_queen_moves(sq("d4"), board)) == 27


def test_king_moves() -> None:
    board = Board.from_placement({"e1": "K", "d1": "Q", "e2": "p"})
    assert names(candidate_king_moves(sq("e1"), board)) == {"d2", "e2", "f2", "f1"}


@pytest.mark.parametrize(
    "placement, square, expected",
    [
        ({"e2": "P"}, "e2", {"e3", "e4"}),
        ({"e3": "P"}, "e3", {"e4"}),
        ({"e7": "p"}, "e7", {"e6", "e5"}),
        ({"e2": "P", "e3": "n"}, "e2", set()),
        ({"e2": "P", "e4": "n"}, "e2", {"e3"}),
        ({"e2": "P", "d3": "n", "f3": "N"}, "e2", {"e3", "e4", "d3"}),
        ({"a7": "p", "b6": "B"}, "a7", {"a6", "a5", "b6"}),
        ({"h8": "P"}, "h8", set()),
    ],
)
def test_pawn_moves(placement: dict[str, str], square: str, expected: set[str]) -> None:
    """Pushes onto empty squares only, double push from the starting rank, capture diagonally"""
    board = Board.from_placement(placement)
    assert names(candidate_pawn_moves(sq(square), board)) == expected


# --- EN PASSANT ---
def test_en_passant_capture() -> None:
    """Black just played d7-d5, white pawn on e5 can take on d6"""
    board = Board.from_placement({"e5": "P", "d5": "p"})
    assert names(en_passant_capture(sq("e5"), board, sq("d6"))) == {"d6"}


def test_no_en_passant_without_target() -> None:
    board = Board.from_placement({"e5": "P", "d5": "p"})
    assert en_passant_capture(sq("e5"), board, None) == []


def test_no_en_passant_from_too_far_away() -> None:
    board = Board.from_placement({"f5": "P", "d5": "p"})
    assert en_passant_capture(sq("f5"), board, sq("d6")) == []


def test_no_en_passant_without_victim() -> None:
    """The opponent's pawn must actually stand behind the target square"""
    board = Board.from_placement({"e5": "P", "d5": "n"})
    assert en_passant_capture(sq("e5"), board, sq("d6")) == []


def test_black_en_passant() -> None:
    board = Board.from_placement({"d4": "p", "e4": "P"})
    assert names(en_passant_capture(sq("d4"), board, sq("e3"))) == {"e3"}


# --- CASTLING ---
@pytest.fixture
def castling_board() -> Board:
    """Only the Kings and the Rooks. Ready to perform any castling move (if allowed)."""
    return Board.from_placement(
        {"a1": "R", "e1": "K", "h1": "R", "a8": "r", "e8": "k", "h8": "r"}
    )


def test_castling_moves_all_rights(castling_board: Board) -> None:
    assert names(castling_moves(sq("e1"), castling_board, CastlingRights())) == {"g1", "c1"}
    assert names(castling_moves(sq("e8"), castling_board, CastlingRights())) == {"g8", "c8"}


def test_castling_moves_without_rights(castling_board: Board) -> None:
    assert castling_moves(sq("e1"), castling_board, CastlingRights.none()) == []
    assert castling_moves(sq("e1"), castling_board, None) == []


def test_castling_blocked_by_piece(castling_board: Board) -> None:
    """b1 must be empty for queen side castling, even though the king never passes it"""
    castling_board.place_piece(Piece(PieceType.KNIGHT, Color.WHITE), sq("b1"))
    assert names(castling_moves(sq("e1"), castling_board, CastlingRights())) == {"g1"}


def test_castling_needs_rook_on_corner() -> None:
    board = Board.from_placement({"e1": "K", "h2": "R"})
    assert castling_moves(sq("e1"), board, CastlingRights()) == []


def test_generate_candidate_moves_adds_special_moves(castling_board: Board) -> None:
    king = Piece(PieceType.KING, Color.WHITE)
    moves = generate_candidate_moves(sq("e1"), king, castling_board, None, CastlingRights())
    assert {"g1", "c1"} <= names(moves)

    board = Board.from_placement({"e5": "P", "d5": "p"})
    pawn = Piece(PieceType.PAWN, Color.WHITE)
    assert names(generate_candidate_moves(sq("e5"), pawn, board, sq("d6"))) == {"e6", "d6"}


def test_generate_candidate_moves_uses_movement_rules() -> None:
    """The piece type selects the strategy"""
    board = Board.from_placement({"d4": "N"})
    with patch.dict(mv.MOVEMENT_RULES, {PieceType.KNIGHT: lambda square, board: []}):
        assert generate_candidate_moves(sq("d4"), Piece(PieceType.KNIGHT, Color.WHITE), board) == []


@pytest.mark.parametrize(
    "square, color, expected",
    [("e8", Color.WHITE, True), ("e1", Color.WHITE, False), ("a1", Color.BLACK, True), ("a8", Color.BLACK, False)],
)
def test_is_promotion_square(square: str, color: Color, expected: bool) -> None:
    assert is_promotion_square(sq(square), color) == expected
