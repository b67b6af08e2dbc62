"""
Legal move filter
----

Turns the pseudo-legal candidates of `moves.py` into legal moves:

1. generate candidate moves (movement rules, en passant, castling)
2. simulate every candidate on a copy of the board
3. remove the ones that put (or leave) your own king in check
4. castling: additionally, you cannot castle out of check, through an attacked square, or into check

This is the single source of legality: the Game never applies a move that is not in this list.
"""

from typing import Optional

from chessroom.chess.attacks import is_in_check
from chessroom.chess.board import Board
from chessroom.chess.castling import (
    CASTLING_RULES,
    CastlingRights,
    castling_direction_for,
)
from chessroom.chess.moves import (
    Move,
    en_passant_victim_square,
    generate_candidate_moves,
)
from chessroom.chess.pieces import Piece
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color, PieceType


def is_en_passant_capture(
    piece: Piece, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    return (
        piece.type == PieceType.PAWN
        and en_passant_target is not None
        and to_square == en_passant_target
    )


def is_castling_move(piece: Piece, from_square: Square, to_square: Square) -> bool:
    """Castling is the only king move that covers two files"""
    return piece.type == PieceType.KING and abs(to_square.file - from_square.file) == 2


def simulate_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square] = None,
) -> Board:
    """
    Copy of the board with the move made.

    NOTE: for castling only the king is moved here. That is all we need to know if the king ends up in check.
    """
    simulated = board.copy()
    piece = simulated.piece(from_square)
    simulated.move_piece(from_square, to_square)
    if piece is not None and is_en_passant_capture(piece, to_square, en_passant_target):
        simulated.remove_piece(en_passant_victim_square(to_square, piece.color))
    return simulated


def _is_castling_legal(
    from_square: Square, to_square: Square, piece: Piece, board: Board
) -> bool:
    """
    **you are allowed to castle if**

    * You are not currently in check (you cannot castle out of a check).
    * None of the squares the king passes through or lands on is under attack.
    """
    direction = castling_direction_for(from_square, to_square)
    if direction is None:
        return False

    if is_in_check(board, piece.color):
        return False

    # place the king on every square of its path, and see if it would be in check there
    for square in CASTLING_RULES[direction].king_path[1:]:
        if is_in_check(simulate_move(board, from_square, square), piece.color):
            return False
    return True


def is_move_legal(
    from_square: Square,
    to_square: Square,
    piece: Piece,
    board: Board,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """Return True if the move does not leave your own king in check"""
    if is_castling_move(piece, from_square, to_square):
        return _is_castling_legal(from_square, to_square, piece, board)

    simulated = simulate_move(board, from_square, to_square, en_passant_target)
    return not is_in_check(simulated, piece.color)


def filter_legal_moves(
    moves: list[Square],
    from_square: Square,
    piece: Piece,
    board: Board,
    en_passant_target: Optional[Square] = None,
) -> list[Square]:
    return [
        to_square
        for to_square in moves
        if is_move_legal(from_square, to_square, piece, board, en_passant_target)
    ]


def generate_legal_moves(
    square: Square,
    piece: Piece,
    board: Board,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> list[Square]:
    """
    Legal destinations for the piece standing on `square`
    ----

    Without castling rights no castling moves are offered, without an en passant target no en passant capture.
    """
    candidates = generate_candidate_moves(
        square, piece, board, en_passant_target, castling_rights
    )
    return filter_legal_moves(candidates, square, piece, board, en_passant_target)


def all_legal_moves(
    board: Board,
    color: Color,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> list[Move]:
    """Every legal move of the player with the `color` pieces"""
    moves: list[Move] = []
    for _, record in board.active_pieces(color):
        destinations = generate_legal_moves(
            record.square, record.piece, board, en_passant_target, castling_rights
        )
        moves.extend(Move(record.square, to_square) for to_square in destinations)
    return moves


def has_legal_move(
    board: Board,
    color: Color,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> bool:
    """Stops at the first piece that can move (cheaper than listing all of them)"""
    return any(
        generate_legal_moves(
            record.square, record.piece, board, en_passant_target, castling_rights
        )
        for _, record in board.active_pieces(color)
    )
