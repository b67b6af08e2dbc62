"""
Checks for ending the game
----

Polled by the caller after every move. Nothing here changes the game.
"""

from collections import Counter
from typing import Optional

from chessroom.chess.attacks import is_in_check
from chessroom.chess.board import Board
from chessroom.chess.castling import CastlingRights
from chessroom.chess.legality import has_legal_move
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color, PieceType

# 50 moves by each player
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3

MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


def is_checkmate(
    board: Board,
    color: Color,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> bool:
    """`color` is in check and has no legal move left"""
    return is_in_check(board, color) and not has_legal_move(
        board, color, en_passant_target, castling_rights
    )


def is_stalemate(
    board: Board,
    color: Color,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> bool:
    """`color` is NOT in check but has no legal move left"""
    return not is_in_check(board, color) and not has_legal_move(
        board, color, en_passant_target, castling_rights
    )


def is_threefold_repetition(position_history: list[str]) -> bool:
    """Some position occurred 3 (or more) times"""
    counts = Counter(position_history)
    return any(count >= REPETITIONS_FOR_DRAW for count in counts.values())


def is_fifty_move_rule(half_move_clock: int) -> bool:
    """100 half-moves without a pawn move or a capture"""
    return half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES


def is_insufficient_material(board: Board) -> bool:
    """
    Material with which no sequence of moves can ever end in checkmate
    ----

    * king vs king
    * king + a single minor piece vs king
    * kings + any number of bishops, as long as all bishops stand on squares of the same color

    NOTE: king + two knights vs king is NOT included: mate cannot be forced, but it can still happen.
    """
    non_king_pieces = [
        record for _, record in board.active_pieces() if record.type != PieceType.KING
    ]

    if any(record.type not in MINOR_PIECES for record in non_king_pieces):
        # any pawn, rook or queen can still mate (a pawn via promotion)
        return False

    if len(non_king_pieces) <= 1:
        return True

    if all(record.type == PieceType.BISHOP for record in non_king_pieces):
        square_colors = {record.square.is_light for record in non_king_pieces}
        return len(square_colors) == 1

    return False
