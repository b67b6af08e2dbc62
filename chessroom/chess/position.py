"""
Fingerprint of a single position. Two positions with the same fingerprint count as a repetition.
"""

from dataclasses import dataclass
from typing import Optional, Self

from chessroom.chess.board import Board
from chessroom.chess.castling import CastlingRights
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color


@dataclass(frozen=True)
class PositionKey:
    """
    Everything that makes two positions "the same position":
    ----

    <placement> <side to move> <castling rights> <en passant target>

    * The placement lists the ranks from the 8th down to the 1st, separated by slashes.
      Capital letters for the white pieces, small letters for the black pieces, digits for empty squares.
    * The side to move is either "w" or "b"
    * Castling rights use "K"/"Q" for white king-/queen-side and "k"/"q" for black. "-" when none are left.
    * The en passant target is the square a pawn just skipped, or "-".

    ex) The standard starting position has the fingerprint
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -
    """

    placement: str
    color_to_move: Color
    castling: str
    en_passant: str

    @classmethod
    def from_parts(
        cls,
        board: Board,
        color_to_move: Color,
        castling_rights: CastlingRights,
        en_passant_target: Optional[Square],
    ) -> Self:
        return cls(
            placement=board.placement_key(),
            color_to_move=color_to_move,
            castling=castling_rights.to_key(),
            en_passant=en_passant_target.to_algebraic() if en_passant_target else "-",
        )

    def __str__(self) -> str:
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        return f"{self.placement} {active_color} {self.castling} {self.en_passant}"


def position_fingerprint(
    board: Board,
    color_to_move: Color,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> str:
    return str(
        PositionKey.from_parts(board, color_to_move, castling_rights, en_passant_target)
    )
