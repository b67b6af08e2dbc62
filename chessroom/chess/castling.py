"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from chessroom.chess.square import Square
from chessroom.core.shared_types import Color


class CastlingDirection(Enum):
    """The four castling directions. Values are the letters used in position fingerprints."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_DIRECTIONS: dict[Color, tuple[CastlingDirection, CastlingDirection]] = {
    Color.WHITE: (CastlingDirection.WHITE_KING_SIDE, CastlingDirection.WHITE_QUEEN_SIDE),
    Color.BLACK: (CastlingDirection.BLACK_KING_SIDE, CastlingDirection.BLACK_QUEEN_SIDE),
}


def squares_between_on_rank(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares in between the two squares specified that are on the same rank (both ends excluded)

    Needed for checking if you can still castle (the Board will check which of those are empty etc.)
    """
    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.file > from_square.file else -1
    return [
        Square(file, from_square.rank)
        for file in range(from_square.file + step, to_square.file, step)
    ]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        squares = [Square.from_algebraic(sq) for sq in (k_from, k_to, r_from, r_to)]
        assert all(squares), "castling squares must be valid square names"
        return cls(*squares)  # type: ignore[arg-type]

    @property
    def path(self) -> list[Square]:
        """Squares between king and rook. All of them must be empty to castle."""
        return squares_between_on_rank(self.king_from, self.rook_from)

    @property
    def king_path(self) -> list[Square]:
        """Every square the king stands on while castling: start, transit and destination. None of them may be attacked."""
        transit = squares_between_on_rank(self.king_from, self.king_to)
        return [self.king_from, *transit, self.king_to]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_direction_for(
    king_from: Square, king_to: Square
) -> CastlingDirection | None:
    """Which castling move (if any) takes the king from one square to the other"""
    for direction, rule in CASTLING_RULES.items():
        if rule.king_from == king_from and rule.king_to == king_to:
            return direction
    return None


@dataclass
class CastlingRights:
    """
    Rights are only ever revoked during a game, never granted back.
    ----

    A right is lost when:
    * the king moves (both directions of that color)
    * the rook moves away from its starting corner
    * the rook gets captured on its starting corner
    """

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    @classmethod
    def none(cls) -> Self:
        return cls(False, False, False, False)

    def allows(self, direction: CastlingDirection) -> bool:
        return getattr(self, _RIGHTS_FIELD[direction])

    def revoke(self, direction: CastlingDirection) -> None:
        setattr(self, _RIGHTS_FIELD[direction], False)

    def revoke_all(self, color: Color) -> None:
        for direction in CASTLING_DIRECTIONS[color]:
            self.revoke(direction)

    def any_for(self, color: Color) -> bool:
        return any(self.allows(direction) for direction in CASTLING_DIRECTIONS[color])

    def to_key(self) -> str:
        """ex. 'KQkq' with all rights, 'Kq' after some are lost and '-' when none are left"""
        letters = "".join(
            direction.value for direction in CastlingDirection if self.allows(direction)
        )
        return letters or "-"


_RIGHTS_FIELD: dict[CastlingDirection, str] = {
    CastlingDirection.WHITE_KING_SIDE: "white_kingside",
    CastlingDirection.WHITE_QUEEN_SIDE: "white_queenside",
    CastlingDirection.BLACK_KING_SIDE: "black_kingside",
    CastlingDirection.BLACK_QUEEN_SIDE: "black_queenside",
}
