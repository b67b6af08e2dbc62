"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Files and ranks are 0-based: a1 is (0, 0), h8 is (7, 7).
Anything that cannot be a square is reported with None, never with an exception: the front end
probes squares speculatively (clicking next to the board etc.)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILE_LETTERS = "abcdefgh"


def is_valid_square(file: int, rank: int) -> bool:
    return (0 <= file < BOARD_DIMENSIONS[0]) and (0 <= rank < BOARD_DIMENSIONS[1])


def parse_square(square: object) -> Optional[tuple[int, int]]:
    """'e4' -> (4, 3). None for anything that is not a square name."""
    if not isinstance(square, str) or len(square) != 2:
        return None
    file_letter, rank_digit = square[0].lower(), square[1]
    if file_letter not in FILE_LETTERS or not rank_digit.isdigit():
        return None
    file = FILE_LETTERS.index(file_letter)
    rank = int(rank_digit) - 1
    if not is_valid_square(file, rank):
        return None
    return file, rank


def format_square(file: int, rank: int) -> Optional[str]:
    """(4, 3) -> 'e4'. Inverse of parse_square."""
    if not is_valid_square(file, rank):
        return None
    return f"{FILE_LETTERS[file]}{rank + 1}"


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: object) -> Optional[Square]:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        coords = parse_square(sq)
        if coords is None:
            return None
        return cls(*coords)

    def to_algebraic(self) -> str:
        return f"{FILE_LETTERS[self.file]}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return is_valid_square(self.file, self.rank)

    def offset(self, df: int, dr: int) -> Square:
        """Square shifted by a vector. May lie off the board: check with is_within_bounds()."""
        return Square(self.file + df, self.rank + dr)

    @property
    def is_light(self) -> bool:
        """a1 is a dark square"""
        return (self.file + self.rank) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic() if self.is_within_bounds() else repr(self)
