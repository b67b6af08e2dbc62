"""
Defines the chess pieces
----

* Piece: the immutable value (type + color). This is what move generation looks at.
* PieceRecord: a piece placed on the board, with a stable identity. The front end animates
  "the mesh with this id", so ids must survive every move and are never handed out twice.
* The piece directory: where every piece starts in a standard game.
"""

from dataclasses import dataclass
from typing import Self

from chessroom.chess.square import BOARD_DIMENSIONS, Square
from chessroom.core.shared_types import Color, PieceType

LETTER_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_LETTER: dict[PieceType, str] = {
    value: key for key, value in LETTER_TO_PIECE.items()
}


PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_letter(cls, character: str) -> Self:
        # upper case: White pieces, lower case: Black pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = LETTER_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_letter(self) -> str:
        letter = PIECE_TO_LETTER[self.type]
        return letter.upper() if self.color == Color.WHITE else letter

    @property
    def points(self) -> int:
        # NOTE: The King's worth is undefined (does not count towards total points)
        return PIECE_POINTS.get(self.type, 0)


@dataclass
class PieceRecord:
    id: str
    type: PieceType
    color: Color
    square: Square
    captured: bool = False

    @property
    def piece(self) -> Piece:
        return Piece(self.type, self.color)

    def promote_to(self, new_type: PieceType) -> None:
        """Rewrite the type in place: the piece keeps its id (same mesh on the board, new shape)."""
        self.type = new_type


# --- PIECE DIRECTORY ---
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

HOME_RANKS: dict[Color, tuple[int, int]] = {
    # (back rank, pawn rank), 0-based
    Color.WHITE: (0, 1),
    Color.BLACK: (BOARD_DIMENSIONS[1] - 1, BOARD_DIMENSIONS[1] - 2),
}


def piece_id(piece_type: PieceType, color: Color, index: int) -> str:
    """ex. 'pawn-white-3': the third white pawn counted from the a-file"""
    return f"{piece_type}-{color}-{index}"


def starting_layout() -> list[PieceRecord]:
    """The 32 pieces of a standard game, on their starting squares."""
    records: list[PieceRecord] = []
    for color, (back_rank, pawn_rank) in HOME_RANKS.items():
        counters: dict[PieceType, int] = {}
        for file, piece_type in enumerate(BACK_RANK):
            counters[piece_type] = counters.get(piece_type, 0) + 1
            records.append(
                PieceRecord(
                    id=piece_id(piece_type, color, counters[piece_type]),
                    type=piece_type,
                    color=color,
                    square=Square(file, back_rank),
                )
            )
        for file in range(BOARD_DIMENSIONS[0]):
            records.append(
                PieceRecord(
                    id=piece_id(PieceType.PAWN, color, file + 1),
                    type=PieceType.PAWN,
                    color=color,
                    square=Square(file, pawn_rank),
                )
            )
    return records
