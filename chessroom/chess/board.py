"""
The Game board: the authoritative set of pieces on the board.

Pieces are stored by their id (the identity the front end animates). Looking up a square goes through a
derived index (square -> id) that is kept in sync with every placement, move and capture.
Captured pieces leave the board entirely: the Game keeps them in its list of captured pieces.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from chessroom.chess.pieces import Piece, PieceRecord, piece_id, starting_layout
from chessroom.chess.square import BOARD_DIMENSIONS, Square
from chessroom.core.shared_types import Color, PieceType


@dataclass
class Board:
    pieces: dict[str, PieceRecord] = field(default_factory=dict)
    index: dict[Square, str] = field(default_factory=dict)
    # every id ever placed on this board (also the captured ones): ids are never handed out twice
    issued_ids: set[str] = field(default_factory=set)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position"""
        board = cls()
        for record in starting_layout():
            board._add(record)
        return board

    @classmethod
    def from_placement(cls, placement: dict[str, str]) -> Self:
        """
        Convenience constructor for set-ups: {'e1': 'K', 'e8': 'k', 'a7': 'P'}
        (upper case: White pieces, lower case: Black pieces)
        """
        board = cls()
        for square_name, letter in placement.items():
            square = Square.from_algebraic(square_name)
            if square is None:
                raise ValueError(f"Not a square: {square_name!r}")
            board.place_piece(Piece.from_letter(letter), square)
        return board

    # --- LOOKUPS ---
    def at(self, square: Optional[Square]) -> Optional[PieceRecord]:
        """The record of the piece standing on the square (None for empty / invalid squares)"""
        if square is None:
            return None
        piece_id_found = self.index.get(square)
        if piece_id_found is None:
            return None
        return self.pieces[piece_id_found]

    def piece(self, square: Square) -> Optional[Piece]:
        record = self.at(square)
        return record.piece if record else None

    def piece_id_at(self, square: Square) -> Optional[str]:
        return self.index.get(square)

    def by_id(self, piece_id_: str) -> Optional[PieceRecord]:
        return self.pieces.get(piece_id_)

    def is_empty(self, square: Square) -> bool:
        return square not in self.index

    def active_pieces(self, color: Optional[Color] = None) -> list[tuple[str, PieceRecord]]:
        return [
            (id_, record)
            for id_, record in self.pieces.items()
            if color is None or record.color == color
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            record.square
            for _, record in self.active_pieces(color)
            if record.type == piece_type
        ]

    # --- UPDATES ---
    def place_piece(
        self, piece: Piece, square: Square, piece_id_: Optional[str] = None
    ) -> PieceRecord:
        """Put a new piece on an empty square. Without explicit id, the next free id for this type/color is used."""
        if not square.is_within_bounds():
            raise ValueError(f"Square off the board: {square!r}")
        if not self.is_empty(square):
            raise ValueError(f"Square {square} is already occupied")
        if piece_id_ is None:
            piece_id_ = self._next_id(piece.type, piece.color)
        elif piece_id_ in self.issued_ids:
            raise ValueError(f"Piece id {piece_id_!r} was already used on this board")

        record = PieceRecord(piece_id_, piece.type, piece.color, square)
        self._add(record)
        return record

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[PieceRecord]:
        """
        Relocate the piece on `from_square`. A piece standing on `to_square` gets captured.

        Returns the captured piece (if any)
        """
        moving_id = self.index.get(from_square)
        if moving_id is None:
            return None

        captured = self.remove_piece(to_square)
        del self.index[from_square]
        self.pieces[moving_id].square = to_square
        self.index[to_square] = moving_id
        return captured

    def remove_piece(self, square: Square) -> Optional[PieceRecord]:
        """Take a piece off the board (a capture). The record gets flagged as captured and is returned."""
        removed_id = self.index.pop(square, None)
        if removed_id is None:
            return None
        record = self.pieces.pop(removed_id)
        record.captured = True
        return record

    def copy(self) -> Self:
        """Independent copy (records are copied as well, so simulating moves never leaks into the original)"""
        return type(self)(
            pieces={id_: replace(record) for id_, record in self.pieces.items()},
            index=dict(self.index),
            issued_ids=set(self.issued_ids),
        )

    # --- MATERIAL ---
    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(record.piece.points for _, record in self.active_pieces(color))
            for color in Color
        }

    # --- TEXT FORMS ---
    def placement_key(self) -> str:
        """
        Compact text form of the placement, ranks separated by slashes (8th rank first).
        Letters denote pieces, digits the number of consecutive empty squares.
        """
        return "/".join(
            self._rank_key(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_key(self, rank: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Square(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.to_letter())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def __str__(self) -> str:
        rows: list[str] = []
        for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
            row = []
            for file in range(BOARD_DIMENSIONS[0]):
                piece = self.piece(Square(file, rank))
                row.append(piece.to_letter() if piece else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    # -- PRIVATE HELPERS ---
    def _add(self, record: PieceRecord) -> None:
        self.pieces[record.id] = record
        self.index[record.square] = record.id
        self.issued_ids.add(record.id)

    def _next_id(self, piece_type: PieceType, color: Color) -> str:
        index = 1
        while piece_id(piece_type, color, index) in self.issued_ids:
            index += 1
        return piece_id(piece_type, color, index)


def create_initial_board() -> Board:
    return Board.initial()

