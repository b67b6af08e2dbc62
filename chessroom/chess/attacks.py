"""
Attacking rules: which squares a color controls, where the kings are, and who is giving check.

Attacks are looked up in reverse: starting from the attacked square we look outwards for a piece
that could reach it (a rook along the straight lines, a knight one jump away, etc.)
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from chessroom.chess.moves import (
    DIAGONAL,
    KING_STEPS,
    KNIGHT_JUMPS,
    ORTHOGONAL,
    Vector,
    pawn_direction,
)
from chessroom.chess.pieces import Piece, PieceRecord
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the attack rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def active_pieces(
        self, color: Optional[Color] = None
    ) -> list[tuple[str, PieceRecord]]: ...


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered along one of the rays is one of the attacking pieces.
    """
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.
    """
    attacker = Piece(by_piece_type, by_color)
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square.is_within_bounds() and board.piece(target_square) == attacker:
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. That is, you are asking "Could a white pawn, that moves UP the board, take on the specified square?"

    The forward push of a pawn never attacks anything.
    """
    backwards = -pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(1, backwards), (-1, backwards)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_JUMPS)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.BISHOP,), board, DIAGONAL)


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.ROOK,), board, ORTHOGONAL)


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    """The Queen attacks along the straight lines and the diagonals"""
    return raycasting_attack(
        square, by_color, (PieceType.QUEEN,), board, ORTHOGONAL + DIAGONAL
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_STEPS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}


def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """Could any piece of `by_color` capture on `square` (if an enemy piece stood there)?"""
    return any(
        is_attacked_by(square, by_color, board) for is_attacked_by in ATTACK_RULES.values()
    )


def find_king(board: Board, color: Color) -> Optional[Square]:
    kings = board.locate_pieces(PieceType.KING, color)
    return kings[0] if kings else None


def is_in_check(board: Board, color: Color) -> bool:
    """
    Is the king of `color` attacked by the opponent?

    NOTE: A board without that king should never occur. Answer "not in check" rather than crash.
    """
    king_square = find_king(board, color)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, color.opponent)


# --- CHECK ANALYSIS ---
@dataclass
class CheckInfo:
    """
    Who is giving check, and along which squares.

    Every entry of `check_paths` belongs to the attacker at the same index: the squares from the king
    (exclusive) up to and including the attacker. Capturing the attacker or interposing a piece on one of the
    other squares resolves that particular check.
    """

    in_check: bool = False
    attackers: list[tuple[Square, Piece]] = field(default_factory=list)
    check_paths: list[list[Square]] = field(default_factory=list)


SLIDING_ATTACKS: list[tuple[list[Vector], tuple[PieceType, ...]]] = [
    (ORTHOGONAL, (PieceType.ROOK, PieceType.QUEEN)),
    (DIAGONAL, (PieceType.BISHOP, PieceType.QUEEN)),
]


def analyze_check(board: Board, color: Color) -> CheckInfo:
    """Enumerate the pieces attacking the king of `color` (used to highlight how a check can be blocked)"""
    king_square = find_king(board, color)
    if king_square is None:
        return CheckInfo()

    opponent = color.opponent
    info = CheckInfo()

    # sliding pieces: walk every ray once, stop at the first piece found
    for directions, piece_types in SLIDING_ATTACKS:
        for df, dr in directions:
            path: list[Square] = []
            square = king_square
            while True:
                square = square.offset(df, dr)
                if not square.is_within_bounds():
                    break
                path.append(square)
                piece = board.piece(square)
                if piece is None:
                    continue
                if piece.color == opponent and piece.type in piece_types:
                    info.attackers.append((square, piece))
                    info.check_paths.append(list(path))
                break

    # knights and pawns: the attacker's square is the whole path
    single_steps: list[tuple[PieceType, list[Vector]]] = [
        (PieceType.KNIGHT, KNIGHT_JUMPS),
        (PieceType.PAWN, [(-1, pawn_direction(color)), (1, pawn_direction(color))]),
    ]
    for piece_type, deltas in single_steps:
        attacker = Piece(piece_type, opponent)
        for df, dr in deltas:
            square = king_square.offset(df, dr)
            if square.is_within_bounds() and board.piece(square) == attacker:
                info.attackers.append((square, attacker))
                info.check_paths.append([square])

    info.in_check = bool(info.attackers)
    return info
