"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the candidate move sets for each piece type.

The functions here produce *pseudo-legal* destination squares: they respect how a piece moves and
what blocks it, but not whether the move leaves your own king in check.
Legality is checked later by the legality module.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from chessroom.chess.castling import CASTLING_DIRECTIONS, CASTLING_RULES, CastlingRights
from chessroom.chess.pieces import HOME_RANKS, LETTER_TO_PIECE, PIECE_TO_LETTER, Piece
from chessroom.chess.square import Square
from chessroom.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

ORTHOGONAL: list[Vector] = [(0, 1), (1, 0), (0, -1), (-1, 0)]
DIAGONAL: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_STEPS: list[Vector] = ORTHOGONAL + DIAGONAL


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


@dataclass
class Move:
    """basic definition of a move that was made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Optional[Self]:
        """
        Coordinate notation, as used by the Universal Chess Interface

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e8e8q" : the pawn already standing on e8 gets promoted to a queen

        Returns None if the string cannot be read as a move.
        """
        if len(uci) not in (4, 5):
            return None
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        if from_sq is None or to_sq is None:
            return None
        move = cls(from_sq, to_sq)
        if len(uci) == 5:
            promote_to = LETTER_TO_PIECE.get(uci[4].lower())
            if promote_to is None:
                return None
            move.promote_to = promote_to
        return move

    def to_uci(self) -> str:
        piece_char = PIECE_TO_LETTER[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    @property
    def is_in_place_promotion(self) -> bool:
        return self.from_square == self.to_square and self.promote_to is not None


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    The first occupied square along a ray is only included if it holds an opponent's piece.
    """
    mover = board.piece(square)
    if mover is None:
        return []

    moves: list[Square] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            occupant = board.piece(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != mover.color:
                    moves.append(target_square)
                break

            moves.append(target_square)
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    mover = board.piece(square)
    if mover is None:
        return []

    moves: list[Square] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None or occupant.color != mover.color:
            moves.append(target_square)

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward (only onto an empty square).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant is added by `en_passant_capture()`
    """
    pawn = board.piece(square)
    if pawn is None:
        return []

    moves: list[Square] = []
    direction = pawn_direction(pawn.color)
    _, start_rank = HOME_RANKS[pawn.color]

    # Pawn pushes
    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.piece(one_step) is None:
        moves.append(one_step)
        two_steps = square.offset(0, 2 * direction)
        if (
            square.rank == start_rank
            and two_steps.is_within_bounds()
            and board.piece(two_steps) is None
        ):
            moves.append(two_steps)

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != pawn.color:
            moves.append(target_square)
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Square]:
    """Knights always jump such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_JUMPS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONAL)


def candidate_rook_moves(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, ORTHOGONAL)


def candidate_queen_moves(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    horizontal_and_vertical_moves = candidate_rook_moves(square, board)
    diagonal_moves = candidate_bishop_moves(square, board)
    return horizontal_and_vertical_moves + diagonal_moves


def candidate_king_moves(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `castling_moves()`).
    """
    return single_step_move(square, board, KING_STEPS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# -- EN PASSANT MOVES ---
def en_passant_victim_square(target: Square, capturing_color: Color) -> Square:
    """The pawn taken en passant does not stand on the target square, but on the square right behind it."""
    return target.offset(0, -pawn_direction(capturing_color))


def en_passant_capture(
    square: Square, board: Board, en_passant_target: Optional[Square]
) -> list[Square]:
    """
    Diagonal capture onto the en passant target (the square an opponent pawn just skipped).

    Only offered when the target is diagonally in front of the pawn and the opponent's pawn is actually
    standing behind the target.
    """
    pawn = board.piece(square)
    if en_passant_target is None or pawn is None or pawn.type != PieceType.PAWN:
        return []

    direction = pawn_direction(pawn.color)
    is_diagonal_step = (
        abs(en_passant_target.file - square.file) == 1
        and en_passant_target.rank - square.rank == direction
    )
    if not is_diagonal_step:
        return []

    victim_square = en_passant_victim_square(en_passant_target, pawn.color)
    if board.piece(victim_square) != Piece(PieceType.PAWN, pawn.color.opponent):
        return []
    if board.piece(en_passant_target) is not None:
        return []
    return [en_passant_target]


# -- CASTLING MOVES ---
def castling_moves(
    square: Square, board: Board, castling_rights: Optional[CastlingRights]
) -> list[Square]:
    """
    Candidate castling destinations for the king standing on `square`.
    ---

    **offered if**

    * the king stands on its original square and the castling right has not been revoked
    * the own rook stands on its original corner
    * every square in between king and rook is empty

    NOTE: whether the king is in check, or passes through / lands on an attacked square is NOT checked here.
    """
    king = board.piece(square)
    if castling_rights is None or king is None or king.type != PieceType.KING:
        return []

    own_rook = Piece(PieceType.ROOK, king.color)
    moves: list[Square] = []
    for direction in CASTLING_DIRECTIONS[king.color]:
        rule = CASTLING_RULES[direction]
        if not castling_rights.allows(direction) or square != rule.king_from:
            continue
        if board.piece(rule.rook_from) != own_rook:
            continue
        if any(board.piece(sq) is not None for sq in rule.path):
            continue
        moves.append(rule.king_to)
    return moves


def generate_candidate_moves(
    square: Square,
    piece: Piece,
    board: Board,
    en_passant_target: Optional[Square] = None,
    castling_rights: Optional[CastlingRights] = None,
) -> list[Square]:
    """
    All pseudo-legal destinations of the piece on `square`
    ----

    1. basic movement rule of the piece type
    2. pawns: add en passant capture
    3. kings: add castling moves
    """
    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    moves = movement_rule(square, board)

    if piece.type == PieceType.PAWN:
        moves.extend(en_passant_capture(square, board, en_passant_target))

    if piece.type == PieceType.KING:
        moves.extend(castling_moves(square, board, castling_rights))

    return moves


# -- PAWN PROMOTION ---
def is_promotion_square(square: Square, color: Color) -> bool:
    """White promotes on the 8th rank, black on the 1st"""
    back_rank, _ = HOME_RANKS[color.opponent]
    return square.rank == back_rank
