"""Move generation, attack detection and game-status classification.

Every check, castling-transit and terminal-state question in the engine is
answered through ``is_square_attacked``; nothing else reimplements it.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from .move import Move, parse_uci
from .pieces import Colour, Piece
from .position import Position


KNIGHT_OFFSETS = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
BISHOP_DIRS = ((1, 1), (1, -1), (-1, -1), (-1, 1))
ROOK_DIRS = ((1, 0), (0, 1), (-1, 0), (0, -1))
QUEEN_DIRS = BISHOP_DIRS + ROOK_DIRS
KING_OFFSETS = ((1, 1), (1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1))

PROMOTION_ORDER = (Piece.QUEEN, Piece.ROOK, Piece.BISHOP, Piece.KNIGHT)


class GameStatus(Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


# --- Pseudo-legal generation ---


def pseudo_legal_moves(position: Position) -> List[Move]:
    """Return moves that obey piece movement rules for the side to move.

    Moves may leave the mover's own king in check. Order is board index
    ascending with per-piece generator order, then castling, then en passant.
    """
    moves: List[Move] = []
    side = position.side_to_move
    for sq, content in enumerate(position.squares):
        if content.colour != side:
            continue
        piece = content.piece
        if piece == Piece.PAWN:
            _add_pawn_moves(position, sq, side, moves)
        elif piece == Piece.KNIGHT:
            _add_step_moves(position, sq, side, KNIGHT_OFFSETS, moves)
        elif piece == Piece.BISHOP:
            _add_slider_moves(position, sq, side, BISHOP_DIRS, moves)
        elif piece == Piece.ROOK:
            _add_slider_moves(position, sq, side, ROOK_DIRS, moves)
        elif piece == Piece.QUEEN:
            _add_slider_moves(position, sq, side, QUEEN_DIRS, moves)
        elif piece == Piece.KING:
            _add_step_moves(position, sq, side, KING_OFFSETS, moves)
    _add_castling_moves(position, moves)
    _add_en_passant_moves(position, moves)
    return moves


def _add_pawn_moves(position: Position, from_sq: int, side: Colour, moves: List[Move]) -> None:
    squares = position.squares
    f = from_sq % 8
    r = from_sq // 8
    direction = 1 if side == Colour.WHITE else -1
    start_rank = 1 if side == Colour.WHITE else 6
    promotion_rank = 7 if side == Colour.WHITE else 0

    fwd_rank = r + direction
    if not 0 <= fwd_rank < 8:
        return

    # Advances
    to_sq = fwd_rank * 8 + f
    if squares[to_sq].is_empty:
        if fwd_rank == promotion_rank:
            for promo in PROMOTION_ORDER:
                moves.append(Move(from_sq, to_sq, promo))
        else:
            moves.append(Move(from_sq, to_sq))
            if r == start_rank:
                dbl_sq = (r + 2 * direction) * 8 + f
                if squares[dbl_sq].is_empty:
                    moves.append(Move(from_sq, dbl_sq))

    # Diagonal captures onto enemy pieces only; en passant is added separately
    for df in (-1, 1):
        tf = f + df
        if not 0 <= tf < 8:
            continue
        cap_sq = fwd_rank * 8 + tf
        target = squares[cap_sq]
        if target.is_empty or target.colour == side:
            continue
        if fwd_rank == promotion_rank:
            for promo in PROMOTION_ORDER:
                moves.append(Move(from_sq, cap_sq, promo))
        else:
            moves.append(Move(from_sq, cap_sq))


def _add_step_moves(
    position: Position, from_sq: int, side: Colour, offsets: tuple, moves: List[Move]
) -> None:
    squares = position.squares
    f = from_sq % 8
    r = from_sq // 8
    for df, dr in offsets:
        tf = f + df
        tr = r + dr
        if 0 <= tf < 8 and 0 <= tr < 8:
            to_sq = tr * 8 + tf
            if squares[to_sq].colour != side:
                moves.append(Move(from_sq, to_sq))


def _add_slider_moves(
    position: Position, from_sq: int, side: Colour, dirs: tuple, moves: List[Move]
) -> None:
    squares = position.squares
    f = from_sq % 8
    r = from_sq // 8
    for df, dr in dirs:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            to_sq = tr * 8 + tf
            target = squares[to_sq]
            if target.is_empty:
                moves.append(Move(from_sq, to_sq))
                continue
            if target.colour != side:
                moves.append(Move(from_sq, to_sq))
            break


def _add_castling_moves(position: Position, moves: List[Move]) -> None:
    side = position.side_to_move
    opponent = side.opponent
    rank_base = 0 if side == Colour.WHITE else 56
    king_from = rank_base + 4
    squares = position.squares

    king = squares[king_from]
    if king.piece != Piece.KING or king.colour != side:
        return

    def rook_home(sq: int) -> bool:
        content = squares[sq]
        return content.piece == Piece.ROOK and content.colour == side

    rights = position.castling
    # Kingside: f and g empty; e, f, g not attacked
    if (
        rights.kingside(side)
        and rook_home(rank_base + 7)
        and squares[rank_base + 5].is_empty
        and squares[rank_base + 6].is_empty
        and not is_square_attacked(position, king_from, opponent)
        and not is_square_attacked(position, rank_base + 5, opponent)
        and not is_square_attacked(position, rank_base + 6, opponent)
    ):
        moves.append(Move(king_from, rank_base + 6, is_castle=True))
    # Queenside: b, c and d empty; e, d, c not attacked (b may be)
    if (
        rights.queenside(side)
        and rook_home(rank_base)
        and squares[rank_base + 1].is_empty
        and squares[rank_base + 2].is_empty
        and squares[rank_base + 3].is_empty
        and not is_square_attacked(position, king_from, opponent)
        and not is_square_attacked(position, rank_base + 3, opponent)
        and not is_square_attacked(position, rank_base + 2, opponent)
    ):
        moves.append(Move(king_from, rank_base + 2, is_castle=True))


def _add_en_passant_moves(position: Position, moves: List[Move]) -> None:
    ep = position.ep_square
    if ep is None:
        return
    side = position.side_to_move
    f = ep % 8
    r = ep // 8
    pawn_rank = r - 1 if side == Colour.WHITE else r + 1
    if not 0 <= pawn_rank < 8:
        return
    for df in (-1, 1):
        pf = f + df
        if not 0 <= pf < 8:
            continue
        from_sq = pawn_rank * 8 + pf
        pawn = position.squares[from_sq]
        if pawn.piece == Piece.PAWN and pawn.colour == side:
            moves.append(Move(from_sq, ep, is_en_passant=True))


# --- Attacks ---


def is_square_attacked(position: Position, square: int, by_colour: Colour) -> bool:
    """Return True if any piece of ``by_colour`` attacks ``square``.

    Brute force: each attacker's attack pattern is tested against the
    square. Pawns attack diagonally only; sliders stop at the first occupied
    square on a ray (that square itself is attacked).
    """
    squares = position.squares
    tf = square % 8
    tr = square // 8
    for sq, content in enumerate(squares):
        if content.colour != by_colour:
            continue
        df = tf - sq % 8
        dr = tr - sq // 8
        piece = content.piece
        if piece == Piece.PAWN:
            forward = 1 if by_colour == Colour.WHITE else -1
            if dr == forward and (df == 1 or df == -1):
                return True
        elif piece == Piece.KNIGHT:
            if (abs(df), abs(dr)) in ((1, 2), (2, 1)):
                return True
        elif piece == Piece.KING:
            if sq != square and abs(df) <= 1 and abs(dr) <= 1:
                return True
        elif piece in (Piece.BISHOP, Piece.ROOK, Piece.QUEEN):
            if _slider_reaches(squares, sq, piece, df, dr):
                return True
    return False


def _slider_reaches(squares, from_sq: int, piece: Piece, df: int, dr: int) -> bool:
    if df == 0 and dr == 0:
        return False
    diagonal = abs(df) == abs(dr)
    straight = df == 0 or dr == 0
    if piece == Piece.BISHOP and not diagonal:
        return False
    if piece == Piece.ROOK and not straight:
        return False
    if piece == Piece.QUEEN and not (diagonal or straight):
        return False
    step_f = (df > 0) - (df < 0)
    step_r = (dr > 0) - (dr < 0)
    distance = max(abs(df), abs(dr))
    f = from_sq % 8
    r = from_sq // 8
    # Every square strictly between must be empty
    for i in range(1, distance):
        if not squares[(r + step_r * i) * 8 + f + step_f * i].is_empty:
            return False
    return True


def in_check(position: Position, colour: Optional[Colour] = None) -> bool:
    """Return True if ``colour`` (default: side to move) has its king attacked."""
    side = position.side_to_move if colour is None else colour
    king_sq = position.king_square(side)
    if king_sq is None:
        return False
    return is_square_attacked(position, king_sq, side.opponent)


# --- Legality ---


def legal_moves(position: Position) -> List[Move]:
    """Return pseudo-legal moves that do not leave the mover's king attacked.

    Each candidate is applied to a copy of ``position``; the original is
    never modified. Generation order is preserved.
    """
    side = position.side_to_move
    opponent = side.opponent
    legal: List[Move] = []
    for mv in pseudo_legal_moves(position):
        child = position.copy()
        if not child.apply_move(mv):
            continue
        king_sq = child.king_square(side)
        if king_sq is None:
            continue
        if not is_square_attacked(child, king_sq, opponent):
            legal.append(mv)
    return legal


def is_legal_move(position: Position, move: Move) -> bool:
    """Exact structural match of ``move`` against ``legal_moves``."""
    return any(m == move for m in legal_moves(position))


def move_from_uci(position: Position, text: str) -> Optional[Move]:
    """Resolve move text into the matching legal ``Move`` (flags included).

    Returns:
        Optional[Move]: The legal move, or None if ``text`` is malformed or
            names no legal move.
    """
    try:
        from_sq, to_sq, promo = parse_uci(text)
    except ValueError:
        return None
    for m in legal_moves(position):
        if m.from_sq == from_sq and m.to_sq == to_sq and m.promotion == promo:
            return m
    return None


def game_status(position: Position, legal: Optional[List[Move]] = None) -> GameStatus:
    """Classify ``position`` as ongoing, checkmate or stalemate.

    This is the only place terminal states are decided. ``legal`` may be a
    precomputed ``legal_moves(position)`` list to avoid generating twice.
    """
    moves = legal_moves(position) if legal is None else legal
    if not moves:
        return GameStatus.CHECKMATE if in_check(position) else GameStatus.STALEMATE
    return GameStatus.ONGOING
