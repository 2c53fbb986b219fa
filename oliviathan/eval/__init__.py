"""Evaluation heuristics and related utilities.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Dict, Final, Tuple

from oliviathan.engine.movegen import legal_moves
from oliviathan.engine.pieces import Colour, Piece
from oliviathan.engine.position import Position


# Material values in centipawns; the king is never traded so it carries none
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 0

PIECE_VALUES: Final[Dict[Piece, int]] = {
    Piece.EMPTY: 0,
    Piece.PAWN: P_VAL,
    Piece.KNIGHT: N_VAL,
    Piece.BISHOP: B_VAL,
    Piece.ROOK: R_VAL,
    Piece.QUEEN: Q_VAL,
    Piece.KING: K_VAL,
}

# Heuristic weights (centipawns)
CASTLING_RIGHT_BONUS: Final = 20
DOUBLED_PAWN_PENALTY: Final = 10


def _mirror_sq(sq: int) -> int:
    # Flip vertically (rank mirror)
    f = sq % 8
    r = sq // 8
    return (7 - r) * 8 + f


# Piece-square tables, white perspective, a1 first.
# fmt: off
PSQT_P: Final[Tuple[int, ...]] = (
      0,   0,   0,   0,   0,   0,   0,   0,
      5,  10,  10, -20, -20,  10,  10,   5,
      5,  -5, -10,   0,   0, -10,  -5,   5,
      0,   0,   0,  20,  20,   0,   0,   0,
      5,   5,  10,  25,  25,  10,   5,   5,
     10,  10,  20,  30,  30,  20,  10,  10,
     50,  50,  50,  50,  50,  50,  50,  50,
      0,   0,   0,   0,   0,   0,   0,   0,
)
PSQT_N: Final[Tuple[int, ...]] = (
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
)
PSQT_B: Final[Tuple[int, ...]] = (
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
)
PSQT_R: Final[Tuple[int, ...]] = (
      0,   0,   5,  10,  10,   5,   0,   0,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
      5,  10,  10,  10,  10,  10,  10,   5,
      0,   0,   0,   0,   0,   0,   0,   0,
)
PSQT_Q: Final[Tuple[int, ...]] = (
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,   5,   5,   5,   0, -10,
     -5,   0,   5,   5,   5,   5,   0,  -5,
     -5,   0,   5,   5,   5,   5,   0,  -5,
    -10,   0,   5,   5,   5,   5,   0, -10,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
)
PSQT_K: Final[Tuple[int, ...]] = (
     20,  30,  10,   0,   0,  10,  30,  20,
     20,  20,   0,   0,   0,   0,  20,  20,
    -10, -20, -20, -20, -20, -20, -20, -10,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
)
# fmt: on

PSQT: Final[Dict[Piece, Tuple[int, ...]]] = {
    Piece.PAWN: PSQT_P,
    Piece.KNIGHT: PSQT_N,
    Piece.BISHOP: PSQT_B,
    Piece.ROOK: PSQT_R,
    Piece.QUEEN: PSQT_Q,
    Piece.KING: PSQT_K,
}


def piece_value(piece: Piece) -> int:
    return PIECE_VALUES[piece]


def _material_and_placement(position: Position) -> int:
    score = 0
    for sq, content in enumerate(position.squares):
        if content.is_empty:
            continue
        piece = content.piece
        if content.colour == Colour.WHITE:
            score += PIECE_VALUES[piece] + PSQT[piece][sq]
        else:
            score -= PIECE_VALUES[piece] + PSQT[piece][_mirror_sq(sq)]
    return score


def _castling_rights(position: Position) -> int:
    rights = position.castling
    score = 0
    if rights.white_kingside:
        score += CASTLING_RIGHT_BONUS
    if rights.white_queenside:
        score += CASTLING_RIGHT_BONUS
    if rights.black_kingside:
        score -= CASTLING_RIGHT_BONUS
    if rights.black_queenside:
        score -= CASTLING_RIGHT_BONUS
    return score


def _pawn_structure(position: Position) -> int:
    # Doubled pawns: penalty per extra pawn on the same file
    white_files = [0] * 8
    black_files = [0] * 8
    for sq, content in enumerate(position.squares):
        if content.piece != Piece.PAWN:
            continue
        if content.colour == Colour.WHITE:
            white_files[sq % 8] += 1
        else:
            black_files[sq % 8] += 1
    score = 0
    for f in range(8):
        if white_files[f] > 1:
            score -= DOUBLED_PAWN_PENALTY * (white_files[f] - 1)
        if black_files[f] > 1:
            score += DOUBLED_PAWN_PENALTY * (black_files[f] - 1)
    return score


def _mobility(position: Position) -> int:
    own = len(legal_moves(position))
    other = len(legal_moves(position.null_move()))
    if position.side_to_move == Colour.WHITE:
        return own - other
    return other - own


def evaluate(position: Position) -> int:
    """Return a material + PSQT + positional evaluation in centipawns.

    Positive means advantage for White, whichever side is to move. Checkmate
    and stalemate are not scored here; the search resolves them.
    """
    score = _material_and_placement(position)
    score += _castling_rights(position)
    score += _pawn_structure(position)
    score += _mobility(position)
    return score
