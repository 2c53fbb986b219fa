from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .pieces import Piece


NULL_MOVE_UCI = "0000"

PROMOTION_PIECES = {
    "q": Piece.QUEEN,
    "r": Piece.ROOK,
    "b": Piece.BISHOP,
    "n": Piece.KNIGHT,
}
PROMOTION_CHARS = {v: k for k, v in PROMOTION_PIECES.items()}


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (int): Origin square index (0-based, a1 = 0).
        to_sq (int): Destination square index (0-based).
        promotion (Optional[Piece]): Piece a pawn turns into, if any.
        is_castle (bool): King move that also relocates the rook.
        is_en_passant (bool): Pawn capture whose victim sits behind ``to_sq``.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[Piece] = None
    is_castle: bool = False
    is_en_passant: bool = False

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = PROMOTION_CHARS[self.promotion] if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


def move_to_uci(move: Optional[Move]) -> str:
    """Like ``Move.to_uci`` but renders a missing move as ``"0000"``."""
    return NULL_MOVE_UCI if move is None else move.to_uci()


def parse_uci(uci: str) -> Tuple[int, int, Optional[Piece]]:
    """Parse a move string into its squares and promotion piece.

    The castle and en-passant flags depend on the position, so this only
    returns the raw parts; see ``movegen.move_from_uci`` for a full ``Move``.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Tuple[int, int, Optional[Piece]]: Origin, destination, promotion.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[Piece] = None
    if len(uci) == 5:
        ch = uci[4]
        if ch not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {ch!r}")
        promo = PROMOTION_PIECES[ch]
    return from_sq, to_sq, promo


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Args:
        idx (int): Square index in range 0..63.

    Returns:
        str: Algebraic notation for ``idx``.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
