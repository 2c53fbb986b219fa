from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Piece(IntEnum):
    EMPTY = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Colour(IntEnum):
    WHITE = 0
    BLACK = 1
    NONE = 2

    @property
    def opponent(self) -> "Colour":
        if self is Colour.WHITE:
            return Colour.BLACK
        if self is Colour.BLACK:
            return Colour.WHITE
        return Colour.NONE


@dataclass(frozen=True)
class Square:
    """Content of one board cell."""

    piece: Piece
    colour: Colour

    @property
    def is_empty(self) -> bool:
        return self.piece == Piece.EMPTY


EMPTY_SQUARE = Square(Piece.EMPTY, Colour.NONE)

PIECE_TO_CHAR = {
    Piece.PAWN: "p",
    Piece.KNIGHT: "n",
    Piece.BISHOP: "b",
    Piece.ROOK: "r",
    Piece.QUEEN: "q",
    Piece.KING: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}

# One shared instance per piece/colour pair; squares are immutable so a board
# copy only needs to copy the list of references.
SQUARES = {
    (piece, colour): Square(piece, colour)
    for piece in PIECE_TO_CHAR
    for colour in (Colour.WHITE, Colour.BLACK)
}


def square_of(piece: Piece, colour: Colour) -> Square:
    if piece == Piece.EMPTY:
        return EMPTY_SQUARE
    return SQUARES[(piece, colour)]


def square_to_char(sq: Square) -> str:
    """FEN letter for an occupied square: uppercase White, lowercase Black."""
    ch = PIECE_TO_CHAR[sq.piece]
    return ch.upper() if sq.colour == Colour.WHITE else ch


def char_to_square(ch: str) -> Square:
    """Inverse of ``square_to_char``.

    Raises:
        ValueError: If ``ch`` is not a piece letter.
    """
    piece = CHAR_TO_PIECE.get(ch.lower())
    if piece is None:
        raise ValueError(f"invalid piece in FEN: {ch!r}")
    return square_of(piece, Colour.WHITE if ch.isupper() else Colour.BLACK)
