from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from .move import Move, square_to_str, str_to_square
from .pieces import (
    EMPTY_SQUARE,
    Colour,
    Piece,
    Square,
    char_to_square,
    square_of,
    square_to_char,
)


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

BACK_RANK = (
    Piece.ROOK,
    Piece.KNIGHT,
    Piece.BISHOP,
    Piece.QUEEN,
    Piece.KING,
    Piece.BISHOP,
    Piece.KNIGHT,
    Piece.ROOK,
)

# Home squares that gate castling rights
A1, E1, H1 = 0, 4, 7
A8, E8, H8 = 56, 60, 63


def _starting_squares() -> List[Square]:
    squares = [EMPTY_SQUARE] * 64
    for f, piece in enumerate(BACK_RANK):
        squares[f] = square_of(piece, Colour.WHITE)
        squares[8 + f] = square_of(Piece.PAWN, Colour.WHITE)
        squares[48 + f] = square_of(Piece.PAWN, Colour.BLACK)
        squares[56 + f] = square_of(piece, Colour.BLACK)
    return squares


@dataclass(frozen=True)
class CastlingRights:
    """Four independent castling flags, serialised as FEN ``KQkq``."""

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    @classmethod
    def none(cls) -> "CastlingRights":
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, field_: str) -> "CastlingRights":
        if field_ == "-":
            return cls.none()
        if not field_ or any(ch not in "KQkq" for ch in field_):
            raise ValueError("invalid castling rights")
        return cls("K" in field_, "Q" in field_, "k" in field_, "q" in field_)

    def to_fen(self) -> str:
        out = ""
        if self.white_kingside:
            out += "K"
        if self.white_queenside:
            out += "Q"
        if self.black_kingside:
            out += "k"
        if self.black_queenside:
            out += "q"
        return out or "-"

    def kingside(self, colour: Colour) -> bool:
        return self.white_kingside if colour == Colour.WHITE else self.black_kingside

    def queenside(self, colour: Colour) -> bool:
        return self.white_queenside if colour == Colour.WHITE else self.black_queenside

    def revoke_for_square(self, sq: int) -> "CastlingRights":
        """Drop every right whose king or rook home square is ``sq``."""
        if sq == E1:
            return replace(self, white_kingside=False, white_queenside=False)
        if sq == H1:
            return replace(self, white_kingside=False)
        if sq == A1:
            return replace(self, white_queenside=False)
        if sq == E8:
            return replace(self, black_kingside=False, black_queenside=False)
        if sq == H8:
            return replace(self, black_kingside=False)
        if sq == A8:
            return replace(self, black_queenside=False)
        return self


@dataclass
class Position:
    """Mailbox chess position with FEN I/O and move application.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - A default-constructed Position is the standard starting position.
    - Holds state and the rules for applying a move; attack detection and
      legality live in ``movegen``.
    """

    squares: List[Square] = field(default_factory=_starting_squares)
    side_to_move: Colour = Colour.WHITE
    castling: CastlingRights = field(default_factory=CastlingRights)
    ep_square: Optional[int] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def startpos(cls) -> "Position":
        """Create a position initialised to the standard starting arrangement."""
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Create a position from a Forsyth–Edwards Notation (FEN) string.

        Args:
            fen (str): FEN string describing the position to load.

        Returns:
            Position: Position initialised with the state encoded in ``fen``.

        Raises:
            ValueError: If ``fen`` is empty, has the wrong number of fields, or
                contains invalid piece placement, kings, castling rights, en
                passant square, or move counters.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) != 6:
            raise ValueError("FEN must have 6 fields")
        placement, stm, castling, ep, halfmove, fullmove = parts

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        squares = [EMPTY_SQUARE] * 64
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    if file_idx >= 8:
                        raise ValueError("too many squares in FEN rank")
                    squares[rank_idx * 8 + file_idx] = char_to_square(ch)
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")

        for colour in (Colour.WHITE, Colour.BLACK):
            kings = sum(1 for s in squares if s.piece == Piece.KING and s.colour == colour)
            if kings != 1:
                raise ValueError("each side must have exactly one king")

        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")

        rights = CastlingRights.from_fen(castling)

        ep_square: Optional[int]
        if ep == "-":
            ep_square = None
        else:
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            # Target sits behind a pawn the opponent just pushed two ranks
            if ep_square // 8 != (5 if stm == "w" else 2):
                raise ValueError("invalid en passant square rank")

        try:
            halfmove_clock = int(halfmove)
            fullmove_number = int(fullmove)
        except ValueError as e:
            raise ValueError("invalid move counters in FEN") from e
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters in FEN")

        return cls(
            squares=squares,
            side_to_move=Colour.WHITE if stm == "w" else Colour.BLACK,
            castling=rights,
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )

    def reset(self) -> None:
        """Reinitialise in place to the standard starting position."""
        self.squares = _starting_squares()
        self.side_to_move = Colour.WHITE
        self.castling = CastlingRights()
        self.ep_square = None
        self.halfmove_clock = 0
        self.fullmove_number = 1

    def copy(self) -> "Position":
        """Return an independent copy; mutating it never touches ``self``."""
        return Position(
            squares=list(self.squares),
            side_to_move=self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def null_move(self) -> "Position":
        """Copy with the side to move swapped and nothing else played.

        The en-passant target belongs to the side that was to move, so it is
        dropped as well.
        """
        child = self.copy()
        child.side_to_move = self.side_to_move.opponent
        child.ep_square = None
        return child

    def to_fen(self) -> str:
        """Serialize the current position into a FEN string.

        Returns:
            str: FEN string describing the position.
        """
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for file_idx in range(8):
                sq = self.squares[rank_idx * 8 + file_idx]
                if sq.is_empty:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(square_to_char(sq))
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        placement = "/".join(ranks_str)

        stm = "w" if self.side_to_move == Colour.WHITE else "b"
        ep = square_to_str(self.ep_square) if self.ep_square is not None else "-"
        return (
            f"{placement} {stm} {self.castling.to_fen()} {ep} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )

    def piece_at(self, sq: int) -> Square:
        return self.squares[sq]

    def king_square(self, colour: Colour) -> Optional[int]:
        for idx, sq in enumerate(self.squares):
            if sq.piece == Piece.KING and sq.colour == colour:
                return idx
        return None

    def apply_move(self, move: Move) -> bool:
        """Apply ``move`` in place.

        Fails without touching any state when the origin square is empty or
        holds a piece of the side not to move. Castling moves are relocated
        structurally only; the caller is responsible for having validated
        them (see ``movegen.legal_moves``).

        Returns:
            bool: True when the move was applied.
        """
        from_sq, to_sq = move.from_sq, move.to_sq
        if not (0 <= from_sq < 64 and 0 <= to_sq < 64):
            return False
        mover = self.squares[from_sq]
        if mover.is_empty or mover.colour != self.side_to_move:
            return False

        is_white = mover.colour == Colour.WHITE
        target = self.squares[to_sq]

        if move.is_castle:
            if to_sq > from_sq:  # kingside
                rook_from, rook_to = from_sq + 3, from_sq + 1
            else:  # queenside
                rook_from, rook_to = from_sq - 4, from_sq - 1
            if not 0 <= rook_from < 64:
                return False
            self.squares[rook_to] = self.squares[rook_from]
            self.squares[rook_from] = EMPTY_SQUARE
            self.squares[to_sq] = mover
            self.squares[from_sq] = EMPTY_SQUARE
            self.ep_square = None
            self.halfmove_clock += 1
        elif move.is_en_passant:
            if not 8 <= to_sq < 56:
                return False
            self.squares[to_sq] = mover
            self.squares[from_sq] = EMPTY_SQUARE
            # Victim sits one rank behind the target, toward the mover
            self.squares[to_sq - 8 if is_white else to_sq + 8] = EMPTY_SQUARE
            self.ep_square = None
            self.halfmove_clock = 0
        else:
            if move.promotion is not None:
                self.squares[to_sq] = square_of(move.promotion, mover.colour)
            else:
                self.squares[to_sq] = mover
            self.squares[from_sq] = EMPTY_SQUARE

            if mover.piece == Piece.PAWN and abs(to_sq - from_sq) == 16:
                self.ep_square = (from_sq + to_sq) // 2
            else:
                self.ep_square = None

            if mover.piece == Piece.PAWN or not target.is_empty:
                self.halfmove_clock = 0
            else:
                self.halfmove_clock += 1

        # Any move touching a king or rook home square ends those rights,
        # including a capture of the rook on its corner
        self.castling = self.castling.revoke_for_square(from_sq).revoke_for_square(to_sq)

        if not is_white:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opponent
        return True
