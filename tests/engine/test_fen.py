from __future__ import annotations

import pytest

from oliviathan.engine.move import str_to_square
from oliviathan.engine.movegen import legal_moves
from oliviathan.engine.pieces import Colour, Piece
from oliviathan.engine.position import STARTPOS_FEN, Position


def test_startpos_round_trip() -> None:
    p = Position.from_fen(STARTPOS_FEN)
    assert p.to_fen() == STARTPOS_FEN


def test_default_position_is_startpos() -> None:
    assert Position().to_fen() == STARTPOS_FEN
    assert Position.startpos() == Position.from_fen(STARTPOS_FEN)


@pytest.mark.parametrize(
    "fen",
    [
        # Mixed pieces and empty squares, some castling rights
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        # No castling rights, ep target present on rank 3
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1",
        # All castling rights
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        # Partial rights for black only
        "r3k2r/8/8/8/8/8/8/4K3 b kq - 12 40",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    p = Position.from_fen(fen)
    assert p.to_fen() == fen


def test_fields_are_parsed() -> None:
    p = Position.from_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b Kq e3 3 7")
    assert p.side_to_move == Colour.BLACK
    assert p.ep_square == str_to_square("e3")
    assert p.castling.white_kingside and not p.castling.white_queenside
    assert p.castling.black_queenside and not p.castling.black_kingside
    assert p.halfmove_clock == 3
    assert p.fullmove_number == 7
    e4 = p.piece_at(str_to_square("e4"))
    assert e4.piece == Piece.PAWN and e4.colour == Colour.WHITE


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "4k3/8/8/8/8/8/4K3 w - - 0 1",  # not enough ranks
        "4k3/8/8/8/8/8/8/4K3 w - - 0",  # missing fields
        "4k3/8/8/8/8/8/8/4K3 x - - 0 1",  # bad side to move
        "4k3/8/8/8/8/8/8/4K3 w A - 0 1",  # bad castling
        "4k3/8/8/8/8/8/8/4K3 w - z9 0 1",  # bad ep square
        "4k3/8/8/8/8/8/8/4K3 w - e4 0 1",  # ep square on wrong rank
        "4k3/8/8/8/8/8/3P4/4K3 w - e3 0 1",  # ep square on the mover's own side
        "4k3/8/8/8/8/8/8/4K3 b - e6 0 1",  # ep square on the mover's own side
        "4k3/8/8/8/8/8/8/4K3 w - - -1 1",  # bad halfmove
        "4k3/8/8/8/8/8/8/4K3 w - - 0 0",  # bad fullmove
        "4k3/8/8/8/8/8/8/4K3 w - - a 1",  # non-numeric counter
        "4k4/8/8/8/8/8/8/4K3 w - - 0 1",  # too many squares
        "4k3/8/8/8/8/8/8/4K2X w - - 0 1",  # bad piece
        "8/8/8/8/8/8/8/4K3 w - - 0 1",  # missing black king
        "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",  # two white kings
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(ValueError):
        Position.from_fen(fen)


def test_round_trip_preserves_legal_moves() -> None:
    fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
    p = Position.from_fen(fen)
    again = Position.from_fen(p.to_fen())
    assert {m.to_uci() for m in legal_moves(p)} == {m.to_uci() for m in legal_moves(again)}
