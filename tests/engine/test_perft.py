from __future__ import annotations

import pytest

from oliviathan.engine.perft import PerftResult, perft, perft_detailed, perft_divide
from oliviathan.engine.position import STARTPOS_FEN, Position


# Kiwipete (castling, EP, promotions rich position)
KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
# Endgame with en passant discoveries and rook checks
POSITION_3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


@pytest.mark.parametrize(
    ("depth", "expected"),
    [
        (0, 1),
        (1, 20),
        (2, 400),
        (3, 8902),
    ],
)
def test_startpos_perft(depth: int, expected: int) -> None:
    p = Position.from_fen(STARTPOS_FEN)
    assert perft(p, depth) == expected


@pytest.mark.slow
def test_startpos_perft_depth4() -> None:
    assert perft(Position.startpos(), 4) == 197281


@pytest.mark.parametrize(("depth", "expected"), [(1, 48), (2, 2039)])
def test_kiwipete_perft_shallow(depth: int, expected: int) -> None:
    assert perft(Position.from_fen(KIWIPETE), depth) == expected


@pytest.mark.slow
def test_kiwipete_perft_depth3() -> None:
    assert perft(Position.from_fen(KIWIPETE), 3) == 97862


@pytest.mark.parametrize(("depth", "expected"), [(1, 14), (2, 191), (3, 2812)])
def test_position3_perft(depth: int, expected: int) -> None:
    assert perft(Position.from_fen(POSITION_3), depth) == expected


def test_perft_leaves_position_untouched() -> None:
    p = Position.from_fen(KIWIPETE)
    perft(p, 2)
    assert p.to_fen() == KIWIPETE


def test_perft_negative_depth_raises() -> None:
    with pytest.raises(ValueError):
        perft(Position.startpos(), -1)


@pytest.mark.parametrize(
    ("fen", "depth", "expected"),
    [
        (STARTPOS_FEN, 0, PerftResult(nodes=1)),
        (STARTPOS_FEN, 1, PerftResult(nodes=20)),
        (STARTPOS_FEN, 3, PerftResult(nodes=8902, captures=34, checks=12)),
        (KIWIPETE, 1, PerftResult(nodes=48, captures=8, castles=2)),
        (KIWIPETE, 2, PerftResult(nodes=2039, captures=351, castles=91, en_passants=1, checks=3)),
        (POSITION_3, 1, PerftResult(nodes=14, captures=1, checks=2)),
        (POSITION_3, 2, PerftResult(nodes=191, captures=14, checks=10)),
        (POSITION_3, 3, PerftResult(nodes=2812, captures=209, en_passants=2, checks=267)),
    ],
)
def test_perft_detailed_matches_reference(fen: str, depth: int, expected: PerftResult) -> None:
    assert perft_detailed(Position.from_fen(fen), depth) == expected


@pytest.mark.slow
def test_perft_detailed_startpos_depth4() -> None:
    res = perft_detailed(Position.startpos(), 4)
    assert res == PerftResult(nodes=197281, captures=1576, checks=469)


def test_perft_divide_startpos() -> None:
    p = Position.startpos()
    div1 = perft_divide(p, 1)
    assert len(div1) == 20 and set(div1.values()) == {1}

    div2 = perft_divide(p, 2)
    assert sum(div2.values()) == 400
    assert div2["e2e4"] == 20
    assert div2["g1f3"] == 20


def test_perft_divide_sums_to_perft() -> None:
    p = Position.from_fen(KIWIPETE)
    assert sum(perft_divide(p, 2).values()) == perft(p, 2)


def test_perft_divide_requires_positive_depth() -> None:
    with pytest.raises(ValueError):
        perft_divide(Position.startpos(), 0)
