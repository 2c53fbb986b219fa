from __future__ import annotations

from oliviathan.engine.move import Move
from oliviathan.engine.movegen import legal_moves, move_from_uci
from oliviathan.engine.position import Position
from oliviathan.search.service import (
    CASTLE_BONUS,
    EN_PASSANT_BONUS,
    PROMOTION_BONUS,
    move_order_score,
    order_moves,
)


def _mv(p: Position, uci: str) -> Move:
    mv = move_from_uci(p, uci)
    assert mv is not None, uci
    return mv


def test_mvv_lva_capture_score() -> None:
    p = Position.from_fen("4k3/8/8/3q4/4P3/8/8/3RK3 w - - 0 1")
    # Pawn takes queen: 900 * 10 - 100
    assert move_order_score(p, _mv(p, "e4d5")) == 8900
    # Rook takes queen: 900 * 10 - 500
    assert move_order_score(p, _mv(p, "d1d5")) == 8500
    assert move_order_score(p, _mv(p, "e1f1")) == 0


def test_special_move_bonuses() -> None:
    promo = Position.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert move_order_score(promo, _mv(promo, "e7e8q")) == PROMOTION_BONUS

    castle = Position.from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
    assert move_order_score(castle, _mv(castle, "e1g1")) == CASTLE_BONUS

    ep = Position.from_fen("4k3/8/8/3Pp3/8/8/8/4K3 w - e6 0 1")
    assert move_order_score(ep, _mv(ep, "d5e6")) == EN_PASSANT_BONUS


def test_capture_promotion_adds_both() -> None:
    p = Position.from_fen("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert move_order_score(p, _mv(p, "e7d8q")) == 500 * 10 - 100 + PROMOTION_BONUS


def test_order_moves_is_stable_and_descending() -> None:
    p = Position.from_fen("4k3/8/8/3q4/4P3/8/8/3RK3 w - - 0 1")
    moves = legal_moves(p)
    ordered = order_moves(p, moves)
    assert ordered[0].to_uci() == "e4d5"
    assert ordered[1].to_uci() == "d1d5"
    scores = [move_order_score(p, m) for m in ordered]
    assert scores == sorted(scores, reverse=True)
    # Quiet moves keep generation order
    quiet = [m for m in moves if move_order_score(p, m) == 0]
    assert [m for m in ordered if move_order_score(p, m) == 0] == quiet
    # Input list untouched
    assert moves == legal_moves(p)
