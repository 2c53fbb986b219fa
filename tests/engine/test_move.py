from __future__ import annotations

import pytest

from oliviathan.engine.move import (
    NULL_MOVE_UCI,
    Move,
    move_to_uci,
    parse_uci,
    square_to_str,
    str_to_square,
)
from oliviathan.engine.pieces import Piece


def test_square_conversions() -> None:
    assert str_to_square("a1") == 0
    assert str_to_square("h1") == 7
    assert str_to_square("e4") == 28
    assert str_to_square("h8") == 63
    assert square_to_str(0) == "a1"
    assert square_to_str(63) == "h8"


@pytest.mark.parametrize("s", ["", "e", "i1", "a0", "a9", "E4", "e44"])
def test_invalid_square_raises(s: str) -> None:
    with pytest.raises(ValueError):
        str_to_square(s)


def test_square_index_out_of_range_raises() -> None:
    with pytest.raises(ValueError):
        square_to_str(64)


def test_parse_uci() -> None:
    assert parse_uci("e2e4") == (12, 28, None)
    assert parse_uci("e7e8q") == (52, 60, Piece.QUEEN)
    assert parse_uci("a2a1n") == (8, 0, Piece.KNIGHT)


@pytest.mark.parametrize("text", ["", "e2", "e2e", "e2e4qq", "e2e9", "z2e4", "e7e8k", "e7e8Q"])
def test_parse_uci_rejects_malformed(text: str) -> None:
    with pytest.raises(ValueError):
        parse_uci(text)


def test_move_to_uci() -> None:
    assert Move(12, 28).to_uci() == "e2e4"
    assert Move(52, 60, Piece.ROOK).to_uci() == "e7e8r"
    assert move_to_uci(None) == NULL_MOVE_UCI == "0000"
