from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .movegen import in_check, legal_moves
from .position import Position


@dataclass
class PerftResult:
    """Leaf count plus a breakdown of the moves that produced the leaves."""

    nodes: int = 0
    captures: int = 0
    promotions: int = 0
    castles: int = 0
    en_passants: int = 0
    checks: int = 0


def perft(position: Position, depth: int) -> int:
    """Compute perft node count for `position` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Every branch works on its own copy, so `position` is left untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = legal_moves(position)
    if depth == 1:
        return len(moves)

    nodes = 0
    for m in moves:
        child = position.copy()
        if not child.apply_move(m):
            continue
        nodes += perft(child, depth - 1)
    return nodes


def perft_detailed(position: Position, depth: int) -> PerftResult:
    """Perft with the move-type breakdown used by published reference tables.

    Moves are classified on the last ply, the one whose children are the
    counted leaves (for depth 1 that is the first ply).
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    result = PerftResult()
    _perft_detailed(position, depth, result)
    return result


def _perft_detailed(position: Position, depth: int, result: PerftResult) -> None:
    if depth == 0:
        result.nodes += 1
        return

    side = position.side_to_move
    for m in legal_moves(position):
        child = position.copy()
        if not child.apply_move(m):
            continue
        if depth == 1:
            target = position.squares[m.to_sq]
            if m.is_en_passant or (not target.is_empty and target.colour != side):
                result.captures += 1
            if m.promotion is not None:
                result.promotions += 1
            if m.is_castle:
                result.castles += 1
            if m.is_en_passant:
                result.en_passants += 1
            if in_check(child):
                result.checks += 1
        _perft_detailed(child, depth - 1, result)


def perft_divide(position: Position, depth: int) -> Dict[str, int]:
    """Return the perft count below each root move, keyed by move text."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for m in legal_moves(position):
        child = position.copy()
        if not child.apply_move(m):
            continue
        out[m.to_uci()] = perft(child, depth - 1)
    return out
