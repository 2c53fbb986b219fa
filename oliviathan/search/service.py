from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Final, List, Optional

from oliviathan.engine.move import Move, move_to_uci
from oliviathan.engine.movegen import GameStatus, game_status, legal_moves
from oliviathan.engine.pieces import Colour
from oliviathan.engine.position import Position
from oliviathan.eval import evaluate, piece_value


logger = logging.getLogger(__name__)

INF: Final = 10_000_000
MATE_SCORE: Final = 100_000  # mate scores are MATE_SCORE + remaining depth

# Move ordering bonuses
PROMOTION_BONUS: Final = 900
EN_PASSANT_BONUS: Final = 100
CASTLE_BONUS: Final = 50


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int  # centipawns, positive favours White
    depth: int
    nodes: int
    time_ms: int
    stopped: bool = False

    @property
    def best_move_uci(self) -> str:
        return move_to_uci(self.best_move)


def move_order_score(position: Position, move: Move) -> int:
    """Heuristic priority of ``move``; higher is searched first.

    Captures use victim * 10 - attacker (MVV/LVA). Promotions, en passant and
    castling get flat bonuses; quiet moves score zero.
    """
    score = 0
    target = position.squares[move.to_sq]
    if not target.is_empty:
        score += piece_value(target.piece) * 10
        score -= piece_value(position.squares[move.from_sq].piece)
    if move.promotion is not None:
        score += PROMOTION_BONUS
    if move.is_castle:
        score += CASTLE_BONUS
    if move.is_en_passant:
        score += EN_PASSANT_BONUS
    return score


def order_moves(position: Position, moves: List[Move]) -> List[Move]:
    """Return ``moves`` sorted by ``move_order_score``, best first.

    The sort is stable, so equal scores keep generation order.
    """
    return sorted(moves, key=lambda m: move_order_score(position, m), reverse=True)


class SearchService:
    """Fixed-depth minimax search with alpha-beta pruning.

    Scores are always from White's point of view: White maximises, Black
    minimises. Every branch is explored on its own copy of the position.
    """

    def __init__(self, *, enable_pruning: bool = True, enable_ordering: bool = True) -> None:
        self.enable_pruning = enable_pruning
        self.enable_ordering = enable_ordering
        self.nodes = 0
        self._stop_event: Optional[threading.Event] = None

    def find_best_move(
        self,
        position: Position,
        depth: int,
        *,
        stop_event: Optional[threading.Event] = None,
    ) -> SearchResult:
        """Search ``position`` to ``depth`` plies and pick a move.

        Args:
            position (Position): Position to search; never modified.
            depth (int): Remaining plies, ``>= 0``.
            stop_event (Optional[threading.Event]): When set by another
                thread, the search unwinds and reports the best move found
                so far.

        Returns:
            SearchResult: Best move (None when ``depth`` is 0 or there are no
                legal moves) and its white-positive score.

        Raises:
            ValueError: If ``depth`` is negative.
        """
        if depth < 0:
            raise ValueError("depth must be >= 0")
        start = time.perf_counter()
        self.nodes = 0
        self._stop_event = stop_event

        moves = legal_moves(position) if depth > 0 else []
        if not moves:
            # Depth 0 or terminal root: null move plus static evaluation
            return SearchResult(
                best_move=None,
                score=evaluate(position),
                depth=depth,
                nodes=1,
                time_ms=int((time.perf_counter() - start) * 1000),
            )

        if self.enable_ordering:
            moves = order_moves(position, moves)

        maximising = position.side_to_move == Colour.WHITE
        best_move: Optional[Move] = None
        best_score = -INF if maximising else INF
        alpha, beta = -INF, INF
        stopped = False

        for m in moves:
            if self._stopped():
                stopped = True
                break
            child = position.copy()
            if not child.apply_move(m):
                continue
            score = self.minimax(child, depth - 1, alpha, beta, not maximising)
            if self._stopped():
                # Subtree was cut short; its score is not a search result
                stopped = True
                break
            if maximising:
                if score > best_score:
                    best_score, best_move = score, m
                if self.enable_pruning:
                    alpha = max(alpha, score)
            else:
                if score < best_score:
                    best_score, best_move = score, m
                if self.enable_pruning:
                    beta = min(beta, score)

        if best_move is None:
            # Stopped before any root move finished
            best_move = moves[0]
            best_score = evaluate(position)

        time_ms = int((time.perf_counter() - start) * 1000)
        if stopped:
            logger.info("search stopped", extra={"depth": depth, "nodes": self.nodes})
        logger.debug(
            "search complete",
            extra={
                "depth": depth,
                "nodes": self.nodes,
                "score": best_score,
                "best_move": best_move.to_uci(),
                "time_ms": time_ms,
            },
        )
        self._stop_event = None
        return SearchResult(
            best_move=best_move,
            score=best_score,
            depth=depth,
            nodes=self.nodes,
            time_ms=time_ms,
            stopped=stopped,
        )

    def minimax(
        self, position: Position, depth: int, alpha: int, beta: int, maximising: bool
    ) -> int:
        """Return the white-positive minimax value of ``position``.

        ``maximising`` is True when White is to move. With pruning enabled,
        siblings are skipped once ``beta <= alpha``; the returned value for
        the root of the call is the same either way.
        """
        self.nodes += 1
        if depth == 0 or self._stopped():
            return evaluate(position)

        moves = legal_moves(position)
        if not moves:
            status = game_status(position, moves)
            if status is GameStatus.CHECKMATE:
                # Larger remaining depth means a quicker mate
                mate = MATE_SCORE + depth
                return -mate if position.side_to_move == Colour.WHITE else mate
            return 0

        if self.enable_ordering:
            moves = order_moves(position, moves)

        if maximising:
            best = -INF
            for m in moves:
                child = position.copy()
                if not child.apply_move(m):
                    continue
                score = self.minimax(child, depth - 1, alpha, beta, False)
                best = max(best, score)
                alpha = max(alpha, score)
                if self.enable_pruning and beta <= alpha:
                    break
            return best

        best = INF
        for m in moves:
            child = position.copy()
            if not child.apply_move(m):
                continue
            score = self.minimax(child, depth - 1, alpha, beta, True)
            best = min(best, score)
            beta = min(beta, score)
            if self.enable_pruning and beta <= alpha:
                break
        return best

    def _stopped(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()
