from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from oliviathan.search.service import SearchService

from .move import Move
from .movegen import GameStatus, game_status, is_legal_move, move_from_uci
from .movegen import in_check as _in_check
from .movegen import legal_moves as _legal_moves
from .position import Position


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Game wrapper around a position with helper operations.

    Responsibility: track the current position, validate and apply moves, keep
    previous positions for undo, and answer game-state questions.
    """

    position: Position
    history: List[Position] = field(default_factory=list)
    move_stack: List[Move] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(position=Position.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(position=Position.from_fen(fen))

    def reset(self) -> None:
        self.position.reset()
        self.history.clear()
        self.move_stack.clear()

    def to_fen(self) -> str:
        return self.position.to_fen()

    def legal_moves(self) -> List[Move]:
        return _legal_moves(self.position)

    def make_move(self, text: str) -> bool:
        """Apply a move given in coordinate notation such as ``e2e4`` or ``e7e8q``.

        Returns:
            bool: False, with nothing changed, if ``text`` is malformed or is
                not a legal move here.
        """
        move = move_from_uci(self.position, text)
        if move is None:
            logger.info("move rejected", extra={"move": text, "fen": self.to_fen()})
            return False
        self._push(move)
        return True

    def apply_move(self, move: Move) -> bool:
        if not is_legal_move(self.position, move):
            logger.info("move rejected", extra={"move": move.to_uci(), "fen": self.to_fen()})
            return False
        self._push(move)
        return True

    def _push(self, move: Move) -> None:
        child = self.position.copy()
        if not child.apply_move(move):
            # legal_moves only yields applicable moves
            raise RuntimeError(f"legal move failed to apply: {move.to_uci()}")
        self.history.append(self.position)
        self.move_stack.append(move)
        self.position = child

    def undo_move(self) -> None:
        if not self.history:
            raise ValueError("no moves to undo")
        self.position = self.history.pop()
        self.move_stack.pop()

    # --- State flags ---
    def status(self) -> GameStatus:
        return game_status(self.position)

    def in_check(self) -> bool:
        return _in_check(self.position)

    def checkmate(self) -> bool:
        return self.status() is GameStatus.CHECKMATE

    def stalemate(self) -> bool:
        return self.status() is GameStatus.STALEMATE

    def is_game_over(self) -> bool:
        return self.status() is not GameStatus.ONGOING

    def best_move(
        self, depth: int, *, stop_event: Optional[threading.Event] = None
    ) -> Tuple[str, int]:
        """Search the current position and return (move text, score).

        The move is ``"0000"`` when there is nothing to play (depth 0 or a
        finished game). The score is in centipawns from White's side.
        """
        result = SearchService().find_best_move(self.position, depth, stop_event=stop_event)
        return result.best_move_uci, result.score

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
