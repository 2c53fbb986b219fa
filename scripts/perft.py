#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import logging
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `oliviathan/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from oliviathan.engine.perft import perft, perft_detailed, perft_divide
from oliviathan.engine.position import STARTPOS_FEN, Position


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft on a given FEN and depth")
    parser.add_argument(
        "--fen", type=str, default=STARTPOS_FEN, help="FEN string (default: startpos)"
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--detailed", action="store_true", help="Also count captures, castles, checks, ..."
    )
    parser.add_argument("--divide", action="store_true", help="Print counts per root move")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        position = Position.from_fen(args.fen)
    except ValueError as e:
        parser.error(f"invalid --fen: {e}")

    start = time.perf_counter()
    if args.divide:
        counts = perft_divide(position, args.depth)
        for uci in sorted(counts):
            print(f"{uci}: {counts[uci]}")
        nodes = sum(counts.values())
    elif args.detailed:
        res = perft_detailed(position, args.depth)
        nodes = res.nodes
        print(
            f"captures={res.captures} ep={res.en_passants} castles={res.castles} "
            f"promotions={res.promotions} checks={res.checks}"
        )
    else:
        nodes = perft(position, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
