#!/usr/bin/env python3
"""
Benchmark: nodes created, depth reached and time per move on fixed positions.

Run before and after any change to move ordering or evaluation to see its
effect. Fewer nodes at the same completed depth means better pruning; a
higher nodes/second figure means a cheaper evaluation.

Each position gets a fresh SearchBot so repetition history never leaks
between rows. Settings are read from chessbot.toml (if present) and the
CHESSBOT_* environment variables.

Usage: python3 tools/bench.py [config.toml]
"""
import logging
import sys
import time

import chess

from chessbot import ChessPosition, SearchBot, load_settings

# Fixed positions spanning opening, middlegame, and endgame. Either a FEN or
# a list of UCI moves from the start position.
POSITIONS = [
    ("Start",        []),
    ("After 1.e4",   ["e2e4"]),
    ("Sicilian",     ["e2e4", "c7c5"]),
    ("Italian",      ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4"]),
    ("London",       ["d2d4", "d7d5", "g1f3", "g8f6", "c1f4"]),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Pawn ending",  "6k1/ppp2ppp/8/3p4/3P4/8/PPP2PPP/6K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


def build_board(spec: str | list[str]) -> chess.Board:
    """Turn a POSITIONS entry into a board."""
    if isinstance(spec, str):
        return chess.Board(spec)
    board = chess.Board()
    for uci_move in spec:
        board.push_uci(uci_move)
    return board


def run_position(label: str, spec: str | list[str], settings) -> dict:
    """
    Search one position and return its metrics.

    Args:
        label:    Human-readable position name for display.
        spec:     FEN string or list of UCI moves from the start position.
        settings: SearchSettings shared by every row.

    Returns:
        Dict with keys: label, move, depth, value, nodes, nps, time_ms.
    """
    bot = SearchBot(settings)
    position = ChessPosition(build_board(spec))

    start = time.monotonic()
    bot.choose_move(position)
    time_ms = max(1, int((time.monotonic() - start) * 1000))

    result = bot.last_result
    return {
        "label": label,
        "move": str(result.move),
        "depth": result.depth,
        "value": result.value,
        "nodes": result.nodes,
        "nps": result.nodes * 1000 // time_ms,
        "time_ms": time_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    settings = load_settings(sys.argv[1] if len(sys.argv) > 1 else "chessbot.toml")
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    print(f"Chess bot benchmark: {sys.executable}")
    print(f"Depths: {settings.depth_schedule}  node budget: {settings.node_budget:,}")
    print()
    print(
        f"{'Position':<14} {'Move':<7} {'Depth':>5} {'Value':>8} "
        f"{'Nodes':>8} {'NPS':>8} {'Time(ms)':>9}"
    )
    print("-" * 70)

    results = []
    for label, spec in POSITIONS:
        r = run_position(label, spec, settings)
        results.append(r)
        print(
            f"{r['label']:<14} {r['move']:<7} {r['depth']:>5} {r['value']:>8.2f} "
            f"{r['nodes']:>8,} {r['nps']:>8,} {r['time_ms']:>9,}"
        )

    avg_nodes = sum(r["nodes"] for r in results) // len(results)
    avg_time = sum(r["time_ms"] for r in results) // len(results)
    avg_nps = sum(r["nps"] for r in results) // len(results)
    print("-" * 70)
    print(
        f"{'AVERAGE':<14} {'':<7} {'':<5} {'':<8} "
        f"{avg_nodes:>8,} {avg_nps:>8,} {avg_time:>9,}"
    )


if __name__ == "__main__":
    main()
