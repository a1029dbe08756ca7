# cutroute/solver_cutting_stock.py
# 1D cutting stock heuristics (bars / profiles / lumber):
# - First-Fit-Decreasing: each piece goes into the first open bar it fits
# - Best-Fit-Decreasing: each piece goes into the open bar it leaves the least room in
#
# Pieces are sorted longest-first (stable). Kerf is charged once per cut after the
# first piece on a bar, so a bar with k pieces loses kerf * (k - 1).

from __future__ import annotations

from typing import Iterable, List, Optional

from .config import DEFAULTS, parse_algorithm
from .logger import get_logger
from .metrics import summarize_patterns
from .types import CuttingResult, CuttingStockJob, PieceCopy, PieceRequest, StockUnit, expand_pieces


def _first_fit(bins: List[StockUnit], piece: PieceCopy, kerf: float) -> int:
    for i, b in enumerate(bins):
        if b.fits(piece, kerf):
            return i
    return -1


def _best_fit(bins: List[StockUnit], piece: PieceCopy, kerf: float) -> int:
    best_idx = -1
    best_left = float("inf")
    for i, b in enumerate(bins):
        left = b.leftover_after(piece, kerf)
        if left >= 0 and left < best_left:
            best_left = left
            best_idx = i
    return best_idx


def pack_pieces(
    pieces: List[PieceCopy],
    stock_length: float,
    kerf: float,
    algorithm: str,
) -> List[StockUnit]:
    """
    Place already expanded pieces onto bars.
    Caller guarantees every piece fits an empty bar.
    """
    choose = _first_fit if algorithm == "ffd" else _best_fit
    ordered = sorted(pieces, key=lambda p: -p.length)

    bins: List[StockUnit] = []
    for piece in ordered:
        idx = choose(bins, piece, kerf)
        if idx == -1:
            bins.append(StockUnit.open_with(stock_length, piece))
        else:
            bins[idx].add(piece, kerf)
    return bins


def solve_cutting_stock(
    stock_length: float,
    kerf: float,
    pieces: Iterable[PieceRequest],
    algorithm: str = DEFAULTS.default_algorithm,
) -> Optional[CuttingResult]:
    """
    Cut the requested pieces from bars of `stock_length`.

    Returns None when there is nothing to cut (no requests, or every quantity is 0)
    or when some piece is longer than the stock.
    """
    algorithm = parse_algorithm(algorithm)
    if kerf < 0:
        raise ValueError(f"kerf must be >= 0, got {kerf}")

    requests = list(pieces)
    if not requests:
        return None

    expanded = expand_pieces(requests)
    if any(p.length > stock_length for p in expanded):
        return None
    if not expanded:
        return None

    bins = pack_pieces(expanded, stock_length, kerf, algorithm)
    result = summarize_patterns([b.pieces for b in bins], stock_length, kerf, algorithm)

    get_logger().info(
        f"Cutting stock {algorithm.upper()}: {len(expanded)} pieces -> {result.stocks_used} bars, "
        f"waste {result.waste_percent}%"
    )
    return result


def cutting_stock(job: CuttingStockJob) -> Optional[CuttingResult]:
    """Structured-input entry point: cutting_stock(CuttingStockJob(...))."""
    return solve_cutting_stock(job.stock_length, job.kerf, job.pieces, job.algorithm)
