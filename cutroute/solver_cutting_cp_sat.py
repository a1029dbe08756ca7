# cutroute/solver_cutting_cp_sat.py
# Exact 1D cutting stock reference with CP-SAT (OR-Tools).
# Minimizes the number of bars used; meant as ground truth for the FFD/BFD
# heuristics on small and medium jobs, the same way brute force backs the TSP 2-opt.
#
# Kerf trick: a bar with k pieces needs sum(len) + kerf*(k-1) <= L, which is
# sum(len + kerf) <= L + kerf, so every piece simply weighs len + kerf.
#
# Lengths go into the integer model scaled by `scale`; pieces are rounded up
# and capacity down so any model solution really fits.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ortools.sat.python import cp_model

from .config import DEFAULTS, parse_algorithm
from .logger import get_logger
from .metrics import summarize_patterns
from .solver_cutting_stock import pack_pieces, solve_cutting_stock
from .types import CuttingResult, PieceCopy, PieceRequest, expand_pieces


@dataclass(frozen=True)
class ExactParams:
    time_limit_s: float = DEFAULTS.exact_time_limit_s
    num_workers: int = DEFAULTS.exact_num_workers
    scale: int = DEFAULTS.exact_scale


@dataclass(frozen=True)
class ExactComparison:
    algorithm: str
    heuristic_stocks: int
    exact_stocks: int
    proven_optimal: bool

    @property
    def extra_stocks(self) -> int:
        return self.heuristic_stocks - self.exact_stocks


def _scaled_up(v: float, scale: int) -> int:
    return int(math.ceil(v * scale - 1e-9))


def _scaled_down(v: float, scale: int) -> int:
    return int(math.floor(v * scale + 1e-9))


def _solve_bins_cp_sat(
    pieces: List[PieceCopy],
    stock_length: float,
    kerf: float,
    params: ExactParams,
) -> Optional[tuple]:
    """
    Returns (bins, proven_optimal) or None if CP-SAT found nothing.
    `pieces` must be sorted longest-first (used for symmetry breaking).
    """
    n = len(pieces)
    hint_bins = pack_pieces(pieces, stock_length, kerf, "ffd")
    max_bins = len(hint_bins)

    weight = [_scaled_up(p.length + kerf, params.scale) for p in pieces]
    capacity = _scaled_down(stock_length + kerf, params.scale)

    m = cp_model.CpModel()

    # x[i][b]: piece i is cut from bar b. Piece i may only use bars 0..i
    # (bars are labelled by their longest piece, pieces are sorted).
    x = [[m.NewBoolVar(f"x[{i},{b}]") for b in range(max_bins)] for i in range(n)]
    used = [m.NewBoolVar(f"used[{b}]") for b in range(max_bins)]

    for i in range(n):
        m.AddExactlyOne(x[i])
        for b in range(i + 1, max_bins):
            m.Add(x[i][b] == 0)

    for b in range(max_bins):
        m.Add(sum(weight[i] * x[i][b] for i in range(n)) <= capacity * used[b])
        for i in range(n):
            m.AddImplication(x[i][b], used[b])

    # used bars are contiguous from 0
    for b in range(max_bins - 1):
        m.Add(used[b] >= used[b + 1])

    # lower bound helps CP-SAT close the gap quickly
    lb = int(math.ceil(sum(weight) / capacity)) if capacity > 0 else max_bins
    m.Add(sum(used) >= min(lb, max_bins))

    m.Minimize(sum(used))

    # FFD solution as a hint: map pieces back by identity
    position = {id(p): i for i, p in enumerate(pieces)}
    for b, unit in enumerate(hint_bins):
        for p in unit.pieces:
            m.AddHint(x[position[id(p)]][b], 1)

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = float(params.time_limit_s)
    solver.parameters.num_workers = int(params.num_workers)

    status = solver.Solve(m)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return None

    bins: List[List[PieceCopy]] = [[] for _ in range(max_bins)]
    for i, p in enumerate(pieces):
        for b in range(max_bins):
            if solver.Value(x[i][b]) == 1:
                bins[b].append(p)
                break
    bins = [b for b in bins if b]
    return bins, status == cp_model.OPTIMAL


def solve_cutting_stock_exact(
    stock_length: float,
    kerf: float,
    pieces: Iterable[PieceRequest],
    params: Optional[ExactParams] = None,
) -> Optional[CuttingResult]:
    """
    Minimum-bar cutting plan. Same None rules as the heuristics.
    `proven_optimal` is False when the time limit hit before CP-SAT closed the gap.
    """
    params = params or ExactParams()
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

    ordered = sorted(expanded, key=lambda p: -p.length)
    log = get_logger()

    solved = _solve_bins_cp_sat(ordered, stock_length, kerf, params)
    if solved is None:
        log.warn("CP-SAT found no solution in time; falling back to FFD layout")
        bins = [u.pieces for u in pack_pieces(ordered, stock_length, kerf, "ffd")]
        proven = False
    else:
        bins, proven = solved
        if not proven:
            log.warn("CP-SAT stopped at time limit; bar count is not proven optimal")

    result = summarize_patterns(bins, stock_length, kerf, "exact")
    result.proven_optimal = proven
    log.info(f"Cutting stock EXACT: {len(expanded)} pieces -> {result.stocks_used} bars (optimal={proven})")
    return result


def compare_with_exact(
    stock_length: float,
    kerf: float,
    pieces: Iterable[PieceRequest],
    algorithm: str = DEFAULTS.default_algorithm,
    params: Optional[ExactParams] = None,
) -> Optional[ExactComparison]:
    """How many bars the heuristic wastes compared to the CP-SAT reference."""
    algorithm = parse_algorithm(algorithm)
    requests = list(pieces)
    heur = solve_cutting_stock(stock_length, kerf, requests, algorithm)
    if heur is None:
        return None
    exact = solve_cutting_stock_exact(stock_length, kerf, requests, params=params)
    if exact is None:
        return None
    return ExactComparison(
        algorithm=algorithm,
        heuristic_stocks=heur.stocks_used,
        exact_stocks=exact.stocks_used,
        proven_optimal=bool(exact.proven_optimal),
    )
