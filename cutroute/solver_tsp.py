# cutroute/solver_tsp.py
# Travelling Salesman solver for small/medium 2D point sets:
# - nearest neighbour construction from EVERY start node (keep the shortest)
# - 2-opt local search on the best NN tour until no improving swap remains
# - exact brute force (node 0 fixed, permute the rest) for <= 10 nodes,
#   reported next to the heuristic as ground truth
#
# Deterministic: ties always go to the lowest index / earliest candidate.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import BRUTE_FORCE_MAX_NODES, DEFAULTS
from .logger import get_logger
from .types import Node, NodeLike, TspJob, TspResult, as_nodes
from .utils import round_to


@dataclass(frozen=True)
class TwoOptParams:
    epsilon: float = DEFAULTS.two_opt_epsilon
    # None = unbounded (stop only at a local optimum)
    max_passes: Optional[int] = DEFAULTS.two_opt_max_passes


def dist(a: Node, b: Node) -> float:
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)


def tour_distance(nodes: Sequence[Node], tour: Sequence[int]) -> float:
    """Closed tour length, including the edge from the last node back to the first."""
    n = len(tour)
    d = 0.0
    for i in range(n):
        d += dist(nodes[tour[i]], nodes[tour[(i + 1) % n]])
    return d


def nearest_neighbor(nodes: Sequence[Node], start: int) -> List[int]:
    """Greedy tour from `start`; equal distances keep the lowest index."""
    n = len(nodes)
    visited = [False] * n
    tour = [start]
    visited[start] = True

    for _ in range(1, n):
        current = nodes[tour[-1]]
        best_dist = math.inf
        best_idx = -1
        for j in range(n):
            if not visited[j]:
                d = dist(current, nodes[j])
                if d < best_dist:
                    best_dist = d
                    best_idx = j
        tour.append(best_idx)
        visited[best_idx] = True
    return tour


def best_nearest_neighbor(nodes: Sequence[Node]) -> Tuple[List[int], float]:
    """Run NN from every start node and keep the shortest tour (earliest start on ties)."""
    best_tour: List[int] = []
    best_dist = math.inf
    for s in range(len(nodes)):
        tour = nearest_neighbor(nodes, s)
        d = tour_distance(nodes, tour)
        if d < best_dist:
            best_dist = d
            best_tour = tour
    return best_tour, best_dist


def two_opt(
    nodes: Sequence[Node],
    tour: Sequence[int],
    params: Optional[TwoOptParams] = None,
) -> List[int]:
    """
    First-improvement 2-opt. Edges (t[i], t[i+1]) and (t[j], t[j+1]) are
    replaced by (t[i], t[j]) and (t[i+1], t[j+1]) by reversing t[i+1..j].
    The (0, n-1) pair is skipped: reversing it would flip the whole tour.
    """
    params = params or TwoOptParams()
    n = len(tour)
    result = list(tour)
    eps = params.epsilon

    passes = 0
    improved = True
    while improved:
        if params.max_passes is not None and passes >= params.max_passes:
            get_logger().warn(f"2-opt stopped after {passes} passes (cap reached before local optimum)")
            break
        improved = False
        passes += 1
        for i in range(n - 1):
            for j in range(i + 2, n):
                if i == 0 and j == n - 1:
                    continue
                a, b = nodes[result[i]], nodes[result[i + 1]]
                c, d = nodes[result[j]], nodes[result[(j + 1) % n]]
                old = dist(a, b) + dist(c, d)
                new = dist(a, c) + dist(b, d)
                if new < old - eps:
                    result[i + 1:j + 1] = result[i + 1:j + 1][::-1]
                    improved = True
    return result


def _permute(arr: List[int], l: int) -> Iterable[List[int]]:
    """Recursive swap-based permutation generator (mutates `arr` in place)."""
    if l == len(arr):
        yield arr
        return
    for i in range(l, len(arr)):
        arr[l], arr[i] = arr[i], arr[l]
        yield from _permute(arr, l + 1)
        arr[l], arr[i] = arr[i], arr[l]


def brute_force(nodes: Sequence[Node]) -> Optional[Tuple[List[int], float]]:
    """
    Exact tour with node 0 fixed as start. Returns None above the node cap.
    """
    n = len(nodes)
    if n > BRUTE_FORCE_MAX_NODES:
        return None
    dm = [[dist(a, b) for b in nodes] for a in nodes]
    best_dist = math.inf
    best_tour: List[int] = []
    for perm in _permute(list(range(1, n)), 0):
        tour = [0] + perm
        d = 0.0
        for i in range(n):
            d += dm[tour[i]][tour[(i + 1) % n]]
        if d < best_dist:
            best_dist = d
            best_tour = list(tour)
    return best_tour, best_dist


def solve_tsp(
    points: Iterable[NodeLike],
    params: Optional[TwoOptParams] = None,
) -> Optional[TspResult]:
    """
    Solve the TSP for 2D points.

    0 nodes -> None; 1 node -> zero-length tour; 2 nodes -> direct round trip.
    Otherwise: best NN tour, 2-opt improvement, and for <= 10 nodes the exact
    optimum with the heuristic's optimality gap.
    """
    nodes = as_nodes(points)
    n = len(nodes)
    dec = DEFAULTS.tsp_decimals
    log = get_logger()

    if n == 0:
        return None
    if n == 1:
        return TspResult(
            nn_tour=[0], nn_distance=0.0,
            optimized_tour=[0], optimized_distance=0.0,
            improvement_percent=0.0,
        )
    if n == 2:
        d = round_to(2 * dist(nodes[0], nodes[1]), dec)
        return TspResult(
            nn_tour=[0, 1], nn_distance=d,
            optimized_tour=[0, 1], optimized_distance=d,
            improvement_percent=0.0,
        )

    nn_tour, nn_dist = best_nearest_neighbor(nodes)
    log.info(f"TSP n={n}: nearest neighbour best distance {nn_dist:.2f}")

    opt_tour = two_opt(nodes, nn_tour, params=params)
    opt_dist = tour_distance(nodes, opt_tour)
    log.info(f"TSP n={n}: 2-opt distance {opt_dist:.2f}")

    improvement = round_to((nn_dist - opt_dist) / nn_dist * 100, dec) if nn_dist > 0 else 0.0

    result = TspResult(
        nn_tour=nn_tour,
        nn_distance=round_to(nn_dist, dec),
        optimized_tour=opt_tour,
        optimized_distance=round_to(opt_dist, dec),
        improvement_percent=improvement,
    )

    bf = brute_force(nodes)
    if bf is not None:
        bf_tour, bf_dist = bf
        result.optimal_tour = bf_tour
        result.optimal_distance = round_to(bf_dist, dec)
        result.optimality_gap = (
            round_to((opt_dist - bf_dist) / bf_dist * 100, dec)
            if result.optimized_distance > 0 and bf_dist > 0
            else 0.0
        )
        log.info(f"TSP n={n}: exact optimum {bf_dist:.2f} (gap {result.optimality_gap}%)")

    return result


def tsp(job: TspJob, params: Optional[TwoOptParams] = None) -> Optional[TspResult]:
    """Structured-input entry point: tsp(TspJob(nodes=[...]))."""
    return solve_tsp(job.nodes, params=params)
