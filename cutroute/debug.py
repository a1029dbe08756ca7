# cutroute/debug.py
# Debug / inspection helpers:
# - pretty-print tours and cutting patterns
# - quick ASCII summaries (used by the CLI report)

from __future__ import annotations

from typing import Sequence

from .types import CuttingResult, Pattern, TspResult


def format_tour(tour: Sequence[int]) -> str:
    if not tour:
        return "-"
    return " -> ".join(str(i) for i in list(tour) + [tour[0]])


def print_tsp_result(res: TspResult) -> None:
    print(f"Nodes: {res.num_nodes()}")
    print(f"NN tour:        {format_tour(res.nn_tour)}")
    print(f"NN distance:    {res.nn_distance}")
    print(f"2-opt tour:     {format_tour(res.optimized_tour)}")
    print(f"2-opt distance: {res.optimized_distance}  (improvement {res.improvement_percent}%)")
    if res.has_optimal():
        print(f"Optimal:        {res.optimal_distance}  (gap {res.optimality_gap}%)")


def print_pattern(index: int, pat: Pattern) -> None:
    pieces = " + ".join(pc.label for pc in pat.pieces)
    print(
        f"[B{index + 1:02d}] {pieces:40s} used={pat.used_length:g} "
        f"kerf={pat.kerf_loss:g} waste={pat.waste_length:g} ({pat.waste_percent}%)"
    )


def print_cutting_result(res: CuttingResult) -> None:
    print(f"Algorithm: {res.algorithm.upper()}  stock={res.stock_length:g}  kerf={res.kerf:g}")
    print(f"Bars used: {res.stocks_used}")
    if res.proven_optimal is not None:
        print(f"Proven optimal: {'yes' if res.proven_optimal else 'no (time limit)'}")
    for i, pat in enumerate(res.patterns):
        print_pattern(i, pat)
    print(f"TOTAL KERF: {res.total_kerf_loss:g}")
    print(f"TOTAL WASTE: {res.total_waste:g} ({res.waste_percent}%)")
    print(f"UTILIZATION: {res.utilization_percent}%")
