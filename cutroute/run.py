# cutroute/run.py
# High-level convenience runners that tie together:
# - solver (TSP heuristics / FFD / BFD / CP-SAT exact)
# - validation
# - optional CSV + JSON export
# - matplotlib visualization
#
# This is meant to be called from your own scripts or the CLI.
# Example:
#   from cutroute.run import run_cutting_stock
#   res = run_cutting_stock(6000, 3, pieces, algorithm="bfd", out_dir="out")

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .io_csv import export_all, export_tour_csv
from .logger import get_logger
from .plotting import PlotStyle, plot_patterns, plot_tour
from .solver_cutting_cp_sat import ExactComparison, ExactParams, compare_with_exact, solve_cutting_stock_exact
from .solver_cutting_stock import solve_cutting_stock
from .solver_tsp import TwoOptParams, solve_tsp
from .types import CuttingResult, Node, NodeLike, PieceRequest, TspResult, as_nodes
from .utils import save_result_json, timer
from .validate import raise_on_errors, validate_cutting_result, validate_tsp_result


@dataclass(frozen=True)
class TspRunResult:
    nodes: List[Node]
    result: Optional[TspResult]
    seconds: float


@dataclass(frozen=True)
class CuttingRunResult:
    result: Optional[CuttingResult]
    seconds: float
    comparison: Optional[ExactComparison] = None


def run_tsp(
    points: Iterable[NodeLike],
    *,
    max_passes: Optional[int] = None,
    validate: bool = True,
    out_dir: Optional[Union[str, Path]] = None,
    export_prefix: str = "tour",
    show_plot: bool = False,
    plot_style: Optional[PlotStyle] = None,
):
    """
    Run the TSP solver end-to-end.

    Returns TspRunResult. If show_plot=True and a tour exists, returns (TspRunResult, fig).
    """
    nodes = as_nodes(points)
    params = TwoOptParams(max_passes=max_passes)

    with timer("tsp") as t:
        res = solve_tsp(nodes, params=params)
    get_logger().info(f"TSP solved in {t['seconds']:.3f} s")

    if res is not None and validate:
        raise_on_errors(validate_tsp_result(nodes, res))

    run = TspRunResult(nodes=nodes, result=res, seconds=t["seconds"])

    if res is not None and out_dir is not None:
        outp = Path(out_dir)
        export_tour_csv(nodes, res, outp / f"{export_prefix}.csv")
        save_result_json(res, outp / f"{export_prefix}.json")

    if show_plot and res is not None:
        fig = plot_tour(nodes, res, style=plot_style or PlotStyle())
        return run, fig

    return run


def run_cutting_stock(
    stock_length: float,
    kerf: float,
    pieces: Iterable[PieceRequest],
    *,
    algorithm: str = "ffd",
    exact_params: Optional[ExactParams] = None,
    compare_exact: bool = False,
    validate: bool = True,
    out_dir: Optional[Union[str, Path]] = None,
    export_prefix: str = "cutting",
    show_plot: bool = False,
    plot_style: Optional[PlotStyle] = None,
):
    """
    Run a cutting stock solver end-to-end. algorithm: "ffd", "bfd" or "exact".

    Returns CuttingRunResult. If show_plot=True and a plan exists, returns (CuttingRunResult, fig).
    """
    requests = list(pieces)
    algo = str(algorithm).strip().lower()

    with timer("cutting") as t:
        if algo == "exact":
            res = solve_cutting_stock_exact(stock_length, kerf, requests, params=exact_params)
        else:
            res = solve_cutting_stock(stock_length, kerf, requests, algo)
    get_logger().info(f"Cutting stock solved in {t['seconds']:.3f} s")

    if res is not None and validate:
        raise_on_errors(validate_cutting_result(res, requests))

    comparison = None
    if compare_exact and res is not None and algo != "exact":
        comparison = compare_with_exact(stock_length, kerf, requests, algo, params=exact_params)

    run = CuttingRunResult(result=res, seconds=t["seconds"], comparison=comparison)

    if res is not None and out_dir is not None:
        outp = Path(out_dir)
        export_all(res, out_dir=outp, prefix=export_prefix)
        save_result_json(res, outp / f"{export_prefix}.json")

    if show_plot and res is not None:
        fig = plot_patterns(res, style=plot_style or PlotStyle())
        return run, fig

    return run
