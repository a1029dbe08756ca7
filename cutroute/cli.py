# cutroute/cli.py
# Command line entry point with two subcommands:
#   tsp : shortest closed tour through 2D points
#   cut : 1D cutting stock plan (FFD / BFD / CP-SAT exact)
#
# Run:
#   python -m cutroute tsp --nodes nodes.csv --png tour.png
#   python -m cutroute tsp --node 0,0 --node 3,4 --node 6,0 --no_plot
#   python -m cutroute cut --pieces pieces.csv --stock 6000 --kerf 3 --algorithm bfd --out out/
#   python -m cutroute cut --job job.json --compare_exact
#   python -m cutroute cut --piece 1990x3:rail --piece 1200x2 --stock 6000
#
# CSV formats (header required):
#   nodes:  x,y
#   pieces: length,quantity,label

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .config import DEFAULTS, parse_node_text, parse_piece_text, parse_stock_text
from .debug import print_cutting_result, print_tsp_result
from .io_csv import read_nodes_csv, read_pieces_csv
from .io_json import load_cutting_json, load_tsp_json
from .logger import set_enabled
from .plotting import PlotStyle, save_figure_png
from .run import run_cutting_stock, run_tsp
from .solver_cutting_cp_sat import ExactParams
from .types import RUN_ALGORITHMS


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--job", type=str, default="", help="Path to job JSON")
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save plot as PNG file (optional)")
    p.add_argument("--no_plot", action="store_true", help="Do not show matplotlib plot")
    p.add_argument("--no_labels", action="store_true", help="Hide labels in plot")
    p.add_argument("--grid", action="store_true", help="Show grid in plot")
    p.add_argument("--verbose", action="store_true", help="Print solver diagnostics")


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TSP tours and 1D cutting stock plans")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("tsp", help="Shortest closed tour through 2D points")
    t.add_argument("--nodes", type=str, default="", help="Path to nodes CSV (x,y)")
    t.add_argument("--node", action="append", default=[], help="Inline node 'x,y' (repeatable)")
    t.add_argument("--max_passes", type=int, default=0, help="Cap on 2-opt passes (0 = until local optimum)")
    _add_common(t)

    c = sub.add_parser("cut", help="1D cutting stock plan")
    c.add_argument("--pieces", type=str, default="", help="Path to pieces CSV (length,quantity,label)")
    c.add_argument("--piece", action="append", default=[], help="Inline piece 'length[xqty][:label]' (repeatable)")
    c.add_argument("--stock", type=str, default=None, help="Stock length, optionally with kerf: 6000 or 6000/3")
    c.add_argument("--kerf", type=float, default=None, help="Saw kerf")
    c.add_argument("--algorithm", type=str, default=None, choices=list(RUN_ALGORITHMS), help="Packing algorithm")
    c.add_argument("--compare_exact", action="store_true", help="Also report bars versus the CP-SAT optimum")
    c.add_argument("--time", type=float, default=DEFAULTS.exact_time_limit_s, help="CP-SAT time limit (seconds)")
    _add_common(c)

    return p


def _style(args: argparse.Namespace) -> PlotStyle:
    return PlotStyle(show_labels=not args.no_labels, show_grid=bool(args.grid))


def _finish_plot(fig, args: argparse.Namespace) -> None:
    if fig is None:
        return
    if args.png.strip():
        save_figure_png(fig, args.png.strip())
        print(f"Plot saved to: {args.png.strip()}")
        return
    if not args.no_plot:
        import matplotlib.pyplot as plt
        plt.show()


def _cmd_tsp(args: argparse.Namespace) -> None:
    if args.job.strip():
        job_path = Path(args.job)
        if not job_path.exists():
            raise SystemExit(f"Job JSON not found: {job_path}")
        nodes = list(load_tsp_json(job_path).nodes)
    elif args.nodes.strip():
        nodes = read_nodes_csv(Path(args.nodes))
    else:
        nodes = []
    nodes.extend(parse_node_text(s) for s in args.node)
    if not nodes:
        raise SystemExit("No nodes given (use --nodes, --node or --job).")

    want_fig = bool(args.png.strip()) or not args.no_plot
    result = run_tsp(
        nodes,
        max_passes=args.max_passes if args.max_passes > 0 else None,
        out_dir=args.out.strip() or None,
        export_prefix=args.prefix.strip() or "tour",
        show_plot=want_fig,
        plot_style=_style(args),
    )
    run, fig = result if isinstance(result, tuple) else (result, None)

    print_tsp_result(run.result)
    print(f"Solved in {run.seconds:.3f} s")
    if args.out.strip():
        print(f"Exported CSV + JSON to: {args.out.strip()}")
    _finish_plot(fig, args)


def _cmd_cut(args: argparse.Namespace) -> None:
    stock = DEFAULTS.default_stock_length
    kerf = DEFAULTS.default_kerf
    algorithm = DEFAULTS.default_algorithm
    pieces = []

    if args.job.strip():
        job_path = Path(args.job)
        if not job_path.exists():
            raise SystemExit(f"Job JSON not found: {job_path}")
        job = load_cutting_json(job_path)
        stock, kerf, algorithm = job.stock_length, job.kerf, job.algorithm
        pieces.extend(job.pieces)
    if args.pieces.strip():
        pieces.extend(read_pieces_csv(Path(args.pieces)))
    pieces.extend(parse_piece_text(s) for s in args.piece)

    # explicit flags override the job file
    if args.stock is not None:
        stock, stock_kerf = parse_stock_text(args.stock)
        if stock_kerf is not None:
            kerf = stock_kerf
    if args.kerf is not None:
        kerf = args.kerf
    if args.algorithm is not None:
        algorithm = args.algorithm

    if not pieces:
        raise SystemExit("No pieces given (use --pieces, --piece or --job).")

    want_fig = bool(args.png.strip()) or not args.no_plot
    result = run_cutting_stock(
        stock,
        kerf,
        pieces,
        algorithm=algorithm,
        exact_params=ExactParams(time_limit_s=float(args.time)),
        compare_exact=bool(args.compare_exact),
        out_dir=args.out.strip() or None,
        export_prefix=args.prefix.strip() or "cutting",
        show_plot=want_fig,
        plot_style=_style(args),
    )
    run, fig = result if isinstance(result, tuple) else (result, None)

    if run.result is None:
        too_long = [p for p in pieces if p.length > stock]
        if too_long:
            raise SystemExit(
                f"Cannot cut: {len(too_long)} piece type(s) longer than stock {stock:g} "
                f"(e.g. {too_long[0].display_label()})."
            )
        raise SystemExit("Nothing to cut (all quantities are 0).")

    print_cutting_result(run.result)
    if run.comparison is not None:
        cmp_ = run.comparison
        print(
            f"CP-SAT reference: {cmp_.exact_stocks} bars "
            f"({'optimal' if cmp_.proven_optimal else 'best found'}), "
            f"{cmp_.algorithm.upper()} uses {cmp_.extra_stocks} extra"
        )
    print(f"Solved in {run.seconds:.3f} s")
    if args.out.strip():
        print(f"Exported CSV + JSON to: {args.out.strip()}")
    _finish_plot(fig, args)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    set_enabled(bool(args.verbose))

    if args.command == "tsp":
        _cmd_tsp(args)
    else:
        _cmd_cut(args)


if __name__ == "__main__":
    main()
