# cutroute/tests_smoke.py
# Very small smoke tests you can run with:
#   python -m cutroute.tests_smoke
#
# These are not full unit tests, but they quickly tell you if
# the solvers, validation, exports and plotting are wired correctly.

from __future__ import annotations

import tempfile
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

from cutroute.plotting import plot_patterns, save_figure_png
from cutroute.run import run_cutting_stock, run_tsp
from cutroute.sample_data import RandomNodesConfig, RandomPiecesConfig, generate_random_nodes, generate_random_pieces
from cutroute.types import PieceRequest


def test_tsp_end_to_end() -> None:
    nodes = generate_random_nodes(RandomNodesConfig(seed=5, n=7))
    with tempfile.TemporaryDirectory() as tmp:
        run, fig = run_tsp(nodes, out_dir=tmp, show_plot=True)
        res = run.result

        assert res is not None
        assert res.optimal_distance is not None
        assert res.optimized_distance >= res.optimal_distance
        assert (Path(tmp) / "tour.csv").exists()
        assert (Path(tmp) / "tour.json").exists()

        png = Path(tmp) / "tour.png"
        save_figure_png(fig, str(png))
        assert png.exists()


def test_cutting_end_to_end() -> None:
    pieces = generate_random_pieces(RandomPiecesConfig(seed=9, n_unique=5))
    with tempfile.TemporaryDirectory() as tmp:
        run, fig = run_cutting_stock(6000, 3, pieces, algorithm="bfd", compare_exact=True,
                                     out_dir=tmp, show_plot=True)
        res = run.result

        assert res is not None
        assert res.num_pieces() == sum(p.quantity for p in pieces)
        assert run.comparison is not None
        assert run.comparison.extra_stocks >= 0
        assert (Path(tmp) / "cutting_patterns.csv").exists()

        png = Path(tmp) / "cutting.png"
        save_figure_png(fig, str(png))
        assert png.exists()


def test_unsolvable_job_has_no_plot() -> None:
    run = run_cutting_stock(6000, 3, [PieceRequest(7000, 1)], show_plot=True)
    assert run.result is None


def test_zero_kerf_plot() -> None:
    run = run_cutting_stock(2000, 0, [PieceRequest(1000, 2)], algorithm="exact")
    assert run.result is not None
    assert run.result.total_kerf_loss == 0
    fig = plot_patterns(run.result)
    assert fig is not None


def main() -> None:
    print("Running smoke tests...")
    test_tsp_end_to_end()
    test_cutting_end_to_end()
    test_unsolvable_job_has_no_plot()
    test_zero_kerf_plot()
    print("OK")


if __name__ == "__main__":
    main()
