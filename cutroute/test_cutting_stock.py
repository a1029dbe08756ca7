# cutroute/test_cutting_stock.py
# Unit tests for the FFD / BFD cutting stock heuristics and their metrics.

from __future__ import annotations

import pytest

from cutroute.metrics import build_pattern, compute_kerf_loss
from cutroute.sample_data import RandomPiecesConfig, generate_random_pieces
from cutroute.solver_cutting_stock import cutting_stock, solve_cutting_stock
from cutroute.types import CuttingStockJob, PieceCopy, PieceRequest, expand_pieces
from cutroute.validate import raise_on_errors, validate_cutting_result


def _labels(res):
    return [pat.labels() for pat in res.patterns]


def test_three_pieces_fit_one_bar() -> None:
    # 3 x 1990 + 2 kerfs = 5976 <= 6000
    res = solve_cutting_stock(6000, 3, [PieceRequest(1990, 3)], "ffd")
    assert res is not None
    assert res.stocks_used == 1
    pat = res.patterns[0]
    assert pat.used_length == 5976
    assert pat.waste_length == 24
    assert pat.waste_percent == 0.4
    assert pat.kerf_loss == 6
    assert res.total_kerf_loss == 6
    assert res.total_waste == 24
    assert res.waste_percent == 0.4
    assert res.utilization_percent == 99.6


def test_kerf_accounted_at_the_edge() -> None:
    # 3 x 1997 + 2 x 3 = 5997
    res = solve_cutting_stock(6000, 3, [PieceRequest(1997, 3)], "ffd")
    assert res is not None
    assert res.stocks_used == 1
    assert res.total_kerf_loss == 6

    # 3 x 1999 + 2 x 3 = 6003 > 6000 -> second bar
    res2 = solve_cutting_stock(6000, 3, [PieceRequest(1999, 3)], "ffd")
    assert res2 is not None
    assert res2.stocks_used == 2
    assert res2.total_kerf_loss == 3


def test_simple_pieces() -> None:
    res = cutting_stock(CuttingStockJob(stock_length=6000, kerf=3, pieces=[PieceRequest(1000, 4)]))
    assert res is not None
    assert res.stocks_used == 1
    assert res.algorithm == "ffd"
    assert res.patterns[0].num_pieces() == 4


def test_empty_and_oversized_return_none() -> None:
    assert solve_cutting_stock(6000, 3, [], "ffd") is None
    assert solve_cutting_stock(6000, 3, [PieceRequest(7000, 1)], "ffd") is None
    assert solve_cutting_stock(6000, 3, [PieceRequest(1000, 2), PieceRequest(6001, 1)], "bfd") is None


def test_zero_quantity_contributes_nothing() -> None:
    assert solve_cutting_stock(6000, 3, [PieceRequest(1000, 0)], "ffd") is None
    res = solve_cutting_stock(6000, 3, [PieceRequest(1000, 0), PieceRequest(500, 2)], "ffd")
    assert res is not None
    assert res.num_pieces() == 2


def test_oversized_piece_with_zero_quantity_is_ignored() -> None:
    # nothing of that length is actually requested
    res = solve_cutting_stock(6000, 3, [PieceRequest(7000, 0), PieceRequest(500, 1)], "ffd")
    assert res is not None
    assert res.stocks_used == 1


def test_zero_kerf() -> None:
    res = solve_cutting_stock(6000, 0, [PieceRequest(2000, 3)], "ffd")
    assert res is not None
    assert res.total_kerf_loss == 0
    assert res.stocks_used == 1
    assert res.total_waste == 0
    assert res.utilization_percent == 100


def test_piece_equal_to_stock() -> None:
    res = solve_cutting_stock(6000, 3, [PieceRequest(6000, 2)], "bfd")
    assert res is not None
    assert res.stocks_used == 2
    for pat in res.patterns:
        assert pat.num_pieces() == 1
        assert pat.waste_length == 0
        assert pat.kerf_loss == 0


def test_ffd_and_bfd_differ() -> None:
    pieces = [PieceRequest(7, 1, "a"), PieceRequest(5, 1, "b"), PieceRequest(4, 1, "c"), PieceRequest(1, 1, "d")]
    ffd = solve_cutting_stock(10, 0, pieces, "ffd")
    bfd = solve_cutting_stock(10, 0, pieces, "bfd")
    assert ffd is not None and bfd is not None
    assert _labels(ffd) == [["a", "d"], ["b", "c"]]
    assert _labels(bfd) == [["a"], ["b", "c", "d"]]
    assert ffd.stocks_used == bfd.stocks_used == 2


def test_sort_is_decreasing_and_stable() -> None:
    pieces = [PieceRequest(100, 1, "short"), PieceRequest(300, 1, "A"), PieceRequest(300, 1, "B")]
    res = solve_cutting_stock(1000, 0, pieces, "ffd")
    assert res is not None
    assert _labels(res) == [["A", "B", "short"]]


def test_default_labels() -> None:
    copies = expand_pieces([PieceRequest(1990, 2), PieceRequest(12.5, 1), PieceRequest(300, 1, "rail")])
    assert [c.label for c in copies] == ["1990", "1990", "12.5", "rail"]


def test_waste_metrics_reported() -> None:
    res = solve_cutting_stock(6000, 3, [PieceRequest(2500, 2)], "ffd")
    assert res is not None
    assert res.waste_percent > 0
    assert res.utilization_percent < 100

    res2 = solve_cutting_stock(6000, 3, [PieceRequest(1000, 5)], "ffd")
    assert res2 is not None
    assert res2.total_waste > 0


def test_lumber_cutting_utilization() -> None:
    res = solve_cutting_stock(2440, 3, [PieceRequest(600, 8), PieceRequest(400, 4)], "bfd")
    assert res is not None
    assert res.stocks_used == 3
    assert res.utilization_percent > 70


def test_conservation_and_completeness_random() -> None:
    for seed in range(10):
        cfg = RandomPiecesConfig(seed=seed, n_unique=4 + seed % 5)
        pieces = generate_random_pieces(cfg)
        total = sum(p.quantity for p in pieces)
        for algorithm in ("ffd", "bfd"):
            res = solve_cutting_stock(cfg.stock_length, 4, pieces, algorithm)
            assert res is not None
            raise_on_errors(validate_cutting_result(res, pieces))
            assert res.num_pieces() == total
            for pat in res.patterns:
                used = sum(p.length for p in pat.pieces) + 4 * (pat.num_pieces() - 1)
                assert used <= cfg.stock_length


def test_bfd_never_uses_more_bars_than_pieces() -> None:
    pieces = [PieceRequest(1200, 10), PieceRequest(800, 15)]
    res = solve_cutting_stock(6000, 5, pieces, "bfd")
    assert res is not None
    assert 0 < res.stocks_used <= 25
    assert res.num_pieces() == 25


def test_invalid_inputs_raise() -> None:
    with pytest.raises(ValueError):
        solve_cutting_stock(6000, 3, [PieceRequest(100, 1)], "nfd")
    with pytest.raises(ValueError):
        solve_cutting_stock(6000, -1, [PieceRequest(100, 1)], "ffd")
    with pytest.raises(ValueError):
        PieceRequest(-5, 1)
    with pytest.raises(ValueError):
        PieceRequest(float("nan"), 1)
    with pytest.raises(ValueError):
        PieceRequest(100, -1)


def test_algorithm_name_is_normalized() -> None:
    res = solve_cutting_stock(6000, 3, [PieceRequest(100, 1)], " BFD ")
    assert res is not None
    assert res.algorithm == "bfd"


def test_metrics_helpers() -> None:
    assert compute_kerf_loss(0, 3) == 0
    assert compute_kerf_loss(1, 3) == 0
    assert compute_kerf_loss(4, 3) == 9
    with pytest.raises(ValueError):
        build_pattern([PieceCopy(4000, "a"), PieceCopy(2000, "b")], 6000, 3)


def test_total_waste_is_sum_of_pattern_wastes() -> None:
    # each bar wastes 0.05, shown as 0.1 per pattern; the total must agree
    res = solve_cutting_stock(10, 0, [PieceRequest(9.95, 2)], "ffd")
    assert res is not None
    assert [pat.waste_length for pat in res.patterns] == [0.1, 0.1]
    assert res.total_waste == 0.2
    assert res.waste_percent == 1.0
    assert res.utilization_percent == 99.0


def test_zero_length_piece_is_placed() -> None:
    res = solve_cutting_stock(10, 1, [PieceRequest(6), PieceRequest(0, label="mark")], "ffd")
    assert res is not None
    assert res.stocks_used == 1
    assert _labels(res) == [["6", "mark"]]
    assert res.patterns[0].kerf_loss == 1
    assert res.patterns[0].waste_length == 3
    raise_on_errors(validate_cutting_result(res, [PieceRequest(6), PieceRequest(0, label="mark")]))
