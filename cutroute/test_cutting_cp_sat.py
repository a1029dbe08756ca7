# cutroute/test_cutting_cp_sat.py
# CP-SAT exact reference for cutting stock (needs ortools).

from __future__ import annotations

from cutroute.solver_cutting_cp_sat import ExactParams, compare_with_exact, solve_cutting_stock_exact
from cutroute.solver_cutting_stock import solve_cutting_stock
from cutroute.types import PieceRequest
from cutroute.validate import raise_on_errors, validate_cutting_result

# FFD/BFD need 3 bars here, the optimum is 2: {5,3,2} + {4,4,2}
TRICKY = [PieceRequest(5, 1), PieceRequest(4, 2), PieceRequest(3, 1), PieceRequest(2, 2)]


def test_exact_beats_heuristic() -> None:
    assert solve_cutting_stock(10, 0, TRICKY, "ffd").stocks_used == 3
    assert solve_cutting_stock(10, 0, TRICKY, "bfd").stocks_used == 3

    res = solve_cutting_stock_exact(10, 0, TRICKY, params=ExactParams(time_limit_s=5))
    assert res is not None
    assert res.algorithm == "exact"
    assert res.stocks_used == 2
    assert res.proven_optimal is True
    assert res.total_waste == 0
    raise_on_errors(validate_cutting_result(res, TRICKY))


def test_exact_respects_kerf() -> None:
    pieces = [PieceRequest(1990, 3)]
    res = solve_cutting_stock_exact(6000, 3, pieces)
    assert res is not None
    assert res.stocks_used == 1
    assert res.total_kerf_loss == 6

    # 1999 x 3 + 2 kerfs overflows 6000, so two bars are the optimum
    res2 = solve_cutting_stock_exact(6000, 3, [PieceRequest(1999, 3)])
    assert res2 is not None
    assert res2.stocks_used == 2
    raise_on_errors(validate_cutting_result(res2, [PieceRequest(1999, 3)]))


def test_exact_none_cases() -> None:
    assert solve_cutting_stock_exact(6000, 3, []) is None
    assert solve_cutting_stock_exact(6000, 3, [PieceRequest(7000, 1)]) is None
    assert solve_cutting_stock_exact(6000, 3, [PieceRequest(100, 0)]) is None


def test_compare_with_exact() -> None:
    cmp_ = compare_with_exact(10, 0, TRICKY, "ffd")
    assert cmp_ is not None
    assert cmp_.heuristic_stocks == 3
    assert cmp_.exact_stocks == 2
    assert cmp_.extra_stocks == 1
    assert cmp_.proven_optimal

    assert compare_with_exact(10, 0, [PieceRequest(11, 1)], "bfd") is None


def test_fractional_lengths_are_scaled() -> None:
    pieces = [PieceRequest(2.5, 4)]
    res = solve_cutting_stock_exact(10, 0, pieces)
    assert res is not None
    assert res.stocks_used == 1
    assert res.total_waste == 0
