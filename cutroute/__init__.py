# cutroute/__init__.py
"""
cutroute package (small combinatorial optimization calculators).

Current state:
- TSP on 2D points:
  - nearest neighbour from every start node
  - 2-opt local search (optional pass cap)
  - exact brute force reference for <= 10 nodes
- 1D cutting stock:
  - First-Fit-Decreasing / Best-Fit-Decreasing with kerf accounting
  - CP-SAT exact reference (minimum bars) for comparison
- JSON/CSV IO, validation, matplotlib plots, CLI (python -m cutroute)
"""

from .types import (
    Node,
    TspJob,
    TspResult,
    PieceRequest,
    PieceCopy,
    expand_pieces,
    StockUnit,
    Pattern,
    CuttingResult,
    CuttingStockJob,
)

from .solver_tsp import (
    TwoOptParams,
    solve_tsp,
    tsp,
)

from .solver_cutting_stock import (
    solve_cutting_stock,
    cutting_stock,
)

from .solver_cutting_cp_sat import (
    ExactParams,
    ExactComparison,
    solve_cutting_stock_exact,
    compare_with_exact,
)

from .validate import (
    ValidationIssue,
    validate_tsp_result,
    validate_cutting_result,
    raise_on_errors,
)

from .utils import round_to

__all__ = [
    # types
    "Node",
    "TspJob",
    "TspResult",
    "PieceRequest",
    "PieceCopy",
    "expand_pieces",
    "StockUnit",
    "Pattern",
    "CuttingResult",
    "CuttingStockJob",
    # tsp
    "TwoOptParams",
    "solve_tsp",
    "tsp",
    # cutting stock
    "solve_cutting_stock",
    "cutting_stock",
    "ExactParams",
    "ExactComparison",
    "solve_cutting_stock_exact",
    "compare_with_exact",
    # validation
    "ValidationIssue",
    "validate_tsp_result",
    "validate_cutting_result",
    "raise_on_errors",
    # utils
    "round_to",
]
