# cutroute/types.py
# Core data structures for both solvers (TSP tours + 1D cutting stock).
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union


# ----------------------------
# TSP
# ----------------------------

@dataclass(frozen=True)
class Node:
    """A 2D point. Identified by its index in the input sequence."""
    x: float
    y: float

    def __post_init__(self):
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Node coordinates must be finite, got ({self.x}, {self.y})")


NodeLike = Union[Node, Tuple[float, float], Sequence[float]]


def as_nodes(points: Iterable[NodeLike]) -> List[Node]:
    """Accept Node objects or (x, y) pairs, return a list of Node."""
    out: List[Node] = []
    for p in points:
        if isinstance(p, Node):
            out.append(p)
        else:
            x, y = p
            out.append(Node(float(x), float(y)))
    return out


@dataclass(frozen=True)
class TspJob:
    """Structured TSP input: {nodes: [{x, y}, ...]}."""
    nodes: List[Node] = field(default_factory=list)


@dataclass
class TspResult:
    """
    Tours are lists of node indices in visit order (implicitly cyclic).
    optimal_* fields are only filled when the brute-force reference ran.
    """
    nn_tour: List[int]
    nn_distance: float
    optimized_tour: List[int]
    optimized_distance: float
    improvement_percent: float
    optimal_distance: Optional[float] = None
    optimality_gap: Optional[float] = None
    optimal_tour: Optional[List[int]] = None

    def num_nodes(self) -> int:
        return len(self.optimized_tour)

    def has_optimal(self) -> bool:
        return self.optimal_distance is not None


# ----------------------------
# Cutting stock
# ----------------------------

ALGORITHMS = ("ffd", "bfd")
# heuristics plus the CP-SAT reference, accepted by job files and the runner
RUN_ALGORITHMS = ALGORITHMS + ("exact",)


def format_length(length: float) -> str:
    """1990 -> '1990', 1990.0 -> '1990', 12.5 -> '12.5'."""
    v = float(length)
    if v.is_integer():
        return str(int(v))
    return repr(v)


@dataclass(frozen=True)
class PieceRequest:
    """A demand for `quantity` pieces of `length`."""
    length: float
    quantity: int = 1
    label: Optional[str] = None

    def __post_init__(self):
        if not (self.length >= 0) or not math.isfinite(self.length):
            raise ValueError(f"Invalid piece length: {self.length}")
        if self.quantity < 0:
            raise ValueError(f"quantity must be >= 0 for piece {self.display_label()}")

    def display_label(self) -> str:
        return self.label if self.label is not None else format_length(self.length)


@dataclass(frozen=True)
class PieceCopy:
    """A single physical piece (expanded from quantity)."""
    length: float
    label: str


def expand_pieces(pieces: Iterable[PieceRequest]) -> List[PieceCopy]:
    """Expand quantity into individual copies (stable order)."""
    out: List[PieceCopy] = []
    for p in pieces:
        label = p.display_label()
        for _ in range(p.quantity):
            out.append(PieceCopy(length=p.length, label=label))
    return out


@dataclass
class StockUnit:
    """
    An open bar while a solver is filling it.
    `remaining` is the free length left after the pieces and kerfs so far.
    """
    stock_length: float
    pieces: List[PieceCopy] = field(default_factory=list)
    remaining: float = 0.0

    @classmethod
    def open_with(cls, stock_length: float, piece: PieceCopy) -> "StockUnit":
        return cls(stock_length=stock_length, pieces=[piece], remaining=stock_length - piece.length)

    def kerf_needed(self, kerf: float) -> float:
        return kerf if self.pieces else 0.0

    def leftover_after(self, piece: PieceCopy, kerf: float) -> float:
        """Free length left if `piece` were added; negative means it does not fit."""
        return self.remaining - self.kerf_needed(kerf) - piece.length

    def fits(self, piece: PieceCopy, kerf: float) -> bool:
        return self.remaining - self.kerf_needed(kerf) >= piece.length

    def add(self, piece: PieceCopy, kerf: float) -> None:
        self.remaining -= piece.length + self.kerf_needed(kerf)
        self.pieces.append(piece)


@dataclass(frozen=True)
class Pattern:
    """One used stock unit: its pieces + summary metrics."""
    pieces: List[PieceCopy]
    used_length: float
    waste_length: float
    waste_percent: float
    kerf_loss: float = 0.0

    def num_pieces(self) -> int:
        return len(self.pieces)

    def labels(self) -> List[str]:
        return [p.label for p in self.pieces]


@dataclass
class CuttingResult:
    """Full cutting plan across all used stock units."""
    stock_length: float
    kerf: float
    algorithm: str
    patterns: List[Pattern] = field(default_factory=list)

    total_kerf_loss: float = 0.0
    total_waste: float = 0.0
    waste_percent: float = 0.0
    utilization_percent: float = 0.0

    # Only meaningful for the exact solver
    proven_optimal: Optional[bool] = None

    @property
    def stocks_used(self) -> int:
        return len(self.patterns)

    def num_pieces(self) -> int:
        return sum(p.num_pieces() for p in self.patterns)


@dataclass(frozen=True)
class CuttingStockJob:
    """Structured cutting stock input."""
    stock_length: float
    kerf: float = 0.0
    pieces: List[PieceRequest] = field(default_factory=list)
    algorithm: str = "ffd"
