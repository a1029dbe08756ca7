# cutroute/sample_data.py
# Utilities to generate sample / random node sets and piece lists for quick
# benchmarking and property checks without needing real CSVs.

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Tuple

from .types import Node, PieceRequest


@dataclass(frozen=True)
class RandomNodesConfig:
    seed: int = 123
    n: int = 8
    x_range: Tuple[float, float] = (0.0, 100.0)
    y_range: Tuple[float, float] = (0.0, 100.0)
    # snap to this grid (0 = keep floats); grids produce ties on purpose
    grid: float = 0.0


@dataclass(frozen=True)
class RandomPiecesConfig:
    seed: int = 123
    n_unique: int = 6
    qty_range: Tuple[int, int] = (1, 5)

    # piece lengths as a fraction of stock length
    length_fraction_range: Tuple[float, float] = (0.08, 0.6)
    stock_length: float = 6000.0

    # probability a piece is "long" (more than half a bar)
    p_long: float = 0.15


def generate_random_nodes(cfg: RandomNodesConfig) -> List[Node]:
    rnd = random.Random(cfg.seed)
    out: List[Node] = []
    for _ in range(cfg.n):
        x = rnd.uniform(*cfg.x_range)
        y = rnd.uniform(*cfg.y_range)
        if cfg.grid > 0:
            x = round(x / cfg.grid) * cfg.grid
            y = round(y / cfg.grid) * cfg.grid
        out.append(Node(x, y))
    return out


def circle_nodes(n: int, radius: float = 10.0) -> List[Node]:
    """Regular polygon; the optimal tour is its perimeter."""
    return [
        Node(math.cos(2 * math.pi * i / n) * radius, math.sin(2 * math.pi * i / n) * radius)
        for i in range(n)
    ]


def generate_random_pieces(cfg: RandomPiecesConfig) -> List[PieceRequest]:
    """
    Piece list resembling a steel/lumber order: mostly short and medium cuts, a few long ones.
    Lengths are whole millimetres.
    """
    rnd = random.Random(cfg.seed)
    lo, hi = cfg.length_fraction_range
    out: List[PieceRequest] = []
    for i in range(cfg.n_unique):
        if rnd.random() < cfg.p_long:
            frac = rnd.uniform(0.5, 0.95)
        else:
            frac = rnd.uniform(lo, hi)
        out.append(
            PieceRequest(
                length=float(max(1, int(cfg.stock_length * frac))),
                quantity=rnd.randint(*cfg.qty_range),
                label=f"P{i + 1:02d}",
            )
        )
    return out
