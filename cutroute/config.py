# cutroute/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (kerf, epsilon, brute-force cap, rounding) in one place.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .types import ALGORITHMS, Node, PieceRequest

# Exact TSP enumeration is factorial; 10 nodes -> 9! = 362,880 tours.
BRUTE_FORCE_MAX_NODES = 10


@dataclass(frozen=True)
class Defaults:
    # Typical 6 m steel bar and saw blade (mm)
    default_stock_length: float = 6000.0
    default_kerf: float = 3.0
    default_algorithm: str = "ffd"

    # 2-opt accepts a swap only if it shortens the tour by more than this
    two_opt_epsilon: float = 1e-10
    # None = keep passing until no improving swap is found
    two_opt_max_passes: Optional[int] = None

    # Output rounding
    tsp_decimals: int = 2
    cutting_decimals: int = 1

    # CP-SAT exact reference for cutting stock
    exact_time_limit_s: float = 10.0
    exact_num_workers: int = 2
    # lengths are multiplied by this before going into the integer model
    exact_scale: int = 1000


DEFAULTS = Defaults()


def parse_algorithm(text: str, allowed: Tuple[str, ...] = ALGORITHMS) -> str:
    """
    Normalize 'FFD' / ' bfd ' -> 'ffd' / 'bfd'.
    """
    s = str(text).strip().lower()
    if s not in allowed:
        raise ValueError(f"algorithm must be one of {allowed}, got {text!r}")
    return s


def parse_node_text(node_text: str) -> Node:
    """
    Parse '3.5,4' -> Node(3.5, 4.0)
    """
    vals = [v.strip() for v in node_text.split(",") if v.strip() != ""]
    if len(vals) != 2:
        raise ValueError(f"node_text must be 'x,y' (e.g. '3,4'), got {node_text!r}")
    return Node(float(vals[0]), float(vals[1]))


def parse_piece_text(piece_text: str) -> PieceRequest:
    """
    Parse 'length[xqty][:label]':
      '1990'         -> PieceRequest(1990, 1)
      '1990x3'       -> PieceRequest(1990, 3)
      '1990x3:rail'  -> PieceRequest(1990, 3, 'rail')
    """
    s = piece_text.strip()
    label: Optional[str] = None
    if ":" in s:
        s, label = s.split(":", 1)
        label = label.strip() or None
    s = s.lower().replace(" ", "")
    if not s:
        raise ValueError(f"Empty piece definition: {piece_text!r}")
    if "x" in s:
        a, b = s.split("x", 1)
        return PieceRequest(length=float(a), quantity=int(float(b)), label=label)
    return PieceRequest(length=float(s), quantity=1, label=label)


def parse_stock_text(stock_text: str) -> Tuple[float, Optional[float]]:
    """
    Parse '6000' -> (6000, None) or '6000/3' -> (6000, 3)
    """
    s = stock_text.replace(" ", "")
    if "/" in s:
        a, b = s.split("/", 1)
        return float(a), float(b)
    return float(s), None
