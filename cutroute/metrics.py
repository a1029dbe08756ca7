# cutroute/metrics.py
# Metrics for 1D cutting:
# - kerf loss per pattern (one kerf per cut after the first piece)
# - used / waste length and waste percent per pattern
# - aggregate totals across all used stock units
#
# These metrics are solver-agnostic: they work for any FFD/BFD/exact bin assignment.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .config import DEFAULTS
from .types import CuttingResult, Pattern, PieceCopy
from .utils import round_to


@dataclass(frozen=True)
class Totals:
    stocks_used: int
    total_kerf_loss: float
    total_waste: float
    waste_percent: float
    utilization_percent: float


def compute_kerf_loss(num_pieces: int, kerf: float) -> float:
    """kerf x (pieces - 1); an empty or single-piece bar has no internal cut."""
    return kerf * max(0, num_pieces - 1)


def compute_used_length(pieces: Sequence[PieceCopy], kerf: float) -> float:
    return sum(p.length for p in pieces) + compute_kerf_loss(len(pieces), kerf)


def build_pattern(
    pieces: Sequence[PieceCopy],
    stock_length: float,
    kerf: float,
    decimals: int = DEFAULTS.cutting_decimals,
) -> Pattern:
    """
    Compute metrics for one stock unit.
    Raises if the pieces + kerfs do not fit (should be prevented upstream).
    """
    kerf_loss = compute_kerf_loss(len(pieces), kerf)
    used = sum(p.length for p in pieces) + kerf_loss
    waste = stock_length - used
    if waste < -1e-9:
        raise ValueError(f"Pattern overflows stock (used={used} > stock={stock_length}).")
    return Pattern(
        pieces=list(pieces),
        used_length=round_to(used, decimals),
        waste_length=round_to(waste, decimals),
        waste_percent=round_to(waste / stock_length * 100, decimals),
        kerf_loss=round_to(kerf_loss, decimals),
    )


def compute_totals(
    patterns: Sequence[Pattern],
    bins: Iterable[Sequence[PieceCopy]],
    stock_length: float,
    kerf: float,
    decimals: int = DEFAULTS.cutting_decimals,
) -> Totals:
    """
    Aggregate metrics across stock units.
    total_waste is the sum of the (rounded) pattern wastes, so the totals
    agree with the per-pattern figures printed beside them.
    Kerf loss is summed from raw per-bar values.
    """
    kerf_total = sum(compute_kerf_loss(len(pieces), kerf) for pieces in bins)
    waste_total = sum(p.waste_length for p in patterns)

    count = len(patterns)
    material = stock_length * count
    waste_pct = (waste_total / material) * 100 if material > 0 else 0.0
    util_pct = ((material - waste_total) / material) * 100 if material > 0 else 0.0
    return Totals(
        stocks_used=count,
        total_kerf_loss=round_to(kerf_total, decimals),
        total_waste=round_to(waste_total, decimals),
        waste_percent=round_to(waste_pct, decimals),
        utilization_percent=round_to(util_pct, decimals),
    )


def summarize_patterns(
    bins: List[List[PieceCopy]],
    stock_length: float,
    kerf: float,
    algorithm: str,
    decimals: int = DEFAULTS.cutting_decimals,
) -> CuttingResult:
    """Turn raw bin contents into a fully populated CuttingResult."""
    patterns = [build_pattern(b, stock_length, kerf, decimals) for b in bins]
    totals = compute_totals(patterns, bins, stock_length, kerf, decimals)
    return CuttingResult(
        stock_length=stock_length,
        kerf=kerf,
        algorithm=algorithm,
        patterns=patterns,
        total_kerf_loss=totals.total_kerf_loss,
        total_waste=totals.total_waste,
        waste_percent=totals.waste_percent,
        utilization_percent=totals.utilization_percent,
    )
