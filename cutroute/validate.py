# cutroute/validate.py
# Validation utilities:
# - tours are permutations of 0..n-1
# - 2-opt never worsens NN, heuristic never beats the exact optimum
# - cutting patterns fit their bar (pieces + kerfs <= stock length)
# - every requested piece is cut exactly once
#
# Useful both during development and to sanity-check solver output.

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .metrics import compute_kerf_loss, compute_used_length
from .types import CuttingResult, Node, PieceRequest, TspResult, expand_pieces

# Reported numbers are rounded; comparisons allow for that.
_TOL = 1e-6


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    pattern_index: Optional[int] = None
    label: Optional[str] = None


def validate_tour(n: int, tour: Sequence[int], name: str = "tour") -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if len(tour) != n:
        issues.append(ValidationIssue(level="ERROR", message=f"{name} has {len(tour)} stops, expected {n}"))
    if sorted(tour) != list(range(n)):
        issues.append(ValidationIssue(level="ERROR", message=f"{name} is not a permutation of 0..{n - 1}: {list(tour)}"))
    return issues


def validate_tsp_result(nodes: Sequence[Node], res: TspResult) -> List[ValidationIssue]:
    n = len(nodes)
    issues: List[ValidationIssue] = []
    issues.extend(validate_tour(n, res.nn_tour, "nn_tour"))
    issues.extend(validate_tour(n, res.optimized_tour, "optimized_tour"))

    if res.optimized_distance > res.nn_distance + _TOL:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"2-opt made the tour worse: {res.optimized_distance} > {res.nn_distance}",
            )
        )

    if res.optimal_distance is not None:
        if res.optimized_distance + _TOL < res.optimal_distance:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Heuristic beats exact optimum: {res.optimized_distance} < {res.optimal_distance}",
                )
            )
        if res.optimality_gap is not None and res.optimality_gap < 0:
            issues.append(ValidationIssue(level="ERROR", message=f"Negative optimality gap: {res.optimality_gap}"))
        if res.optimal_tour is not None:
            issues.extend(validate_tour(n, res.optimal_tour, "optimal_tour"))

    if res.improvement_percent < 0:
        issues.append(ValidationIssue(level="WARN", message=f"Negative improvement: {res.improvement_percent}%"))

    return issues


def validate_patterns(res: CuttingResult) -> List[ValidationIssue]:
    """Each bar: sum(lengths) + kerf*(count-1) <= stock length."""
    issues: List[ValidationIssue] = []
    for idx, pat in enumerate(res.patterns):
        if not pat.pieces:
            issues.append(ValidationIssue(level="ERROR", message="Empty pattern", pattern_index=idx))
            continue
        used = compute_used_length(pat.pieces, res.kerf)
        if used > res.stock_length + _TOL:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Pattern overflows stock: used={used} > stock={res.stock_length}",
                    pattern_index=idx,
                )
            )
        expected_kerf = compute_kerf_loss(len(pat.pieces), res.kerf)
        if abs(pat.kerf_loss - expected_kerf) > 0.05 + _TOL:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Kerf loss {pat.kerf_loss} != expected {expected_kerf}",
                    pattern_index=idx,
                )
            )
    return issues


def validate_completeness(res: CuttingResult, pieces: Iterable[PieceRequest]) -> List[ValidationIssue]:
    """Every requested copy is cut exactly once (compared as (length, label) multisets)."""
    wanted = Counter((p.length, p.label) for p in expand_pieces(pieces))
    got = Counter((p.length, p.label) for pat in res.patterns for p in pat.pieces)
    issues: List[ValidationIssue] = []
    for key in sorted(set(wanted) | set(got), key=lambda k: (k[0], k[1])):
        if wanted[key] != got[key]:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Piece {key[1]} ({key[0]}): requested {wanted[key]}, cut {got[key]}",
                    label=key[1],
                )
            )
    return issues


def validate_cutting_result(res: CuttingResult, pieces: Iterable[PieceRequest]) -> List[ValidationIssue]:
    """
    Validate entire cutting plan.
    Returns a list of issues (empty if OK).
    """
    issues = validate_patterns(res)
    issues.extend(validate_completeness(res, pieces))
    if res.kerf == 0 and res.total_kerf_loss != 0:
        issues.append(ValidationIssue(level="ERROR", message=f"Zero kerf but kerf loss {res.total_kerf_loss}"))
    pattern_waste = sum(pat.waste_length for pat in res.patterns)
    if abs(res.total_waste - pattern_waste) > 0.05 + _TOL:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Total waste {res.total_waste} != sum of pattern wastes {pattern_waste}",
            )
        )
    if not res.patterns:
        issues.append(ValidationIssue(level="WARN", message="Cutting plan has 0 bars."))
    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(
            f"[{e.level}] pattern={e.pattern_index} label={e.label} :: {e.message}" for e in errs
        )
        raise ValueError("Validation failed:\n" + msg)
