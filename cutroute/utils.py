# cutroute/utils.py
# Small utilities used across the project:
# - decimal rounding for reported numbers
# - timing context manager
# - simple JSON export for results (tours / patterns + metrics)
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import math
import time
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Dict, Iterator, Union

from .types import CuttingResult, TspResult


def round_to(value: float, decimals: int = 2) -> float:
    """
    Round half away from zero on the shortest decimal repr of the float,
    so 0.615 -> 0.62 and 2.555 -> 2.56 (plain round() gives 0.61 / 2.56).
    """
    if not math.isfinite(value) or abs(value) >= 1e20:
        # beyond Decimal's default 28-digit context there is nothing to round
        return value
    q = Decimal(1).scaleb(-int(decimals))
    return float(Decimal(repr(float(value))).quantize(q, rounding=ROUND_HALF_UP))


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("solve") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def _to_jsonable(obj: Any) -> Any:
    """Convert dataclasses and other objects to JSON-serializable structures."""
    if is_dataclass(obj):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def tsp_result_to_dict(res: TspResult) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "nn_tour": list(res.nn_tour),
        "nn_distance": res.nn_distance,
        "optimized_tour": list(res.optimized_tour),
        "optimized_distance": res.optimized_distance,
        "improvement_percent": res.improvement_percent,
    }
    if res.has_optimal():
        out["optimal_distance"] = res.optimal_distance
        out["optimality_gap"] = res.optimality_gap
        out["optimal_tour"] = list(res.optimal_tour or [])
    return out


def cutting_result_to_dict(res: CuttingResult) -> Dict[str, Any]:
    """
    Convert CuttingResult to a JSON-friendly dict.
    Keeps only essential fields + metrics.
    """
    out: Dict[str, Any] = {
        "stock_length": res.stock_length,
        "kerf": res.kerf,
        "algorithm": res.algorithm,
        "totals": {
            "stocks_used": res.stocks_used,
            "total_kerf_loss": res.total_kerf_loss,
            "total_waste": res.total_waste,
            "waste_percent": res.waste_percent,
            "utilization_percent": res.utilization_percent,
        },
        "patterns": [
            {
                "index": i,
                "pieces": [{"length": pc.length, "label": pc.label} for pc in pat.pieces],
                "used_length": pat.used_length,
                "waste_length": pat.waste_length,
                "waste_percent": pat.waste_percent,
                "kerf_loss": pat.kerf_loss,
            }
            for i, pat in enumerate(res.patterns)
        ],
    }
    if res.proven_optimal is not None:
        out["proven_optimal"] = res.proven_optimal
    return out


def result_to_dict(res: Union[TspResult, CuttingResult]) -> Dict[str, Any]:
    if isinstance(res, TspResult):
        return tsp_result_to_dict(res)
    if isinstance(res, CuttingResult):
        return cutting_result_to_dict(res)
    raise TypeError(f"Unsupported result type: {type(res).__name__}")


def save_result_json(res: Union[TspResult, CuttingResult], path: Union[str, Path], *, indent: int = 2) -> None:
    """Save a solver result into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = result_to_dict(res)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_to_jsonable(payload), f, ensure_ascii=False, indent=indent)
