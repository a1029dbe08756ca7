# cutroute/io_json.py
# Load job JSON files into TspJob / CuttingStockJob.
#
# TSP job:
# {
#   "nodes": [{"x": 0, "y": 0}, {"x": 3, "y": 4}, ...]      # or [[0, 0], [3, 4], ...]
# }
#
# Cutting stock job (camelCase keys from the web calculator are accepted too):
# {
#   "stock_length": 6000, "kerf": 3, "algorithm": "ffd",          # ffd | bfd | exact
#   "pieces": [{"length": 1990, "quantity": 3, "label": "rail"}, ...]
# }

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from .config import DEFAULTS, parse_algorithm
from .types import RUN_ALGORITHMS, CuttingStockJob, Node, PieceRequest, TspJob


def _read_json(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level JSON must be an object")
    return data


def _get(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def parse_tsp_job(data: Dict[str, Any]) -> TspJob:
    raw = data.get("nodes")
    if raw is None:
        raise ValueError("JSON missing 'nodes'.")
    nodes: List[Node] = []
    for it in raw:
        if isinstance(it, dict):
            if "x" not in it or "y" not in it:
                raise ValueError(f"Node missing x/y: {it}")
            nodes.append(Node(float(it["x"]), float(it["y"])))
        else:
            x, y = it
            nodes.append(Node(float(x), float(y)))
    return TspJob(nodes=nodes)


def parse_cutting_job(data: Dict[str, Any]) -> CuttingStockJob:
    stock = _get(data, "stock_length", "stockLength")
    if stock is None:
        raise ValueError("JSON missing 'stock_length'.")
    kerf = float(_get(data, "kerf", default=DEFAULTS.default_kerf))
    algorithm = parse_algorithm(_get(data, "algorithm", default=DEFAULTS.default_algorithm), RUN_ALGORITHMS)

    pieces: List[PieceRequest] = []
    for it in data.get("pieces") or []:
        if "length" not in it:
            raise ValueError(f"Piece missing length: {it}")
        label = it.get("label")
        pieces.append(
            PieceRequest(
                length=float(it["length"]),
                quantity=int(_get(it, "quantity", "qty", "count", default=1)),
                label=str(label) if label is not None else None,
            )
        )
    return CuttingStockJob(stock_length=float(stock), kerf=kerf, pieces=pieces, algorithm=algorithm)


def load_tsp_json(path: Union[str, Path]) -> TspJob:
    """Load {"nodes": [...]} from a JSON file."""
    return parse_tsp_job(_read_json(path))


def load_cutting_json(path: Union[str, Path]) -> CuttingStockJob:
    """
    Load a cutting stock job.
    - "quantity" may also be spelled "qty" or "count" (default 1)
    - "kerf" defaults to the configured saw kerf
    """
    return parse_cutting_job(_read_json(path))
