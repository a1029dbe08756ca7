# cutroute/io_csv.py
# CSV import/export helpers:
# - read node lists (x,y) and piece lists (length,quantity[,label])
# - export tour stops and cutting patterns (for the workshop / verification)
#
# (No PDF export; plotting is handled in plotting.py.)

from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Sequence, Union

from .solver_tsp import dist
from .types import CuttingResult, Node, PieceRequest, TspResult


def read_nodes_csv(path: Union[str, Path]) -> List[Node]:
    """
    CSV with header, at least columns x,y (extra columns ignored).
    """
    path = Path(path)
    nodes: List[Node] = []
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        required = {"x", "y"}
        if not required.issubset(set(reader.fieldnames or [])):
            raise ValueError(f"CSV must contain at least columns: {sorted(required)}")
        for row in reader:
            x = (row.get("x") or "").strip()
            y = (row.get("y") or "").strip()
            if not x and not y:
                continue
            nodes.append(Node(float(x), float(y)))
    return nodes


def read_pieces_csv(path: Union[str, Path]) -> List[PieceRequest]:
    """
    CSV with header: length,quantity[,label]. Missing quantity -> 1.
    """
    path = Path(path)
    pieces: List[PieceRequest] = []
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if "length" not in set(reader.fieldnames or []):
            raise ValueError("CSV must contain at least column: length")
        for row in reader:
            length = (row.get("length") or "").strip()
            if not length:
                continue
            qty = int(float(row.get("quantity") or "1"))
            label = (row.get("label") or "").strip() or None
            pieces.append(PieceRequest(length=float(length), quantity=qty, label=label))
    return pieces


def export_tour_csv(
    nodes: Sequence[Node],
    result: TspResult,
    path: Union[str, Path],
) -> None:
    """
    One row per stop of the optimized tour, with the leg length to the next stop
    (last row closes the loop back to the first stop).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["order", "node", "x", "y", "leg_to_next"]
    tour = result.optimized_tour
    n = len(tour)

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for k, idx in enumerate(tour):
            nxt = tour[(k + 1) % n]
            w.writerow(
                {
                    "order": k,
                    "node": idx,
                    "x": nodes[idx].x,
                    "y": nodes[idx].y,
                    "leg_to_next": round(dist(nodes[idx], nodes[nxt]), 4),
                }
            )


def export_patterns_csv(result: CuttingResult, path: Union[str, Path]) -> None:
    """
    One row per piece: which bar it is cut from and its position on that bar
    (offset includes the kerfs of the previous cuts).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["pattern_index", "position", "label", "length", "offset"]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for pi, pat in enumerate(result.patterns):
            offset = 0.0
            for k, pc in enumerate(pat.pieces):
                w.writerow(
                    {
                        "pattern_index": pi,
                        "position": k,
                        "label": pc.label,
                        "length": pc.length,
                        "offset": offset,
                    }
                )
                offset += pc.length + result.kerf


def export_summary_csv(result: CuttingResult, path: Union[str, Path]) -> None:
    """
    One-row-per-bar summary (useful for quick costing).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "pattern_index",
        "stock_length",
        "num_pieces",
        "used_length",
        "kerf_loss",
        "waste_length",
        "waste_percent",
        "labels",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for pi, pat in enumerate(result.patterns):
            w.writerow(
                {
                    "pattern_index": pi,
                    "stock_length": result.stock_length,
                    "num_pieces": pat.num_pieces(),
                    "used_length": pat.used_length,
                    "kerf_loss": pat.kerf_loss,
                    "waste_length": pat.waste_length,
                    "waste_percent": pat.waste_percent,
                    "labels": " ".join(pat.labels()),
                }
            )


def export_all(result: CuttingResult, out_dir: Union[str, Path], prefix: str = "cutting") -> None:
    """
    Export piece positions and per-bar summary into out_dir.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    export_patterns_csv(result, out_dir / f"{prefix}_patterns.csv")
    export_summary_csv(result, out_dir / f"{prefix}_summary.csv")
