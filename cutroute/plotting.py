# cutroute/plotting.py
# Minimal matplotlib visualization:
# - TSP: nodes + nearest-neighbour tour (dashed) + 2-opt tour (solid)
# - cutting stock: one horizontal bar per used stock, pieces coloured by label

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .types import CuttingResult, Node, TspResult


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_dims: bool = True
    show_nn_tour: bool = True
    show_grid: bool = False
    font_size: int = 7
    bar_height: float = 0.6
    waste_color: str = "#dddddd"
    kerf_color: str = "#444444"


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    # map to [0.3..0.9] range for readability
    r = 0.3 + ((h >> 0) & 0xFF) / 255 * 0.6
    g = 0.3 + ((h >> 8) & 0xFF) / 255 * 0.6
    b = 0.3 + ((h >> 16) & 0xFF) / 255 * 0.6
    return (r, g, b)


def _closed(nodes: Sequence[Node], tour: Sequence[int]) -> Tuple[List[float], List[float]]:
    xs = [nodes[i].x for i in tour] + [nodes[tour[0]].x]
    ys = [nodes[i].y for i in tour] + [nodes[tour[0]].y]
    return xs, ys


def plot_tour(
    nodes: Sequence[Node],
    result: TspResult,
    style: Optional[PlotStyle] = None,
    figsize: Tuple[float, float] = (7.0, 6.0),
) -> plt.Figure:
    """Draw the nodes and both tours in one axes."""
    style = style or PlotStyle()
    if not nodes:
        raise ValueError("No nodes to plot")

    fig, ax = plt.subplots(figsize=figsize)

    if style.show_nn_tour and len(result.nn_tour) > 1:
        xs, ys = _closed(nodes, result.nn_tour)
        ax.plot(xs, ys, linestyle="--", linewidth=0.9, color="gray",
                label=f"nearest neighbour ({result.nn_distance})")

    if len(result.optimized_tour) > 1:
        xs, ys = _closed(nodes, result.optimized_tour)
        ax.plot(xs, ys, linewidth=1.6, color="tab:blue",
                label=f"2-opt ({result.optimized_distance})")

    ax.scatter([p.x for p in nodes], [p.y for p in nodes], s=25, color="black", zorder=3)
    if style.show_labels:
        for i, p in enumerate(nodes):
            ax.annotate(str(i), (p.x, p.y), textcoords="offset points", xytext=(4, 4),
                        fontsize=style.font_size)

    bits = [f"{len(nodes)} nodes", f"tour {result.optimized_distance}"]
    if result.optimal_distance is not None:
        bits.append(f"optimal {result.optimal_distance} (gap {result.optimality_gap}%)")
    ax.set_title(" | ".join(bits), fontsize=10)
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(style.show_grid, linewidth=0.3)
    if len(result.optimized_tour) > 1:
        ax.legend(fontsize=8, loc="best")

    fig.tight_layout()
    return fig


def plot_patterns(
    result: CuttingResult,
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """
    One bar per used stock unit, top to bottom in pattern order.
    Pieces are laid out left to right with a kerf slot between them.
    """
    style = style or PlotStyle()
    n = result.stocks_used
    if n == 0:
        raise ValueError("Cutting plan has no bars to plot")

    if figsize is None:
        figsize = (10.0, 0.6 * n + 1.5)

    fig, ax = plt.subplots(figsize=figsize)
    L = result.stock_length
    hh = style.bar_height

    for row, pat in enumerate(result.patterns):
        y = n - 1 - row
        ax.add_patch(Rectangle((0, y - hh / 2), L, hh, facecolor=style.waste_color,
                               edgecolor="black", linewidth=0.8))
        x = 0.0
        for k, pc in enumerate(pat.pieces):
            if k > 0 and result.kerf > 0:
                ax.add_patch(Rectangle((x, y - hh / 2), result.kerf, hh,
                                       facecolor=style.kerf_color, linewidth=0))
                x += result.kerf
            ax.add_patch(Rectangle((x, y - hh / 2), pc.length, hh, facecolor=_hash_color(pc.label),
                                   edgecolor="black", linewidth=0.6))
            if style.show_labels or style.show_dims:
                lines: List[str] = []
                if style.show_labels:
                    lines.append(pc.label)
                if style.show_dims and pc.label != f"{pc.length:g}":
                    lines.append(f"{pc.length:g}")
                ax.text(x + pc.length / 2, y, "\n".join(lines), ha="center", va="center",
                        fontsize=style.font_size)
            x += pc.length

    ax.set_xlim(0, L * 1.02)
    ax.set_ylim(-1, n)
    ax.set_yticks(list(range(n)))
    ax.set_yticklabels([f"#{n - i}  waste {result.patterns[n - 1 - i].waste_percent}%" for i in range(n)],
                       fontsize=8)
    ax.set_title(
        f"{result.algorithm.upper()} | stock {result.stock_length:g} | kerf {result.kerf:g} | "
        f"{n} bars | utilization {result.utilization_percent}%",
        fontsize=10,
    )
    if style.show_grid:
        ax.grid(True, axis="x", linewidth=0.3)

    fig.tight_layout()
    return fig


def show_tour(nodes: Sequence[Node], result: TspResult, style: Optional[PlotStyle] = None) -> None:
    """Convenience wrapper: plot and show."""
    plot_tour(nodes, result, style=style)
    plt.show()


def show_patterns(result: CuttingResult, style: Optional[PlotStyle] = None) -> None:
    """Convenience wrapper: plot and show."""
    plot_patterns(result, style=style)
    plt.show()


def save_figure_png(fig: plt.Figure, path: str, dpi: int = 200) -> None:
    """Save figure to PNG and release it."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
