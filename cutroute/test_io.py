# cutroute/test_io.py
# JSON / CSV loaders and exporters, config parsers, and the CLI.

from __future__ import annotations

import csv
import json

import pytest

from cutroute.cli import main as cli_main
from cutroute.config import parse_algorithm, parse_node_text, parse_piece_text, parse_stock_text
from cutroute.io_csv import export_all, export_tour_csv, read_nodes_csv, read_pieces_csv
from cutroute.io_json import load_cutting_json, load_tsp_json
from cutroute.solver_cutting_stock import solve_cutting_stock
from cutroute.solver_tsp import solve_tsp
from cutroute.types import Node, PieceRequest
from cutroute.utils import result_to_dict, round_to, save_result_json


def test_round_to() -> None:
    assert round_to(3.14159) == 3.14
    assert round_to(2.5) == 2.5
    assert round_to(2.555) == 2.56
    assert round_to(0.615, 2) == 0.62
    assert round_to(1.005, 2) == 1.01
    assert round_to(-2.555, 2) == -2.56
    assert round_to(3.14159, 0) == 3
    assert round_to(3.14159, 3) == 3.142


def test_config_parsers() -> None:
    assert parse_node_text("3.5, 4") == Node(3.5, 4.0)
    assert parse_piece_text("1990") == PieceRequest(1990, 1)
    assert parse_piece_text("1990x3") == PieceRequest(1990, 3)
    assert parse_piece_text("1990X3:rail") == PieceRequest(1990, 3, "rail")
    assert parse_stock_text("6000/5") == (6000.0, 5.0)
    assert parse_stock_text("6000") == (6000.0, None)
    assert parse_algorithm("BFD") == "bfd"
    with pytest.raises(ValueError):
        parse_node_text("1,2,3")
    with pytest.raises(ValueError):
        parse_algorithm("greedy")


def test_load_tsp_json(tmp_path) -> None:
    p = tmp_path / "tsp.json"
    p.write_text(json.dumps({"nodes": [{"x": 0, "y": 0}, [3, 4]]}), encoding="utf-8")
    job = load_tsp_json(p)
    assert job.nodes == [Node(0, 0), Node(3, 4)]

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"points": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_tsp_json(bad)


def test_load_cutting_json_accepts_camel_case(tmp_path) -> None:
    p = tmp_path / "cut.json"
    p.write_text(
        json.dumps(
            {
                "stockLength": 6000,
                "kerf": 3,
                "algorithm": "bfd",
                "pieces": [{"length": 1990, "quantity": 3, "label": "rail"}, {"length": 500, "qty": 2}],
            }
        ),
        encoding="utf-8",
    )
    job = load_cutting_json(p)
    assert job.stock_length == 6000
    assert job.kerf == 3
    assert job.algorithm == "bfd"
    assert job.pieces == [PieceRequest(1990, 3, "rail"), PieceRequest(500, 2)]


def test_read_csv_inputs(tmp_path) -> None:
    nodes_csv = tmp_path / "nodes.csv"
    nodes_csv.write_text("x,y\n0,0\n3,4\n\n", encoding="utf-8")
    assert read_nodes_csv(nodes_csv) == [Node(0, 0), Node(3, 4)]

    pieces_csv = tmp_path / "pieces.csv"
    pieces_csv.write_text("length,quantity,label\n1990,3,rail\n500,,\n", encoding="utf-8")
    assert read_pieces_csv(pieces_csv) == [PieceRequest(1990, 3, "rail"), PieceRequest(500, 1)]

    wrong = tmp_path / "wrong.csv"
    wrong.write_text("a,b\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_nodes_csv(wrong)
    with pytest.raises(ValueError):
        read_pieces_csv(wrong)


def test_exports(tmp_path) -> None:
    nodes = [Node(0, 0), Node(1, 0), Node(1, 1), Node(0, 1)]
    tres = solve_tsp(nodes)
    export_tour_csv(nodes, tres, tmp_path / "tour.csv")
    with (tmp_path / "tour.csv").open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 4
    assert sum(float(r["leg_to_next"]) for r in rows) == pytest.approx(4.0)

    cres = solve_cutting_stock(6000, 3, [PieceRequest(1990, 3, "rail")], "ffd")
    export_all(cres, tmp_path / "out", prefix="job")
    with (tmp_path / "out" / "job_patterns.csv").open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [float(r["offset"]) for r in rows] == [0.0, 1993.0, 3986.0]
    assert (tmp_path / "out" / "job_summary.csv").exists()

    save_result_json(cres, tmp_path / "out" / "job.json")
    data = json.loads((tmp_path / "out" / "job.json").read_text(encoding="utf-8"))
    assert data["totals"]["stocks_used"] == 1
    assert data["patterns"][0]["pieces"][0]["label"] == "rail"
    assert result_to_dict(tres)["optimal_distance"] == 4.0


def test_cli_cut(tmp_path, capsys) -> None:
    pieces_csv = tmp_path / "pieces.csv"
    pieces_csv.write_text("length,quantity,label\n1990,3,rail\n", encoding="utf-8")
    cli_main(["cut", "--pieces", str(pieces_csv), "--stock", "6000", "--kerf", "3", "--no_plot",
              "--out", str(tmp_path / "out")])
    out = capsys.readouterr().out
    assert "Bars used: 1" in out
    assert (tmp_path / "out" / "cutting.json").exists()


def test_cli_cut_oversized_exits() -> None:
    with pytest.raises(SystemExit):
        cli_main(["cut", "--piece", "7000", "--stock", "6000", "--no_plot"])


def test_cli_tsp(capsys) -> None:
    cli_main(["tsp", "--node", "0,0", "--node", "3,4", "--no_plot"])
    out = capsys.readouterr().out
    assert "2-opt distance: 10.0" in out


def test_cli_cut_stock_with_kerf(tmp_path, capsys) -> None:
    cli_main(["cut", "--piece", "1000x2", "--stock", "2003/3", "--no_plot", "--out", str(tmp_path)])
    capsys.readouterr()
    data = json.loads((tmp_path / "cutting.json").read_text(encoding="utf-8"))
    assert data["kerf"] == 3
    assert data["totals"]["stocks_used"] == 1


def test_cutting_job_with_exact_algorithm(tmp_path, capsys) -> None:
    p = tmp_path / "exact.json"
    p.write_text(
        json.dumps({"stockLength": 10, "kerf": 0, "algorithm": "Exact",
                    "pieces": [{"length": 5}, {"length": 4, "qty": 2}, {"length": 3}, {"length": 2, "qty": 2}]}),
        encoding="utf-8",
    )
    job = load_cutting_json(p)
    assert job.algorithm == "exact"

    cli_main(["cut", "--job", str(p), "--no_plot", "--out", str(tmp_path / "out")])
    capsys.readouterr()
    data = json.loads((tmp_path / "out" / "cutting.json").read_text(encoding="utf-8"))
    assert data["algorithm"] == "exact"
    assert data["totals"]["stocks_used"] == 2

    p.write_text(json.dumps({"stock_length": 10, "algorithm": "greedy", "pieces": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_cutting_json(p)
