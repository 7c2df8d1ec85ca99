# bar_solver/test_io.py
# Job loading (JSON/CSV), exports, runners.

from __future__ import annotations

import csv
import json

import pytest

from bar_solver import cli, run_json
from bar_solver.config import DEFAULT_STOCK_TYPES, find_stock_type, make_default_settings, merge_stock_types, parse_section_text
from bar_solver.ids import SequenceIds
from bar_solver.io_csv import export_all, read_pieces_csv
from bar_solver.io_json import load_job_json, parse_job
from bar_solver.logger import is_enabled, set_enabled
from bar_solver.run import make_strategy, run_job
from bar_solver.solver_cp_sat import CpSatExact
from bar_solver.types import StockType

JOB = {
    "settings": {"minLength": 2400, "maxLength": 4800, "increment": 600, "defaultKerf": 4},
    "stockTypes": [{"id": "8", "name": "35x70", "width": 35, "height": 70}],
    "groups": [
        {
            "name": "Frame",
            "items": [
                {"id": "stud", "length": 2200, "stockType": {"id": "3"}, "quantity": 4, "margin": 5},
                {"id": "plate", "length": 5000, "stock_type": "45x95", "quantity": 1, "kerf": 3},
            ],
        },
        {"name": "Battens", "items": [{"length": 1100, "stock_type": "35x70", "qty": 5}]},
    ],
}


@pytest.fixture(autouse=True)
def quiet_logger():
    was_enabled = is_enabled()
    set_enabled(False)
    try:
        yield
    finally:
        set_enabled(was_enabled)


def test_parse_job_camel_case():
    job = parse_job(JOB)
    s = job.settings
    assert (s.min_length, s.max_length, s.increment, s.default_kerf) == (2400, 4800, 600, 4)
    assert s.available_lengths() == [2400, 3000, 3600, 4200, 4800]

    assert [t.id for t in job.stock_types] == ["1", "2", "3", "4", "5", "6", "7", "8"]
    frame, battens = job.groups
    stud, plate = frame.items
    assert stud.stock_type.id == "3" and stud.kerf == 4 and stud.margin == 5
    assert plate.stock_type.id == "3" and plate.kerf == 3
    assert battens.items[0].id == "Battens-1"
    assert battens.items[0].stock_type.id == "8"
    assert battens.items[0].quantity == 5


def test_parse_job_requires_pieces():
    with pytest.raises(ValueError, match="no 'groups' or 'pieces'"):
        parse_job({"settings": {}})


def test_parse_job_unknown_stock_type():
    with pytest.raises(ValueError, match="Unknown stock type"):
        parse_job({"pieces": [{"id": "a", "length": 100, "stock_type": "99x99"}]})


def test_parse_job_rejects_bad_piece():
    with pytest.raises(ValueError):
        parse_job({"pieces": [{"id": "a", "length": 0, "stock_type": "1"}]})


def test_config_helpers():
    assert parse_section_text("45×95") == (45, 95)
    assert find_stock_type(DEFAULT_STOCK_TYPES, "70x70").id == "7"
    custom = StockType(id="1", name="dup", width=1, height=1)
    assert merge_stock_types([custom]) == DEFAULT_STOCK_TYPES
    s = make_default_settings(max_length=6000)
    assert s.min_length == 2700 and s.max_length == 6000


def test_run_job_and_exports(tmp_path):
    job = parse_job(JOB)
    res = run_job(job, ids=SequenceIds(), out_dir=tmp_path, export_prefix="job")

    labels = [(g, p.stock_type.id) for g, p in res.plans]
    assert labels == [("Frame", "3"), ("Battens", "8")]
    frame_plan = res.plans[0][1]
    assert len(frame_plan.oversized_pieces) == 1
    assert frame_plan.placed_count() == 4

    for name in ("job_stocks.csv", "job_oversize.csv", "job_summary.csv", "job.json"):
        assert (tmp_path / name).exists()

    with (tmp_path / "job_summary.csv").open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["group"] for r in rows] == ["Frame", "Battens"]
    assert int(rows[0]["num_oversized"]) == 1

    with (tmp_path / "job_oversize.csv").open(newline="", encoding="utf-8") as f:
        parts = list(csv.DictReader(f))
    assert [float(p["length"]) for p in parts] == [4800, 200]

    payload = json.loads((tmp_path / "job.json").read_text(encoding="utf-8"))
    assert payload[0]["group"] == "Frame"
    assert payload[0]["stocks"][0]["id"] == "stock-1"


def test_make_strategy():
    assert make_strategy("ffd").name == "ffd"
    assert isinstance(make_strategy("cpsat", time_limit_s=1), CpSatExact)
    with pytest.raises(ValueError):
        make_strategy("best")


def test_read_pieces_csv(tmp_path):
    path = tmp_path / "pieces.csv"
    path.write_text(
        "id,length,stock_type,quantity,kerf,margin\n"
        "rail,1800,45x70,2,,5\n"
        ",100,45x70,1,,\n"
        "post,2400,7,1,2,\n",
        encoding="utf-8",
    )
    settings = make_default_settings()
    pieces = read_pieces_csv(path, DEFAULT_STOCK_TYPES, settings)
    assert [p.id for p in pieces] == ["rail", "post"]
    assert pieces[0].stock_type.id == "2" and pieces[0].kerf == 3 and pieces[0].margin == 5
    assert pieces[1].stock_type.id == "7" and pieces[1].kerf == 2 and pieces[1].margin == 0


def test_read_pieces_csv_requires_columns(tmp_path):
    path = tmp_path / "pieces.csv"
    path.write_text("name,w\nA,1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="at least columns"):
        read_pieces_csv(path, DEFAULT_STOCK_TYPES, make_default_settings())


def test_export_all_empty_plans(tmp_path):
    export_all([], tmp_path)
    assert (tmp_path / "plan_summary.csv").read_text(encoding="utf-8").startswith("group,")


def test_run_json_main(tmp_path, capsys):
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps(JOB), encoding="utf-8")
    run_json.main(["--job", str(job_path), "--quiet", "--out", str(tmp_path / "out")])
    out = capsys.readouterr().out
    assert "Frame / 45×95" in out
    assert "Joined plate" in out
    assert (tmp_path / "out" / "plan_stocks.csv").exists()


def test_run_json_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        run_json.main(["--job", str(tmp_path / "nope.json")])


def test_cli_main(tmp_path, capsys):
    path = tmp_path / "pieces.csv"
    path.write_text("id,length,stock_type,quantity\nleg,700,45x45,4\n", encoding="utf-8")
    cli.main(["--pieces", str(path), "--min", "1500", "--max", "3000", "--increment", "500"])
    out = capsys.readouterr().out
    assert "=== 45×45 ===" in out
    # 700+3 twice per 1500 bar
    assert "Bars total: 2" in out


def test_load_job_json_file(tmp_path):
    path = tmp_path / "job.json"
    path.write_text(json.dumps({"pieces": [{"id": "a", "length": 900, "stock_type": "1"}]}), encoding="utf-8")
    job = load_job_json(path)
    assert job.groups[0].name == ""
    assert job.all_pieces()[0].kerf == 3


def test_parse_job_rejects_fractional_quantity():
    with pytest.raises(ValueError, match="whole number"):
        parse_job({"pieces": [{"id": "a", "length": 900, "stock_type": "1", "quantity": 2.5}]})
    job = parse_job({"pieces": [{"id": "a", "length": 900, "stock_type": "1", "quantity": 3.0}]})
    assert job.all_pieces()[0].quantity == 3


def test_read_pieces_csv_rejects_fractional_quantity(tmp_path):
    path = tmp_path / "pieces.csv"
    path.write_text("id,length,stock_type,quantity\nrail,1800,45x70,2.5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="whole number for rail"):
        read_pieces_csv(path, DEFAULT_STOCK_TYPES, make_default_settings())
    path.write_text("id,length,stock_type,quantity\nrail,1800,45x70,3\n", encoding="utf-8")
    assert read_pieces_csv(path, DEFAULT_STOCK_TYPES, make_default_settings())[0].quantity == 3


def test_run_json_quiet_leaves_logging_switch_as_it_was(tmp_path):
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps(JOB), encoding="utf-8")
    set_enabled(True)
    run_json.main(["--job", str(job_path), "--quiet"])
    assert is_enabled()
