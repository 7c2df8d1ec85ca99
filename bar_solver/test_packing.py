# bar_solver/test_packing.py
# Strategy-level tests: placement primitives, first-fit, CP-SAT exact strategy.

from __future__ import annotations

import pytest

from bar_solver.ids import SequenceIds
from bar_solver.optimizer import optimize_cutting
from bar_solver.packing import FirstFitDecreasing, PackingStrategy, fit_on_stock, open_stock
from bar_solver.solver_cp_sat import CpSatExact, CpSatParams
from bar_solver.types import Demand, OptimizedStock, Piece, StockSettings, StockType
from bar_solver.validate import raise_on_errors, validate_plan

ST = StockType(id="2", name="45×70", width=45, height=70)


def demand(length: float, kerf: float = 0, margin: float = 0, pid: str = "p") -> Demand:
    return Demand(uid=f"{pid}#1", piece=Piece(pid, length, ST, kerf=kerf, margin=margin))


def test_empty_bar_waives_kerf_but_new_bar_charges_it():
    settings = StockSettings(min_length=1000, max_length=1000, increment=100)
    d = demand(400, kerf=4, margin=5)

    empty = OptimizedStock(id="s", length=1000, stock_type=ST, remaining_length=1000)
    assert fit_on_stock(empty, d) == (0, 5)

    opened = open_stock(d, settings, SequenceIds())
    assert opened is not None
    assert opened.pieces[0].applied_kerf == 4
    assert opened.pieces[0].applied_margin == 5
    assert opened.remaining_length == 591


def test_fit_on_stock_rejects_when_margin_does_not_fit():
    settings = StockSettings(min_length=1000, max_length=1000, increment=100)
    stock = open_stock(demand(500, margin=10), settings, SequenceIds())
    assert stock.remaining_length == 490
    # 485 + 10 > 490 and not flush
    assert fit_on_stock(stock, demand(485, margin=10)) is None
    # flush
    assert fit_on_stock(stock, demand(490, margin=10)) == (0, 0)


def test_open_stock_without_catalog_length():
    settings = StockSettings(min_length=1000, max_length=1500, increment=500)
    assert open_stock(demand(1600), settings, SequenceIds()) is None


def test_ffd_reports_unplaced():
    settings = StockSettings(min_length=1000, max_length=1500, increment=500)
    res = FirstFitDecreasing().pack([demand(1600), demand(800)], settings, ST, SequenceIds())
    assert [d.length for d in res.unplaced] == [1600]
    assert len(res.stocks) == 1


def test_base_strategy_is_abstract():
    with pytest.raises(NotImplementedError):
        PackingStrategy().pack([], StockSettings(1000, 2000, 500), ST, SequenceIds())


def test_cp_sat_beats_first_fit_on_purchased_length():
    settings = StockSettings(min_length=1000, max_length=2000, increment=500)
    pieces = [
        Piece("a", 700, ST, quantity=2),
        Piece("b", 600, ST),
    ]
    ffd = optimize_cutting(pieces, settings, ST)
    assert ffd.total_stock_length == 3000

    exact = optimize_cutting(pieces, settings, ST, strategy=CpSatExact(CpSatParams(time_limit_s=10)))
    assert exact.num_stocks() == 1
    assert exact.stocks[0].length == 2000
    assert exact.stocks[0].remaining_length == 0
    assert exact.overall_utilization == 100
    raise_on_errors(validate_plan(exact, settings, pieces))


def test_cp_sat_charges_full_footprint():
    settings = StockSettings(min_length=1000, max_length=3000, increment=1000)
    pieces = [Piece("a", 900, ST, quantity=3, kerf=3, margin=5)]
    plan = optimize_cutting(pieces, settings, ST, strategy=CpSatExact(CpSatParams(time_limit_s=10)))
    # 3 x 908 = 2724 -> one 3000 bar
    assert [s.length for s in plan.stocks] == [3000]
    assert plan.stocks[0].remaining_length == 3000 - 3 * 908
    assert [p.position for p in plan.stocks[0].pieces] == [0, 908, 1816]
    raise_on_errors(validate_plan(plan, settings, pieces))


def test_cp_sat_falls_back_on_large_instances():
    settings = StockSettings(min_length=1000, max_length=2000, increment=500)
    pieces = [Piece("a", 700, ST, quantity=2), Piece("b", 600, ST)]
    exact = optimize_cutting(
        pieces, settings, ST, strategy=CpSatExact(CpSatParams(max_demands=1)), ids=SequenceIds()
    )
    ffd = optimize_cutting(pieces, settings, ST, ids=SequenceIds())
    assert [s.length for s in exact.stocks] == [s.length for s in ffd.stocks]
    assert [s.remaining_length for s in exact.stocks] == [s.remaining_length for s in ffd.stocks]


def test_cp_sat_falls_back_when_footprint_exceeds_catalog():
    settings = StockSettings(min_length=1000, max_length=1000, increment=100)
    pieces = [Piece("a", 1000, ST, kerf=3)]
    plan = optimize_cutting(pieces, settings, ST, strategy=CpSatExact())
    assert plan.num_stocks() == 1
    assert plan.stocks[0].remaining_length == 0


def test_cp_sat_scaled_fractional_lengths():
    settings = StockSettings(min_length=1000, max_length=2000, increment=1000)
    pieces = [Piece("a", 999.5, ST, quantity=2)]
    plan = optimize_cutting(pieces, settings, ST, strategy=CpSatExact(CpSatParams(scale=10)))
    assert [s.length for s in plan.stocks] == [2000]
    assert plan.stocks[0].remaining_length == pytest.approx(1.0)


def test_skipped_demand_is_logged_with_its_uid(capsys):
    settings = StockSettings(min_length=1000, max_length=1500, increment=500)
    FirstFitDecreasing().pack([demand(1600, pid="beam")], settings, ST, SequenceIds())
    err = capsys.readouterr().err
    assert "[BAR:packing] WARNING:" in err
    assert "uid=beam#1 length=1600" in err
