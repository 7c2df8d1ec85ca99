# bar_solver/tests_smoke.py
# Very small smoke tests you can run with:
#   python -m bar_solver.tests_smoke
#
# These are not full unit tests, but they quickly tell you if
# the optimizer, validation and runner are wired correctly.

from __future__ import annotations

from bar_solver.config import DEFAULT_STOCK_TYPES, make_default_settings
from bar_solver.io_json import JobSpec
from bar_solver.run import run_job
from bar_solver.types import Piece, PieceGroup
from bar_solver.validate import raise_on_errors, validate_plan


def test_basic_fit() -> None:
    settings = make_default_settings()
    st = DEFAULT_STOCK_TYPES[2]

    pieces = [
        Piece("rafter", 3900, st, quantity=4, kerf=3, margin=5),
        Piece("collar", 1450, st, quantity=4, kerf=3, margin=5),
    ]

    job = JobSpec(settings=settings, stock_types=DEFAULT_STOCK_TYPES, groups=[PieceGroup("Roof", pieces)])
    res = run_job(job)
    (_, plan), = res.plans

    raise_on_errors(validate_plan(plan, settings, pieces))

    assert plan.num_stocks() >= 1
    assert plan.placed_count() == 8
    assert plan.total_waste >= 0


def test_oversize_only() -> None:
    settings = make_default_settings()
    st = DEFAULT_STOCK_TYPES[0]

    # Longer than any bar: must be joined, never packed
    pieces = [Piece("ridge", 9000, st, kerf=3)]

    job = JobSpec(settings=settings, stock_types=DEFAULT_STOCK_TYPES, groups=[PieceGroup("Ridge", pieces)])
    res = run_job(job)
    (_, plan), = res.plans

    assert plan.stocks == []
    assert len(plan.oversized_pieces) == 1


def main() -> None:
    print("Running smoke tests...")
    test_basic_fit()
    test_oversize_only()
    print("OK")


if __name__ == "__main__":
    main()
