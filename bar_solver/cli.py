# bar_solver/cli.py
# CSV front-end:
# - pieces from CSV
# - catalog from flags
# - prints one plan per stock type, optional CSV/JSON export
#
# Run:
#   python -m bar_solver.cli --pieces pieces.csv --min 2700 --max 5400 --increment 300 --out out/
#
# CSV pieces format (header required):
#   id,length,stock_type[,quantity,kerf,margin]

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_STOCK_TYPES, DEFAULTS, make_default_settings
from .debug import print_plan
from .io_csv import read_pieces_csv
from .io_json import JobSpec
from .run import STRATEGIES, make_strategy, run_job
from .types import PieceGroup


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Bar cutting planner (first-fit-decreasing / CP-SAT)")
    p.add_argument("--pieces", type=str, required=True, help="Path to pieces CSV")
    p.add_argument("--min", dest="min_length", type=float, default=DEFAULTS.min_length, help="Shortest bar (mm)")
    p.add_argument("--max", dest="max_length", type=float, default=DEFAULTS.max_length, help="Longest bar (mm)")
    p.add_argument("--increment", type=float, default=DEFAULTS.increment, help="Catalog step (mm)")
    p.add_argument("--kerf", type=float, default=DEFAULTS.default_kerf, help="Default saw kerf (mm)")
    p.add_argument("--strategy", type=str, default="ffd", choices=list(STRATEGIES), help="Packing strategy")
    p.add_argument("--time", type=float, default=None, help="CP-SAT time limit (seconds)")
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)

    settings = make_default_settings(
        min_length=args.min_length,
        max_length=args.max_length,
        increment=args.increment,
        default_kerf=args.kerf,
    )
    stock_types = list(DEFAULT_STOCK_TYPES)

    path = Path(args.pieces)
    if not path.exists():
        raise SystemExit(f"Pieces CSV not found: {path}")
    pieces = read_pieces_csv(path, stock_types, settings)
    if not pieces:
        raise SystemExit("No pieces found in CSV.")

    job = JobSpec(settings=settings, stock_types=stock_types, groups=[PieceGroup(name="", items=pieces)])
    res = run_job(
        job,
        strategy=make_strategy(args.strategy, time_limit_s=args.time),
        out_dir=args.out.strip() or None,
    )

    for _, plan in res.plans:
        print_plan(plan)
    print(f"Bars total: {res.total_bars}  waste total: {res.total_waste:g} {settings.unit}")


if __name__ == "__main__":
    main()
