# bar_solver/run_json.py
# Runner for JSON jobs (settings + stock types + groups of pieces).
#
# Strategies:
#   --strategy ffd    : first-fit-decreasing (default, greedy)
#   --strategy cpsat  : exact CP-SAT assignment for small jobs (falls back to ffd)
#
# Usage:
#   python -m bar_solver.run_json --job job.json
#   python -m bar_solver.run_json --job job.json --strategy cpsat --time 10 --out out/

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from .debug import print_plan
from .io_json import load_job_json
from .logger import is_enabled, set_enabled
from .run import STRATEGIES, make_strategy, run_job


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Plan bar cutting from a JSON job (settings/stock_types/groups).")
    p.add_argument("--job", type=str, required=True, help="Path to job JSON")
    p.add_argument("--strategy", type=str, default="ffd", choices=list(STRATEGIES), help="Packing strategy")
    p.add_argument("--time", type=float, default=None, help="CP-SAT time limit (seconds)")
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="plan", help="Export filename prefix")
    p.add_argument("--quiet", action="store_true", help="Only print the plans, no log messages")
    return p


def main(argv: Optional[list[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    was_enabled = is_enabled()
    if args.quiet:
        set_enabled(False)
    try:
        _run(args)
    finally:
        set_enabled(was_enabled)


def _run(args: argparse.Namespace) -> None:
    job_path = Path(args.job)
    if not job_path.exists():
        raise SystemExit(f"Job JSON not found: {job_path}")

    job = load_job_json(job_path)
    s = job.settings
    print(f"Catalog: {s.min_length:g}..{s.max_length:g} step {s.increment:g} {s.unit}")
    print(f"Strategy: {args.strategy}")

    out_dir = args.out.strip() or None
    res = run_job(
        job,
        strategy=make_strategy(args.strategy, time_limit_s=args.time),
        out_dir=out_dir,
        export_prefix=args.prefix,
    )

    for group, plan in res.plans:
        title = f"{group} / {plan.stock_type.name}" if group else plan.stock_type.name
        print_plan(plan, title=title)

    print(f"Bars total: {res.total_bars}  waste total: {res.total_waste:g} {s.unit}")
    if out_dir is not None:
        print(f"Exported CSV + JSON to: {out_dir}")


if __name__ == "__main__":
    main()
