# bar_solver/run.py
# High-level convenience runner that ties together:
# - optimizer (one plan per group and stock type)
# - strategy selection (first-fit-decreasing or CP-SAT)
# - validation + demand reconciliation
# - optional CSV + JSON export
#
# This is meant to be called from your own scripts or future API layer.
# Example:
#   from bar_solver.run import run_job
#   res = run_job(load_job_json("job.json"), strategy="cpsat", out_dir="out")

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .ids import IdFactory
from .io_csv import export_all
from .io_json import JobSpec
from .logger import get_logger
from .optimizer import optimize_all
from .packing import FirstFitDecreasing, PackingStrategy
from .solver_cp_sat import CpSatExact, CpSatParams
from .types import CuttingPlan
from .utils import save_plans_json, timer
from .validate import ValidationIssue, raise_on_errors, validate_plan

STRATEGIES = ("ffd", "cpsat")


@dataclass
class RunResult:
    plans: List[Tuple[str, CuttingPlan]] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)
    seconds: float = 0.0

    @property
    def total_waste(self) -> float:
        return sum(p.total_waste for _, p in self.plans)

    @property
    def total_bars(self) -> int:
        return sum(p.num_stocks() for _, p in self.plans)


def make_strategy(name: str, *, time_limit_s: Optional[float] = None) -> PackingStrategy:
    if name == "ffd":
        return FirstFitDecreasing()
    if name == "cpsat":
        params = CpSatParams() if time_limit_s is None else CpSatParams(time_limit_s=float(time_limit_s))
        return CpSatExact(params)
    raise ValueError(f"Unknown strategy {name!r} (choose from {', '.join(STRATEGIES)})")


def run_job(
    job: JobSpec,
    *,
    strategy: str | PackingStrategy = "ffd",
    ids: Optional[IdFactory] = None,
    validate: bool = True,
    out_dir: Optional[str | Path] = None,
    export_prefix: str = "plan",
) -> RunResult:
    """
    Optimize every group separately, one plan per stock type present in the group.
    """
    strat = make_strategy(strategy) if isinstance(strategy, str) else strategy
    log = get_logger("run")
    res = RunResult()

    with timer("optimize") as t:
        for group in job.groups:
            plans = optimize_all(group.items, job.settings, strategy=strat, ids=ids)
            for plan in plans.values():
                res.plans.append((group.name, plan))
                if validate:
                    res.issues.extend(validate_plan(plan, job.settings, group.items))
    res.seconds = t["seconds"]

    for issue in res.issues:
        if issue.level == "WARN":
            log.warn(issue.message, piece=issue.piece_id)
    if validate:
        raise_on_errors(res.issues)

    log.info("planned", plans=len(res.plans), bars=res.total_bars, seconds=round(res.seconds, 3))

    if out_dir is not None:
        outp = Path(out_dir)
        export_all(res.plans, out_dir=outp, prefix=export_prefix)
        save_plans_json(res.plans, outp / f"{export_prefix}.json")

    return res
