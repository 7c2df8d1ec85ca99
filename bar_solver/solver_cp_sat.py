# bar_solver/solver_cp_sat.py
# Exact bar assignment with CP-SAT (OR-Tools) for small instances.
#
# Model:
# - up to n candidate bars (one per demand); each bar picks at most one catalog length
# - each demand is assigned to exactly one bar
# - every demand charges its full footprint (length + kerf + margin)
# - minimize purchased length, then number of bars
#
# Falls back to first-fit-decreasing when the instance is too large, when a
# footprint cannot fit any catalog bar, or when no solution is found in time.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ortools.sat.python import cp_model

from .config import DEFAULTS
from .ids import IdFactory
from .logger import get_logger
from .packing import FirstFitDecreasing, PackingStrategy, PackResult, place_on_stock
from .types import Demand, OptimizedStock, StockSettings, StockType


@dataclass(frozen=True)
class CpSatParams:
    time_limit_s: float = DEFAULTS.cp_sat_time_limit_s
    max_demands: int = DEFAULTS.cp_sat_max_demands

    # Lengths are multiplied by `scale` and rounded to integers for CP-SAT
    # (e.g. scale=10 keeps 0.1 mm resolution).
    scale: int = 1
    num_workers: int = 2


class CpSatExact(PackingStrategy):
    """Minimum purchased length assignment of demands to catalog bars."""

    name = "cpsat"

    def __init__(self, params: Optional[CpSatParams] = None, fallback: Optional[PackingStrategy] = None):
        self.params = params or CpSatParams()
        self.fallback = fallback or FirstFitDecreasing()

    def pack(
        self,
        demands: Sequence[Demand],
        settings: StockSettings,
        stock_type: StockType,
        ids: IdFactory,
    ) -> PackResult:
        demands = list(demands)
        if not demands:
            return PackResult()

        log = get_logger("cpsat")
        lengths = settings.available_lengths()
        if len(demands) > self.params.max_demands:
            log.warn(
                "too many demands for CP-SAT; using first-fit", demands=len(demands), limit=self.params.max_demands
            )
            return self.fallback.pack(demands, settings, stock_type, ids)

        if not lengths or any(_footprint(d) > lengths[-1] for d in demands):
            log.warn(
                "a footprint (length+kerf+margin) exceeds the longest bar; using first-fit",
                longest=lengths[-1] if lengths else None,
            )
            return self.fallback.pack(demands, settings, stock_type, ids)

        assignment = self._solve(demands, lengths)
        if assignment is None:
            log.warn("no solution within time limit; using first-fit", time_limit_s=self.params.time_limit_s)
            return self.fallback.pack(demands, settings, stock_type, ids)

        res = PackResult()
        for bar_length, members in assignment:
            stock = OptimizedStock(
                id=ids("stock"),
                length=bar_length,
                stock_type=stock_type,
                remaining_length=bar_length,
            )
            for d in members:
                place_on_stock(stock, d, d.kerf, d.margin, ids)
            res.stocks.append(stock)
        return res

    def _solve(self, demands: List[Demand], lengths: List[float]):
        """
        Returns [(bar_length, [demands in input order]), ...] or None.
        """
        scale = max(1, int(self.params.scale))
        # Round footprints up and bar lengths down so scaled feasibility implies real feasibility.
        fp = [int(math.ceil(_footprint(d) * scale)) for d in demands]
        caps = [int(math.floor(L * scale)) for L in lengths]

        n = len(demands)
        K = len(lengths)
        m = cp_model.CpModel()

        # x[i][b]: demand i on bar b. Demand i may only use bars 0..i (symmetry break).
        x = [[m.NewBoolVar(f"x[{i},{b}]") if b <= i else None for b in range(n)] for i in range(n)]
        # z[b][k]: bar b bought with catalog length k
        z = [[m.NewBoolVar(f"z[{b},{k}]") for k in range(K)] for b in range(n)]
        used = [m.NewBoolVar(f"used[{b}]") for b in range(n)]

        for i in range(n):
            m.Add(sum(x[i][b] for b in range(i + 1)) == 1)

        for b in range(n):
            m.Add(sum(z[b]) == used[b])
            load = sum(fp[i] * x[i][b] for i in range(b, n))
            m.Add(load <= sum(caps[k] * z[b][k] for k in range(K)))

        for b in range(n - 1):
            m.Add(used[b] >= used[b + 1])

        total_length = sum(caps[k] * z[b][k] for b in range(n) for k in range(K))
        m.Minimize(total_length * (n + 1) + sum(used))

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = float(self.params.time_limit_s)
        solver.parameters.num_search_workers = int(self.params.num_workers)

        status = solver.Solve(m)
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return None

        out = []
        for b in range(n):
            if not solver.Value(used[b]):
                continue
            k = next(k for k in range(K) if solver.Value(z[b][k]))
            members = [demands[i] for i in range(b, n) if solver.Value(x[i][b])]
            if members:
                out.append((lengths[k], members))
        return out


def _footprint(d: Demand) -> float:
    return d.length + d.kerf + d.margin
